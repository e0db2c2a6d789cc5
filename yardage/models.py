"""Value types shared across the engine.

Every type here is a frozen dataclass; state changes replace the whole value so
readers never observe a half-updated point or fix.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional

from .constants import DEFAULT_PAR_CYCLE, UNAVAILABLE

Unit = Literal["yd", "m"]
Anchor = Literal["A", "C"]


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


@dataclass(frozen=True)
class NormPoint:
    """Position inside the hole diagram, origin top-left, y pointing down."""

    x: float
    y: float

    @classmethod
    def clamped(cls, x: float, y: float) -> "NormPoint":
        return cls(x=clamp01(float(x)), y=clamp01(float(y)))

    def distance_to(self, other: "NormPoint") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: "NormPoint", t: float) -> "NormPoint":
        return NormPoint.clamped(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )


def clamp_norm(x: object, y: object, fallback: Optional[NormPoint] = None) -> Optional[NormPoint]:
    """Coerce raw coordinates into a NormPoint, or return ``fallback``."""
    try:
        fx = float(x)  # type: ignore[arg-type]
        fy = float(y)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    if not (math.isfinite(fx) and math.isfinite(fy)):
        return fallback
    return NormPoint.clamped(fx, fy)


def default_par(hole_number: int) -> int:
    index = max(0, (hole_number or 1) - 1) % len(DEFAULT_PAR_CYCLE)
    return DEFAULT_PAR_CYCLE[index]


@dataclass(frozen=True)
class HoleReference:
    tee: GeoPoint
    green: GeoPoint
    par: int = 4

    @classmethod
    def from_catalog(
        cls, tee: GeoPoint, green: GeoPoint, hole_number: int, par: Optional[int] = None
    ) -> "HoleReference":
        return cls(tee=tee, green=green, par=par if par else default_par(hole_number))


@dataclass(frozen=True)
class Calibration:
    a: NormPoint
    c: NormPoint

    @property
    def separation(self) -> float:
        return self.a.distance_to(self.c)


@dataclass(frozen=True)
class Target:
    b: NormPoint
    active: bool = False


@dataclass(frozen=True)
class LiveFix:
    point: GeoPoint
    accuracy_m: float
    received_at_ms: int


@dataclass(frozen=True)
class ProjectedLivePosition:
    norm: NormPoint


def format_distance(value: Optional[float]) -> str:
    """Render a distance for display, using a dash when it is unavailable."""
    if value is None or not math.isfinite(value):
        return UNAVAILABLE
    return str(int(round(value)))
