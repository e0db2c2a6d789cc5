"""Ease the live-position marker toward each new projected position."""

from __future__ import annotations

from typing import Optional

from .constants import SMOOTHING_DURATION_MS
from .models import NormPoint
from .timing import Stopwatch


def ease_out(progress: float) -> float:
    p = max(0.0, min(1.0, progress))
    return 1.0 - (1.0 - p) ** 3


def tick(
    current: Optional[NormPoint],
    target: Optional[NormPoint],
    elapsed_ms: float,
    duration_ms: float = SMOOTHING_DURATION_MS,
) -> Optional[NormPoint]:
    """Position ``elapsed_ms`` into an easing window from ``current`` to ``target``."""
    if elapsed_ms < 0:
        raise ValueError("elapsed_ms must be non-negative")
    if target is None:
        return None
    if current is None or duration_ms <= 0:
        return target
    if elapsed_ms >= duration_ms:
        return target
    return current.lerp(target, ease_out(elapsed_ms / duration_ms))


class MarkerSmoother:
    """Keeps only the latest target; a new one restarts the easing window."""

    def __init__(self, duration_ms: float = SMOOTHING_DURATION_MS) -> None:
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        self.duration_ms = float(duration_ms)
        self._origin: Optional[NormPoint] = None
        self._target: Optional[NormPoint] = None
        self._current: Optional[NormPoint] = None
        self._clock = Stopwatch()

    @property
    def position(self) -> Optional[NormPoint]:
        return self._current

    @property
    def target(self) -> Optional[NormPoint]:
        return self._target

    def set_target(self, target: Optional[NormPoint]) -> Optional[NormPoint]:
        if target is None:
            self.reset()
            return None
        if target == self._target:
            return self._current
        # First sighting snaps; later ones ease from wherever the marker is now.
        self._origin = self._current if self._current is not None else target
        self._current = self._origin
        self._target = target
        self._clock.reset()
        return self._current

    def tick(self, elapsed_ms: float) -> Optional[NormPoint]:
        if self._target is None:
            return None
        self._clock.tick(elapsed_ms)
        self._current = tick(self._origin, self._target, self._clock.elapsed_ms, self.duration_ms)
        return self._current

    @property
    def settled(self) -> bool:
        return self._target is not None and self._current == self._target

    def reset(self) -> None:
        self._origin = None
        self._target = None
        self._current = None
        self._clock.reset()
