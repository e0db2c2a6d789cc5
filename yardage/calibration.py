"""Two-anchor calibration between geodetic metres and diagram units."""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Optional

from .constants import DEFAULT_ANCHOR_A, DEFAULT_ANCHOR_C, MIN_NORM_SEPARATION
from .geodesy import convert_m, distance_m
from .models import Anchor, Calibration, HoleReference, NormPoint, Unit

logger = logging.getLogger(__name__)


def default_calibration() -> Calibration:
    return Calibration(a=NormPoint.clamped(*DEFAULT_ANCHOR_A), c=NormPoint.clamped(*DEFAULT_ANCHOR_C))


def tee_to_green(hole: HoleReference, unit: Unit = "yd") -> Optional[float]:
    meters = distance_m(hole.tee, hole.green)
    if not math.isfinite(meters) or meters <= 0:
        return None
    return convert_m(meters, unit)


def derive_scale(
    calibration: Optional[Calibration], hole: Optional[HoleReference], unit: Unit = "yd"
) -> Optional[float]:
    """Distance units per normalized image unit, or ``None`` when not computable."""
    if calibration is None or hole is None:
        return None
    separation = calibration.separation
    if not math.isfinite(separation) or separation <= MIN_NORM_SEPARATION:
        return None
    length = tee_to_green(hole, unit)
    if length is None:
        return None
    return length / separation


class CalibrationState(str, Enum):
    UNSET = "unset"
    DEFAULT = "default"
    USER_PLACED = "user_placed"
    SAVED = "saved"
    LOADED = "loaded"


class CalibrationModel:
    """Anchor ownership for a single hole visit."""

    def __init__(self) -> None:
        self._calibration: Optional[Calibration] = None
        self._state = CalibrationState.UNSET

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def calibration(self) -> Optional[Calibration]:
        return self._calibration

    @property
    def current(self) -> Calibration:
        """The anchors in use; raises until defaults or a saved pair are set."""
        if self._calibration is None:
            raise RuntimeError("calibration has not been initialised")
        return self._calibration

    def use_defaults(self) -> Calibration:
        self._calibration = default_calibration()
        self._state = CalibrationState.DEFAULT
        return self._calibration

    def load(self, calibration: Calibration) -> Calibration:
        self._calibration = Calibration(
            a=NormPoint.clamped(calibration.a.x, calibration.a.y),
            c=NormPoint.clamped(calibration.c.x, calibration.c.y),
        )
        self._state = CalibrationState.LOADED
        return self._calibration

    def drag_anchor(self, which: Anchor, point: NormPoint) -> Calibration:
        current = self._calibration or self.use_defaults()
        moved = NormPoint.clamped(point.x, point.y)
        if which == "A":
            self._calibration = Calibration(a=moved, c=current.c)
        elif which == "C":
            self._calibration = Calibration(a=current.a, c=moved)
        else:
            raise ValueError(f"unknown anchor: {which!r}")
        self._state = CalibrationState.USER_PLACED
        logger.debug("anchor %s moved to (%.4f, %.4f)", which, moved.x, moved.y)
        return self._calibration

    def mark_saved(self) -> None:
        if self._calibration is None:
            return
        self._state = CalibrationState.SAVED

    def scale(self, hole: Optional[HoleReference], unit: Unit = "yd") -> Optional[float]:
        return derive_scale(self._calibration, hole, unit)
