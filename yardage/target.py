"""Optional aim point placed on the calibrated tee-green line."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .constants import (
    DEFAULT_RENDER_HEIGHT_PX,
    DEFAULT_RENDER_WIDTH_PX,
    TARGET_ENDPOINT_GUARD_PX,
)
from .models import Calibration, NormPoint, Target

logger = logging.getLogger(__name__)

RenderSize = Tuple[float, float]


def segment_fraction(p: NormPoint, a: NormPoint, b: NormPoint) -> float:
    abx = b.x - a.x
    aby = b.y - a.y
    ab2 = abx * abx + aby * aby
    if ab2 == 0:
        return 0.0
    t = ((p.x - a.x) * abx + (p.y - a.y) * aby) / ab2
    return max(0.0, min(1.0, t))


def closest_point_on_segment(p: NormPoint, a: NormPoint, b: NormPoint) -> NormPoint:
    return a.lerp(b, segment_fraction(p, a, b))


def _pixel_distance(p1: NormPoint, p2: NormPoint, render_size: RenderSize) -> float:
    width, height = render_size
    return (((p2.x - p1.x) * width) ** 2 + ((p2.y - p1.y) * height) ** 2) ** 0.5


def default_target(calibration: Calibration) -> Target:
    return Target(b=calibration.a.lerp(calibration.c, 0.5), active=False)


def place_target(
    calibration: Calibration,
    click: NormPoint,
    current: Optional[Target] = None,
    render_size: RenderSize = (DEFAULT_RENDER_WIDTH_PX, DEFAULT_RENDER_HEIGHT_PX),
    guard_px: float = TARGET_ENDPOINT_GUARD_PX,
) -> Target:
    """Snap ``click`` onto A-C and activate it, unless it lands on an endpoint.

    A rejected placement returns ``current`` (or an inactive default) so callers
    can compare identity to detect the no-op.
    """
    existing = current if current is not None else default_target(calibration)
    click = NormPoint.clamped(click.x, click.y)
    snapped = closest_point_on_segment(click, calibration.a, calibration.c)
    if (
        _pixel_distance(snapped, calibration.a, render_size) < guard_px
        or _pixel_distance(snapped, calibration.c, render_size) < guard_px
    ):
        logger.debug("target placement rejected near endpoint at (%.4f, %.4f)", snapped.x, snapped.y)
        return existing
    return Target(b=snapped, active=True)


def clear_target(target: Target) -> Target:
    return Target(b=target.b, active=False)


def drag_target(target: Target, point: NormPoint) -> Target:
    if not target.active:
        return target
    return Target(b=NormPoint.clamped(point.x, point.y), active=True)


def target_fraction(calibration: Calibration, target: Target) -> float:
    """Fraction of the tee-green line at which ``B`` sits, by orthogonal projection."""
    return segment_fraction(target.b, calibration.a, calibration.c)
