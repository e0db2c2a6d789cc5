"""Map a live fix onto the calibrated hole diagram.

The calibrated A-C line is the geometric reference in image space. The fix only
contributes two numbers: how far along the tee-green line it sits, and how far
left or right of it. Both are measured geodetically and then re-applied to the
image through the calibration scale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .calibration import derive_scale, tee_to_green
from .constants import MAX_LATERAL_OFFSET
from .geodesy import (
    along_track_fraction,
    convert_m,
    cross_track_m,
    distance_m,
    point_along_great_circle,
)
from .models import (
    Calibration,
    GeoPoint,
    HoleReference,
    LiveFix,
    NormPoint,
    ProjectedLivePosition,
    Target,
    Unit,
)
from .target import target_fraction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    norm_position: Optional[NormPoint] = None
    along_track_fraction: Optional[float] = None
    along_track: Optional[float] = None
    cross_track: Optional[float] = None
    cross_track_raw: Optional[float] = None
    distance_to_green: Optional[float] = None
    distance_to_target: Optional[float] = None
    tee_to_green: Optional[float] = None
    tee_to_target: Optional[float] = None
    target_to_green: Optional[float] = None
    target_geo: Optional[GeoPoint] = None
    scale: Optional[float] = None

    @property
    def live(self) -> Optional[ProjectedLivePosition]:
        if self.norm_position is None:
            return None
        return ProjectedLivePosition(norm=self.norm_position)


UNAVAILABLE_PROJECTION = Projection()


def _centerline_only(
    fix: Optional[LiveFix], hole: HoleReference, calibration: Calibration
) -> Projection:
    if fix is None:
        return UNAVAILABLE_PROJECTION
    t = along_track_fraction(hole.tee, hole.green, fix.point)
    if t is None:
        return UNAVAILABLE_PROJECTION
    return Projection(norm_position=calibration.a.lerp(calibration.c, t), along_track_fraction=t)


def _offset_perpendicular(base: NormPoint, calibration: Calibration, offset: float) -> NormPoint:
    length = calibration.separation
    ux = (calibration.c.x - calibration.a.x) / length
    uy = (calibration.c.y - calibration.a.y) / length
    # Right-hand normal of A->C with y pointing down.
    nx, ny = -uy, ux
    return NormPoint.clamped(base.x + nx * offset, base.y + ny * offset)


def project(
    fix: Optional[LiveFix],
    hole: Optional[HoleReference],
    calibration: Optional[Calibration],
    target: Optional[Target] = None,
    *,
    max_lateral: float = MAX_LATERAL_OFFSET,
    unit: Unit = "yd",
) -> Projection:
    """Compute marker position and every derived distance for one update.

    Distances are reported in ``unit``. Any value that cannot be computed is
    ``None``; when the calibration has no usable scale only the centerline
    position survives.
    """
    if max_lateral < 0:
        raise ValueError("max_lateral must be non-negative")
    if hole is None or calibration is None:
        return UNAVAILABLE_PROJECTION

    scale = derive_scale(calibration, hole, unit)
    if scale is None:
        return _centerline_only(fix, hole, calibration)
    hole_length = tee_to_green(hole, unit)

    tee_to_target: Optional[float] = None
    target_to_green: Optional[float] = None
    target_geo: Optional[GeoPoint] = None
    if target is not None and target.active:
        tee_to_target = calibration.a.distance_to(target.b) * scale
        target_to_green = target.b.distance_to(calibration.c) * scale
        fraction = target_fraction(calibration, target)
        target_geo = point_along_great_circle(
            hole.tee, hole.green, fraction * distance_m(hole.tee, hole.green)
        )

    if fix is None:
        return Projection(
            tee_to_green=hole_length,
            tee_to_target=tee_to_target,
            target_to_green=target_to_green,
            target_geo=target_geo,
            scale=scale,
        )

    to_green = convert_m(distance_m(fix.point, hole.green), unit)
    to_target = (
        convert_m(distance_m(fix.point, target_geo), unit) if target_geo is not None else None
    )

    t = along_track_fraction(hole.tee, hole.green, fix.point)
    if t is None:
        return Projection(
            distance_to_green=to_green,
            distance_to_target=to_target,
            tee_to_green=hole_length,
            tee_to_target=tee_to_target,
            target_to_green=target_to_green,
            target_geo=target_geo,
            scale=scale,
        )

    position = calibration.a.lerp(calibration.c, t)
    along = t * hole_length if hole_length is not None else None

    cross_raw: Optional[float] = None
    cross: Optional[float] = None
    cross_m = cross_track_m(hole.tee, hole.green, fix.point)
    if cross_m is not None:
        cross_raw = convert_m(cross_m, unit)
        cross = max(-max_lateral, min(max_lateral, cross_raw))
        position = _offset_perpendicular(position, calibration, cross / scale)

    logger.debug(
        "projected fix t=%.3f cross=%s -> (%.4f, %.4f)",
        t,
        "n/a" if cross is None else f"{cross:.1f}",
        position.x,
        position.y,
    )
    return Projection(
        norm_position=position,
        along_track_fraction=t,
        along_track=along,
        cross_track=cross,
        cross_track_raw=cross_raw,
        distance_to_green=to_green,
        distance_to_target=to_target,
        tee_to_green=hole_length,
        tee_to_target=tee_to_target,
        target_to_green=target_to_green,
        target_geo=target_geo,
        scale=scale,
    )
