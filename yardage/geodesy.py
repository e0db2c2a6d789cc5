"""Great-circle helpers for golf-hole scale distances."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from .constants import EARTH_RADIUS_M, MIN_REFERENCE_M, YARDS_PER_METER
from .models import GeoPoint, Unit


def _wrap_lon_delta(delta_deg: float) -> float:
    return (delta_deg + 180.0) % 360.0 - 180.0


def distance_m(p1: GeoPoint, p2: GeoPoint) -> float:
    """Return the haversine distance between two points in metres."""
    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)
    dlat = lat2 - lat1
    dlon = math.radians(_wrap_lon_delta(p2.lon - p1.lon))
    h = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def bearing_rad(origin: GeoPoint, dest: GeoPoint) -> float:
    """Initial bearing from ``origin`` toward ``dest`` in ``(-pi, pi]``."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(dest.lat)
    dlon = math.radians(_wrap_lon_delta(dest.lon - origin.lon))
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    bearing = math.atan2(y, x)
    if bearing <= -math.pi:
        return math.pi
    return bearing


def point_along_great_circle(p1: GeoPoint, p2: GeoPoint, distance: float) -> GeoPoint:
    """Slerp from ``p1`` toward ``p2`` by ``distance`` metres, clamped to the segment."""
    total = distance_m(p1, p2)
    if not math.isfinite(total) or total <= 0:
        return p1

    travelled = max(0.0, min(distance, total))
    fraction = travelled / total
    angular = total / EARTH_RADIUS_M
    sin_angular = math.sin(angular)
    if abs(sin_angular) < 1e-12:
        return p1

    lat1, lon1 = math.radians(p1.lat), math.radians(p1.lon)
    lat2, lon2 = math.radians(p2.lat), math.radians(p2.lon)
    wa = math.sin((1.0 - fraction) * angular) / sin_angular
    wb = math.sin(fraction * angular) / sin_angular

    x = wa * math.cos(lat1) * math.cos(lon1) + wb * math.cos(lat2) * math.cos(lon2)
    y = wa * math.cos(lat1) * math.sin(lon1) + wb * math.cos(lat2) * math.sin(lon2)
    z = wa * math.sin(lat1) + wb * math.sin(lat2)

    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lon = math.atan2(y, x)
    return GeoPoint(lat=math.degrees(lat), lon=math.degrees(lon))


def _local_xy(origin: GeoPoint, point: GeoPoint) -> Tuple[float, float]:
    # Equirectangular: x east, y north, metres.
    cos_lat = math.cos(math.radians(origin.lat))
    x = math.radians(_wrap_lon_delta(point.lon - origin.lon)) * cos_lat * EARTH_RADIUS_M
    y = math.radians(point.lat - origin.lat) * EARTH_RADIUS_M
    return x, y


def cross_track_m(ref_from: GeoPoint, ref_to: GeoPoint, point: GeoPoint) -> Optional[float]:
    """Signed distance of ``point`` from the reference line, positive to the right."""
    dx, dy = _local_xy(ref_from, ref_to)
    length = math.hypot(dx, dy)
    if not math.isfinite(length) or length <= MIN_REFERENCE_M:
        return None
    px, py = _local_xy(ref_from, point)
    return (dy * px - dx * py) / length


def along_track_fraction(
    ref_from: GeoPoint, ref_to: GeoPoint, point: GeoPoint
) -> Optional[float]:
    """Progress of ``point`` along ``ref_from -> ref_to`` as a clamped fraction."""
    reference = distance_m(ref_from, ref_to)
    if not math.isfinite(reference) or reference <= MIN_REFERENCE_M:
        return None
    offset = distance_m(ref_from, point)
    if offset == 0:
        return 0.0
    delta = bearing_rad(ref_from, point) - bearing_rad(ref_from, ref_to)
    along = math.cos(delta) * offset
    return max(0.0, min(1.0, along / reference))


def meters_to_yards(meters: float) -> float:
    return meters * YARDS_PER_METER


def yards_to_meters(yards: float) -> float:
    return yards / YARDS_PER_METER


def convert_m(meters: float, unit: Unit = "yd") -> float:
    if unit == "yd":
        return meters_to_yards(meters)
    if unit == "m":
        return meters
    raise ValueError(f"unsupported unit: {unit}")


def round_distance(value: Optional[float]) -> Optional[int]:
    if value is None or not math.isfinite(value):
        return None
    return int(round(value))
