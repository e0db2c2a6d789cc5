"""Shared thresholds for the yardage overlay engine."""

from __future__ import annotations

EARTH_RADIUS_M = 6_371_000.0
YARDS_PER_METER = 1.0936133

# Geodetic segments shorter than this are treated as degenerate.
MIN_REFERENCE_M = 0.5
# Image-space anchors closer than this cannot define a scale.
MIN_NORM_SEPARATION = 1e-4

DEFAULT_ANCHOR_A = (0.5, 0.75)
DEFAULT_ANCHOR_C = (0.5, 0.25)

TARGET_ENDPOINT_GUARD_PX = 35.0
DEFAULT_RENDER_WIDTH_PX = 360.0
DEFAULT_RENDER_HEIGHT_PX = 640.0

MAX_LATERAL_OFFSET = 250.0
AUTO_HIDE_WITHIN_GREEN = 150.0
AUTO_HIDE_WITHIN_TARGET = 100.0

SMOOTHING_DURATION_MS = 350.0

DEFAULT_PAR_CYCLE = (4, 3, 5)

UNAVAILABLE = "—"
