"""Hole yardage overlay engine exports."""

from .calibration import CalibrationModel, CalibrationState, derive_scale
from .geodesy import (
    along_track_fraction,
    bearing_rad,
    cross_track_m,
    distance_m,
    point_along_great_circle,
)
from .location import LocationStatus, LocationTracker
from .models import (
    Calibration,
    GeoPoint,
    HoleReference,
    LiveFix,
    NormPoint,
    ProjectedLivePosition,
    Target,
    format_distance,
)
from .projector import Projection, project
from .session import HoleController, HoleSession, OverlayFrame, SessionOptions, hole_key
from .smoothing import MarkerSmoother
from .store import (
    InMemoryCalibrationStore,
    JsonFileCalibrationStore,
    SavedCalibration,
    get_hole_defaults,
    set_hole_defaults,
)
from .visibility import TargetVisibility, VisibilityState

__all__ = [
    "CalibrationModel",
    "CalibrationState",
    "derive_scale",
    "along_track_fraction",
    "bearing_rad",
    "cross_track_m",
    "distance_m",
    "point_along_great_circle",
    "LocationStatus",
    "LocationTracker",
    "Calibration",
    "GeoPoint",
    "HoleReference",
    "LiveFix",
    "NormPoint",
    "ProjectedLivePosition",
    "Target",
    "format_distance",
    "Projection",
    "project",
    "HoleController",
    "HoleSession",
    "OverlayFrame",
    "SessionOptions",
    "hole_key",
    "MarkerSmoother",
    "InMemoryCalibrationStore",
    "JsonFileCalibrationStore",
    "SavedCalibration",
    "get_hole_defaults",
    "set_hole_defaults",
    "TargetVisibility",
    "VisibilityState",
]
