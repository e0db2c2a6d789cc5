from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from yardage.geodesy import round_distance
from yardage.models import NormPoint as EngineNormPoint
from yardage.models import format_distance
from yardage.session import OverlayFrame
from yardage.store import SavedCalibration

from server.courses.schemas import GeoPoint


class NormPoint(BaseModel):
    """Diagram coordinate; out-of-range values are clamped, not rejected."""

    x: float
    y: float

    def to_engine(self) -> EngineNormPoint:
        return EngineNormPoint.clamped(self.x, self.y)

    @classmethod
    def from_engine(cls, point: Optional[EngineNormPoint]) -> Optional["NormPoint"]:
        if point is None:
            return None
        return cls(x=point.x, y=point.y)


class CalibrationRecord(BaseModel):
    A: Optional[NormPoint] = None
    C: Optional[NormPoint] = None
    B: Optional[NormPoint] = None
    active: bool = False

    @classmethod
    def from_saved(cls, saved: SavedCalibration) -> "CalibrationRecord":
        return cls(
            A=NormPoint.from_engine(saved.a),
            C=NormPoint.from_engine(saved.c),
            B=NormPoint.from_engine(saved.b),
            active=saved.active,
        )


class OpenVisitRequest(BaseModel):
    club: str
    nine: str
    hole: int = Field(..., ge=1)


class FixRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    accuracy_m: float = Field(default=0.0, ge=0)
    received_at_ms: int = Field(..., ge=0)


class FixErrorRequest(BaseModel):
    kind: Literal["error", "unsupported"] = "error"
    message: str = "unavailable"


class TickRequest(BaseModel):
    elapsed_ms: float = Field(..., ge=0)


class Distances(BaseModel):
    """Rounded distances; ``None`` means unavailable and ``display`` shows a dash."""

    tee_to_green: Optional[int] = None
    to_green: Optional[int] = None
    to_target: Optional[int] = None
    tee_to_target: Optional[int] = None
    target_to_green: Optional[int] = None
    along_track: Optional[int] = None
    cross_track: Optional[int] = None
    cross_track_raw: Optional[int] = None
    display: dict[str, str] = Field(default_factory=dict)


class TargetView(BaseModel):
    B: NormPoint
    active: bool
    visible: bool
    visibility: Literal["showing", "auto_hidden"]
    hidden_reason: Optional[str] = None
    geo: Optional[GeoPoint] = None


class FrameResponse(BaseModel):
    visit_id: str
    hole_key: str
    unit: Literal["yd", "m"]
    A: NormPoint
    C: NormPoint
    calibration_state: str
    scale: Optional[float] = None
    target: TargetView
    live_position: Optional[NormPoint] = None
    marker: Optional[NormPoint] = None
    along_track_fraction: Optional[float] = None
    distances: Distances
    location_status: str
    location_message: str


class PlacementResponse(BaseModel):
    placed: bool
    frame: FrameResponse


def frame_to_response(visit_id: str, frame: OverlayFrame) -> FrameResponse:
    projection = frame.projection
    state = frame.state
    raw = {
        "tee_to_green": projection.tee_to_green,
        "to_green": projection.distance_to_green,
        "to_target": projection.distance_to_target,
        "tee_to_target": projection.tee_to_target,
        "target_to_green": projection.target_to_green,
        "along_track": projection.along_track,
        "cross_track": projection.cross_track,
        "cross_track_raw": projection.cross_track_raw,
    }
    distances = Distances(
        **{name: round_distance(value) for name, value in raw.items()},
        display={name: format_distance(value) for name, value in raw.items()},
    )
    target_geo = projection.target_geo
    return FrameResponse(
        visit_id=visit_id,
        hole_key=state.hole_key,
        unit=frame.unit,
        A=NormPoint.from_engine(state.calibration.a),
        C=NormPoint.from_engine(state.calibration.c),
        calibration_state=state.calibration_state.value,
        scale=projection.scale,
        target=TargetView(
            B=NormPoint.from_engine(state.target.b),
            active=state.target.active,
            visible=frame.visibility.visible,
            visibility=frame.visibility.state.value,
            hidden_reason=frame.visibility.reason,
            geo=GeoPoint(lat=target_geo.lat, lon=target_geo.lon) if target_geo else None,
        ),
        live_position=NormPoint.from_engine(projection.norm_position),
        marker=NormPoint.from_engine(frame.marker),
        along_track_fraction=projection.along_track_fraction,
        distances=distances,
        location_status=frame.location_status.value,
        location_message=frame.location_message,
    )
