"""Hole-visit endpoints: calibration gestures, live fixes and render frames."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Literal

from fastapi import APIRouter, Depends, HTTPException, status

from yardage.models import GeoPoint, LiveFix
from yardage.session import HoleController, HoleSession, hole_key

from server.courses import get_hole
from server.courses.store import CatalogLookupError
from server.metrics import CALIBRATIONS_SAVED, FIXES, PROJECTIONS, TARGET_PLACEMENTS
from server.security import require_api_key
from server.visits import VisitRegistry, get_visit_registry
from server.visits.models import (
    FixErrorRequest,
    FixRequest,
    FrameResponse,
    NormPoint,
    OpenVisitRequest,
    PlacementResponse,
    TickRequest,
    frame_to_response,
)


router = APIRouter(prefix="/api/visits", tags=["visits"], dependencies=[Depends(require_api_key)])


def _controller(visit_id: str, registry: VisitRegistry) -> HoleController:
    controller = registry.get(visit_id)
    if controller is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="visit not found")
    return controller


def _require_session(controller: HoleController) -> HoleSession:
    session = controller.session
    if session is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="no hole open")
    return session


@contextmanager
def _locked_session(visit_id: str, registry: VisitRegistry) -> Iterator[HoleSession]:
    controller = _controller(visit_id, registry)
    with controller.lock:
        yield _require_session(controller)


def _open(controller: HoleController, req: OpenVisitRequest) -> HoleSession:
    try:
        entry = get_hole(req.club, req.nine, req.hole)
    except CatalogLookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return controller.open_hole(hole_key(req.club, req.nine, req.hole), entry.to_reference())


@router.post("", response_model=FrameResponse, status_code=status.HTTP_201_CREATED)
def open_visit(
    req: OpenVisitRequest, registry: VisitRegistry = Depends(get_visit_registry)
) -> FrameResponse:
    visit_id, controller = registry.create()
    try:
        with controller.lock:
            frame = _open(controller, req).frame()
    except HTTPException:
        registry.close(visit_id)
        raise
    return frame_to_response(visit_id, frame)


@router.post("/{visit_id}/hole", response_model=FrameResponse)
def switch_hole(
    visit_id: str,
    req: OpenVisitRequest,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    controller = _controller(visit_id, registry)
    with controller.lock:
        frame = _open(controller, req).frame()
    return frame_to_response(visit_id, frame)


@router.get("/{visit_id}", response_model=FrameResponse)
def get_frame(visit_id: str, registry: VisitRegistry = Depends(get_visit_registry)) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        return frame_to_response(visit_id, session.frame())


@router.delete("/{visit_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_visit(visit_id: str, registry: VisitRegistry = Depends(get_visit_registry)) -> None:
    if not registry.close(visit_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="visit not found")


@router.post("/{visit_id}/anchors/{which}", response_model=FrameResponse)
def drag_anchor(
    visit_id: str,
    which: Literal["A", "C"],
    point: NormPoint,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        session.drag_anchor(which, point.to_engine())
        return frame_to_response(visit_id, session.frame())


@router.post("/{visit_id}/target", response_model=PlacementResponse)
def place_target(
    visit_id: str,
    click: NormPoint,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> PlacementResponse:
    with _locked_session(visit_id, registry) as session:
        placed = session.place_target(click.to_engine())
        frame = frame_to_response(visit_id, session.frame())
    TARGET_PLACEMENTS.labels(outcome="placed" if placed else "rejected").inc()
    return PlacementResponse(placed=placed, frame=frame)


@router.post("/{visit_id}/target/drag", response_model=FrameResponse)
def drag_target(
    visit_id: str,
    point: NormPoint,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        session.drag_target(point.to_engine())
        return frame_to_response(visit_id, session.frame())


@router.delete("/{visit_id}/target", response_model=FrameResponse)
def clear_target(visit_id: str, registry: VisitRegistry = Depends(get_visit_registry)) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        session.clear_target()
        return frame_to_response(visit_id, session.frame())


@router.post("/{visit_id}/save", response_model=FrameResponse)
def save_calibration(
    visit_id: str, registry: VisitRegistry = Depends(get_visit_registry)
) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        session.save_defaults()
        frame = frame_to_response(visit_id, session.frame())
    CALIBRATIONS_SAVED.inc()
    return frame


@router.post("/{visit_id}/fix", response_model=FrameResponse)
def record_fix(
    visit_id: str,
    req: FixRequest,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    controller = _controller(visit_id, registry)
    fix = LiveFix(
        point=GeoPoint(lat=req.lat, lon=req.lon),
        accuracy_m=req.accuracy_m,
        received_at_ms=req.received_at_ms,
    )
    with controller.lock:
        projection = controller.update_fix(fix)
        FIXES.labels(outcome="ok").inc()
        if projection is not None:
            PROJECTIONS.labels(available=str(projection.norm_position is not None).lower()).inc()
        return frame_to_response(visit_id, _require_session(controller).frame())


@router.post("/{visit_id}/fix-error", response_model=FrameResponse)
def record_fix_error(
    visit_id: str,
    req: FixErrorRequest,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    controller = _controller(visit_id, registry)
    with controller.lock:
        if req.kind == "unsupported":
            controller.report_location_unsupported()
        else:
            controller.report_location_error(req.message)
        FIXES.labels(outcome=req.kind).inc()
        return frame_to_response(visit_id, _require_session(controller).frame())


@router.post("/{visit_id}/tick", response_model=FrameResponse)
def tick(
    visit_id: str,
    req: TickRequest,
    registry: VisitRegistry = Depends(get_visit_registry),
) -> FrameResponse:
    with _locked_session(visit_id, registry) as session:
        session.tick(req.elapsed_ms)
        return frame_to_response(visit_id, session.frame())
