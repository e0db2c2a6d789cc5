from __future__ import annotations

import threading

import pytest

from yardage.calibration import CalibrationState
from yardage.location import LocationStatus
from yardage.models import GeoPoint, HoleReference, LiveFix, NormPoint
from yardage.session import HoleController, SessionClosedError, SessionOptions, hole_key
from yardage.store import InMemoryCalibrationStore, SavedCalibration
from yardage.visibility import VisibilityState

TEE = GeoPoint(lat=28.844444, lon=-81.955278)
GREEN = GeoPoint(lat=28.841111, lon=-81.954722)
HOLE_1 = HoleReference(tee=TEE, green=GREEN, par=5)
HOLE_2 = HoleReference(
    tee=GeoPoint(lat=28.840278, lon=-81.953889),
    green=GeoPoint(lat=28.8375, lon=-81.954167),
    par=4,
)
KEY_1 = "BelleGlades-Calusa-01"
KEY_2 = "BelleGlades-Calusa-02"


def _fix(point: GeoPoint, ts: int = 1_000) -> LiveFix:
    return LiveFix(point=point, accuracy_m=5.0, received_at_ms=ts)


@pytest.fixture
def controller() -> HoleController:
    return HoleController(InMemoryCalibrationStore(), options=SessionOptions(smoothing_ms=300))


def test_hole_key_format() -> None:
    assert hole_key("Belle Glades", "Calusa", 1) == KEY_1
    assert hole_key("Broad Stripes Golf", "Back", 12) == "BroadStripesGolf-Back-12"
    with pytest.raises(ValueError):
        hole_key("", "Calusa", 1)


def test_first_visit_uses_default_layout(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    state = session.get_state()
    assert state.calibration_state == CalibrationState.DEFAULT
    assert state.calibration.a == NormPoint(0.5, 0.75)
    assert state.calibration.c == NormPoint(0.5, 0.25)
    assert state.target.active is False
    assert state.target.b == NormPoint(0.5, 0.5)

    frame = session.frame()
    assert frame.projection.tee_to_green == pytest.approx(409.6, rel=1e-3)
    assert frame.projection.distance_to_green is None
    assert frame.marker is None
    assert frame.location_status == LocationStatus.NOT_STARTED


def test_place_save_and_reload(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    session.drag_anchor("A", NormPoint(0.45, 0.8))
    assert session.place_target(NormPoint(0.9, 0.5)) is True
    saved = session.save_defaults()
    assert session.get_state().calibration_state == CalibrationState.SAVED
    assert saved.active is True

    reopened = controller.open_hole(KEY_1, HOLE_1)
    state = reopened.get_state()
    assert state.calibration_state == CalibrationState.LOADED
    assert state.calibration.a == NormPoint(0.45, 0.8)
    assert state.target == session.target


def test_loaded_partial_record_falls_back_to_defaults() -> None:
    store = InMemoryCalibrationStore()
    store.set(KEY_1, SavedCalibration(a=NormPoint(0.3, 0.9)))
    session = HoleController(store).open_hole(KEY_1, HOLE_1)
    state = session.get_state()
    assert state.calibration.a == NormPoint(0.3, 0.9)
    assert state.calibration.c == NormPoint(0.5, 0.25)
    assert state.target.b.x == pytest.approx(0.4)
    assert state.target.b.y == pytest.approx(0.575)


def test_rejected_placement_leaves_target_untouched(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    assert session.place_target(NormPoint(0.5, 0.26)) is False
    assert session.target.active is False


def test_clear_target_only_flips_flag(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    session.place_target(NormPoint(0.5, 0.55))
    b = session.target.b
    session.clear_target()
    assert session.target.active is False
    assert session.target.b == b


def test_fix_drives_projection_and_marker(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    controller.update_fix(_fix(TEE))
    frame = session.frame()
    assert frame.location_status == LocationStatus.LOCKED
    assert frame.marker == NormPoint(0.5, 0.75)

    controller.update_fix(_fix(GREEN, ts=2_000))
    assert session.frame().marker == NormPoint(0.5, 0.75)
    controller.tick(150)
    moving = session.frame().marker
    assert moving is not None and 0.25 < moving.y < 0.75
    controller.tick(150)
    settled = session.frame().marker
    assert settled is not None
    assert settled.y == pytest.approx(0.25, abs=1e-4)


def test_location_error_makes_live_outputs_unavailable(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    controller.update_fix(_fix(TEE))
    controller.report_location_error("timeout")
    frame = session.frame()
    assert frame.location_status == LocationStatus.ERROR
    assert frame.projection.distance_to_green is None
    assert frame.projection.norm_position is None
    assert frame.marker is None
    assert frame.projection.tee_to_green is not None


def test_auto_hide_is_scoped_to_the_visit(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    session.place_target(NormPoint(0.5, 0.5))
    controller.update_fix(_fix(TEE))
    assert session.frame().visibility.visible is True

    controller.update_fix(_fix(GREEN, ts=2_000))
    assert session.frame().visibility.state == VisibilityState.AUTO_HIDDEN
    controller.update_fix(_fix(TEE, ts=3_000))
    assert session.frame().visibility.state == VisibilityState.AUTO_HIDDEN

    # Re-placing the target shows it again within the same visit.
    session.place_target(NormPoint(0.5, 0.6))
    assert session.frame().visibility.visible is True

    controller.update_fix(_fix(GREEN, ts=4_000))
    assert session.frame().visibility.state == VisibilityState.AUTO_HIDDEN

    fresh = controller.open_hole(KEY_2, HOLE_2)
    assert fresh.frame().visibility.state == VisibilityState.SHOWING


def test_switching_holes_discards_previous_session(controller: HoleController) -> None:
    first = controller.open_hole(KEY_1, HOLE_1)
    first.drag_anchor("C", NormPoint(0.2, 0.1))
    controller.update_fix(_fix(TEE))
    assert first.frame().marker is not None

    second = controller.open_hole(KEY_2, HOLE_2)
    assert first.closed
    with pytest.raises(SessionClosedError):
        first.frame()
    with pytest.raises(SessionClosedError):
        first.drag_anchor("A", NormPoint(0.1, 0.1))

    state = second.get_state()
    assert state.hole_key == KEY_2
    assert state.calibration.c == NormPoint(0.5, 0.25)
    # The fix carries over, but it is re-projected against the new hole.
    assert second.frame().projection.distance_to_green is not None
    assert controller.session is second


def test_controller_without_session_ignores_ticks() -> None:
    controller = HoleController(InMemoryCalibrationStore())
    assert controller.update_fix(_fix(TEE)) is None
    assert controller.tick(16) is None
    assert controller.tracker.fix is not None


def test_unsupported_location_blanks_live_outputs(controller: HoleController) -> None:
    session = controller.open_hole(KEY_1, HOLE_1)
    controller.update_fix(_fix(TEE))
    controller.report_location_unsupported()
    frame = session.frame()
    assert frame.location_status == LocationStatus.UNSUPPORTED
    assert frame.projection.distance_to_green is None
    assert frame.projection.norm_position is None


def test_hole_switch_waits_for_lock_holder(controller: HoleController) -> None:
    first = controller.open_hole(KEY_1, HOLE_1)
    switched = threading.Event()

    def switch() -> None:
        controller.open_hole(KEY_2, HOLE_2)
        switched.set()

    with controller.lock:
        worker = threading.Thread(target=switch)
        worker.start()
        assert not switched.wait(0.1)
        # The session cannot be closed underneath a caller holding the lock.
        controller.update_fix(_fix(GREEN))
        assert first.frame().projection.distance_to_green is not None
    worker.join(timeout=5)

    assert switched.is_set()
    assert first.closed
    assert controller.session is not None
    assert controller.session.key == KEY_2


def test_concurrent_fixes_and_hole_switches_never_hit_closed_session(
    controller: HoleController,
) -> None:
    controller.open_hole(KEY_1, HOLE_1)
    errors: list[Exception] = []

    def feed_fixes() -> None:
        try:
            for ts in range(2_000):
                controller.update_fix(_fix(TEE, ts=ts))
        except Exception as exc:
            errors.append(exc)

    def switch_holes() -> None:
        try:
            for i in range(200):
                if i % 2:
                    controller.open_hole(KEY_1, HOLE_1)
                else:
                    controller.open_hole(KEY_2, HOLE_2)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=feed_fixes), threading.Thread(target=switch_holes)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
