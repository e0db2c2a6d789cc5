"""Per-hole-visit sessions and the controller that swaps them.

A session is built fresh every time the hole identity changes and is thrown
away on exit, so anchors, target, smoothing and auto-hide state of one hole can
never bleed into the next.
"""

from __future__ import annotations

import logging
import re
from threading import RLock
from dataclasses import dataclass
from typing import Optional, Tuple

from .calibration import CalibrationModel, CalibrationState, default_calibration
from .constants import (
    AUTO_HIDE_WITHIN_GREEN,
    AUTO_HIDE_WITHIN_TARGET,
    DEFAULT_RENDER_HEIGHT_PX,
    DEFAULT_RENDER_WIDTH_PX,
    MAX_LATERAL_OFFSET,
    SMOOTHING_DURATION_MS,
    TARGET_ENDPOINT_GUARD_PX,
)
from .location import LocationStatus, LocationTracker
from .models import Anchor, Calibration, HoleReference, LiveFix, NormPoint, Target, Unit
from .projector import UNAVAILABLE_PROJECTION, Projection, project
from .smoothing import MarkerSmoother
from .store import CalibrationStore, SavedCalibration
from .target import clear_target, default_target, drag_target, place_target
from .visibility import TargetVisibility, VisibilitySnapshot

logger = logging.getLogger(__name__)


def hole_key(club: str, nine: str, hole: int) -> str:
    """Stable identity for one hole, e.g. ``BelleGlades-Calusa-01``."""
    if not club or not nine or not hole:
        raise ValueError("club, nine and hole are required")
    safe_club = re.sub(r"\s+", "", str(club))
    return f"{safe_club}-{nine}-{int(hole):02d}"


class SessionClosedError(RuntimeError):
    """Raised when a discarded hole session is used."""


@dataclass(frozen=True)
class SessionOptions:
    unit: Unit = "yd"
    max_lateral: float = MAX_LATERAL_OFFSET
    near_green: float = AUTO_HIDE_WITHIN_GREEN
    near_target: float = AUTO_HIDE_WITHIN_TARGET
    smoothing_ms: float = SMOOTHING_DURATION_MS
    render_size: Tuple[float, float] = (DEFAULT_RENDER_WIDTH_PX, DEFAULT_RENDER_HEIGHT_PX)
    guard_px: float = TARGET_ENDPOINT_GUARD_PX


@dataclass(frozen=True)
class SessionState:
    hole_key: str
    calibration: Calibration
    calibration_state: CalibrationState
    target: Target


@dataclass(frozen=True)
class OverlayFrame:
    """Everything the presentation layer needs for one render."""

    state: SessionState
    projection: Projection
    marker: Optional[NormPoint]
    visibility: VisibilitySnapshot
    location_status: LocationStatus
    location_message: str
    unit: Unit


class HoleSession:
    def __init__(
        self,
        key: str,
        hole: HoleReference,
        *,
        store: CalibrationStore,
        tracker: LocationTracker,
        options: Optional[SessionOptions] = None,
    ) -> None:
        self.key = key
        self.hole = hole
        self.options = options or SessionOptions()
        self._store = store
        self._tracker = tracker
        self._model = CalibrationModel()
        self._visibility = TargetVisibility(
            near_green=self.options.near_green, near_target=self.options.near_target
        )
        self._smoother = MarkerSmoother(self.options.smoothing_ms)
        self._projection = UNAVAILABLE_PROJECTION
        self._closed = False
        self._target = self._restore(store.get(key))
        self.refresh()

    def _restore(self, saved: Optional[SavedCalibration]) -> Target:
        if saved is None or (saved.a is None and saved.c is None):
            calibration = self._model.use_defaults()
            logger.info("hole %s opened with default calibration", self.key)
            return default_target(calibration)
        fallback = default_calibration()
        calibration = self._model.load(
            Calibration(a=saved.a or fallback.a, c=saved.c or fallback.c)
        )
        logger.info("hole %s opened with saved calibration", self.key)
        b = saved.b or default_target(calibration).b
        return Target(b=b, active=saved.active)

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"session for {self.key} is closed")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def calibration(self) -> Calibration:
        return self._model.current

    @property
    def target(self) -> Target:
        return self._target

    @property
    def projection(self) -> Projection:
        return self._projection

    def refresh(self) -> Projection:
        """Recompute the projection from the latest fix and current anchors."""
        self._ensure_open()
        projection = project(
            self._tracker.fix,
            self.hole,
            self.calibration,
            self._target,
            max_lateral=self.options.max_lateral,
            unit=self.options.unit,
        )
        self._projection = projection
        self._visibility.evaluate(
            projection.distance_to_green, projection.tee_to_target, projection.target_to_green
        )
        self._smoother.set_target(projection.norm_position)
        return projection

    def drag_anchor(self, which: Anchor, point: NormPoint) -> Calibration:
        self._ensure_open()
        calibration = self._model.drag_anchor(which, point)
        self.refresh()
        return calibration

    def place_target(self, click: NormPoint) -> bool:
        self._ensure_open()
        placed = place_target(
            self.calibration,
            click,
            self._target,
            render_size=self.options.render_size,
            guard_px=self.options.guard_px,
        )
        if placed is self._target:
            return False
        self._target = placed
        self._visibility.rearm()
        self.refresh()
        return True

    def drag_target(self, point: NormPoint) -> Target:
        self._ensure_open()
        self._target = drag_target(self._target, point)
        self.refresh()
        return self._target

    def clear_target(self) -> Target:
        self._ensure_open()
        self._target = clear_target(self._target)
        self.refresh()
        return self._target

    def save_defaults(self) -> SavedCalibration:
        self._ensure_open()
        calibration = self.calibration
        record = SavedCalibration(
            a=calibration.a, c=calibration.c, b=self._target.b, active=self._target.active
        )
        self._store.set(self.key, record)
        self._model.mark_saved()
        logger.info("saved calibration for %s", self.key)
        return record

    def tick(self, elapsed_ms: float) -> Optional[NormPoint]:
        self._ensure_open()
        return self._smoother.tick(elapsed_ms)

    def get_state(self) -> SessionState:
        return SessionState(
            hole_key=self.key,
            calibration=self.calibration,
            calibration_state=self._model.state,
            target=self._target,
        )

    def frame(self) -> OverlayFrame:
        self._ensure_open()
        projection = self._projection
        return OverlayFrame(
            state=self.get_state(),
            projection=projection,
            marker=self._smoother.position,
            visibility=self._visibility.snapshot(
                target_active=self._target.active,
                calibrated=projection.scale is not None,
            ),
            location_status=self._tracker.status,
            location_message=self._tracker.message,
            unit=self.options.unit,
        )

    def close(self) -> None:
        self._smoother.reset()
        self._projection = UNAVAILABLE_PROJECTION
        self._closed = True


class HoleController:
    """Single owner of the active hole session and the latest fix.

    Every operation runs under ``lock`` so a hole switch can never close the
    session another caller is about to refresh. Callers that need several
    steps against one session may hold ``lock`` themselves; it is reentrant.
    """

    def __init__(
        self,
        store: CalibrationStore,
        *,
        tracker: Optional[LocationTracker] = None,
        options: Optional[SessionOptions] = None,
    ) -> None:
        self.store = store
        self.tracker = tracker or LocationTracker()
        self.options = options or SessionOptions()
        self._session: Optional[HoleSession] = None
        self._lock = RLock()

    @property
    def lock(self) -> RLock:
        return self._lock

    @property
    def session(self) -> Optional[HoleSession]:
        return self._session

    def open_hole(self, key: str, hole: HoleReference) -> HoleSession:
        with self._lock:
            self.close()
            self._session = HoleSession(
                key, hole, store=self.store, tracker=self.tracker, options=self.options
            )
            return self._session

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def _refresh(self) -> Optional[Projection]:
        if self._session is None:
            return None
        return self._session.refresh()

    def update_fix(self, fix: LiveFix) -> Optional[Projection]:
        with self._lock:
            self.tracker.record_fix(fix)
            return self._refresh()

    def report_location_error(self, message: str) -> Optional[Projection]:
        with self._lock:
            self.tracker.record_error(message)
            return self._refresh()

    def report_location_unsupported(self) -> Optional[Projection]:
        with self._lock:
            self.tracker.mark_unsupported()
            return self._refresh()

    def tick(self, elapsed_ms: float) -> Optional[NormPoint]:
        with self._lock:
            if self._session is None:
                return None
            return self._session.tick(elapsed_ms)
