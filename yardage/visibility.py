"""Auto-hide policy for the target overlay."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import AUTO_HIDE_WITHIN_GREEN, AUTO_HIDE_WITHIN_TARGET

logger = logging.getLogger(__name__)


class VisibilityState(str, Enum):
    SHOWING = "showing"
    AUTO_HIDDEN = "auto_hidden"


@dataclass
class VisibilitySnapshot:
    state: VisibilityState
    visible: bool
    reason: Optional[str] = None


class TargetVisibility:
    """One-way SHOWING -> AUTO_HIDDEN transition, scoped to a hole visit."""

    def __init__(
        self,
        *,
        near_green: float = AUTO_HIDE_WITHIN_GREEN,
        near_target: float = AUTO_HIDE_WITHIN_TARGET,
    ) -> None:
        if near_green < 0:
            raise ValueError("near_green must be non-negative")
        if near_target < 0:
            raise ValueError("near_target must be non-negative")
        self.near_green = near_green
        self.near_target = near_target
        self._state = VisibilityState.SHOWING
        self._reason: Optional[str] = None

    @property
    def state(self) -> VisibilityState:
        return self._state

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def evaluate(
        self,
        distance_to_green: Optional[float],
        tee_to_target: Optional[float],
        target_to_green: Optional[float],
    ) -> VisibilityState:
        if self._state == VisibilityState.AUTO_HIDDEN:
            return self._state
        # Nothing to judge until there is a live position.
        if distance_to_green is None:
            return self._state

        if distance_to_green <= self.near_green:
            self._hide("near_green")
        elif tee_to_target is not None and tee_to_target <= self.near_target:
            self._hide("near_target")
        elif target_to_green is not None and distance_to_green < target_to_green:
            self._hide("past_target")
        return self._state

    def rearm(self) -> None:
        self._state = VisibilityState.SHOWING
        self._reason = None

    def snapshot(self, *, target_active: bool, calibrated: bool) -> VisibilitySnapshot:
        visible = (
            target_active and calibrated and self._state == VisibilityState.SHOWING
        )
        return VisibilitySnapshot(state=self._state, visible=visible, reason=self._reason)

    def _hide(self, reason: str) -> None:
        self._state = VisibilityState.AUTO_HIDDEN
        self._reason = reason
        logger.info("target overlay auto-hidden: %s", reason)
