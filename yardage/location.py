"""Latest-fix bookkeeping for the device location provider."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .models import LiveFix

logger = logging.getLogger(__name__)


class LocationStatus(str, Enum):
    NOT_STARTED = "not_started"
    LOCKED = "locked"
    ERROR = "error"
    UNSUPPORTED = "unsupported"


class LocationTracker:
    """Holds at most one fix; every new fix replaces the previous one."""

    def __init__(self) -> None:
        self._fix: Optional[LiveFix] = None
        self._status = LocationStatus.NOT_STARTED
        self._message = "GPS not started"

    @property
    def fix(self) -> Optional[LiveFix]:
        return self._fix

    @property
    def status(self) -> LocationStatus:
        return self._status

    @property
    def message(self) -> str:
        return self._message

    def record_fix(self, fix: LiveFix) -> LiveFix:
        if self._fix is not None and fix.received_at_ms < self._fix.received_at_ms:
            logger.debug(
                "fix timestamp went backwards (%d < %d); keeping newest arrival",
                fix.received_at_ms,
                self._fix.received_at_ms,
            )
        self._fix = fix
        self._status = LocationStatus.LOCKED
        self._message = "GPS locked"
        return fix

    def record_error(self, message: str) -> None:
        logger.warning("location provider error: %s", message)
        self._fix = None
        self._status = LocationStatus.ERROR
        self._message = f"GPS error: {message}"

    def mark_unsupported(self) -> None:
        logger.warning("location provider not supported on this device")
        self._fix = None
        self._status = LocationStatus.UNSUPPORTED
        self._message = "Geolocation not supported"
