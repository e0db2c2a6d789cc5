"""In-memory registry of open hole visits, one controller per client.

Visits are kept in LRU order and expire after ``ttl_seconds`` without a
request, so clients that walk away without closing do not pile up.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock
from time import time
from typing import Callable, List, Optional

from yardage.session import HoleController, SessionOptions
from yardage.store import CalibrationStore, JsonFileCalibrationStore

from server.config import (
    DEFAULT_MAX_OPEN_VISITS,
    DEFAULT_VISIT_TTL_SECONDS,
    get_settings,
    session_options,
)

logger = logging.getLogger(__name__)


def new_visit_id() -> str:
    return f"visit_{uuid.uuid4().hex[:12]}"


@dataclass
class _VisitEntry:
    controller: HoleController
    expires_at: float


class VisitRegistry:
    def __init__(
        self,
        store: CalibrationStore,
        options: Optional[SessionOptions] = None,
        *,
        maxsize: int = DEFAULT_MAX_OPEN_VISITS,
        ttl_seconds: float = DEFAULT_VISIT_TTL_SECONDS,
        clock: Callable[[], float] = time,
    ) -> None:
        self.store = store
        self.options = options or SessionOptions()
        self._maxsize = max(1, int(maxsize))
        self._ttl = float(ttl_seconds)
        if self._ttl <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._clock = clock
        self._entries: "OrderedDict[str, _VisitEntry]" = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now: float) -> List[HoleController]:
        expired = [key for key, entry in self._entries.items() if entry.expires_at < now]
        return [self._entries.pop(key).controller for key in expired]

    def _discard(self, evicted: List[HoleController], reason: str) -> None:
        for controller in evicted:
            controller.close()
        if evicted:
            logger.info("evicted %d %s visit(s)", len(evicted), reason)

    def create(self) -> tuple[str, HoleController]:
        visit_id = new_visit_id()
        controller = HoleController(self.store, options=self.options)
        with self._lock:
            now = self._clock()
            expired = self._purge_expired(now)
            self._entries[visit_id] = _VisitEntry(controller, now + self._ttl)
            self._entries.move_to_end(visit_id)
            overflow: List[HoleController] = []
            while len(self._entries) > self._maxsize:
                overflow.append(self._entries.popitem(last=False)[1].controller)
        self._discard(expired, "idle")
        self._discard(overflow, "least recently used")
        logger.info("opened visit %s", visit_id)
        return visit_id, controller

    def get(self, visit_id: str) -> Optional[HoleController]:
        with self._lock:
            now = self._clock()
            expired = self._purge_expired(now)
            entry = self._entries.get(visit_id)
            if entry is not None:
                entry.expires_at = now + self._ttl
                self._entries.move_to_end(visit_id)
        self._discard(expired, "idle")
        return entry.controller if entry is not None else None

    def close(self, visit_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(visit_id, None)
        if entry is None:
            return False
        entry.controller.close()
        logger.info("closed visit %s", visit_id)
        return True


@lru_cache(maxsize=1)
def get_calibration_store() -> CalibrationStore:
    return JsonFileCalibrationStore(get_settings().calibrations_dir)


@lru_cache(maxsize=1)
def get_visit_registry() -> VisitRegistry:
    settings = get_settings()
    return VisitRegistry(
        get_calibration_store(),
        session_options(settings),
        maxsize=settings.max_open_visits,
        ttl_seconds=settings.visit_ttl_seconds,
    )
