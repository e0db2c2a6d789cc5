"""Persistence for saved per-hole calibrations."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Mapping, Optional, Protocol

from .models import NormPoint, clamp_norm

logger = logging.getLogger(__name__)

STORE_FILENAME = "hole_defaults_v2.json"


@dataclass(frozen=True)
class SavedCalibration:
    a: Optional[NormPoint] = None
    c: Optional[NormPoint] = None
    b: Optional[NormPoint] = None
    active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        def _point(p: Optional[NormPoint]) -> Optional[Dict[str, float]]:
            return None if p is None else {"x": p.x, "y": p.y}

        return {"A": _point(self.a), "C": _point(self.c), "B": _point(self.b), "active": self.active}


def _point_from_raw(raw: Any) -> Optional[NormPoint]:
    if not isinstance(raw, Mapping):
        return None
    return clamp_norm(raw.get("x"), raw.get("y"))


def sanitize_record(raw: Any) -> Optional[SavedCalibration]:
    """Build a SavedCalibration from loosely-typed data, clamping coordinates."""
    if isinstance(raw, SavedCalibration):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return None
    active = raw.get("active", raw.get("Bactive", False))
    return SavedCalibration(
        a=_point_from_raw(raw.get("A", raw.get("a"))),
        c=_point_from_raw(raw.get("C", raw.get("c"))),
        b=_point_from_raw(raw.get("B", raw.get("b"))),
        active=bool(active),
    )


class CalibrationStore(Protocol):
    def get(self, key: str) -> Optional[SavedCalibration]: ...

    def set(self, key: str, record: SavedCalibration) -> None: ...


class InMemoryCalibrationStore:
    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[SavedCalibration]:
        with self._lock:
            raw = self._records.get(key)
        return sanitize_record(raw) if raw is not None else None

    def set(self, key: str, record: SavedCalibration) -> None:
        with self._lock:
            self._records[key] = record.to_dict()


class JsonFileCalibrationStore:
    """Single JSON document keyed by hole identity."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        base = Path(base_dir or os.getenv("YARDAGE_CALIBRATIONS_DIR", "data/calibrations")).expanduser()
        self._base_dir = base.resolve()
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._base_dir / STORE_FILENAME

    def _read_all(self) -> Dict[str, Any]:
        path = self.path
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("unreadable calibration store at %s; treating as empty", path)
            return {}
        if not isinstance(data, dict):
            logger.warning("calibration store at %s is not an object; treating as empty", path)
            return {}
        return data

    def _write_all(self, data: Mapping[str, Any]) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> Optional[SavedCalibration]:
        with self._lock:
            raw = self._read_all().get(key)
        if raw is None:
            return None
        return sanitize_record(raw)

    def set(self, key: str, record: SavedCalibration) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = record.to_dict()
            self._write_all(data)


def set_hole_defaults(store: CalibrationStore, key: str, record: Any) -> SavedCalibration:
    sanitized = sanitize_record(record)
    if sanitized is None:
        raise ValueError("calibration record must be a mapping")
    store.set(key, sanitized)
    logger.info("saved calibration for %s", key)
    return sanitized


def get_hole_defaults(store: CalibrationStore, key: str) -> Optional[SavedCalibration]:
    return store.get(key)
