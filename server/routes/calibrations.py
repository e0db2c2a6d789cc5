from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from yardage.store import CalibrationStore, get_hole_defaults, set_hole_defaults

from server.metrics import CALIBRATIONS_SAVED
from server.security import require_api_key
from server.visits import get_calibration_store
from server.visits.models import CalibrationRecord

router = APIRouter(
    prefix="/api/calibrations",
    tags=["calibrations"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/{hole_key}", response_model=CalibrationRecord)
def read_calibration(
    hole_key: str, store: CalibrationStore = Depends(get_calibration_store)
) -> CalibrationRecord:
    saved = get_hole_defaults(store, hole_key)
    if saved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no saved calibration")
    return CalibrationRecord.from_saved(saved)


@router.put("/{hole_key}", response_model=CalibrationRecord)
def write_calibration(
    hole_key: str,
    record: CalibrationRecord,
    store: CalibrationStore = Depends(get_calibration_store),
) -> CalibrationRecord:
    saved = set_hole_defaults(store, hole_key, record.model_dump())
    CALIBRATIONS_SAVED.inc()
    return CalibrationRecord.from_saved(saved)
