"""Shared pytest fixtures for server tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from server.app import app
from server.config import reset_settings_cache
from server.visits import VisitRegistry, get_calibration_store, get_visit_registry
from yardage.session import SessionOptions
from yardage.store import JsonFileCalibrationStore


@pytest.fixture
def calibration_store(tmp_path):
    return JsonFileCalibrationStore(tmp_path / "calibrations")


@pytest.fixture
def client(calibration_store, monkeypatch):
    monkeypatch.delenv("REQUIRE_API_KEY", raising=False)
    reset_settings_cache()
    registry = VisitRegistry(calibration_store, SessionOptions(smoothing_ms=300))
    app.dependency_overrides[get_calibration_store] = lambda: calibration_store
    app.dependency_overrides[get_visit_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_calibration_store, None)
    app.dependency_overrides.pop(get_visit_registry, None)
    reset_settings_cache()
