"""Hole visits exposed over HTTP."""

from .registry import VisitRegistry, get_calibration_store, get_visit_registry

__all__ = ["VisitRegistry", "get_calibration_store", "get_visit_registry"]
