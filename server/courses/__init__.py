"""Hole catalog and round layout."""

from .rounds import build_round, hole_image_path
from .schemas import CatalogHole, Club, ClubSummary, GeoPoint, RoundHole
from .store import CatalogLookupError, get_club, get_hole, list_clubs, load_catalog

__all__ = [
    "build_round",
    "hole_image_path",
    "CatalogHole",
    "Club",
    "ClubSummary",
    "GeoPoint",
    "RoundHole",
    "CatalogLookupError",
    "get_club",
    "get_hole",
    "list_clubs",
    "load_catalog",
]
