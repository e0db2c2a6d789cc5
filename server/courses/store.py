"""Read-only hole catalog bundled with the service."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from .schemas import CatalogHole, Club, ClubSummary

CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.json"


class CatalogLookupError(LookupError):
    """Raised when a club, nine or hole is not in the catalog."""


@lru_cache(maxsize=4)
def load_catalog(path: Path = CATALOG_PATH) -> Dict[str, Club]:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return {key: Club(**value) for key, value in raw.items()}


def list_clubs(course_type: Optional[str] = None) -> List[ClubSummary]:
    summaries = [
        ClubSummary(
            key=key,
            club_name=club.club_name,
            course_type=club.course_type,
            nines=list(club.nines),
        )
        for key, club in load_catalog().items()
    ]
    if course_type:
        summaries = [s for s in summaries if s.course_type == course_type]
    return summaries


def get_club(club_key: str) -> Club:
    club = load_catalog().get(club_key)
    if club is None:
        raise CatalogLookupError(f"unknown club: {club_key}")
    return club


def get_hole(club_key: str, nine: str, hole: int) -> CatalogHole:
    club = get_club(club_key)
    holes = club.nines.get(nine)
    if holes is None:
        raise CatalogLookupError(f"unknown nine: {club_key}/{nine}")
    for entry in holes:
        if entry.hole == hole:
            return entry
    raise CatalogLookupError(f"unknown hole: {club_key}/{nine}/{hole}")
