from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from server.courses import ClubSummary, RoundHole, build_round, get_club, list_clubs
from server.courses.store import CatalogLookupError
from server.security import require_api_key

router = APIRouter(prefix="/api/clubs", tags=["clubs"], dependencies=[Depends(require_api_key)])


@router.get("", response_model=List[ClubSummary])
def clubs(course_type: Optional[str] = Query(default=None)) -> List[ClubSummary]:
    return list_clubs(course_type)


@router.get("/{club_key}/round", response_model=List[RoundHole])
def club_round(
    club_key: str,
    mode: str = Query(default="9", pattern="^(9|18)$"),
    nine_a: Optional[str] = Query(default=None),
    nine_b: Optional[str] = Query(default=None),
) -> List[RoundHole]:
    try:
        club = get_club(club_key)
    except CatalogLookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

    nines = list(club.nines)
    first = nine_a or (nines[0] if nines else "")
    second = nine_b
    if mode == "18" and second is None and club.course_type == "Executive":
        second = first
    try:
        return build_round(club_key, club, mode, first, second)  # type: ignore[arg-type]
    except CatalogLookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
