from __future__ import annotations

import re
from typing import List, Literal, Optional

from yardage.calibration import tee_to_green
from yardage.geodesy import round_distance
from yardage.session import hole_key

from .schemas import Club, RoundHole
from .store import CatalogLookupError

RoundMode = Literal["9", "18"]


def hole_image_path(club_key: str, nine: str, hole: int) -> Optional[str]:
    if not club_key or not nine or not hole:
        return None
    safe_club = re.sub(r"\s+", "", club_key)
    return f"/GolfCourses/{safe_club}/{nine}/hole{int(hole):02d}.webp"


def build_round(
    club_key: str,
    club: Club,
    mode: RoundMode,
    nine_a: str,
    nine_b: Optional[str] = None,
) -> List[RoundHole]:
    """Lay out the holes of a 9- or 18-hole round.

    The second nine of an 18-hole round keeps its catalog hole numbers for
    identity and images but is displayed as 10-18.
    """
    if nine_a not in club.nines:
        raise CatalogLookupError(f"unknown nine: {club_key}/{nine_a}")
    legs = [(nine_a, 0)]
    if mode == "18":
        if not nine_b:
            raise ValueError("an 18-hole round needs a second nine")
        if nine_b not in club.nines:
            raise CatalogLookupError(f"unknown nine: {club_key}/{nine_b}")
        if nine_b == nine_a and len(club.nines) > 1:
            raise ValueError("front and back nines must differ")
        legs.append((nine_b, 9))

    holes: List[RoundHole] = []
    for nine, offset in legs:
        for entry in club.nines[nine]:
            reference = entry.to_reference()
            holes.append(
                RoundHole(
                    display_hole=entry.hole + offset,
                    nine=nine,
                    hole=entry.hole,
                    par=reference.par,
                    hcp=entry.hcp,
                    tee=entry.tee,
                    green=entry.green,
                    hole_key=hole_key(club_key, nine, entry.hole),
                    image_path=hole_image_path(club_key, nine, entry.hole) or "",
                    tee_to_green=round_distance(tee_to_green(reference)),
                )
            )
    return holes
