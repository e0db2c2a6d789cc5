from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from yardage.models import GeoPoint as EngineGeoPoint
from yardage.models import HoleReference

CourseType = Literal["Executive", "Championship"]


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

    def to_engine(self) -> EngineGeoPoint:
        return EngineGeoPoint(lat=self.lat, lon=self.lon)


class CatalogHole(BaseModel):
    hole: int = Field(..., ge=1)
    par: Optional[int] = None
    hcp: Optional[int] = None
    tee: GeoPoint
    green: GeoPoint

    def to_reference(self) -> HoleReference:
        return HoleReference.from_catalog(
            self.tee.to_engine(), self.green.to_engine(), self.hole, self.par
        )


class Club(BaseModel):
    club_name: str
    course_type: CourseType = "Championship"
    nines: Dict[str, List[CatalogHole]] = Field(default_factory=dict)


class ClubSummary(BaseModel):
    key: str
    club_name: str
    course_type: CourseType
    nines: List[str]


class RoundHole(BaseModel):
    display_hole: int
    nine: str
    hole: int
    par: int
    hcp: Optional[int] = None
    tee: GeoPoint
    green: GeoPoint
    hole_key: str
    image_path: str
    tee_to_green: Optional[int] = None
