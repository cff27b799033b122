from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_TENDER_FIELDS = ("districtId", "status", "province", "district", "title")


class StatusRecord(BaseModel):
    """One tender attached to a district.

    Only the keys the map needs are typed; every other key of the stored JSON
    object (durations, fees, meeting notes, ...) travels through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = ""
    district_id: str = Field(default="", alias="districtId")
    status: str = Field(..., min_length=1)
    province: str = ""
    district: str = ""
    title: str = ""
    created_at: str = ""
    updated_at: str = ""

    @field_validator("district_id", mode="before")
    @classmethod
    def stringify_district_id(cls, value: object) -> str:
        return "" if value is None else str(value)

    @property
    def region_key(self) -> tuple[str, str]:
        return (self.province, self.district)

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def minor_axis(self) -> float:
        return min(self.width, self.height)

    def union(self, other: BoundingBox) -> BoundingBox:
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        max_x = max(self.x + self.width, other.x + other.width)
        max_y = max(self.y + self.height, other.y + other.height)
        return BoundingBox(min_x, min_y, max_x - min_x, max_y - min_y)

    @classmethod
    def from_points(cls, points: List[tuple[float, float]]) -> Optional[BoundingBox]:
        if not points:
            return None
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


@dataclass(frozen=True)
class ViewBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ScreenPoint:
    screen_x: float
    screen_y: float
    visible: bool


@dataclass(frozen=True)
class MapShape:
    shape_id: str
    bbox: BoundingBox


@dataclass(frozen=True)
class Region:
    shape_id: str
    status: Optional[str]
    color: str
    records: List[StatusRecord] = field(default_factory=list)
    opacity: float = 1.0

    @property
    def has_data(self) -> bool:
        return bool(self.records)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.shape_id,
            "status": self.status,
            "color": self.color,
            "opacity": self.opacity,
            "records": [record.to_payload() for record in self.records],
        }


@dataclass(frozen=True)
class LabelCandidate:
    key: str
    anchor: Point  # model space
    size: Size  # screen space
    priority: float
    text: str
    region_size: float = 0.0
    has_data: bool = False


@dataclass(frozen=True)
class PlacedLabel:
    candidate: LabelCandidate
    screen_x: float
    screen_y: float
    visible: bool = True

    @property
    def left(self) -> float:
        return self.screen_x - self.candidate.size.width / 2

    @property
    def top(self) -> float:
        return self.screen_y - self.candidate.size.height / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.candidate.key,
            "text": self.candidate.text,
            "screenX": self.screen_x,
            "screenY": self.screen_y,
            "left": self.left,
            "top": self.top,
            "width": self.candidate.size.width,
            "height": self.candidate.size.height,
            "visible": self.visible,
            "hasData": self.candidate.has_data,
        }


@dataclass(frozen=True)
class RegionSummary:
    district_id: str
    status: str
    province: str
    district: str
    tender_count: int
    total_value: int
    latest_tender: Optional[StatusRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "districtId": self.district_id,
            "status": self.status,
            "details": {
                "province": self.province,
                "district": self.district,
                "tender_count": self.tender_count,
                "total_value": self.total_value,
                "latest_tender": (
                    self.latest_tender.to_payload() if self.latest_tender else None
                ),
            },
        }


@dataclass(frozen=True)
class TenderStats:
    total_tenders: int
    by_status: Dict[str, int]
    total_districts: int
    districts_with_won: int

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"total_tenders": self.total_tenders}
        payload.update(self.by_status)
        payload["total_districts"] = self.total_districts
        payload["districts_with_won"] = self.districts_with_won
        return payload
