from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusDefinition:
    key: str
    color: str
    display: str


# Highest priority first.
STATUS_TABLE: tuple[StatusDefinition, ...] = (
    StatusDefinition("won", "#10b981", "Alınan"),
    StatusDefinition("negotiating", "#fbbf24", "Görüşmesi Devam Eden"),
    StatusDefinition("upcoming", "#fb923c", "İhaleye Çıkacak"),
    StatusDefinition("competitor", "#8b5cf6", "Rakipte"),
    StatusDefinition("lost", "#ef4444", "Olumsuz"),
    StatusDefinition("terminated", "#6b7280", "Sonlandırılan"),
)

NO_DATA_COLOR = "#e5e7eb"
NO_TENDER_STATUS = "no_tender"

_STATUS_BY_KEY: dict[str, StatusDefinition] = {item.key: item for item in STATUS_TABLE}
_RANK_BY_KEY: dict[str, int] = {item.key: index for index, item in enumerate(STATUS_TABLE)}


def known_statuses() -> list[str]:
    return [item.key for item in STATUS_TABLE]


def is_known_status(status: str | None) -> bool:
    return str(status or "") in _STATUS_BY_KEY


def status_rank(status: str | None) -> int:
    """Lower is more important; unknown statuses sort after every known one."""
    return _RANK_BY_KEY.get(str(status or ""), len(STATUS_TABLE))


def status_color(status: str | None) -> str:
    item = _STATUS_BY_KEY.get(str(status or ""))
    return item.color if item else NO_DATA_COLOR


def humanize_status(status: str | None) -> str:
    normalized = str(status or "").strip()
    item = _STATUS_BY_KEY.get(normalized)
    return item.display if item else normalized
