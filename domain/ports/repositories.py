from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Literal, Protocol

from domain.models import MapShape, RegionSummary, StatusRecord, ViewBox

MapLevel = Literal["district", "province"]


class TenderRepository(Protocol):
    def load_all(self) -> list[StatusRecord]: ...

    def save_all(self, records: Sequence[StatusRecord]) -> None: ...


class MapGeometrySource(Protocol):
    def load(self, level: MapLevel) -> Sequence[MapShape]: ...

    def document_path(self, level: MapLevel) -> Path: ...

    def declared_view_box(self, level: MapLevel) -> ViewBox | None: ...


class RecordStore(Protocol):
    def list_records(self) -> list[StatusRecord]: ...

    def create_record(self, fields: Mapping[str, Any]) -> StatusRecord: ...

    def update_record(self, record_id: str, fields: Mapping[str, Any]) -> StatusRecord: ...

    def aggregated_by_region(self) -> list[RegionSummary]: ...
