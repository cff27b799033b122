from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from adapters.layout.label_placer import GreedyLabelPlacer
from domain.errors import MapGeometryError, RecordStoreError
from domain.models import BoundingBox, MapShape, RegionSummary, StatusRecord, ViewBox
from domain.ports.repositories import MapLevel
from domain.sample_data import seed_tenders
from domain.services.map_view import MapViewConfig, MapViewController
from domain.statuses import NO_DATA_COLOR

SHAPES: dict[str, list[MapShape]] = {
    "district": [
        MapShape("34-uskudar", BoundingBox(100, 100, 100, 100)),
        MapShape("34-kadikoy", BoundingBox(200, 100, 100, 100)),
        MapShape("06-cankaya", BoundingBox(500, 300, 100, 100)),
        MapShape("35-bayrakli", BoundingBox(700, 400, 10, 10)),
    ],
    "province": [
        MapShape("34", BoundingBox(100, 100, 200, 100)),
        MapShape("06", BoundingBox(500, 300, 100, 100)),
        MapShape("35", BoundingBox(700, 400, 100, 100)),
    ],
}


class StaticGeometrySource:
    def load(self, level: MapLevel) -> Sequence[MapShape]:
        return SHAPES[level]

    def document_path(self, level: MapLevel) -> Path:
        return Path(f"{level}.svg")

    def declared_view_box(self, level: MapLevel) -> ViewBox | None:
        return ViewBox(0, 0, 1000, 600)


class BrokenGeometrySource(StaticGeometrySource):
    def load(self, level: MapLevel) -> Sequence[MapShape]:
        raise MapGeometryError("map.svg is missing")


class UnreachableRecordStore:
    def list_records(self) -> list[StatusRecord]:
        raise RecordStoreError("connection refused")

    def create_record(self, fields: Mapping[str, Any]) -> StatusRecord:
        raise RecordStoreError("connection refused")

    def update_record(self, record_id: str, fields: Mapping[str, Any]) -> StatusRecord:
        raise RecordStoreError("connection refused")

    def aggregated_by_region(self) -> list[RegionSummary]:
        raise RecordStoreError("connection refused")


def _records() -> list[StatusRecord]:
    return [StatusRecord.model_validate(item) for item in seed_tenders()]


def _view(level: MapLevel = "district", **config: Any) -> MapViewController:
    view = MapViewController(GreedyLabelPlacer(), config=MapViewConfig(**config))
    view.set_records(_records())
    view.load_map(StaticGeometrySource(), level)
    return view


def test_district_regions_take_highest_status() -> None:
    view = _view()

    cankaya = view.region_for("06-cankaya")
    kadikoy = view.region_for("34-kadikoy")
    uskudar = view.region_for("34-uskudar")

    assert (cankaya.status, cankaya.color) == ("won", "#10b981")
    assert kadikoy.status == "won"
    assert [record.id for record in kadikoy.records] == ["tender_001", "tender_002"]
    assert (uskudar.status, uskudar.color) == ("negotiating", "#fbbf24")


def test_region_without_records_uses_neutral_color() -> None:
    region = _view().region_for("35-bayrakli")

    assert region.status is None
    assert region.color == NO_DATA_COLOR
    assert not region.has_data


def test_province_level_aggregates_every_district() -> None:
    view = _view("province")

    assert view.region_for("06").status == "won"
    assert view.region_for("35").status == "won"
    assert view.label_text("06") == "Ankara"


def test_records_loaded_after_map_are_matched() -> None:
    view = MapViewController(GreedyLabelPlacer())
    view.load_map(StaticGeometrySource(), "district")
    assert view.region_for("06-cankaya").status is None

    view.set_records(_records())

    assert view.region_for("06-cankaya").status == "won"


def test_unreachable_store_falls_back_to_sample_data() -> None:
    view = MapViewController(GreedyLabelPlacer())

    records = view.load_records(UnreachableRecordStore())

    assert view.degraded
    assert [record.id for record in records] == [
        "tender_001",
        "tender_003",
        "tender_006",
        "tender_008",
    ]
    view.load_map(StaticGeometrySource(), "district")
    assert view.region_for("06-cankaya").status == "won"
    assert view.region_for("34-kadikoy").status == "won"


def test_broken_map_leaves_state_untouched() -> None:
    view = _view()

    with pytest.raises(MapGeometryError):
        view.load_map(BrokenGeometrySource(), "province")

    assert view.level == "district"
    assert len(view.shapes) == 4


def test_status_filter_dims_other_regions() -> None:
    view = _view()

    regions = {region.shape_id: region for region in view.set_filter("negotiating")}

    assert regions["34-uskudar"].opacity == 1.0
    assert regions["06-cankaya"].opacity == pytest.approx(0.2)
    assert regions["35-bayrakli"].opacity == pytest.approx(0.2)
    assert all(region.opacity == 1.0 for region in view.set_filter("all"))


def test_unknown_status_filter_is_rejected() -> None:
    with pytest.raises(ValueError):
        _view().set_filter("bogus")


def test_describe_existing_region() -> None:
    details = _view().describe("34-uskudar")

    assert details["action"] == "view"
    assert details["status"] == "negotiating"
    assert details["records"][0]["id"] == "tender_003"


def test_describe_empty_region_prefills_creation() -> None:
    details = _view().describe("35-bayrakli")

    assert details["action"] == "create"
    assert details["prefill"] == {"province": "İzmir", "district": "bayrakli"}


def test_no_labels_below_zoom_threshold() -> None:
    view = _view()
    assert view.viewport.zoom_level == pytest.approx(1.0)
    assert view.refresh_labels() == []


def test_labels_use_record_names_when_zoomed_in() -> None:
    view = _view()
    view.viewport.view_box = ViewBox(100, 100, 250, 150)

    labels = {label.candidate.key: label for label in view.refresh_labels()}

    assert set(labels) == {"34-uskudar", "34-kadikoy"}
    assert labels["34-uskudar"].candidate.text == "Üsküdar"
    assert labels["34-uskudar"].candidate.has_data
    assert (labels["34-uskudar"].screen_x, labels["34-uskudar"].screen_y) == (200, 200)


def test_wheel_zoom_relayouts_immediately() -> None:
    view = _view()

    for _ in range(4):
        assert view.handle_wheel(150, 150, -100) == []
    labels = view.handle_wheel(150, 150, -100)

    assert view.viewport.zoom_level > 3.0
    assert "34-uskudar" in {label.candidate.key for label in labels}


def test_drag_repositions_then_debounces_relayout() -> None:
    async def scenario() -> tuple[list[float], bool, MapViewController]:
        view = _view(relayout_delay_seconds=0.01)
        view.viewport.view_box = ViewBox(100, 100, 250, 150)
        view.refresh_labels()

        moved = view.handle_drag(-100, 0)
        pending = view.relayout_pending
        await asyncio.sleep(0.05)
        return [label.screen_x for label in moved], pending, view

    moved_x, pending, view = asyncio.run(scenario())

    assert moved_x == [pytest.approx(100), pytest.approx(500)]
    assert pending
    assert not view.relayout_pending
    assert view.viewport.view_box.x == pytest.approx(125)
    assert {label.candidate.key for label in view.placed_labels} == {
        "34-uskudar",
        "34-kadikoy",
    }


def test_drag_without_event_loop_relayouts_at_once() -> None:
    view = _view()
    view.viewport.view_box = ViewBox(100, 100, 250, 150)

    view.handle_drag(-100, 0)

    assert not view.relayout_pending
    assert len(view.placed_labels) == 2


class NamedProvinceSource(StaticGeometrySource):
    def load(self, level: MapLevel) -> Sequence[MapShape]:
        return [
            MapShape("ankara", BoundingBox(500, 300, 100, 100)),
            MapShape("34", BoundingBox(100, 100, 200, 100)),
        ]


def test_single_record_colors_district_and_province() -> None:
    record = StatusRecord.model_validate(
        {"id": "tender_001", "status": "won", "province": "Ankara", "district": "Çankaya"}
    )
    district_view = MapViewController(GreedyLabelPlacer())
    district_view.set_records([record])
    district_view.load_map(StaticGeometrySource(), "district")
    province_view = MapViewController(GreedyLabelPlacer())
    province_view.set_records([record])
    province_view.load_map(StaticGeometrySource(), "province")

    cankaya = district_view.region_for("06-cankaya")
    assert (cankaya.status, cankaya.color) == ("won", "#10b981")
    assert district_view.region_for("34-uskudar").status is None
    assert province_view.region_for("06").status == "won"
    assert province_view.region_for("34").color == NO_DATA_COLOR


def test_province_shape_named_by_province() -> None:
    view = MapViewController(GreedyLabelPlacer())
    view.load_map(NamedProvinceSource(), "province")

    assert view.label_text("ankara") == "ankara"
    assert view.describe("ankara")["prefill"] == {"province": "ankara", "district": ""}
    assert view.label_text("34") == "İstanbul"
    assert view.describe("34")["prefill"] == {"province": "İstanbul", "district": ""}

    view.set_records(_records())

    assert view.region_for("ankara").status == "won"
    assert view.label_text("ankara") == "Ankara"
    assert view.describe("ankara")["action"] == "view"
