from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from domain.errors import RecordStoreError
from domain.models import (
    BoundingBox,
    LabelCandidate,
    MapShape,
    PlacedLabel,
    Region,
    Size,
    StatusRecord,
    ViewBox,
)
from domain.ports.layout import LabelPlacer
from domain.ports.repositories import MapGeometrySource, MapLevel, RecordStore
from domain.sample_data import fallback_records
from domain.services.debounce import Debouncer
from domain.services.region_matcher import (
    UNKNOWN_PROVINCE,
    RegionMatcher,
    district_display_name,
)
from domain.services.status_aggregator import aggregate_records
from domain.services.viewport import ViewportConfig, ViewportTransform
from domain.statuses import NO_DATA_COLOR, is_known_status, status_color

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


@dataclass(frozen=True)
class MapViewConfig:
    canvas_size: Size = Size(1000, 600)
    label_size: Size = Size(80, 20)
    zoom_threshold: float = 3.0
    relayout_delay_seconds: float = 0.1
    dimmed_opacity: float = 0.2
    viewport: ViewportConfig = ViewportConfig()


def build_label_candidates(
    shapes: Sequence[MapShape],
    texts: dict[str, str],
    with_data: set[str],
    label_size: Size,
) -> list[LabelCandidate]:
    # Larger regions get the first pick: priority is the bbox minor axis.
    return [
        LabelCandidate(
            key=shape.shape_id,
            anchor=shape.bbox.center,
            size=label_size,
            priority=shape.bbox.minor_axis,
            text=texts.get(shape.shape_id, shape.shape_id),
            region_size=shape.bbox.minor_axis,
            has_data=shape.shape_id in with_data,
        )
        for shape in shapes
    ]


def union_bbox(shapes: Sequence[MapShape]) -> BoundingBox | None:
    if not shapes:
        return None
    result = shapes[0].bbox
    for shape in shapes[1:]:
        result = result.union(shape.bbox)
    return result


class MapViewController:
    """Interaction state of one map view: records, shapes, viewport and labels."""

    def __init__(
        self,
        placer: LabelPlacer,
        matcher: RegionMatcher | None = None,
        config: MapViewConfig | None = None,
    ) -> None:
        self.config = config or MapViewConfig()
        self.placer = placer
        self.matcher = matcher or RegionMatcher()
        self.level: MapLevel = "district"
        self.records: list[StatusRecord] = []
        self.shapes: list[MapShape] = []
        self.viewport = ViewportTransform(self.config.canvas_size, config=self.config.viewport)
        self.placed_labels: list[PlacedLabel] = []
        self.status_filter = ALL_STATUSES
        self.degraded = False
        self._debouncer = Debouncer(self.config.relayout_delay_seconds)
        self._matches: dict[str, list[StatusRecord]] = {}

    @property
    def relayout_pending(self) -> bool:
        return self._debouncer.pending

    def load_records(self, store: RecordStore) -> list[StatusRecord]:
        try:
            records = store.list_records()
            self.degraded = False
        except RecordStoreError as exc:
            logger.warning("Record store unavailable, using built-in sample data: %s", exc)
            records = fallback_records()
            self.degraded = True
        self.set_records(records)
        return records

    def set_records(self, records: Sequence[StatusRecord]) -> None:
        self.records = list(records)
        self._rebuild_matches()

    def load_map(self, source: MapGeometrySource, level: MapLevel) -> list[MapShape]:
        # Errors propagate before any state changes: no partial render.
        shapes = list(source.load(level))
        declared = source.declared_view_box(level)
        self.set_shapes(shapes, level, declared)
        return shapes

    def set_shapes(
        self,
        shapes: Sequence[MapShape],
        level: MapLevel = "district",
        view_box: ViewBox | None = None,
    ) -> None:
        self._debouncer.cancel()
        self.level = level
        self.shapes = list(shapes)
        self.viewport = ViewportTransform(self.config.canvas_size, view_box, self.config.viewport)
        self.viewport.ensure_view_box(union_bbox(self.shapes))
        self.placed_labels = []
        self._rebuild_matches()

    def matches_for(self, shape_id: str) -> list[StatusRecord]:
        if shape_id in self._matches:
            return self._matches[shape_id]
        return self._resolve(shape_id)

    def region_for(self, shape_id: str) -> Region:
        records = self.matches_for(shape_id)
        status = aggregate_records(records)
        color = status_color(status) if status else NO_DATA_COLOR
        dimmed = self.status_filter != ALL_STATUSES and status != self.status_filter
        return Region(
            shape_id=shape_id,
            status=status,
            color=color,
            records=list(records),
            opacity=self.config.dimmed_opacity if dimmed else 1.0,
        )

    def regions(self) -> list[Region]:
        return [self.region_for(shape.shape_id) for shape in self.shapes]

    def set_filter(self, status: str) -> list[Region]:
        if status != ALL_STATUSES and not is_known_status(status):
            msg = f"Unknown status filter: {status}"
            raise ValueError(msg)
        self.status_filter = status
        return self.regions()

    def label_text(self, shape_id: str) -> str:
        records = self.matches_for(shape_id)
        if self.level == "province":
            if records:
                return records[0].province
            return self.matcher.province_name(shape_id) or UNKNOWN_PROVINCE
        if records:
            return records[0].district
        return district_display_name(shape_id)

    def refresh_labels(self) -> list[PlacedLabel]:
        self.viewport.ensure_view_box(union_bbox(self.shapes))
        candidates = build_label_candidates(
            self.shapes,
            {shape.shape_id: self.label_text(shape.shape_id) for shape in self.shapes},
            {shape.shape_id for shape in self.shapes if self.matches_for(shape.shape_id)},
            self.config.label_size,
        )
        self.placed_labels = self.placer.place(
            candidates, self.viewport, self.config.zoom_threshold
        )
        logger.debug(
            "Placed %d labels (zoom: %.2f)", len(self.placed_labels), self.viewport.zoom_level
        )
        return self.placed_labels

    def handle_wheel(self, mouse_x: float, mouse_y: float, delta_y: float) -> list[PlacedLabel]:
        self._debouncer.cancel()
        self.viewport.ensure_view_box(union_bbox(self.shapes))
        self.viewport.zoom_wheel(mouse_x, mouse_y, delta_y)
        return self.refresh_labels()

    def handle_drag(self, dx: float, dy: float) -> list[PlacedLabel]:
        self.viewport.ensure_view_box(union_bbox(self.shapes))
        self.viewport.pan(dx, dy)
        self.placed_labels = self.placer.reposition(self.placed_labels, self.viewport)
        self._debouncer.schedule(self.refresh_labels)
        return self.placed_labels

    def describe(self, shape_id: str) -> dict[str, Any]:
        region = self.region_for(shape_id)
        if region.has_data:
            return {
                "id": shape_id,
                "action": "view",
                "status": region.status,
                "color": region.color,
                "records": [record.to_payload() for record in region.records],
            }
        if self.level == "province":
            prefill = {
                "province": self.matcher.province_name(shape_id) or UNKNOWN_PROVINCE,
                "district": "",
            }
        else:
            prefill = {
                "province": self.matcher.parse(shape_id).province,
                "district": district_display_name(shape_id),
            }
        return {
            "id": shape_id,
            "action": "create",
            "status": None,
            "color": region.color,
            "prefill": prefill,
        }

    def _rebuild_matches(self) -> None:
        self._matches = {shape.shape_id: self._resolve(shape.shape_id) for shape in self.shapes}

    def _resolve(self, shape_id: str) -> list[StatusRecord]:
        if self.level == "province":
            return self.matcher.resolve_province(shape_id, self.records)
        return self.matcher.resolve_all(shape_id, self.records)
