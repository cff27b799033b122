from __future__ import annotations

from adapters.filesystem.tender_repository import FileSystemTenderRepository
from adapters.http.record_store_client import HttpRecordStore
from adapters.layout.label_placer import GreedyLabelPlacer
from adapters.svg.map_geometry import SvgMapGeometrySource
from app.config import AppSettings
from domain.services.map_view import MapViewController
from domain.services.region_matcher import RegionMatcher


def build_tender_repository(settings: AppSettings) -> FileSystemTenderRepository:
    return FileSystemTenderRepository(settings.store.data_file)


def build_geometry_source(settings: AppSettings) -> SvgMapGeometrySource:
    return SvgMapGeometrySource(settings.map.documents())


def build_label_placer(settings: AppSettings) -> GreedyLabelPlacer:
    return GreedyLabelPlacer(settings.map.to_placer_config())


def build_record_store(settings: AppSettings) -> HttpRecordStore:
    return HttpRecordStore.from_base_url(
        settings.client.base_url,
        timeout=settings.client.timeout_seconds,
    )


def build_map_view(settings: AppSettings) -> MapViewController:
    return MapViewController(
        build_label_placer(settings),
        RegionMatcher(),
        settings.map.to_view_config(),
    )
