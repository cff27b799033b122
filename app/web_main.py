from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, ORJSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from adapters.filesystem.tender_repository import FileSystemTenderRepository
from adapters.layout.label_placer import GreedyLabelPlacer
from adapters.svg.map_geometry import SvgMapGeometrySource
from adapters.svg.map_painter import SvgMapPainter
from app.config import AppSettings, load_settings
from app.wiring import build_geometry_source, build_label_placer, build_tender_repository
from domain.errors import (
    MapGeometryError,
    RecordStoreError,
    TenderNotFoundError,
    TenderValidationError,
)
from domain.models import Size, ViewBox
from domain.ports.repositories import MapLevel
from domain.sample_data import seed_tenders
from domain.services.manage_tenders import ManageTenders
from domain.services.map_view import ALL_STATUSES, MapViewController
from domain.services.region_matcher import RegionMatcher
from domain.services.status_aggregator import StatusAggregator
from domain.statuses import STATUS_TABLE, humanize_status

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"
STATIC_DIR = Path(__file__).parent / "web" / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContext:
    settings: AppSettings
    repository: FileSystemTenderRepository
    tenders: ManageTenders
    aggregator: StatusAggregator
    geometry: SvgMapGeometrySource
    placer: GreedyLabelPlacer
    matcher: RegionMatcher
    painter: SvgMapPainter


def envelope(
    data: Any = None,
    *,
    message: str | None = None,
    count: int | None = None,
    status_code: int = 200,
) -> ORJSONResponse:
    payload: dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if count is not None:
        payload["count"] = count
    return ORJSONResponse(payload, status_code=status_code)


def error_envelope(status_code: int, message: str, error: str | None = None) -> ORJSONResponse:
    payload: dict[str, Any] = {"success": False, "message": message}
    if error:
        payload["error"] = error
    return ORJSONResponse(payload, status_code=status_code)


def create_app(settings: AppSettings) -> FastAPI:
    templates.env.filters["status_text"] = humanize_status

    repository = build_tender_repository(settings)
    context = AppContext(
        settings=settings,
        repository=repository,
        tenders=ManageTenders(repository),
        aggregator=StatusAggregator(),
        geometry=build_geometry_source(settings),
        placer=build_label_placer(settings),
        matcher=RegionMatcher(),
        painter=SvgMapPainter(),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        if settings.store.seed_on_start:
            repository.ensure_seeded(seed_tenders())
        logger.info("%s API running, data file: %s", settings.title, settings.store.data_file)
        yield

    app = FastAPI(title=settings.title, lifespan=lifespan)
    app.state.context = context

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
        return error_envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        return error_envelope(400, "Invalid request", str(exc.errors()))

    @app.exception_handler(TenderNotFoundError)
    async def handle_not_found(request: Request, exc: TenderNotFoundError) -> ORJSONResponse:
        return error_envelope(404, "Tender not found")

    @app.exception_handler(TenderValidationError)
    async def handle_invalid_tender(
        request: Request, exc: TenderValidationError
    ) -> ORJSONResponse:
        return error_envelope(400, str(exc))

    @app.exception_handler(RecordStoreError)
    async def handle_store_error(request: Request, exc: RecordStoreError) -> ORJSONResponse:
        logger.error("Tender data unavailable: %s", exc)
        return error_envelope(500, "Error reading tender data", str(exc))

    @app.exception_handler(MapGeometryError)
    async def handle_map_error(request: Request, exc: MapGeometryError) -> ORJSONResponse:
        logger.error("Map document unavailable: %s", exc)
        return error_envelope(503, "Error loading map", str(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_envelope(500, "Internal server error", str(exc))

    @app.get("/", response_class=HTMLResponse)
    def index(
        request: Request,
        level: MapLevel = Query(default="district"),
        context: AppContext = Depends(get_context),
    ) -> HTMLResponse:
        map_svg: str | None = None
        map_error: str | None = None
        try:
            view = build_view(context, level)
            map_svg = context.painter.paint(context.geometry.document_path(level), view.regions())
        except MapGeometryError as exc:
            map_error = str(exc)
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": context.settings.title,
                "level": level,
                "statuses": STATUS_TABLE,
                "map_svg": map_svg,
                "map_error": map_error,
            },
        )

    @app.get("/api/health")
    def api_health(context: AppContext = Depends(get_context)) -> ORJSONResponse:
        return envelope(
            message=f"{context.settings.title} API is running",
            data={"timestamp": datetime.now(UTC).isoformat()},
        )

    @app.get("/api/tenders")
    def api_tenders(context: AppContext = Depends(get_context)) -> ORJSONResponse:
        records = context.tenders.list_all()
        return envelope([record.to_payload() for record in records], count=len(records))

    @app.get("/api/tenders/{tender_id}")
    def api_tender(tender_id: str, context: AppContext = Depends(get_context)) -> ORJSONResponse:
        return envelope(context.tenders.get(tender_id).to_payload())

    @app.post("/api/tenders")
    def api_create_tender(
        payload: dict[str, Any],
        context: AppContext = Depends(get_context),
    ) -> ORJSONResponse:
        record = context.tenders.create(payload)
        logger.info("Tender %s added for %s/%s", record.id, record.province, record.district)
        return envelope(
            record.to_payload(), message="Tender added successfully", status_code=201
        )

    @app.put("/api/tenders/{tender_id}")
    def api_update_tender(
        tender_id: str,
        payload: dict[str, Any],
        context: AppContext = Depends(get_context),
    ) -> ORJSONResponse:
        record = context.tenders.update(tender_id, payload)
        return envelope(record.to_payload(), message="Tender updated successfully")

    @app.delete("/api/tenders/{tender_id}")
    def api_delete_tender(
        tender_id: str, context: AppContext = Depends(get_context)
    ) -> ORJSONResponse:
        record = context.tenders.delete(tender_id)
        return envelope(record.to_payload(), message="Tender deleted successfully")

    @app.get("/api/districts")
    def api_districts(context: AppContext = Depends(get_context)) -> ORJSONResponse:
        summaries = context.aggregator.summarize_districts(context.tenders.list_all())
        return envelope([summary.to_dict() for summary in summaries], count=len(summaries))

    @app.get("/api/districts/{district_id}/tenders")
    def api_district_tenders(
        district_id: str, context: AppContext = Depends(get_context)
    ) -> ORJSONResponse:
        records = context.tenders.for_district(district_id)
        return envelope([record.to_payload() for record in records], count=len(records))

    @app.get("/api/stats")
    def api_stats(context: AppContext = Depends(get_context)) -> ORJSONResponse:
        return envelope(context.aggregator.stats(context.tenders.list_all()).to_dict())

    @app.get("/api/map/{level}/regions")
    def api_map_regions(
        level: MapLevel,
        status: str = Query(default=ALL_STATUSES),
        context: AppContext = Depends(get_context),
    ) -> ORJSONResponse:
        view = build_view(context, level)
        try:
            regions = view.set_filter(status)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return envelope([region.to_dict() for region in regions], count=len(regions))

    @app.get("/api/map/{level}/regions/{shape_id}")
    def api_map_region(
        level: MapLevel,
        shape_id: str,
        context: AppContext = Depends(get_context),
    ) -> ORJSONResponse:
        view = build_view(context, level)
        if shape_id not in {shape.shape_id for shape in view.shapes}:
            raise HTTPException(status_code=404, detail="Region not found")
        return envelope(view.describe(shape_id))

    @app.get("/api/map/{level}/labels")
    def api_map_labels(
        level: MapLevel,
        x: float | None = Query(default=None),
        y: float | None = Query(default=None),
        width: float | None = Query(default=None, gt=0),
        height: float | None = Query(default=None, gt=0),
        canvas_width: float | None = Query(default=None, gt=0),
        canvas_height: float | None = Query(default=None, gt=0),
        context: AppContext = Depends(get_context),
    ) -> ORJSONResponse:
        canvas = Size(
            canvas_width or context.settings.map.canvas_width,
            canvas_height or context.settings.map.canvas_height,
        )
        view = build_view(context, level, canvas)
        if None not in (x, y, width, height):
            view.viewport.view_box = ViewBox(
                cast(float, x), cast(float, y), cast(float, width), cast(float, height)
            )
        labels = view.refresh_labels()
        return envelope(
            {
                "zoom": view.viewport.zoom_level,
                "viewBox": view.viewport.view_box.to_dict(),
                "labels": [label.to_dict() for label in labels],
            },
            count=len(labels),
        )

    @app.get("/api/map/{level}/svg")
    def api_map_svg(
        level: MapLevel,
        status: str = Query(default=ALL_STATUSES),
        context: AppContext = Depends(get_context),
    ) -> Response:
        view = build_view(context, level)
        try:
            regions = view.set_filter(status)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        svg = context.painter.paint(context.geometry.document_path(level), regions)
        return Response(content=svg, media_type="image/svg+xml")

    return app


def get_context(request: Request) -> AppContext:
    return cast(AppContext, request.app.state.context)


def build_view(
    context: AppContext,
    level: MapLevel,
    canvas: Size | None = None,
) -> MapViewController:
    view_config = context.settings.map.to_view_config()
    if canvas is not None:
        view_config = replace(view_config, canvas_size=canvas)
    view = MapViewController(context.placer, context.matcher, view_config)
    view.set_records(context.tenders.list_all())
    view.load_map(context.geometry, level)
    return view


app = create_app(load_settings())
