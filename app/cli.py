from __future__ import annotations

from pathlib import Path

import orjson
import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from app.config import AppSettings, load_settings
from app.wiring import (
    build_geometry_source,
    build_map_view,
    build_record_store,
    build_tender_repository,
)
from domain.errors import MapGeometryError, RecordStoreError
from domain.models import StatusRecord, ViewBox
from domain.sample_data import seed_tenders
from domain.services.map_view import ALL_STATUSES, MapViewController
from domain.services.status_aggregator import StatusAggregator
from domain.statuses import humanize_status, is_known_status

app = typer.Typer(no_args_is_help=True)
console = Console()


def _settings(config: Path | None) -> AppSettings:
    return load_settings(config)


def _load_local_records(settings: AppSettings) -> list[StatusRecord]:
    try:
        return build_tender_repository(settings).load_all()
    except RecordStoreError as exc:
        console.print(f"[red]Tender data could not be read:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _load_view(settings: AppSettings, level: str, remote: bool) -> MapViewController:
    if level not in {"district", "province"}:
        console.print(f"[red]Unknown map level:[/] {level}")
        raise typer.Exit(code=1)
    view = build_map_view(settings)
    if remote:
        store = build_record_store(settings)
        try:
            view.load_records(store)
        finally:
            store.close()
        if view.degraded:
            console.print("[yellow]Record store unavailable, using built-in sample data[/]")
    else:
        view.set_records(_load_local_records(settings))
    try:
        view.load_map(build_geometry_source(settings), level)  # type: ignore[arg-type]
    except MapGeometryError as exc:
        console.print(f"[red]Map could not be loaded:[/] {exc}")
        raise typer.Exit(code=1) from exc
    return view


@app.command("seed")
def seed(
    force: bool = typer.Option(False, help="Overwrite an existing data file."),
    config: Path | None = typer.Option(None, help="YAML config file."),
) -> None:
    settings = _settings(config)
    repository = build_tender_repository(settings)
    if force and repository.path.exists():
        repository.path.unlink()
    if repository.ensure_seeded(seed_tenders()):
        console.print(f"[green]Wrote[/] {repository.path}")
    else:
        console.print(f"[yellow]Data file already exists:[/] {repository.path}")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Tender data file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        data = orjson.loads(input_path.read_bytes())
    except orjson.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if not isinstance(data, list):
        console.print("[red]Expected a JSON array of tenders[/]")
        raise typer.Exit(code=1)

    problems: list[str] = []
    for index, item in enumerate(data):
        try:
            record = StatusRecord.model_validate(item)
        except ValidationError as exc:
            problems.append(f"#{index}: {exc.errors()[0]['msg']}")
            continue
        if not is_known_status(record.status):
            problems.append(f"#{index} ({record.id}): unknown status '{record.status}'")
    if problems:
        for problem in problems:
            console.print(f"[red]{problem}[/]")
        raise typer.Exit(code=1)
    console.print(f"[green]Valid tender file ({len(data)} records):[/] {input_path}")


@app.command("regions")
def regions(
    level: str = typer.Option("district", help="Map level: district or province."),
    status: str = typer.Option(ALL_STATUSES, help="Only list regions with this status."),
    remote: bool = typer.Option(False, help="Read records from the record store API."),
    config: Path | None = typer.Option(None, help="YAML config file."),
) -> None:
    view = _load_view(_settings(config), level, remote)
    table = Table("Region", "Status", "Color", "Records")
    for region in view.regions():
        if status != ALL_STATUSES and region.status != status:
            continue
        table.add_row(
            region.shape_id,
            humanize_status(region.status) if region.status else "-",
            region.color,
            ", ".join(record.id for record in region.records),
        )
    console.print(table)


@app.command("labels")
def labels(
    level: str = typer.Option("district", help="Map level: district or province."),
    x: float | None = typer.Option(None, help="View box x."),
    y: float | None = typer.Option(None, help="View box y."),
    width: float | None = typer.Option(None, help="View box width."),
    height: float | None = typer.Option(None, help="View box height."),
    config: Path | None = typer.Option(None, help="YAML config file."),
) -> None:
    view = _load_view(_settings(config), level, remote=False)
    if x is not None and y is not None and width and height:
        view.viewport.view_box = ViewBox(x, y, width, height)
    placed = view.refresh_labels()
    console.print(f"Zoom level: {view.viewport.zoom_level:.2f}")
    if not placed:
        console.print("[yellow]No labels at this zoom level[/]")
        raise typer.Exit(code=0)
    table = Table("Region", "Text", "Screen X", "Screen Y")
    for label in placed:
        table.add_row(
            label.candidate.key,
            label.candidate.text,
            f"{label.screen_x:.1f}",
            f"{label.screen_y:.1f}",
        )
    console.print(table)


@app.command("stats")
def stats(config: Path | None = typer.Option(None, help="YAML config file.")) -> None:
    settings = _settings(config)
    records = _load_local_records(settings)
    payload = StatusAggregator().stats(records).to_dict()
    table = Table("Metric", "Value")
    for key, value in payload.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address."),
    port: int | None = typer.Option(None, help="Bind port."),
    config: Path | None = typer.Option(None, help="YAML config file."),
) -> None:
    settings = _settings(config)
    uvicorn.run(
        "app.web_main:app",
        host=host or settings.host,
        port=port or settings.port,
    )


if __name__ == "__main__":
    app()
