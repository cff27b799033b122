from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, MapSettings, StoreSettings
from domain.models import StatusRecord

SAMPLE_DISTRICT_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1000 600">
  <g id="districts">
    <g id="34-uskudar"><path d="M 100 100 L 200 100 L 200 200 L 100 200 Z"/></g>
    <g id="34-kadikoy"><path d="M 200 100 l 100 0 l 0 100 l -100 0 z"/></g>
    <g id="06-cankaya"><path d="M 500 300 H 600 V 400 H 500 Z"/></g>
    <g id="35-bayrakli"><path d="M 700 400 L 710 400 L 710 410 Z"/></g>
    <g id="label-layer"><text>ignored</text></g>
  </g>
</svg>
"""

SAMPLE_PROVINCE_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1000 600">
  <g id="34"><path d="M 100 100 L 300 100 L 300 200 L 100 200 Z"/></g>
  <g id="06"><path d="M 500 300 L 600 300 L 600 400 Z"/></g>
  <g id="35"><path d="M 700 400 L 800 400 L 800 500 Z"/></g>
</svg>
"""


def _clear_geoscope_env() -> None:
    for key in list(os.environ):
        if key.startswith("GEOSCOPE_"):
            os.environ.pop(key, None)


_clear_geoscope_env()


@pytest.fixture(autouse=True)
def clear_geoscope_env() -> Generator[None, None, None]:
    _clear_geoscope_env()
    yield
    _clear_geoscope_env()


@pytest.fixture
def map_documents(tmp_path: Path) -> dict[str, Path]:
    district = tmp_path / "maps" / "districts.svg"
    province = tmp_path / "maps" / "provinces.svg"
    district.parent.mkdir(parents=True)
    district.write_text(SAMPLE_DISTRICT_SVG, encoding="utf-8")
    province.write_text(SAMPLE_PROVINCE_SVG, encoding="utf-8")
    return {"district": district, "province": province}


@pytest.fixture
def app_settings(tmp_path: Path, map_documents: dict[str, Path]) -> AppSettings:
    return AppSettings(
        title="Test GeoScope",
        store=StoreSettings(data_file=tmp_path / "data" / "tenders.json", seed_on_start=True),
        map=MapSettings(
            district_svg=map_documents["district"],
            province_svg=map_documents["province"],
        ),
    )


@pytest.fixture
def app_settings_factory(app_settings: AppSettings) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return app_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def record_factory() -> Callable[..., StatusRecord]:
    def _factory(**fields: object) -> StatusRecord:
        payload: dict[str, object] = {
            "id": "tender_001",
            "districtId": "1",
            "status": "won",
            "province": "İstanbul",
            "district": "Üsküdar",
            "title": "Test",
        }
        payload.update(fields)
        return StatusRecord.model_validate(payload)

    return _factory
