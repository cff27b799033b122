from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.label_placer import LabelPlacerConfig
from domain.models import Size
from domain.services.map_view import MapViewConfig
from domain.services.viewport import ViewportConfig

DEFAULT_CONFIG_PATH = Path("config/geoscope.yaml")


class StoreSettings(BaseModel):
    data_file: Path = Path("data/tenders.json")
    seed_on_start: bool = True


class MapSettings(BaseModel):
    district_svg: Path = Path("data/map.svg")
    province_svg: Path = Path("data/provinces.svg")
    canvas_width: float = Field(default=1000.0, gt=0)
    canvas_height: float = Field(default=600.0, gt=0)
    reference_width: float = Field(default=1000.0, gt=0)
    visible_padding: float = 50.0
    label_width: float = Field(default=80.0, gt=0)
    label_height: float = Field(default=20.0, gt=0)
    label_gap_x: float = 10.0
    label_gap_y: float = 5.0
    min_region_size: float = 2.0
    zoom_threshold: float = 3.0
    relayout_delay_ms: int = Field(default=100, ge=0)

    def documents(self) -> dict[str, Path]:
        return {"district": self.district_svg, "province": self.province_svg}

    def to_placer_config(self) -> LabelPlacerConfig:
        return LabelPlacerConfig(
            zoom_threshold=self.zoom_threshold,
            min_region_size=self.min_region_size,
            gap_x=self.label_gap_x,
            gap_y=self.label_gap_y,
        )

    def to_viewport_config(self) -> ViewportConfig:
        return ViewportConfig(
            reference_width=self.reference_width,
            visible_padding=self.visible_padding,
        )

    def to_view_config(self) -> MapViewConfig:
        return MapViewConfig(
            canvas_size=Size(self.canvas_width, self.canvas_height),
            label_size=Size(self.label_width, self.label_height),
            zoom_threshold=self.zoom_threshold,
            relayout_delay_seconds=self.relayout_delay_ms / 1000.0,
            viewport=self.to_viewport_config(),
        )


class ClientSettings(BaseModel):
    base_url: str = "http://localhost:3000/api"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: object) -> str:
        return str(value or "").strip().rstrip("/")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GEOSCOPE_", env_nested_delimiter="__")

    title: str = "GeoScope"
    host: str = "0.0.0.0"
    port: int = 3000
    store: StoreSettings = StoreSettings()
    map: MapSettings = MapSettings()
    client: ClientSettings = ClientSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("GEOSCOPE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
