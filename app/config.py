from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.surface.static_page_surface import CSS_PIXELS_PER_MM
from domain.editor_options import EditorOptions
from domain.models import MIN_SIZE_MM, Document, Page, Section, create_empty_document

DEFAULT_CONFIG_PATH = Path("config/editor/app.yaml")
CONFIG_PATH_ENV = "LAYOUT_EDITOR_CONFIG_PATH"


class PageSettings(BaseModel):
    width_mm: float = Field(default=210.0, gt=0)
    height_mm: float = Field(default=297.0, gt=0)


class EditorSettings(BaseModel):
    grid_size_mm: float = Field(default=5.0, ge=0)
    snap_enabled: bool = True
    zoom: float = Field(default=1.0, gt=0)
    pixels_per_mm: float = Field(default=CSS_PIXELS_PER_MM, gt=0)
    frame_interval_seconds: float = Field(default=1 / 60, ge=0)
    min_size_mm: float = Field(default=MIN_SIZE_MM, gt=0)
    nudge_step_mm: float = Field(default=1.0, gt=0)
    nudge_shift_multiplier: float = Field(default=5.0, gt=0)
    active_section: Section = "body"
    page: PageSettings = PageSettings()
    header_height_mm: float = Field(default=25.0, ge=0)
    footer_height_mm: float = Field(default=25.0, ge=0)

    @field_validator("active_section", mode="before")
    @classmethod
    def normalize_section(cls, value: object) -> str:
        return str(value).strip().lower() if value else "body"

    def to_options(self) -> EditorOptions:
        return EditorOptions(
            grid_size_mm=self.grid_size_mm,
            snap_enabled=self.snap_enabled,
            min_size_mm=self.min_size_mm,
            nudge_step_mm=self.nudge_step_mm,
            nudge_shift_multiplier=self.nudge_shift_multiplier,
            active_section=self.active_section,
        )

    def to_page(self) -> Page:
        return Page(width_mm=self.page.width_mm, height_mm=self.page.height_mm)

    def empty_document(self) -> Document:
        return create_empty_document(
            page=self.to_page(),
            header_height_mm=self.header_height_mm,
            footer_height_mm=self.footer_height_mm,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LAYOUT_EDITOR_", env_nested_delimiter="__")

    title: str = "Layout Editor"
    editor: EditorSettings = EditorSettings()

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
    env_path = os.getenv(CONFIG_PATH_ENV)
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
