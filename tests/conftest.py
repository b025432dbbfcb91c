from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, EditorSettings
from domain.editor_options import EditorOptions


def _clear_layout_editor_env() -> None:
    for key in list(os.environ):
        if key.startswith("LAYOUT_EDITOR_"):
            os.environ.pop(key, None)


_clear_layout_editor_env()


@pytest.fixture(autouse=True)
def clear_layout_editor_env() -> Generator[None, None, None]:
    _clear_layout_editor_env()
    yield
    _clear_layout_editor_env()


@pytest.fixture
def editor_settings() -> EditorSettings:
    return EditorSettings(
        grid_size_mm=5.0,
        snap_enabled=True,
        zoom=1.0,
        pixels_per_mm=4.0,
        frame_interval_seconds=0.0,
    )


@pytest.fixture
def editor_settings_factory(editor_settings: EditorSettings) -> Callable[..., EditorSettings]:
    def _factory(**overrides: object) -> EditorSettings:
        return editor_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(editor_settings: EditorSettings) -> AppSettings:
    return AppSettings(title="Test Editor", editor=editor_settings)


@pytest.fixture
def app_settings_factory(
    editor_settings_factory: Callable[..., EditorSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(title="Test Editor", editor=editor_settings_factory(**overrides))

    return _factory


@pytest.fixture
def snap_off_options() -> EditorOptions:
    return EditorOptions(snap_enabled=False)
