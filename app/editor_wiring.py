from __future__ import annotations

from dataclasses import dataclass

from adapters.frames.manual_frame_scheduler import ManualFrameScheduler
from adapters.images.queued_image_source import QueuedImageSource
from adapters.input.event_hub import EventHub
from adapters.surface.static_page_surface import StaticPageSurface
from app.config import AppSettings
from domain.models import Document
from domain.services.editor_session import EditorSession


@dataclass(frozen=True)
class EditorRuntime:
    session: EditorSession
    scheduler: ManualFrameScheduler
    input_source: EventHub
    surface: StaticPageSurface
    image_source: QueuedImageSource


def build_editor_runtime(settings: AppSettings, document: Document | None = None) -> EditorRuntime:
    editor = settings.editor
    document = document or editor.empty_document()
    surface = StaticPageSurface(
        document.page,
        pixels_per_mm=editor.pixels_per_mm,
        zoom=editor.zoom,
    )
    scheduler = ManualFrameScheduler()
    input_source = EventHub()
    image_source = QueuedImageSource()
    session = EditorSession(
        surface,
        scheduler,
        input_source,
        options=editor.to_options(),
        document=document,
        image_source=image_source,
    )
    session.store.on_replace(lambda loaded: surface.set_page(loaded.page))
    return EditorRuntime(
        session=session.mount(),
        scheduler=scheduler,
        input_source=input_source,
        surface=surface,
        image_source=image_source,
    )
