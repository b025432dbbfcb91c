from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, cast

from fastapi import Depends, FastAPI, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.config import AppSettings, load_settings
from app.editor_wiring import EditorRuntime, build_editor_runtime
from app.session_commands import SessionCommand, describe_session, run_commands
from domain.models import Document
from domain.services.element_factory import Tool

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class CommandsPayload(_Payload):
    commands: list[SessionCommand] = Field(default_factory=list)


class ToolPayload(_Payload):
    tool: Tool
    pending_image: str | None = None


class PropertyPayload(_Payload):
    property_name: str = Field(min_length=1)
    value: Any = None


@dataclass
class EditorContext:
    settings: AppSettings
    runtime: EditorRuntime
    revision: int = 0


def create_app(settings: AppSettings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        frame_task: asyncio.Task[None] | None = None
        frame_stop = asyncio.Event()
        interval = settings.editor.frame_interval_seconds
        if interval > 0:
            frame_task = asyncio.create_task(run_frame_loop(context, interval, frame_stop))
        yield
        if frame_task is not None:
            frame_stop.set()
            await frame_task
        context.runtime.session.close()

    app = FastAPI(title=settings.title, lifespan=lifespan)

    context = EditorContext(settings=settings, runtime=build_editor_runtime(settings))

    def bump_revision(_: Document) -> None:
        context.revision += 1

    context.runtime.session.subscribe(bump_revision)
    context.runtime.session.store.on_replace(bump_revision)
    app.state.context = context

    @app.get("/api/document")
    async def api_document(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        return ORJSONResponse(document_response(context))

    @app.put("/api/document")
    async def api_replace_document(
        document: Document,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        context.runtime.session.load_document(document)
        return ORJSONResponse(document_response(context))

    @app.get("/api/state")
    async def api_state(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        return ORJSONResponse({"revision": context.revision, **describe_session(context.runtime)})

    @app.post("/api/commands")
    async def api_commands(
        payload: CommandsPayload,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        run_commands(context.runtime, payload.commands)
        return ORJSONResponse(
            {
                **document_response(context),
                "state": describe_session(context.runtime),
            }
        )

    @app.post("/api/tool")
    async def api_tool(
        payload: ToolPayload,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        session = context.runtime.session
        session.set_tool(payload.tool)
        if payload.pending_image is not None:
            session.set_pending_image(payload.pending_image)
        return ORJSONResponse(describe_session(context.runtime))

    @app.post("/api/properties")
    async def api_properties(
        payload: PropertyPayload,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        context.runtime.session.set_property(payload.property_name, payload.value)
        return ORJSONResponse(document_response(context))

    return app


async def run_frame_loop(
    context: EditorContext,
    interval_seconds: float,
    stop_event: asyncio.Event,
) -> None:
    while True:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
            if stop_event.is_set():
                return
        except TimeoutError:
            pass
        try:
            context.runtime.scheduler.run_pending()
        except Exception:
            logger.exception("Editor frame failed.")


def get_context(request: Request) -> EditorContext:
    return cast(EditorContext, request.app.state.context)


def document_response(context: EditorContext) -> dict[str, Any]:
    return {
        "revision": context.revision,
        "document": context.runtime.session.document.to_payload(),
    }


app = create_app(load_settings())
