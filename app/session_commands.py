from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from app.editor_wiring import EditorRuntime
from domain.events import KeyEvent, PointerEvent, PointerEventType, PointerTarget
from domain.models import Document, ResizeHandle, Section
from domain.services.element_factory import Tool
from domain.services.z_order import ReorderDirection

logger = logging.getLogger(__name__)


class _Command(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel, extra="forbid"
    )


class PointerCommand(_Command):
    """Pointer event at page millimetres (default) or raw device pixels."""

    type: Literal["pointer"] = "pointer"
    event: PointerEventType
    x: float
    y: float
    units: Literal["mm", "px"] = "mm"
    button: int = 0
    shift_key: bool = False
    target: PointerTarget = "page"
    element_id: str | None = None
    handle: ResizeHandle | None = None
    pointer_id: int = 1


class KeyCommand(_Command):
    type: Literal["key"] = "key"
    key: str
    shift_key: bool = False
    from_typing_target: bool = False


class FrameCommand(_Command):
    type: Literal["frame"] = "frame"
    count: int = Field(default=1, ge=1)


class ToolCommand(_Command):
    type: Literal["tool"] = "tool"
    tool: Tool


class PendingImageCommand(_Command):
    type: Literal["pending_image"] = "pending_image"
    data_uri: str | None = None


class QueueImageSourceCommand(_Command):
    type: Literal["queue_image_source"] = "queue_image_source"
    data_uri: str


class SectionCommand(_Command):
    type: Literal["section"] = "section"
    section: Section


class ConfigureCommand(_Command):
    type: Literal["configure"] = "configure"
    grid_size_mm: float | None = Field(default=None, ge=0)
    snap_enabled: bool | None = None
    zoom: float | None = Field(default=None, gt=0)


class SelectCommand(_Command):
    type: Literal["select"] = "select"
    element_id: str
    additive: bool = False


class ClearSelectionCommand(_Command):
    type: Literal["clear_selection"] = "clear_selection"


class DeleteCommand(_Command):
    type: Literal["delete"] = "delete"


class ReorderCommand(_Command):
    type: Literal["reorder"] = "reorder"
    direction: ReorderDirection


class PropertyCommand(_Command):
    type: Literal["property"] = "property"
    name: str = Field(min_length=1)
    value: Any = None


class ColumnCountCommand(_Command):
    type: Literal["column_count"] = "column_count"
    count: int = Field(ge=1)


class ReplaceImageCommand(_Command):
    type: Literal["replace_image"] = "replace_image"
    data_uri: str = Field(min_length=1)


class LoadCommand(_Command):
    type: Literal["load"] = "load"
    document: Document


SessionCommand = Annotated[
    Union[
        PointerCommand,
        KeyCommand,
        FrameCommand,
        ToolCommand,
        PendingImageCommand,
        QueueImageSourceCommand,
        SectionCommand,
        ConfigureCommand,
        SelectCommand,
        ClearSelectionCommand,
        DeleteCommand,
        ReorderCommand,
        PropertyCommand,
        ColumnCountCommand,
        ReplaceImageCommand,
        LoadCommand,
    ],
    Field(discriminator="type"),
]

COMMANDS_ADAPTER: TypeAdapter[list[SessionCommand]] = TypeAdapter(list[SessionCommand])


def parse_commands(payload: Any) -> list[SessionCommand]:
    if isinstance(payload, dict):
        payload = payload.get("commands", [])
    return COMMANDS_ADAPTER.validate_python(payload)


def pointer_event(runtime: EditorRuntime, command: PointerCommand) -> PointerEvent:
    if command.units == "mm":
        client_x, client_y = runtime.surface.to_device(command.x, command.y)
    else:
        client_x, client_y = command.x, command.y
    return PointerEvent(
        type=command.event,
        client_x=client_x,
        client_y=client_y,
        button=command.button,
        shift_key=command.shift_key,
        target=command.target,
        element_id=command.element_id,
        handle=command.handle,
        pointer_id=command.pointer_id,
    )


def run_command(runtime: EditorRuntime, command: SessionCommand) -> None:
    session = runtime.session
    if isinstance(command, PointerCommand):
        runtime.input_source.dispatch(pointer_event(runtime, command))
    elif isinstance(command, KeyCommand):
        runtime.input_source.dispatch(
            KeyEvent(
                key=command.key,
                shift_key=command.shift_key,
                from_typing_target=command.from_typing_target,
            )
        )
    elif isinstance(command, FrameCommand):
        for _ in range(command.count):
            runtime.scheduler.run_pending()
    elif isinstance(command, ToolCommand):
        session.set_tool(command.tool)
    elif isinstance(command, PendingImageCommand):
        session.set_pending_image(command.data_uri)
    elif isinstance(command, QueueImageSourceCommand):
        runtime.image_source.queue(command.data_uri)
    elif isinstance(command, SectionCommand):
        session.set_active_section(command.section)
    elif isinstance(command, ConfigureCommand):
        session.configure(
            grid_size_mm=command.grid_size_mm,
            snap_enabled=command.snap_enabled,
            zoom=command.zoom,
        )
    elif isinstance(command, SelectCommand):
        session.select_element(command.element_id, command.additive)
    elif isinstance(command, ClearSelectionCommand):
        session.clear_selection()
    elif isinstance(command, DeleteCommand):
        session.delete_selected()
    elif isinstance(command, ReorderCommand):
        session.reorder(command.direction)
    elif isinstance(command, PropertyCommand):
        session.set_property(command.name, command.value)
    elif isinstance(command, ColumnCountCommand):
        session.set_table_column_count(command.count)
    elif isinstance(command, ReplaceImageCommand):
        session.replace_selected_image(command.data_uri)
    elif isinstance(command, LoadCommand):
        session.load_document(command.document)


def run_commands(runtime: EditorRuntime, commands: Iterable[SessionCommand]) -> Document:
    count = 0
    for command in commands:
        run_command(runtime, command)
        count += 1
    logger.debug("Ran %d editor commands", count)
    return runtime.session.document


def describe_session(runtime: EditorRuntime) -> dict[str, Any]:
    session = runtime.session
    options = session.options
    marquee = session.drag.marquee_box
    return {
        "tool": session.tool,
        "activeSection": options.active_section,
        "selection": list(session.selection.ids),
        "primaryId": session.selection.primary_id,
        "drag": session.drag.state.kind,
        "marquee": (
            None
            if marquee is None
            else {
                "xMm": marquee.x,
                "yMm": marquee.y,
                "widthMm": marquee.width,
                "heightMm": marquee.height,
            }
        ),
        "pendingImage": session.pending_image is not None,
        "gridSizeMm": options.grid_size_mm,
        "snapEnabled": options.snap_enabled,
        "zoom": runtime.surface.zoom,
        "pendingFrames": runtime.scheduler.pending_count,
    }
