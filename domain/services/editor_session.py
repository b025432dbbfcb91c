from __future__ import annotations

import dataclasses
import logging
from contextlib import ExitStack
from typing import Any

from domain.editor_options import EditorOptions
from domain.events import DELETE_KEYS, KeyEvent, PointerEvent
from domain.models import SECTIONS, Document, Point, Section
from domain.ports.interaction import FrameScheduler, ImageSourceProvider, InputSource
from domain.ports.surface import PageSurface
from domain.services.coordinate_mapper import CoordinateMapper
from domain.services.document_store import DocumentStore
from domain.services.drag_controller import DragController
from domain.services.drag_state import DragCreate
from domain.services.element_factory import TOOLS, Tool
from domain.services.keyboard_nudge import nudge_delta, nudge_elements
from domain.services.pointer_coalescer import PointerCoalescer
from domain.services.property_edit import (
    apply_property_to_elements,
    replace_image_source,
    set_table_column_count,
)
from domain.services.selection import SelectionModel
from domain.services.state import Listener, Unsubscribe
from domain.services.z_order import ReorderDirection, reorder_document

logger = logging.getLogger(__name__)


class EditorSession:
    def __init__(
        self,
        surface: PageSurface,
        scheduler: FrameScheduler,
        input_source: InputSource,
        *,
        options: EditorOptions | None = None,
        document: Document | None = None,
        image_source: ImageSourceProvider | None = None,
    ) -> None:
        self.surface = surface
        self.input_source = input_source
        self.image_source = image_source
        self.mapper = CoordinateMapper(surface)
        self.store = DocumentStore(document)
        self.selection = SelectionModel()
        self._options = options or EditorOptions()
        self._tool: Tool = "select"
        self._pending_image: str | None = None
        self.drag = DragController(self.store, self.selection, lambda: self._options)
        self.coalescer = PointerCoalescer(scheduler, self._apply_pointer_move)
        self._mount_scope: ExitStack | None = None
        self._drag_scope: ExitStack | None = None
        self.store.on_replace(self._prune_selection)
        self.store.subscribe(self._prune_selection)

    def __enter__(self) -> EditorSession:
        return self.mount()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def document(self) -> Document:
        return self.store.document

    @property
    def options(self) -> EditorOptions:
        return self._options

    @property
    def tool(self) -> Tool:
        return self._tool

    @property
    def pending_image(self) -> str | None:
        return self._pending_image

    @property
    def is_mounted(self) -> bool:
        return self._mount_scope is not None

    def mount(self) -> EditorSession:
        if self._mount_scope is not None:
            return self
        with ExitStack() as stack:
            stack.enter_context(self.input_source.listening("pointerdown", self.on_pointer_down))
            stack.enter_context(self.input_source.listening("keydown", self.on_key_down))
            self._mount_scope = stack.pop_all()
        return self

    def close(self) -> None:
        self._finish_drag(None)
        scope, self._mount_scope = self._mount_scope, None
        if scope is not None:
            scope.close()

    def subscribe(self, listener: Listener[Document]) -> Unsubscribe:
        return self.store.subscribe(listener)

    # Pointer input

    def on_pointer_down(self, event: PointerEvent) -> None:
        if self.drag.is_active or event.button != 0:
            return
        point = self._to_page(event)
        if point is None:
            return

        if event.target == "handle" and event.handle is not None:
            started = self.drag.begin_resize(point, event.handle)
        elif event.target == "element" and event.element_id is not None:
            if self._tool != "select":
                self.set_tool("select")
            started = self.drag.begin_element(point, event.element_id, event.shift_key)
        elif self._tool == "select":
            started = self.drag.begin_marquee(point)
        else:
            image = self._pending_image if self._tool == "image" else None
            started = self.drag.begin_create(point, self._tool, image)

        if started:
            self._open_drag_scope()

    def on_pointer_move(self, event: PointerEvent) -> None:
        if self.drag.is_active:
            self.coalescer.push(event)

    def on_pointer_up(self, event: PointerEvent) -> None:
        self._finish_drag(event)

    def _open_drag_scope(self) -> None:
        with ExitStack() as stack:
            stack.enter_context(self.input_source.listening("pointermove", self.on_pointer_move))
            stack.enter_context(self.input_source.listening("pointerup", self.on_pointer_up))
            stack.enter_context(self.input_source.listening("pointercancel", self.on_pointer_up))
            self._drag_scope = stack.pop_all()

    def _finish_drag(self, event: PointerEvent | None) -> None:
        scope, self._drag_scope = self._drag_scope, None
        try:
            if event is not None and self.drag.is_active:
                self.coalescer.flush(event)
            else:
                self.coalescer.cancel()
            finished = self.drag.finish()
            if isinstance(finished, DragCreate):
                self._complete_create(finished)
        finally:
            if scope is not None:
                scope.close()

    def _apply_pointer_move(self, event: PointerEvent) -> None:
        point = self._to_page(event)
        if point is not None:
            self.drag.update(point)

    def _complete_create(self, state: DragCreate) -> None:
        if state.tool == "image":
            if not state.used_placeholder:
                self._pending_image = None
            elif self.image_source is not None:
                source = self.image_source.request_image_source(state.element_id)
                if source:
                    self._commit(
                        replace_image_source(self.store.document, (state.element_id,), source)
                    )
        self.set_tool("select")

    def _to_page(self, event: PointerEvent) -> Point | None:
        return self.mapper.to_page_mm(event.client_x, event.client_y, self.store.document.page)

    # Keyboard input

    def on_key_down(self, event: KeyEvent) -> None:
        if event.from_typing_target or not len(self.selection):
            return
        if event.key in DELETE_KEYS:
            self.delete_selected()
            return
        delta = nudge_delta(event.key, event.shift_key, self._options)
        if delta is not None:
            self.nudge(delta)

    def nudge(self, delta: Point) -> None:
        self._commit(nudge_elements(self.store.document, self.selection.ids, delta, self._options))

    # Host operations

    def load_document(self, document: Document) -> Document:
        return self.store.load(document)

    def set_tool(self, tool: Tool) -> None:
        if tool not in TOOLS:
            raise ValueError(f"Unknown tool: {tool}")
        if tool != self._tool:
            logger.debug("Tool %s -> %s", self._tool, tool)
            self._tool = tool

    def set_pending_image(self, data_uri: str | None) -> None:
        self._pending_image = data_uri or None

    def set_active_section(self, section: Section) -> None:
        if section not in SECTIONS:
            raise ValueError(f"Unknown section: {section}")
        self._options = dataclasses.replace(self._options, active_section=section)

    def configure(
        self,
        *,
        grid_size_mm: float | None = None,
        snap_enabled: bool | None = None,
        zoom: float | None = None,
    ) -> EditorOptions:
        changes: dict[str, Any] = {}
        if grid_size_mm is not None:
            changes["grid_size_mm"] = grid_size_mm
        if snap_enabled is not None:
            changes["snap_enabled"] = snap_enabled
        if changes:
            self._options = dataclasses.replace(self._options, **changes)
        if zoom is not None:
            self.surface.set_zoom(zoom)
        return self._options

    def select_element(self, element_id: str, additive: bool = False) -> None:
        if element_id in self.store.document.element_ids():
            self.selection.select(element_id, additive)

    def clear_selection(self) -> None:
        self.selection.clear()

    def delete_selected(self) -> None:
        targets = set(self.selection.ids)
        if not targets:
            return
        document = self.store.document
        self._commit(
            document.with_elements(
                tuple(element for element in document.elements if element.id not in targets)
            )
        )

    def reorder(self, direction: ReorderDirection) -> None:
        self._commit(reorder_document(self.store.document, self.selection.primary_id, direction))

    def set_property(self, name: str, value: Any) -> None:
        self._commit(
            apply_property_to_elements(self.store.document, self.selection.ids, name, value)
        )

    def set_table_column_count(self, count: int) -> None:
        self._commit(set_table_column_count(self.store.document, self.selection.ids, count))

    def replace_selected_image(self, data_uri: str) -> None:
        self._commit(replace_image_source(self.store.document, self.selection.ids, data_uri))

    def _commit(self, document: Document) -> None:
        if document is not self.store.document:
            self.store.apply(document)

    def _prune_selection(self, document: Document) -> None:
        self.selection.prune(document.element_ids())

