from __future__ import annotations

import logging
from collections.abc import Callable
from typing import assert_never

from domain.editor_options import EditorOptions
from domain.geometry import box_from_points, boxes_overlap
from domain.models import Box, Document, Element, ImageElement, Point, ResizeHandle, Size
from domain.services.box_constraints import AspectLock
from domain.services.document_store import DocumentStore
from domain.services.drag_state import (
    DRAG_NONE,
    DragCreate,
    DragMarquee,
    DragMove,
    DragMultiMove,
    DragNone,
    DragResize,
    DragState,
)
from domain.services.element_factory import CreationTool, create_for_tool
from domain.services.selection import SelectionModel

logger = logging.getLogger(__name__)


class DragController:
    def __init__(
        self,
        store: DocumentStore,
        selection: SelectionModel,
        options: Callable[[], EditorOptions],
    ) -> None:
        self.store = store
        self.selection = selection
        self._options = options
        self._state: DragState = DRAG_NONE
        self._marquee_end: Point | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_active(self) -> bool:
        return not isinstance(self._state, DragNone)

    @property
    def marquee_box(self) -> Box | None:
        state = self._state
        if not isinstance(state, DragMarquee) or self._marquee_end is None:
            return None
        return box_from_points(state.start_pointer, self._marquee_end)

    def begin_element(self, pointer: Point, element_id: str, additive: bool) -> bool:
        if self.is_active:
            return False
        document = self.store.document
        element = document.find(element_id)
        if element is None:
            return False

        if element_id in self.selection and len(self.selection) >= 2 and not additive:
            return self._begin_multi_move(pointer, document)

        self.selection.select(element_id, additive)
        if len(self.selection) >= 2:
            return self._begin_multi_move(pointer, document)
        if element_id not in self.selection:
            return False
        self._start(DragMove(element_id, pointer, Point(element.x_mm, element.y_mm)))
        return True

    def begin_resize(self, pointer: Point, handle: ResizeHandle) -> bool:
        if self.is_active:
            return False
        element = self.selection.selected_element(self.store.document)
        if element is None:
            return False
        self._start(DragResize(element.id, handle, pointer, element.box))
        return True

    def begin_create(
        self, pointer: Point, tool: CreationTool, image_data_uri: str | None = None
    ) -> bool:
        if self.is_active:
            return False
        options = self._options()
        document = self.store.document
        element = create_for_tool(tool, pointer, options.active_section, image_data_uri)
        seeded = options.constraints(document, element.section).constrain_box(element.box)
        element = element.with_box(seeded)  # type: ignore[assignment]
        self.store.apply(document.with_elements((*document.elements, element)))
        self.selection.select(element.id)
        self._start(
            DragCreate(
                tool=tool,
                element_id=element.id,
                start_pointer=pointer,
                used_placeholder=tool == "image" and not image_data_uri,
            )
        )
        return True

    def begin_marquee(self, pointer: Point) -> bool:
        if self.is_active:
            return False
        self.selection.clear()
        self._marquee_end = pointer
        self._start(DragMarquee(pointer))
        return True

    def update(self, pointer: Point) -> None:
        state = self._state
        if isinstance(state, DragNone):
            return
        if isinstance(state, DragMarquee):
            self._marquee_end = pointer
            return

        document = self.store.document
        delta = Point(pointer.x - state.start_pointer.x, pointer.y - state.start_pointer.y)
        if isinstance(state, DragMove):
            updated = self._apply_move(document, state, delta)
        elif isinstance(state, DragMultiMove):
            updated = self._apply_multi_move(document, state, delta)
        elif isinstance(state, DragResize):
            updated = self._apply_resize(document, state, delta)
        elif isinstance(state, DragCreate):
            updated = self._apply_create(document, state, pointer)
        else:
            assert_never(state)

        if updated is not document:
            self.store.apply(updated)

    def finish(self, pointer: Point | None = None) -> DragState:
        if pointer is not None:
            self.update(pointer)
        state = self._state
        if isinstance(state, DragMarquee):
            self._select_marquee(state)
        self._state = DRAG_NONE
        self._marquee_end = None
        if not isinstance(state, DragNone):
            logger.debug("Drag %s finished", state.kind)
        return state

    def _start(self, state: DragState) -> None:
        self._state = state
        logger.debug("Drag %s started", state.kind)

    def _begin_multi_move(self, pointer: Point, document: Document) -> bool:
        members = self.selection.selected_elements(document)
        self._start(
            DragMultiMove(
                element_ids=tuple(element.id for element in members),
                start_pointer=pointer,
                start_positions={
                    element.id: Point(element.x_mm, element.y_mm) for element in members
                },
            )
        )
        return True

    def _moved(self, element: Element, start: Point, delta: Point, document: Document) -> Element:
        constraints = self._options().constraints(document, element.section)
        box = constraints.constrain_position(
            Point(start.x + delta.x, start.y + delta.y),
            Size(element.width_mm, element.height_mm),
        )
        if box == element.box:
            return element
        return element.with_box(box)  # type: ignore[return-value]

    def _apply_move(self, document: Document, state: DragMove, delta: Point) -> Document:
        element = document.find(state.element_id)
        if element is None:
            return document
        moved = self._moved(element, state.start_element, delta, document)
        if moved is element:
            return document
        return document.replace_elements({element.id: moved})

    def _apply_multi_move(
        self, document: Document, state: DragMultiMove, delta: Point
    ) -> Document:
        replacements: dict[str, Element] = {}
        for element_id in state.element_ids:
            element = document.find(element_id)
            start = state.start_positions.get(element_id)
            if element is None or start is None:
                continue
            moved = self._moved(element, start, delta, document)
            if moved is not element:
                replacements[element_id] = moved
        return document.replace_elements(replacements)

    def _apply_resize(self, document: Document, state: DragResize, delta: Point) -> Document:
        element = document.find(state.element_id)
        if element is None:
            return document
        lock = None
        if isinstance(element, ImageElement) and element.aspect_ratio_locked:
            lock = AspectLock.for_handle(state.start_box, state.handle)
        constraints = self._options().constraints(document, element.section)
        box = constraints.resize(state.start_box, state.handle, delta, lock)
        if box == element.box:
            return document
        return document.replace_elements({element.id: element.with_box(box)})  # type: ignore[dict-item]

    def _apply_create(self, document: Document, state: DragCreate, pointer: Point) -> Document:
        element = document.find(state.element_id)
        if element is None:
            return document
        constraints = self._options().constraints(document, element.section)
        box = constraints.constrain_box(box_from_points(state.start_pointer, pointer))
        if box == element.box:
            return document
        return document.replace_elements({element.id: element.with_box(box)})  # type: ignore[dict-item]

    def _select_marquee(self, state: DragMarquee) -> None:
        end = self._marquee_end or state.start_pointer
        area = box_from_points(state.start_pointer, end)
        section = self._options().active_section
        self.selection.set(
            element.id
            for element in self.store.document.elements
            if element.section == section and boxes_overlap(element.box, area)
        )
