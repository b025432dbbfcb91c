from __future__ import annotations

from collections.abc import Iterable

from domain.geometry import bounding_box
from domain.models import Box, Document, Element
from domain.services.state import Listener, StateCell, Unsubscribe


class SelectionModel:
    def __init__(self) -> None:
        self._cell: StateCell[tuple[str, ...]] = StateCell(())

    @property
    def ids(self) -> tuple[str, ...]:
        return self._cell.get()

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._cell.get()

    def __len__(self) -> int:
        return len(self._cell.get())

    @property
    def primary_id(self) -> str | None:
        ids = self._cell.get()
        return ids[0] if ids else None

    def subscribe(self, listener: Listener[tuple[str, ...]]) -> Unsubscribe:
        return self._cell.subscribe(listener)

    def select(self, element_id: str, additive: bool = False) -> None:
        current = self._cell.get()
        if not additive:
            self._set((element_id,))
        elif element_id in current:
            self._set(tuple(item for item in current if item != element_id))
        else:
            self._set((*current, element_id))

    def set(self, element_ids: Iterable[str]) -> None:
        self._set(tuple(dict.fromkeys(element_ids)))

    def clear(self) -> None:
        self._set(())

    def prune(self, valid_ids: set[str]) -> None:
        current = self._cell.get()
        kept = tuple(item for item in current if item in valid_ids)
        if kept != current:
            self._set(kept)

    def selected_elements(self, document: Document) -> list[Element]:
        selected = set(self._cell.get())
        return [element for element in document.elements if element.id in selected]

    def selected_element(self, document: Document) -> Element | None:
        ids = self._cell.get()
        if len(ids) != 1:
            return None
        return document.find(ids[0])

    def bounding_box(self, document: Document) -> Box | None:
        return bounding_box([element.box for element in self.selected_elements(document)])

    def _set(self, ids: tuple[str, ...]) -> None:
        if ids != self._cell.get():
            self._cell.set(ids)
