from __future__ import annotations

import logging

from domain.models import Document, create_empty_document
from domain.services.document_invariants import enforce_document
from domain.services.state import Listener, StateCell, Unsubscribe

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, document: Document | None = None) -> None:
        self._cell: StateCell[Document] = StateCell(
            enforce_document(document or create_empty_document())
        )
        self._replace_listeners: list[Listener[Document]] = []

    @property
    def document(self) -> Document:
        return self._cell.get()

    def apply(self, next_document: Document) -> Document:
        committed = enforce_document(next_document)
        logger.debug("Committing document with %d elements", len(committed.elements))
        self._cell.set(committed)
        return committed

    def load(self, document: Document) -> Document:
        committed = enforce_document(document)
        self._cell.set(committed, notify=False)
        for listener in list(self._replace_listeners):
            listener(committed)
        return committed

    def subscribe(self, listener: Listener[Document]) -> Unsubscribe:
        return self._cell.subscribe(listener)

    def on_replace(self, listener: Listener[Document]) -> Unsubscribe:
        self._replace_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._replace_listeners:
                self._replace_listeners.remove(listener)

        return unsubscribe
