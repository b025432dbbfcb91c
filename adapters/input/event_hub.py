from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager

from domain.events import EventType, InputEvent
from domain.ports.interaction import EventHandler, InputSource


class EventHub(InputSource):
    """In-process input source: handlers subscribe per event type."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    @contextmanager
    def listening(self, event_type: EventType, handler: EventHandler) -> Iterator[None]:
        self._handlers[event_type].append(handler)
        try:
            yield
        finally:
            handlers = self._handlers[event_type]
            if handler in handlers:
                handlers.remove(handler)

    def dispatch(self, event: InputEvent) -> None:
        for handler in list(self._handlers.get(event.type, ())):
            handler(event)

    def listener_count(self, event_type: EventType | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, ()))
        return sum(len(handlers) for handlers in self._handlers.values())
