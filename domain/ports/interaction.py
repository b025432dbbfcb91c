from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Protocol

from domain.events import EventType, InputEvent

FrameCallback = Callable[[], None]
EventHandler = Callable[[Any], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class InputSource(Protocol):
    def listening(self, event_type: EventType, handler: EventHandler) -> AbstractContextManager[None]:
        ...

    def dispatch(self, event: InputEvent) -> None: ...


class ImageSourceProvider(Protocol):
    def request_image_source(self, element_id: str) -> str | None: ...
