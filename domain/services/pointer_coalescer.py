from __future__ import annotations

from collections.abc import Callable

from domain.events import PointerEvent
from domain.ports.interaction import FrameScheduler


class PointerCoalescer:
    def __init__(self, scheduler: FrameScheduler, apply: Callable[[PointerEvent], None]) -> None:
        self.scheduler = scheduler
        self.apply = apply
        self._pending: PointerEvent | None = None
        self._frame: int | None = None

    @property
    def pending(self) -> PointerEvent | None:
        return self._pending

    def push(self, event: PointerEvent) -> None:
        self._pending = event
        if self._frame is None:
            self._frame = self.scheduler.request_frame(self._on_frame)

    def flush(self, event: PointerEvent) -> None:
        self.cancel()
        self.apply(event)

    def cancel(self) -> None:
        self._pending = None
        if self._frame is not None:
            self.scheduler.cancel_frame(self._frame)
            self._frame = None

    def _on_frame(self) -> None:
        self._frame = None
        event = self._pending
        self._pending = None
        if event is not None:
            self.apply(event)
