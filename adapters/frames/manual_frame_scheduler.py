from __future__ import annotations

import itertools

from domain.ports.interaction import FrameCallback, FrameScheduler


class ManualFrameScheduler(FrameScheduler):
    """Frame scheduler driven by its owner calling ``run_pending``.

    Callbacks requested while a tick runs are deferred to the next tick, the
    way a display refresh would schedule them.
    """

    def __init__(self) -> None:
        self._handles = itertools.count(1)
        self._callbacks: dict[int, FrameCallback] = {}

    @property
    def pending_count(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    def run_pending(self) -> int:
        callbacks, self._callbacks = self._callbacks, {}
        for callback in callbacks.values():
            callback()
        return len(callbacks)
