from __future__ import annotations

from collections import deque

from domain.ports.interaction import ImageSourceProvider

REQUEST_HISTORY = 32


class QueuedImageSource(ImageSourceProvider):
    """Answers image prompts from sources queued ahead of time.

    An empty queue means the prompt was dismissed and the placeholder stays.
    Only the most recent prompts are remembered in ``requested``.
    """

    def __init__(self, sources: list[str] | None = None, history: int = REQUEST_HISTORY) -> None:
        self._sources: deque[str] = deque(sources or ())
        self.requested: deque[str] = deque(maxlen=history)

    def queue(self, data_uri: str) -> None:
        self._sources.append(data_uri)

    def drain_requests(self) -> list[str]:
        drained = list(self.requested)
        self.requested.clear()
        return drained

    def request_image_source(self, element_id: str) -> str | None:
        self.requested.append(element_id)
        if not self._sources:
            return None
        return self._sources.popleft()
