from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SurfaceRect:
    """On-screen rectangle of the page surface in device pixels."""

    left: float
    top: float
    width: float
    height: float


class PageSurface(Protocol):
    def bounding_rect(self) -> SurfaceRect: ...

    def set_zoom(self, zoom: float) -> None: ...
