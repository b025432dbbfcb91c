from __future__ import annotations

import math

from domain.models import Page
from domain.ports.surface import PageSurface, SurfaceRect

CSS_PIXELS_PER_MM = 96 / 25.4


class StaticPageSurface(PageSurface):
    """Page surface laid out at a fixed offset, sized from page mm and zoom.

    Zoom only scales the on-screen rectangle; the coordinate mapper divides it
    back out, so stored element units stay physical millimetres.
    """

    def __init__(
        self,
        page: Page,
        *,
        left: float = 0.0,
        top: float = 0.0,
        pixels_per_mm: float = CSS_PIXELS_PER_MM,
        zoom: float = 1.0,
    ) -> None:
        self.page = page
        self.left = left
        self.top = top
        self.pixels_per_mm = pixels_per_mm
        self.zoom = zoom

    def bounding_rect(self) -> SurfaceRect:
        scale = self.pixels_per_mm * self.zoom
        return SurfaceRect(
            left=self.left,
            top=self.top,
            width=self.page.width_mm * scale,
            height=self.page.height_mm * scale,
        )

    def set_zoom(self, zoom: float) -> None:
        if not math.isfinite(zoom) or zoom <= 0:
            raise ValueError(f"Zoom must be a positive number, got {zoom}")
        self.zoom = zoom

    def set_page(self, page: Page) -> None:
        self.page = page

    def to_device(self, x_mm: float, y_mm: float) -> tuple[float, float]:
        scale = self.pixels_per_mm * self.zoom
        return self.left + x_mm * scale, self.top + y_mm * scale
