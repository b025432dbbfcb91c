from __future__ import annotations

import math

from domain.models import Page, Point
from domain.ports.surface import PageSurface


class CoordinateMapper:
    def __init__(self, surface: PageSurface) -> None:
        self.surface = surface

    def to_page_mm(self, device_x: float, device_y: float, page: Page) -> Point | None:
        if not (math.isfinite(device_x) and math.isfinite(device_y)):
            return None
        rect = self.surface.bounding_rect()
        if rect.width <= 0 or rect.height <= 0:
            return None
        x_mm = (device_x - rect.left) * page.width_mm / rect.width
        y_mm = (device_y - rect.top) * page.height_mm / rect.height
        return Point(x_mm, y_mm)
