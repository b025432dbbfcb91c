from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from domain.geometry import clamp, normalize_box, snap, snap_box
from domain.models import MIN_SIZE_MM, Box, Document, Point, ResizeHandle, Section, Size
from domain.sections import SectionBounds, document_section_bounds


@dataclass(frozen=True)
class AspectLock:
    ratio: float
    driver: Literal["width", "height"]

    @classmethod
    def for_handle(cls, start_box: Box, handle: ResizeHandle) -> AspectLock | None:
        if start_box.width <= 0 or start_box.height <= 0:
            return None
        driver: Literal["width", "height"] = "height" if handle in ("n", "s") else "width"
        return cls(ratio=start_box.width / start_box.height, driver=driver)

    def apply(self, box: Box) -> Box:
        if self.driver == "width":
            return Box(box.x, box.y, box.width, box.width / self.ratio)
        return Box(box.x, box.y, box.height * self.ratio, box.height)


@dataclass(frozen=True)
class BoxConstraints:
    page: Size
    section: SectionBounds
    grid_size: float = 5.0
    snap_enabled: bool = True
    min_size: float = MIN_SIZE_MM

    @classmethod
    def for_document(
        cls,
        document: Document,
        section: Section,
        *,
        grid_size: float,
        snap_enabled: bool,
        min_size: float = MIN_SIZE_MM,
    ) -> BoxConstraints:
        return cls(
            page=document.page.size,
            section=document_section_bounds(document, section),
            grid_size=grid_size,
            snap_enabled=snap_enabled,
            min_size=min_size,
        )

    def constrain_position(self, origin: Point, size: Size) -> Box:
        """Clamp a moved box; moves slide along section edges without resizing."""
        x, y = origin.x, origin.y
        if self.snap_enabled:
            x = snap(x, self.grid_size)
            y = snap(y, self.grid_size)
        box = self._clamp_to_page(Box(x, y, size.width, size.height), None)
        span = max(self.section.height, self.min_size)
        height = min(box.height, span)
        top = self.section.top
        return Box(
            box.x,
            clamp(box.y, top, max(top, self.section.bottom - height)),
            box.width,
            height,
        )

    def constrain_box(self, box: Box, lock: AspectLock | None = None) -> Box:
        """Normalize, floor, lock, clamp and snap a resized or drawn box."""
        box = self._floor(normalize_box(box))
        if lock is not None:
            box = self._floor_locked(lock.apply(box))
        box = self._clamp_to_page(box, lock)
        if self.snap_enabled:
            snapped = self._floor(snap_box(box, self.grid_size))
            if lock is not None:
                snapped = self._floor_locked(lock.apply(snapped))
            box = self._clamp_to_page(snapped, lock)
        return self._clip_to_section(box, lock)

    def resize(
        self,
        start_box: Box,
        handle: ResizeHandle,
        delta: Point,
        lock: AspectLock | None = None,
    ) -> Box:
        x, y, width, height = start_box.x, start_box.y, start_box.width, start_box.height
        if "w" in handle:
            x += delta.x
            width -= delta.x
        if "e" in handle:
            width += delta.x
        if "n" in handle:
            y += delta.y
            height -= delta.y
        if "s" in handle:
            height += delta.y
        return self.constrain_box(Box(x, y, width, height), lock)

    def _floor(self, box: Box) -> Box:
        return Box(box.x, box.y, max(self.min_size, box.width), max(self.min_size, box.height))

    def _floor_locked(self, box: Box) -> Box:
        smallest = min(box.width, box.height)
        if smallest >= self.min_size or smallest <= 0:
            return box
        scale = self.min_size / smallest
        return Box(box.x, box.y, box.width * scale, box.height * scale)

    def _clamp_to_page(self, box: Box, lock: AspectLock | None) -> Box:
        if lock is None:
            width = min(box.width, self.page.width)
            height = min(box.height, self.page.height)
        else:
            scale = min(1.0, self.page.width / box.width, self.page.height / box.height)
            width = box.width * scale
            height = box.height * scale
        return Box(
            clamp(box.x, 0.0, max(0.0, self.page.width - width)),
            clamp(box.y, 0.0, max(0.0, self.page.height - height)),
            width,
            height,
        )

    def _clip_to_section(self, box: Box, lock: AspectLock | None) -> Box:
        top = self.section.top
        bottom = max(self.section.bottom, top + self.min_size)
        y = clamp(box.y, top, bottom - self.min_size)
        height = max(self.min_size, min(box.bottom, bottom) - y)
        if lock is None or height >= box.height:
            return Box(box.x, y, box.width, height)
        return Box(box.x, y, height * lock.ratio, height)
