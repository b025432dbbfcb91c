from __future__ import annotations

from dataclasses import dataclass

from domain.geometry import clamp
from domain.models import Box, Document, Section


@dataclass(frozen=True)
class SectionBounds:
    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, box: Box) -> bool:
        return box.top >= self.top and box.bottom <= self.bottom


def section_bounds(
    section: Section,
    header_height_mm: float,
    footer_height_mm: float,
    page_height_mm: float,
) -> SectionBounds:
    page_height = max(0.0, page_height_mm)
    header = clamp(header_height_mm, 0.0, page_height)
    footer = clamp(footer_height_mm, 0.0, page_height)
    if section == "header":
        return SectionBounds(0.0, header)
    if section == "footer":
        return SectionBounds(page_height - footer, page_height)
    # Overlapping header and footer leave an empty body at the header edge.
    return SectionBounds(header, max(header, page_height - footer))


def document_section_bounds(document: Document, section: Section) -> SectionBounds:
    return section_bounds(
        section,
        document.header_height_mm,
        document.footer_height_mm,
        document.page.height_mm,
    )