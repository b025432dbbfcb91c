from __future__ import annotations

from typing import Literal

from domain.geometry import normalize_box
from domain.models import (
    LINE_MIN_THICKNESS_MM,
    MIN_SIZE_MM,
    TRANSPARENT_PIXEL_DATA_URI,
    Box,
    Element,
    ImageElement,
    LineElement,
    Point,
    RectElement,
    Section,
    TableColumn,
    TableElement,
    TextElement,
)
from domain.services.document_invariants import fit_cells

Tool = Literal["select", "text", "rect", "line", "image", "table"]
CreationTool = Literal["text", "rect", "line", "image", "table"]
TOOLS: tuple[Tool, ...] = ("select", "text", "rect", "line", "image", "table")


def _placed(box: Box, section: Section) -> dict[str, object]:
    normalized = normalize_box(box)
    return {
        "section": section,
        "x_mm": normalized.x,
        "y_mm": normalized.y,
        "width_mm": normalized.width,
        "height_mm": normalized.height,
    }


def create_text(box: Box, section: Section = "body") -> TextElement:
    return TextElement(**_placed(box, section))


def create_rect(box: Box, section: Section = "body") -> RectElement:
    return RectElement(**_placed(box, section))


def create_line(box: Box, section: Section = "body") -> LineElement:
    normalized = normalize_box(box)
    thick = Box(
        normalized.x,
        normalized.y,
        max(normalized.width, LINE_MIN_THICKNESS_MM),
        max(normalized.height, LINE_MIN_THICKNESS_MM),
    )
    return LineElement(**_placed(thick, section))


def create_image(
    box: Box, data_uri: str | None = None, section: Section = "body"
) -> ImageElement:
    return ImageElement(**_placed(box, section), data_uri=data_uri or TRANSPARENT_PIXEL_DATA_URI)


def create_table(box: Box, section: Section = "body", column_count: int = 2) -> TableElement:
    width = normalize_box(box).width
    count = max(1, column_count)
    return TableElement(
        **_placed(box, section),
        columns=tuple(TableColumn(width_mm=width / count) for _ in range(count)),
        header=fit_cells((), count, "header"),
        row_template=fit_cells((), count, "row_template"),
    )


def create_for_tool(
    tool: CreationTool,
    start: Point,
    section: Section,
    image_data_uri: str | None = None,
) -> Element:
    """Minimal element seeded at the pointer, sized afterwards by the drag."""
    seed = Box(start.x, start.y, MIN_SIZE_MM, MIN_SIZE_MM)
    if tool == "text":
        return create_text(seed, section)
    if tool == "rect":
        return create_rect(seed, section)
    if tool == "line":
        return create_line(seed, section)
    if tool == "image":
        return create_image(seed, image_data_uri, section)
    return create_table(seed, section)
