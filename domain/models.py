from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ElementType = Literal["text", "rect", "line", "image", "table"]
Section = Literal["header", "body", "footer"]
TextAlign = Literal["left", "center", "right"]
FontWeight = Literal["normal", "bold"]
ObjectFit = Literal["contain", "cover", "fill", "none"]
ResizeHandle = Literal["n", "s", "e", "w", "ne", "nw", "se", "sw"]

SECTIONS: tuple[Section, ...] = ("header", "body", "footer")
RESIZE_HANDLES: tuple[ResizeHandle, ...] = ("n", "s", "e", "w", "ne", "nw", "se", "sw")
MIN_SIZE_MM = 1.0
LINE_MIN_THICKNESS_MM = 0.3
TRANSPARENT_PIXEL_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def new_element_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Page(_Model):
    width_mm: float = Field(210.0, gt=0)
    height_mm: float = Field(297.0, gt=0)

    @property
    def size(self) -> Size:
        return Size(self.width_mm, self.height_mm)


A4_PORTRAIT_PAGE = Page(width_mm=210.0, height_mm=297.0)


class ElementBase(_Model):
    # Unknown property names from the properties panel are kept as extras.
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=new_element_id, min_length=1)
    section: Section = "body"
    x_mm: float = 0.0
    y_mm: float = 0.0
    width_mm: float = MIN_SIZE_MM
    height_mm: float = MIN_SIZE_MM

    @property
    def box(self) -> Box:
        return Box(self.x_mm, self.y_mm, self.width_mm, self.height_mm)

    def with_box(self, box: Box) -> ElementBase:
        return self.model_copy(
            update={
                "x_mm": box.x,
                "y_mm": box.y,
                "width_mm": box.width,
                "height_mm": box.height,
            }
        )


class TextElement(ElementBase):
    type: Literal["text"] = "text"
    text: str = "Text"
    font_family: str = "Arial, Helvetica, sans-serif"
    font_size_pt: float = Field(12.0, gt=0)
    font_weight: FontWeight = "normal"
    color: str = "#111"
    align: TextAlign = "left"
    padding_mm: float = Field(1.0, ge=0)


class RectElement(ElementBase):
    type: Literal["rect"] = "rect"
    fill_color: str = "transparent"
    border_color: str = "#111"
    border_width_mm: float = Field(0.3, ge=0)
    border_radius_mm: float = Field(0.0, ge=0)


class LineElement(ElementBase):
    type: Literal["line"] = "line"
    color: str = "#111"


class ImageElement(ElementBase):
    type: Literal["image"] = "image"
    data_uri: str = TRANSPARENT_PIXEL_DATA_URI
    object_fit: ObjectFit = "contain"
    opacity: float = Field(1.0, ge=0, le=1)
    border_radius_mm: float = Field(0.0, ge=0)
    aspect_ratio_locked: bool = True

    @property
    def is_placeholder(self) -> bool:
        return self.data_uri == TRANSPARENT_PIXEL_DATA_URI


class TableColumn(_Model):
    width_mm: float = 0.0
    align: TextAlign = "left"


class TableCellStyle(_Model):
    align: TextAlign | None = None
    font_weight: FontWeight | None = None
    border_color: str | None = None
    border_width_mm: float | None = Field(None, ge=0)


class TableCell(_Model):
    text: str = ""
    is_header: bool = False
    style: TableCellStyle | None = None


class TableElement(ElementBase):
    type: Literal["table"] = "table"
    columns: tuple[TableColumn, ...] = ()
    header: tuple[TableCell, ...] = ()
    row_template: tuple[TableCell, ...] = ()
    footer: tuple[TableCell, ...] | None = None
    table_dataset: str | None = None
    table_main_type: str | None = None
    table_repeatable_type: str | None = None
    border_color: str = "#cbd5e1"
    border_width_mm: float = Field(0.3, ge=0)
    header_background: str = "#f3f4f6"


Element = Annotated[
    Union[TextElement, RectElement, LineElement, ImageElement, TableElement],
    Field(discriminator="type"),
]
ELEMENT_CLASSES: dict[str, type[ElementBase]] = {
    "text": TextElement,
    "rect": RectElement,
    "line": LineElement,
    "image": ImageElement,
    "table": TableElement,
}


class Document(_Model):
    page: Page = A4_PORTRAIT_PAGE
    header_height_mm: float = 25.0
    footer_height_mm: float = 25.0
    elements: tuple[Element, ...] = ()

    def element_ids(self) -> set[str]:
        return {element.id for element in self.elements}

    def find(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def index_of(self, element_id: str) -> int:
        for index, element in enumerate(self.elements):
            if element.id == element_id:
                return index
        return -1

    def with_elements(self, elements: tuple[Element, ...]) -> Document:
        return self.model_copy(update={"elements": tuple(elements)})

    def replace_elements(self, replacements: dict[str, Element]) -> Document:
        if not replacements:
            return self
        return self.with_elements(
            tuple(replacements.get(element.id, element) for element in self.elements)
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def create_empty_document(
    page: Page | None = None,
    header_height_mm: float = 25.0,
    footer_height_mm: float = 25.0,
) -> Document:
    return Document(
        page=page or A4_PORTRAIT_PAGE,
        header_height_mm=header_height_mm,
        footer_height_mm=footer_height_mm,
        elements=(),
    )
