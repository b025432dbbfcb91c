from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

from domain.models import Box, Point, ResizeHandle
from domain.services.element_factory import CreationTool


@dataclass(frozen=True)
class DragNone:
    kind = "none"


@dataclass(frozen=True)
class DragMove:
    element_id: str
    start_pointer: Point
    start_element: Point
    kind = "move"


@dataclass(frozen=True)
class DragMultiMove:
    element_ids: tuple[str, ...]
    start_pointer: Point
    start_positions: Mapping[str, Point] = field(default_factory=dict)
    kind = "multiMove"

    def __post_init__(self) -> None:
        # Start positions stay read-only for the life of the drag.
        object.__setattr__(self, "start_positions", MappingProxyType(dict(self.start_positions)))


@dataclass(frozen=True)
class DragResize:
    element_id: str
    handle: ResizeHandle
    start_pointer: Point
    start_box: Box
    kind = "resize"


@dataclass(frozen=True)
class DragCreate:
    tool: CreationTool
    element_id: str
    start_pointer: Point
    used_placeholder: bool = False
    kind = "create"


@dataclass(frozen=True)
class DragMarquee:
    start_pointer: Point
    kind = "marquee"


DragState = Union[DragNone, DragMove, DragMultiMove, DragResize, DragCreate, DragMarquee]
DRAG_NONE = DragNone()
