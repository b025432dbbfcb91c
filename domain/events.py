from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from domain.models import ResizeHandle

PointerEventType = Literal["pointerdown", "pointermove", "pointerup", "pointercancel"]
PointerTarget = Literal["page", "element", "handle"]
EventType = Literal["pointerdown", "pointermove", "pointerup", "pointercancel", "keydown"]

ARROW_KEYS = frozenset({"ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown"})
DELETE_KEYS = frozenset({"Delete", "Backspace"})


@dataclass(frozen=True)
class PointerEvent:
    type: PointerEventType
    client_x: float
    client_y: float
    button: int = 0
    shift_key: bool = False
    target: PointerTarget = "page"
    element_id: str | None = None
    handle: ResizeHandle | None = None
    pointer_id: int = 1


@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift_key: bool = False
    # Focus is inside a text input or content-editable node.
    from_typing_target: bool = False
    type: Literal["keydown"] = "keydown"


InputEvent = Union[PointerEvent, KeyEvent]
