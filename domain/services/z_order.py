from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from domain.models import Document, Element

ReorderDirection = Literal["forward", "backward", "front", "back"]
Elements = tuple[Element, ...]


def bring_forward(elements: Elements, index: int) -> Elements:
    if index < 0 or index >= len(elements) - 1:
        return elements
    items = list(elements)
    items[index], items[index + 1] = items[index + 1], items[index]
    return tuple(items)


def send_backward(elements: Elements, index: int) -> Elements:
    if index <= 0 or index >= len(elements):
        return elements
    items = list(elements)
    items[index], items[index - 1] = items[index - 1], items[index]
    return tuple(items)


def bring_to_front(elements: Elements, index: int) -> Elements:
    if index < 0 or index >= len(elements) - 1:
        return elements
    items = list(elements)
    items.append(items.pop(index))
    return tuple(items)


def send_to_back(elements: Elements, index: int) -> Elements:
    if index <= 0 or index >= len(elements):
        return elements
    items = list(elements)
    items.insert(0, items.pop(index))
    return tuple(items)


REORDERS: dict[ReorderDirection, Callable[[Elements, int], Elements]] = {
    "forward": bring_forward,
    "backward": send_backward,
    "front": bring_to_front,
    "back": send_to_back,
}


def reorder(elements: Elements, anchor_id: str | None, direction: ReorderDirection) -> Elements:
    """Reorder around the anchor element; returns ``elements`` itself when nothing moves."""
    if anchor_id is None:
        return elements
    index = next((i for i, element in enumerate(elements) if element.id == anchor_id), -1)
    if index == -1:
        return elements
    return REORDERS[direction](elements, index)


def reorder_document(
    document: Document, anchor_id: str | None, direction: ReorderDirection
) -> Document:
    elements = reorder(document.elements, anchor_id, direction)
    if elements is document.elements:
        return document
    return document.with_elements(elements)
