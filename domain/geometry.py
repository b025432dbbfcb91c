from __future__ import annotations

import math

from domain.models import Box, Point


def normalize_box(box: Box) -> Box:
    """Flip negative width/height so the box is anchored at its top-left corner."""
    x = box.x if box.width >= 0 else box.x + box.width
    y = box.y if box.height >= 0 else box.y + box.height
    return Box(x, y, abs(box.width), abs(box.height))


def box_from_points(start: Point, end: Point) -> Box:
    return normalize_box(Box(start.x, start.y, end.x - start.x, end.y - start.y))


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def snap(value: float, grid_size: float) -> float:
    if not math.isfinite(value):
        return value
    if not math.isfinite(grid_size) or grid_size <= 0:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def snap_box(box: Box, grid_size: float) -> Box:
    return Box(
        snap(box.x, grid_size),
        snap(box.y, grid_size),
        snap(box.width, grid_size),
        snap(box.height, grid_size),
    )


def boxes_overlap(a: Box, b: Box) -> bool:
    return a.left < b.right and a.right > b.left and a.top < b.bottom and a.bottom > b.top


def bounding_box(boxes: list[Box]) -> Box | None:
    if not boxes:
        return None
    left = min(box.left for box in boxes)
    top = min(box.top for box in boxes)
    right = max(box.right for box in boxes)
    bottom = max(box.bottom for box in boxes)
    return Box(left, top, right - left, bottom - top)
