from __future__ import annotations

from collections.abc import Iterable

from domain.editor_options import EditorOptions
from domain.events import ARROW_KEYS
from domain.models import Document, Element, Point, Size

_DIRECTIONS = {
    "ArrowLeft": (-1.0, 0.0),
    "ArrowRight": (1.0, 0.0),
    "ArrowUp": (0.0, -1.0),
    "ArrowDown": (0.0, 1.0),
}


def nudge_delta(key: str, shift_key: bool, options: EditorOptions) -> Point | None:
    if key not in ARROW_KEYS:
        return None
    step = options.grid_size_mm if options.snap_enabled else options.nudge_step_mm
    if shift_key:
        step *= options.nudge_shift_multiplier
    dx, dy = _DIRECTIONS[key]
    return Point(dx * step, dy * step)


def nudge_elements(
    document: Document,
    element_ids: Iterable[str],
    delta: Point,
    options: EditorOptions,
) -> Document:
    targets = set(element_ids)
    replacements: dict[str, Element] = {}
    for element in document.elements:
        if element.id not in targets:
            continue
        constraints = options.constraints(document, element.section)
        box = constraints.constrain_position(
            Point(element.x_mm + delta.x, element.y_mm + delta.y),
            Size(element.width_mm, element.height_mm),
        )
        if box != element.box:
            replacements[element.id] = element.with_box(box)  # type: ignore[assignment]
    return document.replace_elements(replacements)
