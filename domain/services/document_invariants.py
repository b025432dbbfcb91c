from __future__ import annotations

import math

from domain.geometry import normalize_box
from domain.models import (
    MIN_SIZE_MM,
    Box,
    Document,
    Element,
    TableCell,
    TableColumn,
    TableElement,
)

COLUMN_WIDTH_TOLERANCE_MM = 1e-6


def default_cell_text(kind: str, index: int) -> str:
    if kind == "header":
        return f"Header{index + 1}"
    return f"#InvoiceLine_Field{index + 1}#"


def fit_cells(
    cells: tuple[TableCell, ...], count: int, kind: str
) -> tuple[TableCell, ...]:
    is_header = kind == "header"
    fitted = list(cells[:count])
    for index in range(len(fitted), count):
        fitted.append(TableCell(text=default_cell_text(kind, index), is_header=is_header))
    return tuple(fitted)


def even_columns(columns: tuple[TableColumn, ...], count: int, width_mm: float) -> tuple[TableColumn, ...]:
    column_width = width_mm / count
    return tuple(
        TableColumn(
            width_mm=column_width,
            align=columns[index].align if index < len(columns) else "left",
        )
        for index in range(count)
    )


def with_column_count(table: TableElement, count: int) -> TableElement:
    count = max(1, int(count))
    update: dict[str, object] = {
        "columns": even_columns(table.columns, count, table.width_mm),
        "header": fit_cells(table.header, count, "header"),
        "row_template": fit_cells(table.row_template, count, "row_template"),
        "footer": fit_cells(table.footer or (), count, "footer"),
    }
    return table.model_copy(update=update)


def enforce_table(table: TableElement) -> TableElement:
    count = max(1, len(table.columns))
    update: dict[str, object] = {}

    total = sum(column.width_mm for column in table.columns)
    if len(table.columns) != count or not math.isclose(
        total, table.width_mm, abs_tol=COLUMN_WIDTH_TOLERANCE_MM
    ):
        update["columns"] = even_columns(table.columns, count, table.width_mm)

    for field_name, kind in (("header", "header"), ("row_template", "row_template")):
        cells = getattr(table, field_name)
        if len(cells) != count:
            update[field_name] = fit_cells(cells, count, kind)
    if table.footer is not None and len(table.footer) != count:
        update["footer"] = fit_cells(table.footer, count, "footer")

    if not update:
        return table
    return table.model_copy(update=update)


def _finite(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def settle_box(box: Box) -> Box:
    settled = normalize_box(
        Box(
            _finite(box.x, 0.0),
            _finite(box.y, 0.0),
            _finite(box.width, MIN_SIZE_MM),
            _finite(box.height, MIN_SIZE_MM),
        )
    )
    return Box(
        settled.x,
        settled.y,
        max(MIN_SIZE_MM, settled.width),
        max(MIN_SIZE_MM, settled.height),
    )


def enforce_element(element: Element) -> Element:
    box = element.box
    settled = settle_box(box)
    if settled != box:
        element = element.with_box(settled)  # type: ignore[assignment]
    if isinstance(element, TableElement):
        return enforce_table(element)
    return element


def enforce_document(document: Document) -> Document:
    """Re-derive cross-field invariants of every element.

    Unchanged elements keep their identity so callers can compare by ``is``.
    """
    elements = tuple(enforce_element(element) for element in document.elements)
    if all(new is old for new, old in zip(elements, document.elements)):
        return document
    return document.with_elements(elements)
