from __future__ import annotations

import logging

import pytest

from domain.models import ImageElement, RectElement, TableElement
from domain.services.property_edit import (
    apply_property,
    apply_property_to_elements,
    replace_image_source,
    resolve_property_name,
    set_table_column_count,
)
from tests.helpers.document_fixtures import build_document, image, rect, table, text


def test_names_resolve_from_camel_or_snake_case() -> None:
    assert resolve_property_name("fillColor") == "fill_color"
    assert resolve_property_name("fill_color") == "fill_color"
    assert resolve_property_name("objectFit") == "object_fit"


def test_own_field_is_validated_and_applied() -> None:
    updated = apply_property(rect("a", 10.0, 30.0), "fillColor", "#ff0000")

    assert isinstance(updated, RectElement)
    assert updated.fill_color == "#ff0000"
    assert updated.id == "a"


def test_invalid_value_leaves_element_unchanged(caplog: pytest.LogCaptureFixture) -> None:
    element = image("img", 10.0, 30.0)

    with caplog.at_level(logging.WARNING, logger="domain.services.property_edit"):
        updated = apply_property(element, "opacity", 5)

    assert updated is element
    assert "Ignoring invalid opacity" in caplog.text


def test_identity_fields_are_read_only() -> None:
    element = rect("a", 10.0, 30.0)

    assert apply_property(element, "id", "b") is element
    assert apply_property(element, "type", "text") is element


def test_field_of_another_variant_is_skipped() -> None:
    element = text("t", 10.0, 30.0)

    assert apply_property(element, "objectFit", "cover") is element


def test_unknown_name_is_kept_as_extra_data() -> None:
    updated = apply_property(rect("a", 10.0, 30.0), "customFlag", True)

    assert updated.model_extra == {"customFlag": True}
    assert updated.model_dump(by_alias=True)["customFlag"] is True


def test_edit_applies_to_every_selected_element_it_fits() -> None:
    document = build_document(rect("a", 10.0, 30.0), text("t", 10.0, 60.0), rect("b", 40.0, 30.0))

    updated = apply_property_to_elements(document, ["a", "t"], "borderWidthMm", 1.5)

    assert updated.elements[0].border_width_mm == 1.5
    assert updated.elements[1] is document.elements[1]
    assert updated.elements[2] is document.elements[2]


def test_object_fit_edit() -> None:
    document = build_document(image("img", 10.0, 30.0))

    updated = apply_property_to_elements(document, ["img"], "object_fit", "cover")

    element = updated.elements[0]
    assert isinstance(element, ImageElement)
    assert element.object_fit == "cover"


def test_table_column_count_keeps_existing_text() -> None:
    document = build_document(table("t", 0.0, 60.0, width=60.0, columns=2), rect("a", 10.0, 30.0))

    updated = set_table_column_count(document, ["t", "a"], 3)

    widened = updated.elements[0]
    assert isinstance(widened, TableElement)
    assert [cell.text for cell in widened.header] == ["H0", "H1", "Header3"]
    assert [column.width_mm for column in widened.columns] == pytest.approx([20.0, 20.0, 20.0])
    assert updated.elements[1] is document.elements[1]


def test_replace_image_source_only_touches_images() -> None:
    document = build_document(image("img", 10.0, 30.0), rect("a", 10.0, 80.0))

    updated = replace_image_source(document, ["img", "a"], "data:image/png;base64,BBBB")

    assert updated.elements[0].data_uri == "data:image/png;base64,BBBB"
    assert updated.elements[1] is document.elements[1]
