from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from domain.models import ELEMENT_CLASSES, Document, Element, ImageElement, TableElement
from domain.services.document_invariants import with_column_count

logger = logging.getLogger(__name__)

READ_ONLY_PROPERTIES = frozenset({"id", "type"})
_KNOWN_PROPERTIES = frozenset(
    name for element_cls in ELEMENT_CLASSES.values() for name in element_cls.model_fields
)


def resolve_property_name(name: str) -> str:
    return name if name in _KNOWN_PROPERTIES else to_snake(name)


def apply_property(element: Element, name: str, value: Any) -> Element:
    """Apply one panel edit to one element.

    Fields of the element's own variant are validated; invalid values leave the
    element untouched. Names no variant knows are kept as extra data. Names
    owned by other variants do not apply to this element.
    """
    field_name = resolve_property_name(name)
    if field_name in READ_ONLY_PROPERTIES:
        return element
    element_cls = type(element)
    if field_name in element_cls.model_fields:
        payload = element.model_dump()
        payload[field_name] = value
        try:
            return element_cls.model_validate(payload)  # type: ignore[return-value]
        except ValidationError as exc:
            logger.warning(
                "Ignoring invalid %s=%r for element %s: %s",
                name,
                value,
                element.id,
                exc.errors(include_url=False),
            )
            return element
    if field_name in _KNOWN_PROPERTIES:
        return element
    return element.model_copy(update={name: value})


def apply_property_to_elements(
    document: Document, element_ids: Iterable[str], name: str, value: Any
) -> Document:
    targets = set(element_ids)
    replacements: dict[str, Element] = {}
    for element in document.elements:
        if element.id not in targets:
            continue
        updated = apply_property(element, name, value)
        if updated is not element:
            replacements[element.id] = updated
    return document.replace_elements(replacements)


def set_table_column_count(document: Document, element_ids: Iterable[str], count: int) -> Document:
    targets = set(element_ids)
    replacements: dict[str, Element] = {
        element.id: with_column_count(element, count)
        for element in document.elements
        if element.id in targets and isinstance(element, TableElement)
    }
    return document.replace_elements(replacements)


def replace_image_source(document: Document, element_ids: Iterable[str], data_uri: str) -> Document:
    targets = set(element_ids)
    replacements: dict[str, Element] = {
        element.id: element.model_copy(update={"data_uri": data_uri})
        for element in document.elements
        if element.id in targets and isinstance(element, ImageElement)
    }
    return document.replace_elements(replacements)
