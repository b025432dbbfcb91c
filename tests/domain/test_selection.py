from __future__ import annotations

from domain.models import Box
from domain.services.selection import SelectionModel
from tests.helpers.document_fixtures import build_document, rect


def test_select_replaces_and_additive_toggles() -> None:
    selection = SelectionModel()

    selection.select("a")
    selection.select("b")
    assert selection.ids == ("b",)

    selection.select("a", additive=True)
    assert selection.ids == ("b", "a")

    selection.select("b", additive=True)
    assert selection.ids == ("a",)


def test_primary_id_is_the_earliest_remaining_member() -> None:
    selection = SelectionModel()
    selection.set(["a", "b", "c"])

    assert selection.primary_id == "a"
    selection.select("a", additive=True)
    assert selection.primary_id == "b"
    selection.clear()
    assert selection.primary_id is None


def test_prune_drops_unknown_ids() -> None:
    selection = SelectionModel()
    selection.set(["a", "b", "c"])

    selection.prune({"c", "a"})

    assert selection.ids == ("a", "c")


def test_derived_views_follow_document_order() -> None:
    document = build_document(rect("a", 0.0, 30.0), rect("b", 40.0, 50.0, 10.0, 5.0))
    selection = SelectionModel()
    selection.set(["b", "a"])

    assert [element.id for element in selection.selected_elements(document)] == ["a", "b"]
    assert selection.selected_element(document) is None
    assert selection.bounding_box(document) == Box(0.0, 30.0, 50.0, 25.0)

    selection.select("b")
    selected = selection.selected_element(document)
    assert selected is not None
    assert selected.id == "b"


def test_subscribers_see_changes_only() -> None:
    selection = SelectionModel()
    seen: list[tuple[str, ...]] = []
    unsubscribe = selection.subscribe(seen.append)

    selection.select("a")
    selection.select("a")
    selection.clear()
    unsubscribe()
    selection.select("b")

    assert seen == [("a",), ()]
