from __future__ import annotations

import math

import pytest

from domain.editor_options import EditorOptions
from domain.events import PointerEvent
from domain.models import TRANSPARENT_PIXEL_DATA_URI, Box, Document, ImageElement, RectElement
from domain.services.drag_state import DragMove, DragNone
from tests.helpers.document_fixtures import build_document, image, rect
from tests.helpers.editor_harness import build_harness

PNG = "data:image/png;base64,AAAA"


def test_mount_listens_for_pointer_down_and_key_down_only() -> None:
    harness = build_harness()

    assert harness.hub.listener_count("pointerdown") == 1
    assert harness.hub.listener_count("keydown") == 1
    assert harness.hub.listener_count() == 2


def test_drag_listeners_live_for_one_drag() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    assert harness.hub.listener_count() == 5
    harness.pointer("pointerup", 25.0, 45.0)

    assert harness.hub.listener_count() == 2
    assert isinstance(harness.session.drag.state, DragNone)


def test_moves_are_coalesced_into_one_frame() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))
    committed: list[Document] = []
    harness.session.subscribe(committed.append)

    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    for x in (30.0, 35.0, 50.0):
        harness.pointer("pointermove", x, 45.0)

    assert committed == []
    assert harness.scheduler.pending_count == 1
    harness.scheduler.run_pending()

    assert len(committed) == 1
    assert harness.session.document.elements[0].box == Box(45.0, 40.0, 20.0, 10.0)


def test_pointer_up_applies_final_position_synchronously() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    harness.pointer("pointermove", 30.0, 45.0)
    harness.pointer("pointerup", 65.0, 55.0)

    assert harness.scheduler.pending_count == 0
    assert harness.session.document.elements[0].box == Box(60.0, 50.0, 20.0, 10.0)


def test_pointer_cancel_finishes_the_drag() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    harness.pointer("pointermove", 30.0, 45.0)
    harness.pointer("pointercancel", 35.0, 45.0)

    assert harness.hub.listener_count() == 2
    assert isinstance(harness.session.drag.state, DragNone)
    assert harness.session.document.elements[0].x_mm == 30.0


def test_inbound_document_mid_drag_keeps_start_snapshot() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0)))

    harness.pointer("pointerdown", 15.0, 45.0, target="element", element_id="a")
    harness.pointer("pointermove", 20.0, 45.0)
    harness.session.load_document(build_document(rect("a", 100.0, 40.0)))
    harness.pointer("pointerup", 25.0, 45.0)

    assert harness.session.document.elements[0].box == Box(20.0, 40.0, 20.0, 10.0)
    assert isinstance(harness.session.drag.state, DragNone)
    assert harness.hub.listener_count() == 2


def test_inbound_document_removing_dragged_element_ends_drag_cleanly() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0)))
    replacement = build_document(rect("b", 60.0, 80.0))

    harness.pointer("pointerdown", 15.0, 45.0, target="element", element_id="a")
    harness.pointer("pointermove", 20.0, 45.0)
    harness.session.load_document(replacement)
    harness.scheduler.run_pending()
    harness.pointer("pointerup", 25.0, 45.0)

    assert [element.id for element in harness.session.document.elements] == ["b"]
    assert harness.session.document.elements[0].box == Box(60.0, 80.0, 20.0, 10.0)
    assert harness.session.selection.ids == ()
    assert isinstance(harness.session.drag.state, DragNone)
    assert harness.hub.listener_count() == 2


def test_second_pointer_down_during_a_drag_is_ignored() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    harness.pointer("pointerdown", 150.0, 150.0)

    assert isinstance(harness.session.drag.state, DragMove)
    assert harness.session.selection.ids == ("a",)
    assert harness.hub.listener_count() == 5


def test_close_during_a_drag_releases_every_listener() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))
    harness.pointer("pointerdown", 25.0, 45.0, target="element", element_id="a")
    harness.pointer("pointermove", 30.0, 45.0)

    harness.session.close()

    assert harness.hub.listener_count() == 0
    assert harness.scheduler.pending_count == 0
    assert isinstance(harness.session.drag.state, DragNone)


def test_session_is_a_context_manager() -> None:
    harness = build_harness()
    harness.session.close()

    with harness.session as session:
        assert session.is_mounted
        assert harness.hub.listener_count() == 2

    assert harness.hub.listener_count() == 0


def test_non_finite_pointer_starts_nothing() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    harness.hub.dispatch(
        PointerEvent(type="pointerdown", client_x=math.nan, client_y=10.0, target="element", element_id="a")
    )

    assert isinstance(harness.session.drag.state, DragNone)
    assert harness.session.selection.ids == ()


def test_secondary_button_is_ignored() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))
    client_x, client_y = harness.surface.to_device(25.0, 45.0)

    harness.hub.dispatch(
        PointerEvent(
            type="pointerdown",
            client_x=client_x,
            client_y=client_y,
            button=2,
            target="element",
            element_id="a",
        )
    )

    assert harness.session.selection.ids == ()


def test_create_with_tool_resets_tool_to_select() -> None:
    harness = build_harness()
    harness.session.set_tool("rect")

    harness.drag_page((12.0, 41.0), (62.0, 81.0))

    created = harness.session.document.elements[-1]
    assert isinstance(created, RectElement)
    assert created.box == Box(10.0, 40.0, 50.0, 40.0)
    assert harness.session.tool == "select"
    assert harness.session.selection.ids == (created.id,)


def test_pointer_down_on_element_switches_creation_tool_to_select() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))
    harness.session.set_tool("text")

    harness.drag_element("a", (25.0, 45.0), (35.0, 45.0))

    assert harness.session.tool == "select"
    assert len(harness.session.document.elements) == 1
    assert harness.session.document.elements[0].x_mm == 30.0


def test_image_tool_consumes_pending_image() -> None:
    harness = build_harness()
    harness.session.set_tool("image")
    harness.session.set_pending_image(PNG)

    harness.drag_page((10.0, 40.0), (50.0, 60.0))

    created = harness.session.document.elements[-1]
    assert isinstance(created, ImageElement)
    assert created.data_uri == PNG
    assert harness.session.pending_image is None
    assert list(harness.images.requested) == []


def test_image_tool_without_pending_image_prompts_for_source() -> None:
    harness = build_harness(image_sources=[PNG])
    harness.session.set_tool("image")

    harness.drag_page((10.0, 40.0), (50.0, 60.0))

    created = harness.session.document.elements[-1]
    assert isinstance(created, ImageElement)
    assert list(harness.images.requested) == [created.id]
    assert created.data_uri == PNG


def test_dismissed_image_prompt_keeps_placeholder() -> None:
    harness = build_harness()
    harness.session.set_tool("image")

    harness.drag_page((10.0, 40.0), (50.0, 60.0))

    created = harness.session.document.elements[-1]
    assert isinstance(created, ImageElement)
    assert created.data_uri == TRANSPARENT_PIXEL_DATA_URI


def test_marquee_on_background_selects_elements() -> None:
    harness = build_harness(
        build_document(rect("a", 10.0, 30.0, 20.0, 20.0), rect("b", 50.0, 30.0, 20.0, 20.0))
    )
    harness.session.select_element("b")

    harness.drag_page((0.0, 28.0), (40.0, 60.0))

    assert harness.session.selection.ids == ("a",)


def test_resize_through_handle() -> None:
    harness = build_harness(build_document(image("img", 20.0, 40.0, 40.0, 20.0)), EditorOptions(snap_enabled=False))
    harness.session.select_element("img")

    harness.pointer("pointerdown", 60.0, 60.0, target="handle", handle="se")
    harness.pointer("pointerup", 70.0, 60.0)

    assert harness.session.document.elements[0].box == Box(20.0, 40.0, 50.0, 25.0)


def test_arrow_keys_nudge_selected_elements() -> None:
    harness = build_harness(build_document(rect("a", 2.0, 40.0), rect("b", 0.0, 80.0)))

    harness.session.select_element("a")
    harness.key("ArrowRight")
    assert harness.session.document.elements[0].x_mm == 5.0

    harness.session.select_element("b")
    harness.key("ArrowRight", shift=True)
    assert harness.session.document.elements[1].x_mm == 25.0


def test_keys_from_typing_targets_are_ignored() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0)))
    harness.session.select_element("a")

    harness.key("ArrowRight", from_typing_target=True)
    harness.key("Backspace", from_typing_target=True)

    assert harness.session.document.elements[0].x_mm == 10.0


def test_delete_key_removes_selection() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0), rect("b", 50.0, 40.0)))
    harness.session.select_element("a")

    harness.key("Delete")

    assert [element.id for element in harness.session.document.elements] == ["b"]
    assert harness.session.selection.ids == ()


def test_load_prunes_selection_without_emitting_change() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0), rect("b", 50.0, 40.0)))
    committed: list[Document] = []
    harness.session.subscribe(committed.append)
    harness.session.selection.set(["a", "b"])

    harness.session.load_document(build_document(rect("b", 50.0, 40.0)))

    assert committed == []
    assert harness.session.selection.ids == ("b",)


def test_reorder_uses_primary_selection() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0), rect("b", 50.0, 40.0), rect("c", 90.0, 40.0)))
    harness.session.select_element("a")

    harness.session.reorder("front")

    assert [element.id for element in harness.session.document.elements] == ["b", "c", "a"]


def test_reorder_at_boundary_emits_nothing() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0), rect("b", 50.0, 40.0)))
    committed: list[Document] = []
    harness.session.subscribe(committed.append)
    harness.session.select_element("b")

    harness.session.reorder("forward")

    assert committed == []


def test_property_edit_applies_to_selection() -> None:
    harness = build_harness(build_document(rect("a", 10.0, 40.0)))
    harness.session.select_element("a")

    harness.session.set_property("fillColor", "#00ff00")

    assert harness.session.document.elements[0].fill_color == "#00ff00"


def test_configure_changes_grid_snap_and_zoom() -> None:
    harness = build_harness(build_document(rect("a", 20.0, 40.0)))

    options = harness.session.configure(grid_size_mm=10.0, snap_enabled=True, zoom=2.0)
    harness.drag_element("a", (25.0, 45.0), (38.0, 45.0))

    assert options.grid_size_mm == 10.0
    assert harness.surface.zoom == 2.0
    assert harness.session.document.elements[0].x_mm == 30.0


def test_unknown_tool_is_rejected() -> None:
    harness = build_harness()

    with pytest.raises(ValueError, match="Unknown tool"):
        harness.session.set_tool("lasso")  # type: ignore[arg-type]


def test_active_section_controls_creation() -> None:
    harness = build_harness(options=EditorOptions(snap_enabled=False))
    harness.session.set_active_section("footer")
    harness.session.set_tool("rect")

    harness.drag_page((10.0, 100.0), (30.0, 110.0))

    created = harness.session.document.elements[-1]
    assert created.section == "footer"
    assert created.y_mm == 272.0
