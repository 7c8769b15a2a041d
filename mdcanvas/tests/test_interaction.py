"""Tests for the interaction controller and click scheduling."""

import asyncio

import pytest

from mdcanvas.editor.interaction import InteractionController, ResizeHandle, resize_rect
from mdcanvas.editor.scheduler import AsyncioScheduler, ManualScheduler
from mdcanvas.editor.state import EditorState
from mdcanvas.engine.geometry import Rect, rect_of


@pytest.fixture
def controller(canvas_editor: EditorState, scheduler: ManualScheduler) -> InteractionController:
    return InteractionController(canvas_editor, scheduler)


def drag(controller: InteractionController, element_id: str, dx: float, dy: float, handle=None) -> bool:
    """Full gesture from (10, 10) by (dx, dy)."""
    controller.pointer_down(element_id, 10, 10, handle=handle)
    controller.pointer_move(10 + dx, 10 + dy)
    return controller.pointer_up()


class TestMoveGesture:
    """Tests for move drags."""

    def test_tiny_drag_commits_nothing(self, controller: InteractionController) -> None:
        state = controller.state
        count = len(state.history)
        controller.pointer_down("a", 10, 10)
        assert controller.pointer_move(12, 11) is None
        assert not controller.pointer_up()
        assert len(state.history) == count
        assert rect_of(state.find_element("a")) == Rect(100, 100, 200, 100)

    def test_drag_commits_once(self, controller: InteractionController) -> None:
        state = controller.state
        count = len(state.history)
        controller.pointer_down("a", 10, 10)
        for step in range(1, 6):
            controller.pointer_move(10 + step * 10, 10 + step * 6)
        assert controller.pointer_up()
        assert len(state.history) == count + 1
        element = state.find_element("a")
        assert (element.x, element.y) == (150, 130)

    def test_movement_threshold_is_sticky(self, controller: InteractionController) -> None:
        controller.pointer_down("a", 10, 10)
        controller.pointer_move(20, 10)
        element = controller.pointer_move(11, 10)
        assert element is not None
        assert element.x == 101

    def test_drag_back_to_start_commits_nothing(self, controller: InteractionController) -> None:
        count = len(controller.state.history)
        controller.pointer_down("a", 10, 10)
        controller.pointer_move(60, 40)
        controller.pointer_move(10, 10)
        assert not controller.pointer_up()
        assert len(controller.state.history) == count

    def test_drag_snaps_and_shows_guides(self, controller: InteractionController) -> None:
        controller.pointer_down("a", 10, 10)
        element = controller.pointer_move(10 + 397, 10)
        assert element.x == 500
        assert {g.source for g in controller.guides} == {"b"}

        controller.pointer_up()
        assert controller.guides == []

    def test_drag_clamped_to_canvas(self, controller: InteractionController) -> None:
        drag(controller, "a", -500, 5000)
        element = controller.state.find_element("a")
        assert (element.x, element.y) == (0, 1340)

    def test_scale_converts_to_canvas_space(self, canvas_editor: EditorState) -> None:
        controller = InteractionController(canvas_editor, ManualScheduler(), scale=2.0)
        drag(controller, "a", 100, 60)
        assert (canvas_editor.find_element("a").x, canvas_editor.find_element("a").y) == (150, 130)

    def test_scale_applies_to_threshold(self, canvas_editor: EditorState) -> None:
        controller = InteractionController(canvas_editor, ManualScheduler(), scale=2.0)
        assert not drag(controller, "a", 4, 4)

    def test_pointer_cancel_acts_as_pointer_up(self, controller: InteractionController) -> None:
        controller.pointer_down("a", 10, 10)
        controller.pointer_move(60, 40)
        assert controller.pointer_cancel()
        assert not controller.is_dragging

    def test_lost_pointer_up_keeps_gestures_separate(self, controller: InteractionController) -> None:
        state = controller.state
        count = len(state.history)

        controller.pointer_down("a", 10, 10)
        controller.pointer_move(60, 40)
        controller.pointer_down("b", 10, 10)
        assert len(state.history) == count + 1

        controller.pointer_move(10, -30)
        assert controller.pointer_up()
        assert len(state.history) == count + 2

        assert state.undo()
        assert state.find_element("b").y == 600
        assert state.find_element("a").x == 150

    def test_pointer_down_selects_immediately(self, controller: InteractionController) -> None:
        controller.click("b")
        controller.pointer_down("a", 10, 10)
        assert controller.state.selected_id == "a"
        controller.scheduler.advance(1)
        assert controller.state.selected_id == "a"

    def test_move_without_drag(self, controller: InteractionController) -> None:
        assert controller.pointer_move(50, 50) is None
        assert not controller.pointer_up()


class TestResizeGesture:
    """Tests for handle resizing."""

    def test_east_grows_width(self, controller: InteractionController) -> None:
        assert drag(controller, "a", 50, 0, handle="e")
        assert rect_of(controller.state.find_element("a")) == Rect(100, 100, 250, 100)

    def test_west_anchors_right_edge(self, controller: InteractionController) -> None:
        drag(controller, "a", 50, 0, handle=ResizeHandle.W)
        element = controller.state.find_element("a")
        assert (element.x, element.width) == (150, 150)
        assert element.right == 300

    def test_west_floor(self, controller: InteractionController) -> None:
        drag(controller, "a", 500, 0, handle="w")
        element = controller.state.find_element("a")
        assert (element.x, element.width) == (200, 100)

    def test_north_floor(self, controller: InteractionController) -> None:
        drag(controller, "a", 0, 200, handle="n")
        element = controller.state.find_element("a")
        assert (element.y, element.height) == (170, 30)

    def test_northwest_stays_on_canvas(self, controller: InteractionController) -> None:
        drag(controller, "a", -500, -500, handle="nw")
        assert rect_of(controller.state.find_element("a")) == Rect(0, 0, 300, 200)

    def test_southeast_stays_on_canvas(self, controller: InteractionController) -> None:
        drag(controller, "a", 5000, 5000, handle="se")
        assert rect_of(controller.state.find_element("a")) == Rect(100, 100, 980, 1340)

    def test_resize_commits_once(self, controller: InteractionController) -> None:
        count = len(controller.state.history)
        controller.pointer_down("a", 10, 10, handle="s")
        controller.pointer_move(10, 30)
        controller.pointer_move(10, 50)
        controller.pointer_up()
        assert len(controller.state.history) == count + 1
        assert controller.state.find_element("a").height == 140

    def test_resize_rect_south_only_touches_height(self) -> None:
        start = Rect(10, 20, 200, 100)
        assert resize_rect(start, ResizeHandle.S, 999, 30, 1080, 1440) == Rect(10, 20, 200, 130)


class TestClicks:
    """Tests for click / double-click disambiguation."""

    def test_single_click_selects_after_delay(self, controller: InteractionController) -> None:
        controller.click("a")
        assert controller.state.selected_id is None
        controller.scheduler.advance(0.1)
        assert controller.state.selected_id is None
        controller.scheduler.advance(0.15)
        assert controller.state.selected_id == "a"

    def test_second_click_in_window_opens_edit(self, controller: InteractionController) -> None:
        controller.click("a")
        controller.scheduler.advance(0.1)
        controller.click("a")
        assert controller.state.editing_id == "a"
        assert controller.scheduler.advance(1) == 0

    def test_slow_clicks_are_two_selects(self, controller: InteractionController) -> None:
        controller.click("a")
        controller.scheduler.advance(0.5)
        controller.click("a")
        assert controller.scheduler.advance(0.3) == 1
        assert controller.state.editing_id is None
        assert controller.state.selected_id == "a"

    def test_clicks_on_different_elements(self, controller: InteractionController) -> None:
        controller.click("a")
        controller.scheduler.advance(0.1)
        controller.click("b")
        controller.scheduler.advance(0.3)
        assert controller.state.editing_id is None
        assert controller.state.selected_id == "b"

    def test_explicit_timestamps(self, controller: InteractionController) -> None:
        controller.click("a", now=5.0)
        controller.click("a", now=5.3)
        assert controller.state.editing_id == "a"

    def test_double_click_ignored_while_dragging(self, controller: InteractionController) -> None:
        controller.pointer_down("a", 10, 10)
        assert not controller.double_click("a")
        assert controller.state.editing_id is None

    def test_background_click(self, controller: InteractionController) -> None:
        controller.pointer_down("a", 10, 10)
        controller.pointer_move(407, 10)
        controller.pointer_up()
        controller.background_click()
        assert controller.state.selected_id is None
        assert controller.guides == []

    def test_unknown_element(self, controller: InteractionController) -> None:
        with pytest.raises(KeyError):
            controller.click("nope")
        with pytest.raises(KeyError):
            controller.pointer_down("nope", 0, 0)


class TestInlineEdit:
    """Tests for inline text editing."""

    def test_commit_text_edit(self, controller: InteractionController) -> None:
        count = len(controller.state.history)
        assert controller.begin_text_edit("a") == "text"
        controller.commit_text_edit("rewritten")
        assert controller.state.find_element("a").content == "rewritten"
        assert controller.state.editing_id is None
        assert len(controller.state.history) == count + 1

    def test_cancel_text_edit(self, controller: InteractionController) -> None:
        count = len(controller.state.history)
        controller.double_click("a")
        controller.cancel_text_edit()
        assert controller.commit_text_edit("ignored") is None
        assert controller.state.find_element("a").content == "text"
        assert len(controller.state.history) == count


class TestKeyboard:
    """Tests for keyboard shortcuts."""

    def test_escape_cancels_edit_and_deselects(self, controller: InteractionController) -> None:
        controller.double_click("a")
        assert controller.key_down("Escape")
        assert controller.state.editing_id is None
        assert controller.state.selected_id is None

    def test_undo_redo_shortcuts(self, controller: InteractionController) -> None:
        drag(controller, "a", 50, 30)
        assert controller.key_down("z", ctrl=True)
        assert controller.state.find_element("a").x == 100
        assert controller.key_down("Z", ctrl=True, shift=True)
        assert controller.state.find_element("a").x == 150
        controller.key_down("z", ctrl=True)
        assert controller.key_down("y", ctrl=True)
        assert controller.state.find_element("a").x == 150

    def test_undo_at_start_not_consumed(self, canvas_editor: EditorState) -> None:
        controller = InteractionController(canvas_editor, ManualScheduler())
        controller.key_down("z", ctrl=True)
        assert not controller.key_down("z", ctrl=True)

    def test_delete_selected(self, controller: InteractionController) -> None:
        controller.pointer_down("b", 10, 10)
        controller.pointer_up()
        assert controller.key_down("Delete")
        assert [e.id for e in controller.state.current_elements] == ["a"]

    def test_delete_ignored_while_editing(self, controller: InteractionController) -> None:
        controller.double_click("a")
        assert not controller.key_down("Delete")
        assert len(controller.state.current_elements) == 2


class TestSchedulers:
    """Tests for scheduler implementations."""

    def test_manual_scheduler_order_and_cancel(self) -> None:
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(0.3, lambda: fired.append("late"))
        early = scheduler.call_later(0.1, lambda: fired.append("early"))
        scheduler.call_later(0.2, lambda: fired.append("middle"))
        early.cancel()
        assert scheduler.pending == 2
        assert scheduler.advance(1) == 2
        assert fired == ["middle", "late"]
        assert scheduler.now() == 1

    def test_asyncio_scheduler(self) -> None:
        async def run() -> list[str]:
            fired = []
            scheduler = AsyncioScheduler()
            scheduler.call_later(0.01, lambda: fired.append("kept"))
            scheduler.call_later(0.01, lambda: fired.append("dropped")).cancel()
            await asyncio.sleep(0.05)
            return fired

        assert asyncio.run(run()) == ["kept"]
