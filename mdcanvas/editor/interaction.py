"""
interaction.py — Pointer, click and keyboard handling for the canvas.

The controller owns transient gesture state (the active drag, the pending
single-click, the guides being shown). Everything durable lives on the
EditorState it is given. A drag mutates the live element on every move and
commits to history once, at pointer-up, if it actually changed something.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mdcanvas.constraints.snapping import SnappingConstraint
from mdcanvas.dsl.schema import MIN_ELEMENT_HEIGHT, MIN_ELEMENT_WIDTH, AlignmentGuide, Element
from mdcanvas.editor.scheduler import ManualScheduler, Scheduler, TimerHandle
from mdcanvas.editor.state import EditorState
from mdcanvas.engine.geometry import Rect, apply_rect, rect_of
from mdcanvas.engine.units import (
    DOUBLE_CLICK_WINDOW,
    DRAG_MOVE_THRESHOLD,
    SINGLE_CLICK_DELAY,
    clamp,
)

logger = logging.getLogger(__name__)


class DragMode(str, Enum):
    MOVE = "move"
    RESIZE = "resize"


class ResizeHandle(str, Enum):
    """Compass handles around the selected element."""

    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"

    @property
    def moves_west(self) -> bool:
        return "w" in self.value

    @property
    def moves_east(self) -> bool:
        return "e" in self.value

    @property
    def moves_north(self) -> bool:
        return "n" in self.value

    @property
    def moves_south(self) -> bool:
        return "s" in self.value


@dataclass
class DragSession:
    """One pointer gesture, from pointer-down to pointer-up."""

    element_id: str
    mode: DragMode
    start_x: float
    start_y: float
    start_rect: Rect
    handle: Optional[ResizeHandle] = None
    moved: bool = False


def resize_rect(
    start: Rect,
    handle: ResizeHandle,
    dx: float,
    dy: float,
    canvas_width: float,
    canvas_height: float,
) -> Rect:
    """Apply a handle drag to a rectangle.

    The edge opposite the handle stays fixed. Size never drops below the
    element floors and never grows past the canvas.
    """
    x, y, width, height = start

    if handle.moves_east:
        width = clamp(start.width + dx, MIN_ELEMENT_WIDTH, canvas_width - start.x)
    elif handle.moves_west:
        width = clamp(start.width - dx, MIN_ELEMENT_WIDTH, start.right)
        x = start.right - width

    if handle.moves_south:
        height = clamp(start.height + dy, MIN_ELEMENT_HEIGHT, canvas_height - start.y)
    elif handle.moves_north:
        height = clamp(start.height - dy, MIN_ELEMENT_HEIGHT, start.bottom)
        y = start.bottom - height

    return Rect(x, y, width, height)


class InteractionController:
    """Translates raw input events into edits on an EditorState.

    Args:
        state: The editor state to operate on
        scheduler: Timer source for click disambiguation
        scale: Canvas zoom; screen deltas are divided by it
    """

    def __init__(
        self,
        state: EditorState,
        scheduler: Optional[Scheduler] = None,
        scale: float = 1.0,
    ):
        if scale <= 0:
            raise ValueError("scale must be positive")
        self.state = state
        self.scheduler = scheduler or ManualScheduler()
        self.scale = scale

        self.drag: Optional[DragSession] = None
        self.guides: list[AlignmentGuide] = []

        self._pending_click: Optional[TimerHandle] = None
        self._last_click_id: Optional[str] = None
        self._last_click_at: Optional[float] = None

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def _snapper(self) -> SnappingConstraint:
        config = self.state.config
        return SnappingConstraint(
            canvas_width=config.canvas_width,
            canvas_height=config.canvas_height,
            snap_threshold=self.state.snap_threshold,
        )

    def _cancel_pending_click(self) -> None:
        if self._pending_click is not None:
            self._pending_click.cancel()
            self._pending_click = None

    # =========================================================================
    # POINTER GESTURES
    # =========================================================================

    def pointer_down(
        self,
        element_id: str,
        x: float,
        y: float,
        handle: Optional[ResizeHandle | str] = None,
    ) -> DragSession:
        """Start a move (no handle) or resize gesture and select the element.

        A gesture still in progress (its pointer-up never arrived) is ended
        first, so it keeps its own history entry.
        """
        if self.drag is not None:
            self.pointer_up()
        self._cancel_pending_click()
        element = self.state.find_element(element_id)
        self.state.select(element_id)

        self.drag = DragSession(
            element_id=element_id,
            mode=DragMode.RESIZE if handle else DragMode.MOVE,
            start_x=x,
            start_y=y,
            start_rect=rect_of(element),
            handle=ResizeHandle(handle) if handle else None,
        )
        return self.drag

    def pointer_move(self, x: float, y: float) -> Optional[Element]:
        """Update the dragged element. Returns it, or None if nothing moved."""
        session = self.drag
        if session is None:
            return None

        dx = (x - session.start_x) / self.scale
        dy = (y - session.start_y) / self.scale
        if not session.moved and (abs(dx) > DRAG_MOVE_THRESHOLD or abs(dy) > DRAG_MOVE_THRESHOLD):
            session.moved = True
        if not session.moved:
            return None

        element = self.state.page.get_element_by_id(session.element_id)
        if element is None:
            self.drag = None
            self.guides = []
            return None

        start = session.start_rect
        config = self.state.config
        if session.mode == DragMode.MOVE:
            candidate = element.model_copy(update={"x": start.x + dx, "y": start.y + dy})
            result = self._snapper().snap(candidate, self.state.current_elements)
            element.x = result.x
            element.y = result.y
            self.guides = list(result.guides)
        else:
            apply_rect(
                element,
                resize_rect(start, session.handle, dx, dy, config.canvas_width, config.canvas_height),
            )
        return element

    def pointer_up(self) -> bool:
        """End the gesture. Returns True if a history entry was committed."""
        session = self.drag
        self.drag = None
        self.guides = []
        if session is None or not session.moved:
            return False

        element = self.state.page.get_element_by_id(session.element_id)
        if element is None or rect_of(element) == session.start_rect:
            return False

        self.state.commit()
        logger.debug(f"Committed {session.mode.value} of {session.element_id}")
        return True

    def pointer_cancel(self) -> bool:
        """Pointer capture was lost; behaves as pointer-up."""
        return self.pointer_up()

    # =========================================================================
    # CLICKS
    # =========================================================================

    def click(self, element_id: str, now: Optional[float] = None) -> None:
        """Handle a single click on an element.

        Selection is deferred so a quick second click can become an inline
        edit instead.
        """
        now = self.scheduler.now() if now is None else now

        if (
            self._last_click_at is not None
            and self._last_click_id == element_id
            and now - self._last_click_at < DOUBLE_CLICK_WINDOW
        ):
            self._last_click_at = None
            self._last_click_id = None
            self.double_click(element_id)
            return

        self._cancel_pending_click()
        self.state.find_element(element_id)

        def _select() -> None:
            self._pending_click = None
            if self.state.page.get_element_by_id(element_id) is not None:
                self.state.select(element_id)

        self._pending_click = self.scheduler.call_later(SINGLE_CLICK_DELAY, _select)
        self._last_click_id = element_id
        self._last_click_at = now

    def double_click(self, element_id: str) -> bool:
        """Open inline editing. Ignored while a drag is in progress."""
        self._cancel_pending_click()
        if self.is_dragging:
            return False
        self.state.find_element(element_id)
        self.begin_text_edit(element_id)
        return True

    def background_click(self) -> None:
        """Click on empty canvas: deselect and hide guides."""
        self._cancel_pending_click()
        self.state.select(None)
        self.guides = []

    # =========================================================================
    # INLINE TEXT EDITING
    # =========================================================================

    def begin_text_edit(self, element_id: str) -> str:
        """Enter inline edit mode; returns the text to seed the editor with."""
        element = self.state.find_element(element_id)
        self.state.selected_id = element_id
        self.state.editing_id = element_id
        return element.content

    def commit_text_edit(self, text: str) -> Optional[Element]:
        if self.state.editing_id is None:
            return None
        element_id = self.state.editing_id
        self.state.editing_id = None
        return self.state.update_content(element_id, text)

    def cancel_text_edit(self) -> None:
        self.state.editing_id = None

    # =========================================================================
    # KEYBOARD
    # =========================================================================

    def key_down(self, key: str, ctrl: bool = False, shift: bool = False) -> bool:
        """Handle a keyboard shortcut. Returns True if the key was consumed."""
        lowered = key.lower()

        if key == "Escape":
            self.cancel_text_edit()
            self.background_click()
            return True

        # Keys typed into the inline editor belong to the editor
        if self.state.editing_id is not None:
            return False

        if ctrl and lowered == "z":
            self.drag = None
            self.guides = []
            return self.state.redo() if shift else self.state.undo()
        if ctrl and lowered == "y":
            self.drag = None
            self.guides = []
            return self.state.redo()
        if key in ("Delete", "Backspace") and self.state.selected_id is not None:
            self.state.delete_element(self.state.selected_id)
            return True
        return False
