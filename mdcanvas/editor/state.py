"""
state.py — The editable scene and the operations that change it.

EditorState is the single application-state object. It is passed by
reference to the interaction controller and the API layer; nothing here is a
module-level singleton. Style and structure edits commit to history
immediately; pointer gestures commit through the controller at gesture end.
"""

import logging
import uuid
from typing import Any, Optional, Sequence

from mdcanvas.dsl.schema import (
    MIN_ELEMENT_HEIGHT,
    MIN_ELEMENT_WIDTH,
    ContentBlock,
    Element,
    ElementKind,
    LayoutConfig,
    Page,
    StyleSettings,
    TextAlign,
    parse_blocks,
)
from mdcanvas.editor.history import EditHistory
from mdcanvas.engine.geometry import Rect, clamp_to_canvas
from mdcanvas.engine.layout_engine import plan_layout
from mdcanvas.engine.paginator import SPLIT_LEVELS, paginate
from mdcanvas.engine.units import (
    ADDED_ELEMENT_COLOR,
    DEFAULT_HISTORY_CAPACITY,
    DEFAULT_SNAP_THRESHOLD,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    clamp,
)

logger = logging.getLogger(__name__)

# Font size multipliers applied to the global font size for added elements
_ADDED_FONT_SCALE = {
    ElementKind.PARAGRAPH: 1.0,
    ElementKind.LIST: 0.875,
    ElementKind.BLOCKQUOTE: 0.8125,
    ElementKind.CODE: 0.75,
    ElementKind.TABLE: 0.75,
}
_ADDED_HEADING_SCALE = {1: 2.25, 2: 1.75, 3: 1.375}

_PLACEHOLDER_CONTENT = {
    ElementKind.PARAGRAPH: "Paragraph text\nPress Enter for a new line\nMulti-line editing supported",
    ElementKind.LIST: "• Item 1\n• Item 2\n• Item 3\n• Add more items",
    ElementKind.BLOCKQUOTE: "A quoted passage\nto highlight key points\nacross several lines",
    ElementKind.CODE: 'function hello() {\n  console.log("Hello World!");\n  return "multi-line code";\n}',
    ElementKind.TABLE: (
        "Item | Status | Notes\n---|---|---\n"
        "Task A | Done | On time\nTask B | In progress | One day late\n"
        "Task C | Not started | Waiting on resources"
    ),
}
_HEADING_PLACEHOLDERS = {1: "Title", 2: "Subtitle", 3: "Section heading"}

ADDED_ELEMENT_MAX_WIDTH = 400
ADDED_TABLE_HEIGHT = 150


class EditorState:
    """Pages, selection, inline-edit target and history for one document."""

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        style: Optional[StyleSettings] = None,
        split_level: int = 2,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
        snap_threshold: float = DEFAULT_SNAP_THRESHOLD,
    ):
        if split_level not in SPLIT_LEVELS:
            raise ValueError(f"split_level must be one of {SPLIT_LEVELS}, got {split_level}")

        self.config = config or LayoutConfig()
        self.style = style or StyleSettings()
        self.split_level = split_level
        self.snap_threshold = snap_threshold

        self.blocks: list[ContentBlock] = []
        self.pages: list[Page] = [Page()]
        self.current_page = 1
        self.selected_id: Optional[str] = None
        self.editing_id: Optional[str] = None

        self.history: EditHistory[list[Page]] = EditHistory(history_capacity, initial=self.pages)

    # =========================================================================
    # SCENE ACCESS
    # =========================================================================

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def page(self) -> Page:
        """The page currently shown on the canvas."""
        return self.pages[self.current_page - 1]

    @property
    def current_elements(self) -> list[Element]:
        """Elements of the current page (live objects)."""
        return self.page.elements

    def find_element(self, element_id: str) -> Element:
        """Look up an element on the current page.

        Raises:
            KeyError: If no element has that id.
        """
        element = self.page.get_element_by_id(element_id)
        if element is None:
            raise KeyError(element_id)
        return element

    def set_current_page(self, number: int) -> int:
        """Switch pages (1-based, clamped). Clears selection."""
        self.current_page = int(clamp(number, 1, self.total_pages))
        self.select(None)
        return self.current_page

    def select(self, element_id: Optional[str]) -> None:
        """Select an element, or clear the selection with None."""
        if element_id is not None:
            self.find_element(element_id)
        self.selected_id = element_id
        if element_id is None:
            self.editing_id = None

    def commit(self) -> None:
        """Push the current scene onto the history."""
        self.history.commit(self.pages)

    def _restore(self, pages: Optional[list[Page]]) -> bool:
        if pages is None:
            return False
        self.pages = pages or [Page()]
        self.current_page = int(clamp(self.current_page, 1, self.total_pages))
        self.selected_id = None
        self.editing_id = None
        return True

    # =========================================================================
    # FULL-SCENE REPLACEMENT
    # =========================================================================

    def load_blocks(self, blocks: Sequence[Any], split_level: Optional[int] = None) -> list[Page]:
        """Lay out and paginate a document, replacing the whole scene.

        Raises:
            StructuralInputError: If the blocks are malformed; the scene is
                left untouched.
        """
        parsed = parse_blocks(blocks)
        level = self.split_level if split_level is None else split_level
        pages = paginate(plan_layout(parsed, self.config), level, self.config)

        self.blocks = parsed
        self.split_level = level
        self.replace_pages(pages)
        logger.debug(f"Loaded {len(parsed)} blocks into {len(pages)} page(s)")
        return self.pages

    def set_split_level(self, level: int) -> list[Page]:
        """Re-paginate the stored blocks at a new heading depth."""
        if level not in SPLIT_LEVELS:
            raise ValueError(f"split_level must be one of {SPLIT_LEVELS}, got {level}")
        return self.load_blocks(self.blocks, split_level=level)

    def replace_pages(self, pages: Sequence[Page]) -> None:
        """Swap in a new scene and commit it."""
        self.pages = list(pages) or [Page()]
        self.current_page = int(clamp(self.current_page, 1, self.total_pages))
        self.selected_id = None
        self.editing_id = None
        self.commit()

    # =========================================================================
    # ELEMENT EDITS
    # =========================================================================

    def _added_font_size(self, kind: ElementKind, level: Optional[int]) -> int:
        base = self.style.global_font_size
        if kind == ElementKind.HEADING:
            return round(base * _ADDED_HEADING_SCALE.get(level or 1, 1.0))
        return round(base * _ADDED_FONT_SCALE[kind])

    def _added_color(self, kind: ElementKind, level: Optional[int]) -> str:
        if kind != ElementKind.HEADING:
            return ADDED_ELEMENT_COLOR
        return {
            2: self.style.h2_color,
            3: self.style.h3_color,
        }.get(level or 1, self.style.h1_color)

    def add_element(
        self,
        kind: ElementKind | str,
        level: Optional[int] = None,
        content: Optional[str] = None,
    ) -> Element:
        """Add a new element centered on the current page and select it."""
        kind = ElementKind(kind)
        if kind == ElementKind.HEADING:
            level = level or 1
        else:
            level = None

        font_size = self._added_font_size(kind, level)
        width = max(MIN_ELEMENT_WIDTH, min(ADDED_ELEMENT_MAX_WIDTH, self.config.canvas_width * 0.8))
        height = ADDED_TABLE_HEIGHT if kind == ElementKind.TABLE else max(MIN_ELEMENT_HEIGHT, font_size * 2)

        if content is None:
            if kind == ElementKind.HEADING:
                content = _HEADING_PLACEHOLDERS.get(level, "Heading")
            else:
                content = _PLACEHOLDER_CONTENT[kind]

        rect = clamp_to_canvas(
            Rect(
                (self.config.canvas_width - width) / 2,
                (self.config.canvas_height - height) / 2,
                width,
                height,
            ),
            self.config.canvas_width,
            self.config.canvas_height,
        )
        element = Element(
            id=f"element-{uuid.uuid4().hex}",
            kind=kind,
            x=rect.x,
            y=rect.y,
            width=rect.width,
            height=rect.height,
            content=content,
            font_size=font_size,
            color=self._added_color(kind, level),
            text_align=self.style.text_align,
            level=level,
        )
        self.current_elements.append(element)
        self.selected_id = element.id
        self.commit()
        return element

    def delete_element(self, element_id: str) -> None:
        """Remove an element from the current page."""
        element = self.find_element(element_id)
        self.page.elements = [e for e in self.current_elements if e is not element]
        self.selected_id = None
        self.editing_id = None
        self.commit()

    def update_style(
        self,
        element_id: str,
        font_size: Optional[float] = None,
        color: Optional[str] = None,
        background_color: Optional[str] = None,
        text_align: Optional[TextAlign | str] = None,
        clear_background: bool = False,
    ) -> Element:
        """Apply presentation changes to one element and commit."""
        element = self.find_element(element_id)
        if font_size is not None:
            element.font_size = clamp(font_size, MIN_FONT_SIZE, MAX_FONT_SIZE)
        if color is not None:
            element.color = color
        if clear_background:
            element.background_color = None
        elif background_color is not None:
            element.background_color = background_color
        if text_align is not None:
            element.text_align = TextAlign(text_align)
        self.commit()
        return element

    def adjust_font_size(self, element_id: str, delta: float) -> Element:
        """Grow or shrink an element's font, clamped to [8, 72]."""
        element = self.find_element(element_id)
        return self.update_style(element_id, font_size=element.font_size + delta)

    def update_content(self, element_id: str, text: str) -> Element:
        """Replace an element's display text (inline edit result)."""
        element = self.find_element(element_id)
        element.content = text
        self.commit()
        return element

    def apply_theme(self, theme: str) -> StyleSettings:
        """Switch heading color theme for elements added from now on."""
        self.style = self.style.apply_theme(theme)
        return self.style

    # =========================================================================
    # HISTORY
    # =========================================================================

    def undo(self) -> bool:
        """Restore the previous snapshot. False when already at the oldest."""
        return self._restore(self.history.undo())

    def redo(self) -> bool:
        """Restore the next snapshot. False when already at the newest."""
        return self._restore(self.history.redo())
