"""Pydantic v2 models for content blocks and the editable scene.

Content blocks are the typed stream produced by an external markdown lexer.
The layout engine turns them into Elements: absolutely positioned, sized and
styled boxes on a fixed-size canvas. All measurements are in canvas pixels.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)


# Constants
MIN_ELEMENT_WIDTH = 100.0
MIN_ELEMENT_HEIGHT = 30.0
CANVAS_CENTER_SOURCE = "canvas-center"


class StructuralInputError(ValueError):
    """Raised when content blocks are malformed or missing fields.

    The whole layout call fails; no partial result is produced.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ElementKind(str, Enum):
    """Kinds of content an Element can carry."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    CODE = "code"
    TABLE = "table"


class TextAlign(str, Enum):
    """Horizontal text alignment inside an element box."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class GuideAxis(str, Enum):
    """Orientation of an alignment guide line."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


# ============================================================================
# Content Blocks
# ============================================================================


class HeadingBlock(BaseModel):
    """A heading of depth 1-6."""

    model_config = ConfigDict(frozen=True)

    type: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6, description="Heading depth")
    text: str


class ParagraphBlock(BaseModel):
    """A paragraph of inline markdown text."""

    model_config = ConfigDict(frozen=True)

    type: Literal["paragraph"] = "paragraph"
    text: str


class ListBlock(BaseModel):
    """A bullet or ordered list."""

    model_config = ConfigDict(frozen=True)

    type: Literal["list"] = "list"
    items: list[str] = Field(default_factory=list)


class BlockquoteBlock(BaseModel):
    """A quoted passage."""

    model_config = ConfigDict(frozen=True)

    type: Literal["blockquote"] = "blockquote"
    text: str


class CodeBlock(BaseModel):
    """A fenced or indented code block, kept verbatim."""

    model_config = ConfigDict(frozen=True)

    type: Literal["code"] = "code"
    text: str
    lang: Optional[str] = None


class TableBlock(BaseModel):
    """A table with a header row and body rows."""

    model_config = ConfigDict(frozen=True)

    type: Literal["table"] = "table"
    header_cells: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


ContentBlock = Annotated[
    Union[HeadingBlock, ParagraphBlock, ListBlock, BlockquoteBlock, CodeBlock, TableBlock],
    Field(discriminator="type"),
]

_blocks_adapter = TypeAdapter(list[ContentBlock])


def parse_blocks(raw: Sequence[Any]) -> list[ContentBlock]:
    """Validate a sequence of dicts (or block models) into content blocks.

    Args:
        raw: Block dicts as produced by the lexer, or already-built blocks.

    Returns:
        List of validated content blocks, in input order.

    Raises:
        StructuralInputError: If any block is malformed.
    """
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise StructuralInputError("Content blocks must be a sequence")

    items = [b.model_dump() if isinstance(b, BaseModel) else b for b in raw]
    try:
        return _blocks_adapter.validate_python(items)
    except ValidationError as e:
        raise StructuralInputError(
            f"Malformed content blocks: {e.error_count()} error(s)",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


# ============================================================================
# Scene Models
# ============================================================================


class Element(BaseModel):
    """A positioned, styled, editable block on the canvas.

    Mutable: the element under an active drag is updated in place and only
    snapshotted when the gesture ends.
    """

    id: str = Field(description="Unique element identifier")
    kind: ElementKind
    x: float
    y: float
    width: float = Field(ge=MIN_ELEMENT_WIDTH)
    height: float = Field(ge=MIN_ELEMENT_HEIGHT)
    content: str = ""
    font_size: float = Field(default=32, gt=0)
    color: str = "#1f2937"
    background_color: Optional[str] = None
    text_align: TextAlign = TextAlign.CENTER
    level: Optional[int] = Field(default=None, ge=1, le=6)

    @property
    def right(self) -> float:
        """Right edge position."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge position."""
        return self.y + self.height

    @property
    def center_x(self) -> float:
        """Horizontal center."""
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        """Vertical center."""
        return self.y + self.height / 2


class Page(BaseModel):
    """An ordered group of elements rendered as one output frame."""

    elements: list[Element] = Field(default_factory=list)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        """Find an element by its ID."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


class AlignmentGuide(BaseModel):
    """Transient guide line shown while dragging. Never persisted."""

    model_config = ConfigDict(frozen=True)

    axis: GuideAxis
    position: float
    source: str = Field(description="Sibling element id or 'canvas-center'")


class SnapResult(BaseModel):
    """Snapped position for a moving element plus its visual guides."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    guides: list[AlignmentGuide] = Field(default_factory=list)


class LayoutConfig(BaseModel):
    """Canvas geometry used by the planner and paginator."""

    model_config = ConfigDict(frozen=True)

    canvas_width: float = Field(default=1080, gt=0)
    canvas_height: float = Field(default=1440, ge=MIN_ELEMENT_HEIGHT)
    padding: float = Field(default=100, ge=0)

    @model_validator(mode="after")
    def _check_content_width(self) -> "LayoutConfig":
        if self.content_width < MIN_ELEMENT_WIDTH:
            raise ValueError(
                f"canvas_width - 2*padding must be at least {MIN_ELEMENT_WIDTH:g}"
            )
        return self

    @property
    def content_width(self) -> float:
        """Width of the text column."""
        return self.canvas_width - 2 * self.padding


# ============================================================================
# Style Settings
# ============================================================================


THEME_PRESETS: dict[str, tuple[str, str]] = {
    "pink": ("#ec4899", "#f9a8d4"),
    "blue": ("#3b82f6", "#93c5fd"),
    "green": ("#10b981", "#6ee7b7"),
    "purple": ("#8b5cf6", "#c4b5fd"),
    "orange": ("#f59e0b", "#fbbf24"),
}


class StyleSettings(BaseModel):
    """Global style defaults applied to newly added elements."""

    theme: Literal["pink", "blue", "green", "purple", "orange"] = "blue"
    global_font_size: int = Field(default=32, ge=8, le=120)
    text_align: TextAlign = TextAlign.CENTER
    h1_color: str = "#2563eb"
    h2_color: str = "#93c5fd"
    h3_color: str = "#ea580c"
    bold_color: str = "#7c3aed"

    def apply_theme(self, theme: str) -> "StyleSettings":
        """Return settings with the theme's primary/secondary heading colors."""
        if theme not in THEME_PRESETS:
            raise ValueError(f"Unknown theme '{theme}'")
        primary, secondary = THEME_PRESETS[theme]
        return self.model_copy(
            update={"theme": theme, "h1_color": primary, "h2_color": secondary}
        )
