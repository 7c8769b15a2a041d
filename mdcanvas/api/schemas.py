"""
schemas.py — Pydantic request/response models for the API.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from mdcanvas.dsl.schema import (
    AlignmentGuide,
    Element,
    ElementKind,
    LayoutConfig,
    Page,
    TextAlign,
)
from mdcanvas.editor.interaction import ResizeHandle
from mdcanvas.engine.units import DEFAULT_SNAP_THRESHOLD


# =============================================================================
# REQUEST MODELS
# =============================================================================

class LayoutRequest(BaseModel):
    """Content blocks to lay out on a single canvas."""
    blocks: list[dict[str, Any]] = Field(..., description="Content blocks from the markdown lexer")
    config: Optional[LayoutConfig] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "blocks": [
                    {"type": "heading", "level": 1, "text": "Weekly notes"},
                    {"type": "paragraph", "text": "Shipped the **new** exporter."},
                    {"type": "list", "items": ["Docs", "Tests"]},
                ]
            }
        }
    )


class PaginateRequest(LayoutRequest):
    """Content blocks to lay out and split into pages."""
    split_level: int = Field(default=2, ge=1, le=3, description="Heading depth that starts a page")


class SnapRequest(BaseModel):
    """An element at its raw drag position plus the rest of the page."""
    moving: Element
    siblings: list[Element] = Field(default_factory=list)
    canvas_width: float = Field(default=1080, gt=0)
    canvas_height: float = Field(default=1440, gt=0)
    threshold: float = Field(default=DEFAULT_SNAP_THRESHOLD, ge=0)


class PreviewRequest(PaginateRequest):
    """Blocks to render as SVG page previews."""
    background: str = "#ffffff"


class DocumentCreateRequest(BaseModel):
    """Start an editing session from content blocks."""
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    split_level: Optional[int] = Field(default=None, ge=1, le=3)
    config: Optional[LayoutConfig] = None


class AddElementRequest(BaseModel):
    """Add a new element to the current page."""
    kind: ElementKind
    level: Optional[int] = Field(default=None, ge=1, le=3)
    content: Optional[str] = None


class UpdateElementRequest(BaseModel):
    """Content and style edits; omitted fields are left alone."""
    content: Optional[str] = None
    font_size: Optional[float] = Field(default=None, gt=0)
    color: Optional[str] = None
    background_color: Optional[str] = None
    clear_background: bool = False
    text_align: Optional[TextAlign] = None


class GestureRequest(BaseModel):
    """A complete drag: pointer-down, one move by (dx, dy), pointer-up.

    Without a handle the element is moved (with snapping); with one it is
    resized from that handle.
    """
    dx: float
    dy: float
    handle: Optional[ResizeHandle] = None
    scale: float = Field(default=1.0, gt=0)


class SplitLevelRequest(BaseModel):
    split_level: int = Field(..., ge=1, le=3)


class CurrentPageRequest(BaseModel):
    page: int = Field(..., ge=1, description="1-based page number")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class LayoutResponse(BaseModel):
    """Elements placed on one canvas."""
    elements: list[Element]
    element_count: int


class PagesResponse(BaseModel):
    """Paginated layout."""
    pages: list[Page]
    total_pages: int


class PreviewResponse(BaseModel):
    """One SVG document per page."""
    pages: list[str]
    total_pages: int


class DocumentResponse(BaseModel):
    """Full state of an editing session."""
    id: str
    pages: list[Page]
    total_pages: int
    current_page: int
    split_level: int
    selected_id: Optional[str] = None
    can_undo: bool
    can_redo: bool


class GestureResponse(BaseModel):
    """Result of a move or resize gesture."""
    element: Element
    committed: bool
    guides: list[AlignmentGuide] = Field(default_factory=list)
    document: DocumentResponse


class HistoryResponse(BaseModel):
    """Result of an undo or redo."""
    applied: bool
    action: Literal["undo", "redo"]
    document: DocumentResponse
