"""Stateless layout, pagination, snapping and preview routes."""

from fastapi import APIRouter

from mdcanvas.api.schemas import (
    LayoutRequest,
    LayoutResponse,
    PaginateRequest,
    PagesResponse,
    PreviewRequest,
    PreviewResponse,
    SnapRequest,
)
from mdcanvas.constraints.snapping import compute_snap
from mdcanvas.dsl.schema import LayoutConfig, SnapResult
from mdcanvas.engine.layout_engine import plan_layout
from mdcanvas.engine.paginator import layout_pages
from mdcanvas.engine.svg_renderer import SVGRenderer

router = APIRouter()


@router.post("/layout", response_model=LayoutResponse)
async def layout_blocks(request: LayoutRequest):
    """Place content blocks on a single canvas."""
    elements = plan_layout(request.blocks, request.config or LayoutConfig())
    return LayoutResponse(elements=elements, element_count=len(elements))


@router.post("/paginate", response_model=PagesResponse)
async def paginate_blocks(request: PaginateRequest):
    """Lay out content blocks and split them into pages at headings."""
    pages = layout_pages(request.blocks, request.split_level, request.config or LayoutConfig())
    return PagesResponse(pages=pages, total_pages=len(pages))


@router.post("/snap", response_model=SnapResult)
async def snap_element(request: SnapRequest):
    """Snap a dragged element to its siblings and the canvas center."""
    return compute_snap(
        request.moving,
        request.siblings,
        request.canvas_width,
        request.canvas_height,
        request.threshold,
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_pages(request: PreviewRequest):
    """Render each page of the paginated layout as SVG."""
    config = request.config or LayoutConfig()
    pages = layout_pages(request.blocks, request.split_level, config)
    renderer = SVGRenderer(include_styles=False)
    svgs = [renderer.render(page, config, request.background) for page in pages]
    return PreviewResponse(pages=svgs, total_pages=len(svgs))
