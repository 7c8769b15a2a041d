"""Editing-session routes.

Every edit goes through EditorState, so each request produces at most one
history commit.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from mdcanvas.api.dependencies import (
    DocumentStore,
    get_document,
    get_document_store,
    get_element_or_404,
)
from mdcanvas.api.schemas import (
    AddElementRequest,
    CurrentPageRequest,
    DocumentCreateRequest,
    DocumentResponse,
    GestureRequest,
    GestureResponse,
    HistoryResponse,
    SplitLevelRequest,
    UpdateElementRequest,
)
from mdcanvas.dsl.schema import Element
from mdcanvas.editor.interaction import InteractionController
from mdcanvas.editor.state import EditorState
from mdcanvas.engine.export import (
    ZipArchiveWriter,
    batch_filename,
    export_pages,
    svg_page_renderer,
)

router = APIRouter()


def _document_response(document_id: str, state: EditorState) -> DocumentResponse:
    return DocumentResponse(
        id=document_id,
        pages=state.pages,
        total_pages=state.total_pages,
        current_page=state.current_page,
        split_level=state.split_level,
        selected_id=state.selected_id,
        can_undo=state.history.can_undo,
        can_redo=state.history.can_redo,
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreateRequest,
    store: DocumentStore = Depends(get_document_store),
):
    """Lay out blocks into a new editing session."""
    document_id, state = store.create(request.blocks, request.split_level, request.config)
    return _document_response(document_id, state)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document_state(document_id: str, state: EditorState = Depends(get_document)):
    return _document_response(document_id, state)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
):
    try:
        store.delete(document_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{document_id}/page", response_model=DocumentResponse)
async def set_current_page(
    document_id: str,
    request: CurrentPageRequest,
    state: EditorState = Depends(get_document),
):
    """Switch the page that element routes operate on."""
    state.set_current_page(request.page)
    return _document_response(document_id, state)


@router.put("/{document_id}/split-level", response_model=DocumentResponse)
async def set_split_level(
    document_id: str,
    request: SplitLevelRequest,
    state: EditorState = Depends(get_document),
):
    """Re-paginate the document's blocks at a new heading depth."""
    state.set_split_level(request.split_level)
    return _document_response(document_id, state)


# =============================================================================
# ELEMENTS
# =============================================================================

@router.post(
    "/{document_id}/elements",
    response_model=Element,
    status_code=status.HTTP_201_CREATED,
)
async def add_element(request: AddElementRequest, state: EditorState = Depends(get_document)):
    """Add an element to the center of the current page."""
    return state.add_element(request.kind, request.level, request.content)


@router.patch("/{document_id}/elements/{element_id}", response_model=Element)
async def update_element(
    element_id: str,
    request: UpdateElementRequest,
    state: EditorState = Depends(get_document),
):
    """Edit an element's text and/or style."""
    element = get_element_or_404(state, element_id)
    style_fields = request.model_dump(
        include={"font_size", "color", "background_color", "text_align"},
        exclude_none=True,
    )

    if style_fields or request.clear_background:
        if request.content is not None:
            element.content = request.content
        state.update_style(element_id, clear_background=request.clear_background, **style_fields)
    elif request.content is not None:
        state.update_content(element_id, request.content)
    return element


@router.delete("/{document_id}/elements/{element_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_element(element_id: str, state: EditorState = Depends(get_document)):
    get_element_or_404(state, element_id)
    state.delete_element(element_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{document_id}/elements/{element_id}/gesture", response_model=GestureResponse)
async def apply_gesture(
    document_id: str,
    element_id: str,
    request: GestureRequest,
    state: EditorState = Depends(get_document),
):
    """Replay a complete move or resize drag on an element."""
    get_element_or_404(state, element_id)

    controller = InteractionController(state, scale=request.scale)
    controller.pointer_down(element_id, 0, 0, handle=request.handle)
    element = controller.pointer_move(request.dx, request.dy)
    guides = list(controller.guides)
    committed = controller.pointer_up()

    return GestureResponse(
        element=element or state.find_element(element_id),
        committed=committed,
        guides=guides,
        document=_document_response(document_id, state),
    )


# =============================================================================
# HISTORY
# =============================================================================

@router.post("/{document_id}/undo", response_model=HistoryResponse)
async def undo(document_id: str, state: EditorState = Depends(get_document)):
    applied = state.undo()
    return HistoryResponse(applied=applied, action="undo", document=_document_response(document_id, state))


@router.post("/{document_id}/redo", response_model=HistoryResponse)
async def redo(document_id: str, state: EditorState = Depends(get_document)):
    applied = state.redo()
    return HistoryResponse(applied=applied, action="redo", document=_document_response(document_id, state))


# =============================================================================
# EXPORT
# =============================================================================

@router.get("/{document_id}/export")
async def export_document(
    background: str = "#ffffff",
    state: EditorState = Depends(get_document),
):
    """Download every page as SVG in one zip archive."""
    archive = export_pages(
        state.pages,
        svg_page_renderer(state.config, background),
        ZipArchiveWriter(),
        fmt="svg",
    )
    filename = batch_filename(state.total_pages)
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
