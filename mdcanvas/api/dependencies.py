"""FastAPI dependencies: the in-memory document store."""

import logging
import uuid
from functools import lru_cache
from typing import Any, Optional, Sequence

from fastapi import Depends, HTTPException, status

from mdcanvas.api.config import Settings, get_settings
from mdcanvas.dsl.schema import Element, LayoutConfig
from mdcanvas.editor.state import EditorState

logger = logging.getLogger("mdcanvas.api")


class DocumentStore:
    """Editing sessions keyed by document id. Process-local, not persisted."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._documents: dict[str, EditorState] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def create(
        self,
        blocks: Sequence[Any],
        split_level: Optional[int] = None,
        config: Optional[LayoutConfig] = None,
    ) -> tuple[str, EditorState]:
        """Lay out blocks into a new editing session.

        Raises:
            StructuralInputError: If the blocks are malformed.
        """
        state = EditorState(
            config=config or self.settings.layout_config(),
            split_level=split_level or self.settings.split_level,
            history_capacity=self.settings.history_capacity,
            snap_threshold=self.settings.snap_threshold,
        )
        if blocks:
            state.load_blocks(blocks)

        document_id = uuid.uuid4().hex
        self._documents[document_id] = state
        logger.info(f"Created document {document_id} with {state.total_pages} page(s)")
        return document_id, state

    def get(self, document_id: str) -> EditorState:
        """Raises KeyError for unknown ids."""
        return self._documents[document_id]

    def delete(self, document_id: str) -> None:
        del self._documents[document_id]


@lru_cache()
def get_document_store() -> DocumentStore:
    """Process-wide document store."""
    return DocumentStore(get_settings())


def get_document(
    document_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> EditorState:
    """Resolve a document from the path.

    Raises:
        HTTPException: 404 if the document does not exist.
    """
    try:
        return store.get(document_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )


def get_element_or_404(state: EditorState, element_id: str) -> Element:
    """Look up an element on the current page or raise 404."""
    try:
        return state.find_element(element_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Element not found",
        )
