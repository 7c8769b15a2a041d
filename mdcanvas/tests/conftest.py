"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from mdcanvas.api.config import get_settings
from mdcanvas.api.dependencies import DocumentStore, get_document_store
from mdcanvas.api.main import app
from mdcanvas.dsl.schema import Element, ElementKind, LayoutConfig
from mdcanvas.editor.scheduler import ManualScheduler
from mdcanvas.editor.state import EditorState


@pytest.fixture
def client() -> TestClient:
    """Test client with a fresh, empty document store."""
    store = DocumentStore(get_settings())
    app.dependency_overrides[get_document_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def config() -> LayoutConfig:
    """The default 1080x1440 card with 100px padding."""
    return LayoutConfig()


@pytest.fixture
def sample_blocks() -> list[dict]:
    """A short document with two H2 sections."""
    return [
        {"type": "heading", "level": 1, "text": "Release **notes**"},
        {"type": "paragraph", "text": "This week we shipped the new exporter."},
        {"type": "heading", "level": 2, "text": "Fixes"},
        {"type": "list", "items": ["Crash on empty page", "Wrong *italic* color"]},
        {"type": "heading", "level": 2, "text": "Numbers"},
        {
            "type": "table",
            "header_cells": ["Metric", "Value"],
            "rows": [["Pages", "12"], ["Users", "340"]],
        },
    ]


@pytest.fixture
def make_element():
    """Factory for elements with explicit geometry."""

    def _make(
        element_id: str,
        x: float,
        y: float,
        width: float = 200,
        height: float = 100,
        kind: ElementKind = ElementKind.PARAGRAPH,
        content: str = "text",
    ) -> Element:
        return Element(
            id=element_id,
            kind=kind,
            x=x,
            y=y,
            width=width,
            height=height,
            content=content,
        )

    return _make


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def editor(sample_blocks: list[dict]) -> EditorState:
    """Editor with the sample document loaded on a single page."""
    state = EditorState(split_level=1)
    state.load_blocks(sample_blocks)
    return state


@pytest.fixture
def canvas_editor(make_element) -> EditorState:
    """Editor holding two hand-placed elements on one page."""
    state = EditorState()
    state.page.elements = [
        make_element("a", 100, 100),
        make_element("b", 500, 600),
    ]
    state.commit()
    return state
