"""
paginator.py — Split a laid-out element stack into pages at headings.

Split levels:
    1  no split, one page in original order
    2  a new page starts at every H1 or H2
    3  a new page starts at every heading of level <= 3

Each page is then re-laid out as its own mini-document: the column is reset,
offsets start fresh, and the density-aware centering runs per page.
"""

import logging
from typing import Any, Optional, Sequence

from mdcanvas.dsl.schema import Element, ElementKind, LayoutConfig, Page

from .layout_engine import center_vertically, plan_layout, spacing_for_density, stack_elements
from .units import ESTIMATE_BASELINE, ESTIMATE_ELEMENT_EXTRA

logger = logging.getLogger(__name__)

SPLIT_LEVELS = (1, 2, 3)


def _starts_page(element: Element, split_level: int) -> bool:
    return (
        element.kind == ElementKind.HEADING
        and element.level is not None
        and element.level <= split_level
    )


def split_by_headings(elements: Sequence[Element], split_level: int) -> list[list[Element]]:
    """
    Group elements into pages by heading boundary.

    The boundary check happens before accumulation: content gathered so far
    is flushed, then the triggering heading opens the next page.

    Raises:
        ValueError: If split_level is not 1, 2 or 3
    """
    if split_level not in SPLIT_LEVELS:
        raise ValueError(f"split_level must be one of {SPLIT_LEVELS}, got {split_level}")

    if split_level == 1:
        return [list(elements)]

    groups: list[list[Element]] = []
    current: list[Element] = []
    for element in elements:
        if _starts_page(element, split_level) and current:
            groups.append(current)
            current = []
        current.append(element)

    if current:
        groups.append(current)

    return groups or [list(elements)]


def page_density(elements: Sequence[Element], config: LayoutConfig) -> float:
    """Density of an already sized page, on the pre-pass baseline."""
    measured = sum(e.height + ESTIMATE_ELEMENT_EXTRA for e in elements)
    return (ESTIMATE_BASELINE + measured) / config.canvas_height


def relayout_page(elements: Sequence[Element], config: LayoutConfig) -> Page:
    """Stack and center one page's elements with fresh offsets."""
    spacing = spacing_for_density(page_density(elements, config))
    placed = stack_elements(elements, config, spacing)
    center_vertically(placed, config, spacing)
    return Page(elements=placed)


def paginate(
    elements: Sequence[Element],
    split_level: int = 1,
    config: Optional[LayoutConfig] = None,
) -> list[Page]:
    """
    Split elements into pages and lay out each page independently.

    Args:
        elements: Planner output, in document order
        split_level: Heading depth that starts a new page (1, 2 or 3)
        config: Canvas geometry

    Returns:
        A non-empty list of pages. Input elements are not modified
    """
    config = config or LayoutConfig()
    groups = split_by_headings(elements, split_level)
    pages = [relayout_page(group, config) for group in groups]
    logger.debug(f"Paginated {len(elements)} elements into {len(pages)} page(s) at level {split_level}")
    return pages


def layout_pages(
    blocks: Sequence[Any],
    split_level: int = 1,
    config: Optional[LayoutConfig] = None,
) -> list[Page]:
    """Plan the whole document, then paginate it."""
    config = config or LayoutConfig()
    return paginate(plan_layout(blocks, config), split_level, config)
