"""
layout_engine.py — Block Layout Planner.

Turns the typed content-block stream into a vertical stack of Elements:
1. Density pre-pass: coarse height estimate of the whole document
2. Density bands pick base font size, heading tiers and spacing
3. Sequential placement down a single centered column
4. Density-aware vertical centering

The planner is a pure function: it keeps no state between calls and returns
new Element objects every time.
"""

import logging
import uuid
from typing import Any, Callable, Optional, Sequence

from mdcanvas.dsl.schema import (
    BlockquoteBlock,
    CodeBlock,
    ContentBlock,
    Element,
    ElementKind,
    HeadingBlock,
    LayoutConfig,
    ListBlock,
    ParagraphBlock,
    StructuralInputError,
    TableBlock,
    TextAlign,
    parse_blocks,
)

from .text_measure import (
    clean_markdown_text,
    estimate_table_height,
    estimate_text_height,
    format_table_content,
    has_bold_markers,
)
from .units import (
    BASE_FONT_BANDS,
    BASE_FONT_SPARSE,
    BLOCKQUOTE_BACKGROUND,
    BLOCKQUOTE_COLOR,
    BLOCKQUOTE_FONT_SIZE,
    BOLD_ACCENT_COLOR,
    CENTER_DENSE_THRESHOLD,
    CENTER_MODERATE_SLACK_SHARE,
    CENTER_MODERATE_THRESHOLD,
    CODE_BACKGROUND,
    CODE_COLOR,
    CODE_FONT_SIZE,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_INK_COLOR,
    DEFAULT_PADDING,
    ESTIMATE_BASELINE,
    ESTIMATE_DEFAULT,
    ESTIMATE_HEADING_EXTRA,
    ESTIMATE_HEADING_SIZES,
    ESTIMATE_LIST_EXTRA,
    ESTIMATE_LIST_ITEM,
    ESTIMATE_PARAGRAPH,
    HEADING_COLORS,
    HEADING_FONT_BANDS,
    HEADING_FONT_SPARSE,
    LINE_HEIGHT_FACTOR,
    LIST_FONT_SIZE,
    SPACING_BANDS,
    SPACING_SPARSE,
    TABLE_FONT_SIZE,
    pick_band,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DENSITY
# =============================================================================

def _tier(sizes: tuple[int, int, int], level: int) -> int:
    """Pick a heading tier; levels deeper than 3 share the third tier."""
    return sizes[min(level, 3) - 1]


def estimate_block_height(block: ContentBlock) -> float:
    """Coarse per-kind height used only by the density pre-pass."""
    if isinstance(block, HeadingBlock):
        font_size = _tier(ESTIMATE_HEADING_SIZES, block.level)
        return font_size * LINE_HEIGHT_FACTOR + ESTIMATE_HEADING_EXTRA
    if isinstance(block, ParagraphBlock):
        return ESTIMATE_PARAGRAPH
    if isinstance(block, ListBlock):
        items = len(block.items) or 1
        return items * ESTIMATE_LIST_ITEM + ESTIMATE_LIST_EXTRA
    return ESTIMATE_DEFAULT


def estimate_density(blocks: Sequence[ContentBlock], canvas_height: float) -> float:
    """Ratio of estimated content height to canvas height."""
    estimated = ESTIMATE_BASELINE + sum(estimate_block_height(b) for b in blocks)
    return estimated / canvas_height


def spacing_for_density(density: float) -> float:
    """Inter-element spacing for a density."""
    return pick_band(density, SPACING_BANDS, SPACING_SPARSE)


def base_font_for_density(density: float) -> float:
    """Body font size for a density."""
    return pick_band(density, BASE_FONT_BANDS, BASE_FONT_SPARSE)


def heading_sizes_for_density(density: float) -> tuple[int, int, int]:
    """H1/H2/H3 font sizes for a density."""
    return pick_band(density, HEADING_FONT_BANDS, HEADING_FONT_SPARSE)


def heading_color(level: int) -> str:
    """Fixed color per heading level for visual hierarchy."""
    return HEADING_COLORS.get(level, DEFAULT_INK_COLOR)


# =============================================================================
# ELEMENT BUILDERS
# =============================================================================

def new_element_id(index: int) -> str:
    """Unique element id; never reused."""
    return f"element-{index}-{uuid.uuid4().hex[:8]}"


# Each builder returns the per-kind fields layered over the shared column base.

def _heading_fields(block: HeadingBlock, density: float, width: float) -> dict[str, Any]:
    font_size = _tier(heading_sizes_for_density(density), block.level)
    text = clean_markdown_text(block.text)
    return {
        "kind": ElementKind.HEADING,
        "content": text,
        "level": block.level,
        "height": estimate_text_height(text, font_size, width),
        "font_size": font_size,
        "color": heading_color(block.level),
    }


def _paragraph_fields(block: ParagraphBlock, density: float, width: float) -> dict[str, Any]:
    font_size = base_font_for_density(density)
    return {
        "kind": ElementKind.PARAGRAPH,
        "content": clean_markdown_text(block.text),
        "height": estimate_text_height(block.text, font_size, width),
        "color": BOLD_ACCENT_COLOR if has_bold_markers(block.text) else DEFAULT_INK_COLOR,
    }


def _list_fields(block: ListBlock, density: float, width: float) -> dict[str, Any]:
    content = "\n".join(f"• {clean_markdown_text(item)}" for item in block.items)
    return {
        "kind": ElementKind.LIST,
        "content": content,
        "height": estimate_text_height(content, LIST_FONT_SIZE, width),
        "font_size": LIST_FONT_SIZE,
        "text_align": TextAlign.LEFT,
    }


def _blockquote_fields(block: BlockquoteBlock, density: float, width: float) -> dict[str, Any]:
    return {
        "kind": ElementKind.BLOCKQUOTE,
        "content": clean_markdown_text(block.text),
        "height": estimate_text_height(block.text, BLOCKQUOTE_FONT_SIZE, width),
        "font_size": BLOCKQUOTE_FONT_SIZE,
        "color": BLOCKQUOTE_COLOR,
        "background_color": BLOCKQUOTE_BACKGROUND,
        "text_align": TextAlign.LEFT,
    }


def _code_fields(block: CodeBlock, density: float, width: float) -> dict[str, Any]:
    return {
        "kind": ElementKind.CODE,
        "content": block.text,
        "height": estimate_text_height(block.text, CODE_FONT_SIZE, width),
        "font_size": CODE_FONT_SIZE,
        "color": CODE_COLOR,
        "background_color": CODE_BACKGROUND,
        "text_align": TextAlign.LEFT,
    }


def _table_fields(block: TableBlock, density: float, width: float) -> dict[str, Any]:
    return {
        "kind": ElementKind.TABLE,
        "content": format_table_content(block.header_cells, block.rows),
        "height": estimate_table_height(len(block.rows)),
        "font_size": TABLE_FONT_SIZE,
    }


_BUILDERS: dict[type, Callable[[Any, float, float], dict[str, Any]]] = {
    HeadingBlock: _heading_fields,
    ParagraphBlock: _paragraph_fields,
    ListBlock: _list_fields,
    BlockquoteBlock: _blockquote_fields,
    CodeBlock: _code_fields,
    TableBlock: _table_fields,
}


def build_element(
    block: ContentBlock,
    index: int,
    y: float,
    config: LayoutConfig,
    density: float,
) -> Element:
    """
    Create one Element for one content block at the given vertical offset.

    Raises:
        StructuralInputError: If the block is not a known content-block type
    """
    builder = _BUILDERS.get(type(block))
    if builder is None:
        raise StructuralInputError(f"Unsupported content block: {type(block).__name__}")

    base = {
        "id": new_element_id(index),
        "x": config.padding,
        "y": y,
        "width": config.content_width,
        "font_size": base_font_for_density(density),
        "color": DEFAULT_INK_COLOR,
        "text_align": TextAlign.CENTER,
    }
    base.update(builder(block, density, config.content_width))
    return Element(**base)


# =============================================================================
# PLACEMENT & CENTERING
# =============================================================================

def stack_elements(
    elements: Sequence[Element],
    config: LayoutConfig,
    spacing: float,
) -> list[Element]:
    """
    Re-place elements down the standard column with fresh offsets.

    Returns copies; x and width are reset to the column, heights are kept.
    """
    stacked = []
    y_offset = config.padding
    for element in elements:
        placed = element.model_copy(
            update={"x": config.padding, "y": y_offset, "width": config.content_width},
            deep=True,
        )
        stacked.append(placed)
        y_offset += placed.height + spacing
    return stacked


def total_stack_height(elements: Sequence[Element], config: LayoutConfig, spacing: float) -> float:
    """Height of the stack including top and bottom padding."""
    if not elements:
        return 2 * config.padding
    heights = sum(e.height for e in elements)
    return config.padding + heights + spacing * (len(elements) - 1) + config.padding


def centering_offset(total_height: float, config: LayoutConfig) -> float:
    """
    Vertical shift for a stack that is shorter than the canvas.

    Dense stacks barely move, moderate ones take 30% of the slack, sparse
    ones are centered. The bottom never passes canvas_height - padding/2.
    """
    if total_height >= config.canvas_height:
        return 0.0

    slack = config.canvas_height - total_height
    density = total_height / config.canvas_height

    if density > CENTER_DENSE_THRESHOLD:
        offset = max(0.0, config.padding * 0.5)
    elif density > CENTER_MODERATE_THRESHOLD:
        offset = max(slack * CENTER_MODERATE_SLACK_SHARE, config.padding * 0.7)
    else:
        offset = max(slack / 2, config.padding)

    max_offset = config.canvas_height - total_height - config.padding * 0.5
    return min(offset, max(0.0, max_offset))


def center_vertically(elements: list[Element], config: LayoutConfig, spacing: float) -> float:
    """Shift a freshly stacked list down in place. Returns the applied offset."""
    offset = centering_offset(total_stack_height(elements, config, spacing), config)
    if offset:
        for element in elements:
            element.y += offset
    return offset


# =============================================================================
# ENTRY POINTS
# =============================================================================

def plan_layout(blocks: Sequence[Any], config: Optional[LayoutConfig] = None) -> list[Element]:
    """
    Lay out content blocks as a vertical stack of Elements.

    Args:
        blocks: Content blocks (models or dicts in the lexer's shape)
        config: Canvas geometry; defaults to the 1080x1440 card

    Returns:
        Exactly one Element per block, in input order. Empty input gives []

    Raises:
        StructuralInputError: If any block is malformed (no partial result)
    """
    config = config or LayoutConfig()
    parsed = parse_blocks(blocks)
    if not parsed:
        return []

    density = estimate_density(parsed, config.canvas_height)
    spacing = spacing_for_density(density)

    elements = []
    y_offset = config.padding
    for index, block in enumerate(parsed):
        element = build_element(block, index, y_offset, config, density)
        elements.append(element)
        y_offset += element.height + spacing

    offset = center_vertically(elements, config, spacing)

    logger.debug(
        f"Planned {len(elements)} elements: density={density:.2f} "
        f"spacing={spacing} center_offset={offset:.1f}"
    )
    return elements


def layout(
    blocks: Sequence[Any],
    canvas_width: float = DEFAULT_CANVAS_WIDTH,
    canvas_height: float = DEFAULT_CANVAS_HEIGHT,
    padding: float = DEFAULT_PADDING,
) -> list[Element]:
    """Convenience wrapper taking the canvas geometry as plain numbers."""
    config = LayoutConfig(canvas_width=canvas_width, canvas_height=canvas_height, padding=padding)
    return plan_layout(blocks, config)
