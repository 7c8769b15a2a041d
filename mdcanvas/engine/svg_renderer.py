"""
svg_renderer.py — SVG generation from laid-out Pages.

This renderer consumes Pages and produces SVG strings.
It NEVER computes positions; that's the layout engine's job.
It only draws element boxes and breaks their text into lines.

Used for:
1. Live previews in the API
2. The built-in page renderer for export
3. Embedding in web pages (data URIs)
"""

import base64
from typing import Optional
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import SubElement

from mdcanvas.dsl.schema import Element, ElementKind, LayoutConfig, Page, TextAlign

from .text_measure import clean_markdown_text, wrap_lines
from .units import DEFAULT_BACKGROUND_COLOR, LINE_HEIGHT_FACTOR


# =============================================================================
# CONSTANTS
# =============================================================================

SVG_NS = "http://www.w3.org/2000/svg"

# Horizontal inset for left/right aligned text
TEXT_INSET = 16
# Corner radius for filled element boxes
BOX_RADIUS = 12

SANS_FONT_STACK = "'Inter', 'Segoe UI', 'DejaVu Sans', Arial, sans-serif"
MONO_FONT_STACK = "'JetBrains Mono', 'Fira Code', Consolas, monospace"

_TEXT_ANCHORS = {
    TextAlign.LEFT: "start",
    TextAlign.CENTER: "middle",
    TextAlign.RIGHT: "end",
}


def format_px(value: float) -> str:
    """Format pixel value for SVG (2 decimal places)."""
    return f"{value:.2f}"


def display_lines(element: Element) -> list[str]:
    """The lines an element shows on the canvas."""
    if element.kind == ElementKind.CODE:
        return element.content.split("\n")
    if element.kind == ElementKind.TABLE:
        # Drop the header rule row
        return [line for line in element.content.split("\n") if set(line) - set("-| ")]
    text = "\n".join(clean_markdown_text(line) for line in element.content.split("\n"))
    return wrap_lines(text, element.font_size, element.width - 2 * TEXT_INSET)


# =============================================================================
# SVG RENDERER
# =============================================================================

class SVGRenderer:
    """
    Renders a Page to SVG.

    The renderer is stateless; each render() call creates a new SVG.
    """

    def __init__(self, include_styles: bool = True):
        """
        Initialize renderer.

        Args:
            include_styles: Whether to embed the <style> block
        """
        self.include_styles = include_styles

    def render(
        self,
        page: Page,
        config: Optional[LayoutConfig] = None,
        background: str = DEFAULT_BACKGROUND_COLOR,
    ) -> str:
        """
        Render one page.

        Args:
            page: Laid-out page
            config: Canvas geometry (defaults to 1080x1440)
            background: Canvas fill color

        Returns:
            SVG content as string
        """
        config = config or LayoutConfig()
        width = format_px(config.canvas_width)
        height = format_px(config.canvas_height)

        svg = ET.Element("svg")
        svg.set("xmlns", SVG_NS)
        svg.set("width", width)
        svg.set("height", height)
        svg.set("viewBox", f"0 0 {width} {height}")

        if self.include_styles:
            self._add_styles(svg)

        bg = SubElement(svg, "rect")
        bg.set("x", "0")
        bg.set("y", "0")
        bg.set("width", width)
        bg.set("height", height)
        bg.set("fill", background)

        elements_group = SubElement(svg, "g")
        elements_group.set("id", "elements")
        for element in page.elements:
            self._render_element(elements_group, element)

        ET.indent(svg, space="  ")
        svg_str = ET.tostring(svg, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + svg_str

    def _add_styles(self, svg: ET.Element) -> None:
        style = SubElement(svg, "style")
        style.text = f"""
            text {{
                font-family: {SANS_FONT_STACK};
            }}
            .code-text {{
                font-family: {MONO_FONT_STACK};
            }}
        """

    # =========================================================================
    # ELEMENT RENDERING
    # =========================================================================

    def _render_element(self, parent: ET.Element, element: Element) -> None:
        """Render a single element: optional box, then its text."""
        g = SubElement(parent, "g")
        g.set("id", element.id)
        g.set("class", f"element {element.kind.value}")

        if element.background_color:
            rect = SubElement(g, "rect")
            rect.set("x", format_px(element.x))
            rect.set("y", format_px(element.y))
            rect.set("width", format_px(element.width))
            rect.set("height", format_px(element.height))
            rect.set("rx", str(BOX_RADIUS))
            rect.set("fill", element.background_color)

        self._render_text(g, element)

    def _render_text(self, parent: ET.Element, element: Element) -> None:
        """
        Render an element's text, vertically centered in its box.

        One <tspan> per display line, anchored by the element's alignment.
        """
        lines = display_lines(element)
        if not any(line.strip() for line in lines):
            return

        if element.text_align == TextAlign.LEFT:
            text_x = element.x + TEXT_INSET
        elif element.text_align == TextAlign.RIGHT:
            text_x = element.right - TEXT_INSET
        else:
            text_x = element.center_x

        line_height = element.font_size * LINE_HEIGHT_FACTOR
        total_text_height = line_height * len(lines)
        start_y = element.y + (element.height - total_text_height) / 2 + line_height * 0.7

        text_elem = SubElement(parent, "text")
        text_elem.set("x", format_px(text_x))
        text_elem.set("text-anchor", _TEXT_ANCHORS.get(element.text_align, "middle"))
        text_elem.set("fill", element.color)
        text_elem.set("font-size", f"{element.font_size:.1f}px")

        if element.kind == ElementKind.HEADING:
            text_elem.set("font-weight", "bold")
        elif element.kind == ElementKind.CODE:
            text_elem.set("class", "code-text")
            text_elem.set("xml:space", "preserve")
        elif element.kind == ElementKind.BLOCKQUOTE:
            text_elem.set("font-style", "italic")

        for i, line in enumerate(lines):
            tspan = SubElement(text_elem, "tspan")
            tspan.set("x", format_px(text_x))
            tspan.set("y", format_px(start_y + i * line_height))
            tspan.text = line


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def render_page_to_svg(
    page: Page,
    config: Optional[LayoutConfig] = None,
    background: str = DEFAULT_BACKGROUND_COLOR,
) -> str:
    """Render a page to an SVG string without embedded styles."""
    return SVGRenderer(include_styles=False).render(page, config, background)


def render_to_data_uri(
    page: Page,
    config: Optional[LayoutConfig] = None,
    background: str = DEFAULT_BACKGROUND_COLOR,
) -> str:
    """
    Render a page to an SVG data URI (for img src or CSS background).

    Returns:
        Data URI string (data:image/svg+xml;base64,...)
    """
    svg_bytes = render_page_to_svg(page, config, background).encode("utf-8")
    b64 = base64.b64encode(svg_bytes).decode("ascii")
    return f"data:image/svg+xml;base64,{b64}"
