"""
export.py — Package rendered pages into a downloadable archive.

Rendering is a seam: export_pages() takes any callable that turns a Page into
bytes. The built-in one produces SVG; a rasterizer can be plugged in for PNG,
JPEG or WebP output without touching this module.
"""

import io
import logging
import zipfile
from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from mdcanvas.dsl.schema import LayoutConfig, Page

from .svg_renderer import SVGRenderer
from .units import DEFAULT_BACKGROUND_COLOR

logger = logging.getLogger(__name__)

PageRenderer = Callable[[Page], bytes]

EXPORT_FORMATS = ("svg", "png", "jpeg", "webp")

_FORMAT_ALIASES = {"jpg": "jpeg"}


class ArchiveWriter(Protocol):
    """Receives one file per page, in page order."""

    def add(self, name: str, data: bytes) -> None: ...

    def finish(self) -> bytes: ...

    def close(self) -> None: ...


class ZipArchiveWriter:
    """In-memory zip archive."""

    def __init__(self):
        self._buffer = io.BytesIO()
        self._zip = zipfile.ZipFile(self._buffer, "w", compression=zipfile.ZIP_DEFLATED)
        self.names: list[str] = []

    def __enter__(self) -> "ZipArchiveWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def add(self, name: str, data: bytes) -> None:
        self._zip.writestr(name, data)
        self.names.append(name)

    def finish(self) -> bytes:
        """Close the archive and return its bytes."""
        self._zip.close()
        return self._buffer.getvalue()

    def close(self) -> None:
        """Release the archive without reading it back. Safe to call twice."""
        self._zip.close()


def page_filename(index: int, fmt: str) -> str:
    """Archive entry name for a 1-based page index, e.g. page-03.svg."""
    return f"page-{index:02d}.{fmt}"


def single_page_filename(page_number: int, fmt: str, today: Optional[date] = None) -> str:
    """Download name for one exported page."""
    today = today or date.today()
    return f"page-{page_number}-{today.isoformat()}.{fmt}"


def batch_filename(page_count: int, today: Optional[date] = None) -> str:
    """Download name for a multi-page archive."""
    today = today or date.today()
    return f"pages-{page_count}-{today.isoformat()}.zip"


def svg_page_renderer(
    config: Optional[LayoutConfig] = None,
    background: str = DEFAULT_BACKGROUND_COLOR,
) -> PageRenderer:
    """Build the default SVG page renderer."""
    renderer = SVGRenderer()

    def render(page: Page) -> bytes:
        return renderer.render(page, config, background).encode("utf-8")

    return render


def export_pages(
    pages: Sequence[Page],
    render: PageRenderer,
    writer: ArchiveWriter,
    fmt: str = "svg",
) -> bytes:
    """
    Render every page and hand the results to an archive writer.

    Args:
        pages: Pages in display order
        render: Page -> encoded image bytes
        writer: Destination archive
        fmt: File extension used for entry names

    Returns:
        The finished archive bytes
    """
    fmt = _FORMAT_ALIASES.get(fmt, fmt)
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'")

    try:
        for index, page in enumerate(pages, start=1):
            writer.add(page_filename(index, fmt), render(page))
    except Exception:
        writer.close()
        raise

    logger.info(f"Exported {len(pages)} page(s) as {fmt}")
    return writer.finish()
