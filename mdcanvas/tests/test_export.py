"""Tests for page export packaging."""

import io
import zipfile
from datetime import date

import pytest

from mdcanvas.dsl.schema import Page
from mdcanvas.engine.export import (
    ZipArchiveWriter,
    batch_filename,
    export_pages,
    page_filename,
    single_page_filename,
    svg_page_renderer,
)
from mdcanvas.engine.paginator import layout_pages


class RecordingWriter:
    """ArchiveWriter that keeps entries in memory for inspection."""

    def __init__(self):
        self.entries: list[tuple[str, bytes]] = []
        self.finished = False
        self.closed = False

    def add(self, name: str, data: bytes) -> None:
        self.entries.append((name, data))

    def finish(self) -> bytes:
        self.finished = True
        return b"done"

    def close(self) -> None:
        self.closed = True


class TestExportPages:
    """Tests for export_pages."""

    def test_pages_written_in_order(self) -> None:
        pages = [Page(), Page(), Page()]
        writer = RecordingWriter()
        rendered = iter([b"one", b"two", b"three"])

        result = export_pages(pages, lambda page: next(rendered), writer, fmt="png")

        assert result == b"done"
        assert writer.finished
        assert writer.entries == [
            ("page-01.png", b"one"),
            ("page-02.png", b"two"),
            ("page-03.png", b"three"),
        ]

    def test_zip_of_svg_pages(self, sample_blocks: list[dict]) -> None:
        pages = layout_pages(sample_blocks, 2)
        archive = export_pages(pages, svg_page_renderer(), ZipArchiveWriter())

        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            assert zf.namelist() == ["page-01.svg", "page-02.svg", "page-03.svg"]
            assert zf.read("page-02.svg").startswith(b"<?xml")

    @pytest.mark.parametrize("fmt", ["svg", "png", "jpeg", "webp"])
    def test_supported_formats(self, fmt: str) -> None:
        writer = RecordingWriter()
        export_pages([Page()], lambda page: b"x", writer, fmt=fmt)
        assert writer.entries == [(f"page-01.{fmt}", b"x")]

    def test_jpg_alias(self) -> None:
        writer = RecordingWriter()
        export_pages([Page()], lambda page: b"x", writer, fmt="jpg")
        assert writer.entries[0][0] == "page-01.jpeg"

    def test_unsupported_format(self) -> None:
        with pytest.raises(ValueError):
            export_pages([Page()], lambda page: b"", RecordingWriter(), fmt="gif")

    def test_render_failure_closes_writer(self) -> None:
        writer = RecordingWriter()

        def render(page: Page) -> bytes:
            raise RuntimeError("rasterizer crashed")

        with pytest.raises(RuntimeError):
            export_pages([Page()], render, writer)
        assert writer.closed
        assert not writer.finished

    def test_zip_readable_after_failure(self) -> None:
        pages = [Page(), Page()]
        writer = ZipArchiveWriter()

        def render(page: Page) -> bytes:
            if page is pages[1]:
                raise RuntimeError("rasterizer crashed")
            return b"one"

        with pytest.raises(RuntimeError):
            export_pages(pages, render, writer)

        with zipfile.ZipFile(io.BytesIO(writer.finish())) as zf:
            assert zf.namelist() == ["page-01.svg"]

    def test_zip_writer_context_manager(self) -> None:
        with ZipArchiveWriter() as writer:
            writer.add("page-01.svg", b"<svg/>")
        with zipfile.ZipFile(io.BytesIO(writer.finish())) as zf:
            assert zf.read("page-01.svg") == b"<svg/>"


class TestFilenames:
    """Tests for download names."""

    def test_page_filename_zero_padded(self) -> None:
        assert page_filename(7, "jpg") == "page-07.jpg"
        assert page_filename(12, "svg") == "page-12.svg"

    def test_single_page_filename(self) -> None:
        assert single_page_filename(2, "png", today=date(2024, 3, 9)) == "page-2-2024-03-09.png"

    def test_batch_filename(self) -> None:
        assert batch_filename(5, today=date(2024, 3, 9)) == "pages-5-2024-03-09.zip"
