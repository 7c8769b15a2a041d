"""Tests for heading-based pagination."""

import pytest

from mdcanvas.dsl.schema import ElementKind, LayoutConfig
from mdcanvas.engine.layout_engine import centering_offset, plan_layout, total_stack_height
from mdcanvas.engine.paginator import (
    layout_pages,
    page_density,
    paginate,
    split_by_headings,
)


def _doc(*specs: tuple) -> list[dict]:
    """Blocks from (kind, level_or_text) shorthand: ('h', 2) or ('p', 'text')."""
    blocks = []
    for kind, value in specs:
        if kind == "h":
            blocks.append({"type": "heading", "level": value, "text": f"Heading {value}"})
        else:
            blocks.append({"type": "paragraph", "text": value})
    return blocks


class TestSplitByHeadings:
    """Tests for split_by_headings."""

    def test_level_one_keeps_single_group(self, sample_blocks: list[dict]) -> None:
        elements = plan_layout(sample_blocks)
        groups = split_by_headings(elements, 1)
        assert len(groups) == 1
        assert [e.id for e in groups[0]] == [e.id for e in elements]

    def test_level_two_splits_on_h1_and_h2(self, sample_blocks: list[dict]) -> None:
        groups = split_by_headings(plan_layout(sample_blocks), 2)
        assert [len(g) for g in groups] == [2, 2, 2]
        assert all(g[0].kind == ElementKind.HEADING for g in groups)

    def test_content_before_first_heading_gets_own_page(self) -> None:
        elements = plan_layout(_doc(("p", "intro"), ("h", 2), ("p", "body")))
        groups = split_by_headings(elements, 2)
        assert [[e.kind for e in g] for g in groups] == [
            [ElementKind.PARAGRAPH],
            [ElementKind.HEADING, ElementKind.PARAGRAPH],
        ]

    def test_h3_splits_only_at_level_three(self) -> None:
        elements = plan_layout(_doc(("h", 1), ("p", "a"), ("h", 3), ("p", "b")))
        assert len(split_by_headings(elements, 2)) == 1
        assert len(split_by_headings(elements, 3)) == 2

    def test_deeper_headings_never_split(self) -> None:
        elements = plan_layout(_doc(("h", 4), ("p", "a"), ("h", 5), ("p", "b")))
        assert len(split_by_headings(elements, 3)) == 1

    def test_consecutive_headings(self) -> None:
        elements = plan_layout(_doc(("h", 1), ("h", 2), ("p", "x")))
        groups = split_by_headings(elements, 2)
        assert [len(g) for g in groups] == [1, 2]

    @pytest.mark.parametrize("level", [0, 4, -1])
    def test_invalid_level(self, level: int) -> None:
        with pytest.raises(ValueError):
            split_by_headings([], level)


class TestPaginate:
    """Tests for paginate and layout_pages."""

    def test_never_empty(self) -> None:
        pages = paginate([], 2)
        assert len(pages) == 1
        assert pages[0].elements == []

    def test_all_elements_kept_in_order(self, sample_blocks: list[dict]) -> None:
        elements = plan_layout(sample_blocks)
        pages = paginate(elements, 2)
        assert [e.id for p in pages for e in p.elements] == [e.id for e in elements]

    def test_input_not_mutated(self, sample_blocks: list[dict]) -> None:
        elements = plan_layout(sample_blocks)
        before = [(e.x, e.y, e.width, e.height) for e in elements]
        paginate(elements, 2)
        assert [(e.x, e.y, e.width, e.height) for e in elements] == before

    def test_each_page_relaid_out(self, sample_blocks: list[dict], config: LayoutConfig) -> None:
        pages = paginate(plan_layout(sample_blocks, config), 2, config)
        for page in pages:
            spacing = 55  # every sample page is sparse
            assert page_density(page.elements, config) <= 0.7
            expected_top = config.padding + centering_offset(
                total_stack_height(page.elements, config, spacing), config
            )
            assert page.elements[0].y == pytest.approx(expected_top)
            for upper, lower in zip(page.elements, page.elements[1:]):
                assert lower.y - upper.bottom == pytest.approx(spacing)
            assert all(e.x == config.padding for e in page.elements)

    def test_page_density(self, make_element, config: LayoutConfig) -> None:
        elements = [make_element("a", 0, 0, height=300), make_element("b", 0, 0, height=500)]
        assert page_density(elements, config) == pytest.approx((200 + 340 + 540) / 1440)

    def test_dense_page_uses_tight_spacing(self, make_element, config: LayoutConfig) -> None:
        elements = [make_element(str(i), 0, 0, height=200) for i in range(8)]
        page = paginate(elements, 1, config)[0]
        # (200 + 8 * 240) / 1440 > 1.2
        assert page.elements[1].y - page.elements[0].bottom == pytest.approx(25)

    def test_layout_pages(self, sample_blocks: list[dict]) -> None:
        assert len(layout_pages(sample_blocks, 1)) == 1
        assert len(layout_pages(sample_blocks, 2)) == 3

    def test_invalid_level(self, sample_blocks: list[dict]) -> None:
        with pytest.raises(ValueError):
            layout_pages(sample_blocks, 5)
