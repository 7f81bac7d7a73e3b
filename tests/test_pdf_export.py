"""Tests for dialogscript.pdf_export — page layout and rendering."""

from __future__ import annotations

import pytest
from reportlab.lib.pagesizes import A4, letter

from dialogscript.models import Speaker
from dialogscript.pdf_export import (
    LEADING,
    PageGeometry,
    export_pdf,
    layout_pages,
)
from dialogscript.script_blocks import BlockKind, ScriptBlock, build_blocks

from factories import action, dialogue


def _dialogue_block(text: str = "Line") -> ScriptBlock:
    return ScriptBlock(kind=BlockKind.DIALOGUE, text=text, speaker=Speaker.A)


def _cue_block(name: str = "A") -> ScriptBlock:
    return ScriptBlock(kind=BlockKind.CHARACTER, text=name, speaker=Speaker.A)


@pytest.fixture
def geometry() -> PageGeometry:
    return PageGeometry.for_page_size("letter")


class TestPageGeometry:
    def test_letter(self, geometry):
        assert (geometry.width, geometry.height) == letter
        assert geometry.margin_left == 108
        assert geometry.text_width == 612 - 108 - 72
        assert geometry.center_x == 324
        assert geometry.bottom_limit == 792 - 72

    def test_a4_case_insensitive(self):
        assert (PageGeometry.for_page_size("A4").width, PageGeometry.for_page_size("a4").height) == A4

    def test_unknown_size(self):
        with pytest.raises(ValueError, match="Unknown page size"):
            PageGeometry.for_page_size("legal")


class TestLayoutPages:
    def test_single_page(self, geometry):
        pages = layout_pages([_cue_block(), _dialogue_block("Hello")], geometry)
        assert len(pages) == 1
        cue, line = pages[0].lines
        assert cue.font == "Courier-Bold"
        assert cue.y == geometry.margin_top + LEADING
        assert line.y == cue.y + LEADING
        assert line.centered and line.x == geometry.center_x

    def test_action_left_aligned_with_spacing(self, geometry):
        pages = layout_pages(
            [_dialogue_block(), ScriptBlock(kind=BlockKind.ACTION, text="RAIN")],
            geometry,
        )
        first, second = pages[0].lines
        assert second.x == geometry.margin_left
        assert not second.centered
        assert second.y == first.y + 2 * LEADING

    def test_overflow_starts_numbered_page(self, geometry):
        pages = layout_pages([_dialogue_block() for _ in range(60)], geometry)
        assert len(pages) == 2
        # 54 lines of 12pt fit between the 1in margins of a letter page
        assert len(pages[0].lines) == 54
        number = pages[1].lines[0]
        assert number.text == "2."
        assert number.y < geometry.margin_top
        assert len(pages[1].lines) == 1 + 6

    def test_first_page_unnumbered(self, geometry):
        pages = layout_pages([_dialogue_block()], geometry)
        assert all(line.text != "1." for line in pages[0].lines)

    def test_lines_stay_inside_margins(self, geometry):
        blocks = []
        for i in range(40):
            blocks += [_cue_block(), _dialogue_block("word " * (i % 12 + 1))]
        for page in layout_pages(blocks, geometry):
            for line in page.lines:
                assert line.y <= geometry.bottom_limit

    @pytest.mark.parametrize("prefill", range(12))
    def test_cue_never_ends_a_page(self, geometry, prefill):
        blocks = [_dialogue_block() for _ in range(prefill)]
        for _ in range(30):
            blocks += [_cue_block(), _dialogue_block()]
        pages = layout_pages(blocks, geometry)
        assert len(pages) > 1
        for page in pages:
            assert page.lines[-1].font != "Courier-Bold"

    def test_long_dialogue_wraps(self, geometry):
        pages = layout_pages([_dialogue_block("word " * 40)], geometry)
        assert len(pages[0].lines) > 1


class TestExportPdf:
    def test_returns_pdf_bytes(self, sample_elements):
        data = export_pdf(sample_elements, {Speaker.A: "Anna"}, title="Coffee Shop")
        assert data.startswith(b"%PDF")

    def test_deterministic(self, sample_elements):
        assert export_pdf(sample_elements) == export_pdf(sample_elements)

    def test_page_size_changes_output(self, sample_elements):
        assert export_pdf(sample_elements, page_size="a4") != export_pdf(sample_elements)

    def test_long_script_has_several_pages(self, geometry):
        elements = []
        for i in range(60):
            elements.append(dialogue(Speaker.A if i % 2 else Speaker.B, f"Line {i}"))
            elements.append(action("Something happens"))
        assert len(layout_pages(build_blocks(elements), geometry)) > 1
        assert export_pdf(elements).startswith(b"%PDF")

    def test_unknown_page_size(self, sample_elements):
        with pytest.raises(ValueError):
            export_pdf(sample_elements, page_size="tabloid")
