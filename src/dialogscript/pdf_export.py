"""Paginated screenplay layout, rendered to PDF with reportlab.

Layout is computed first as plain data (pages of positioned lines, measured
from the top of the page) so pagination can be inspected without drawing.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import partial

from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.units import inch
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .models import ScreenplayElement, Speaker
from .script_blocks import BlockKind, ScriptBlock, build_blocks, wrap_paragraphs

FONT_SIZE = 12
LEADING = 12

PAGE_SIZES = {
    "letter": letter,
    "a4": A4,
}


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin_top: float = 1 * inch
    margin_bottom: float = 1 * inch
    margin_left: float = 1.5 * inch
    margin_right: float = 1 * inch

    @property
    def text_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def center_x(self) -> float:
        return self.margin_left + self.text_width / 2

    @property
    def bottom_limit(self) -> float:
        return self.height - self.margin_bottom

    @classmethod
    def for_page_size(cls, name: str) -> PageGeometry:
        try:
            width, height = PAGE_SIZES[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown page size: {name!r}") from None
        return cls(width=width, height=height)


@dataclass(frozen=True)
class BlockStyle:
    font: str
    width: float
    centered: bool


_STYLES = {
    BlockKind.CHARACTER: BlockStyle("Courier-Bold", 0, centered=True),
    BlockKind.DIALOGUE: BlockStyle("Courier", 3.5 * inch, centered=True),
    BlockKind.PARENTHETICAL: BlockStyle("Courier-Oblique", 2.5 * inch, centered=True),
    BlockKind.ACTION: BlockStyle("Courier", 0, centered=False),
}


@dataclass(frozen=True)
class PlacedLine:
    text: str
    font: str
    x: float
    # Baseline, measured downward from the top edge of the page
    y: float
    centered: bool = False


@dataclass
class Page:
    number: int
    lines: list[PlacedLine] = field(default_factory=list)


def _style_width(style: BlockStyle, geometry: PageGeometry) -> float:
    return style.width or geometry.text_width


def layout_pages(
    blocks: Sequence[ScriptBlock],
    geometry: PageGeometry,
) -> list[Page]:
    """Place every block line on a page, starting a new page when full."""
    pages = [Page(number=1)]
    cursor = geometry.margin_top

    def new_page() -> None:
        nonlocal cursor
        page = Page(number=len(pages) + 1)
        # Page number at the top right of every page after the first
        page.lines.append(
            PlacedLine(
                text=f"{page.number}.",
                font="Courier",
                x=geometry.width - geometry.margin_right
                - stringWidth(f"{page.number}.", "Courier", FONT_SIZE),
                y=geometry.margin_top / 2 + FONT_SIZE,
            )
        )
        pages.append(page)
        cursor = geometry.margin_top

    for block in blocks:
        style = _STYLES[block.kind]
        measure = partial(stringWidth, fontName=style.font, fontSize=FONT_SIZE)
        lines = wrap_paragraphs(block.text, _style_width(style, geometry), measure)

        spacing = LEADING if block.kind in (BlockKind.CHARACTER, BlockKind.ACTION) else 0
        if cursor == geometry.margin_top:
            spacing = 0
        # A character cue never ends a page on its own
        needed = spacing + LEADING * (2 if block.kind is BlockKind.CHARACTER else 1)
        if cursor + needed > geometry.bottom_limit:
            new_page()
            spacing = 0
        cursor += spacing

        for text in lines:
            if cursor + LEADING > geometry.bottom_limit:
                new_page()
            cursor += LEADING
            if style.centered:
                x = geometry.center_x
            else:
                x = geometry.margin_left
            pages[-1].lines.append(
                PlacedLine(text=text, font=style.font, x=x, y=cursor, centered=style.centered)
            )
    return pages


def render_pdf(pages: Sequence[Page], geometry: PageGeometry, title: str = "") -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(
        buffer,
        pagesize=(geometry.width, geometry.height),
        invariant=1,
    )
    if title:
        pdf.setTitle(title)
    for page in pages:
        for line in page.lines:
            pdf.setFont(line.font, FONT_SIZE)
            y = geometry.height - line.y
            if line.centered:
                pdf.drawCentredString(line.x, y, line.text)
            else:
                pdf.drawString(line.x, y, line.text)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def export_pdf(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
    *,
    title: str = "",
    page_size: str = "letter",
) -> bytes:
    geometry = PageGeometry.for_page_size(page_size)
    blocks = [
        ScriptBlock(kind=b.kind, text=b.text.upper(), speaker=b.speaker, element_id=b.element_id)
        if b.kind is BlockKind.CHARACTER
        else b
        for b in build_blocks(elements, custom_names)
    ]
    return render_pdf(layout_pages(blocks, geometry), geometry, title=title)
