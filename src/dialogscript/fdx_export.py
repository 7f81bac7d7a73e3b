"""Final Draft (.fdx) XML export."""

from __future__ import annotations

from collections.abc import Sequence
from xml.sax.saxutils import escape

from .models import ScreenplayElement, Speaker
from .script_blocks import BlockKind, build_blocks

_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<FinalDraft DocumentType="Script" Template="No" Version="1">\n'
    "<Content>\n"
)
_FOOTER = "</Content>\n</FinalDraft>\n"

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Entity-escape & < > " and '."""
    return escape(text, _QUOTE_ENTITIES)


def _paragraph(paragraph_type: str, text: str) -> str:
    return (
        f'<Paragraph Type="{paragraph_type}">\n'
        f"<Text>{escape_xml(text)}</Text>\n"
        "</Paragraph>\n"
    )


def export_fdx(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
) -> str:
    parts = [_HEADER]
    for block in build_blocks(elements, custom_names):
        text = block.text.upper() if block.kind is BlockKind.CHARACTER else block.text
        parts.append(_paragraph(block.kind.value, text))
    parts.append(_FOOTER)
    return "".join(parts)
