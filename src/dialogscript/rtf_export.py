"""Rich Text Format export in a Courier screenplay layout."""

from __future__ import annotations

from collections.abc import Sequence

from .models import ScreenplayElement, Speaker
from .script_blocks import BlockKind, build_blocks, wrap_paragraphs

DIALOGUE_WRAP = 35
ACTION_WRAP = 60

_HEADER = "{\\rtf1\\ansi\\deff0 {\\fonttbl \\f0 Courier New;} \\f0\\fs24"
_CENTER = "\\qc"
_LEFT = "\\ql"

# Windows-1252 escapes understood by RTF readers; applied in this order
# after backslashes and braces. Other non-ASCII characters become \uN? escapes.
_CHAR_ESCAPES = (
    ("Ä", "\\'c4"),
    ("ä", "\\'e4"),
    ("Ö", "\\'d6"),
    ("ö", "\\'f6"),
    ("Ü", "\\'dc"),
    ("ü", "\\'fc"),
    ("ß", "\\'df"),
    ("é", "\\'e9"),
    ("è", "\\'e8"),
    ("à", "\\'e0"),
    ("á", "\\'e1"),
    ("ñ", "\\'f1"),
    ("ç", "\\'e7"),
)


def escape_rtf(text: str) -> str:
    escaped = text.replace("\\", "\\\\")
    escaped = escaped.replace("{", "\\{").replace("}", "\\}")
    for char, replacement in _CHAR_ESCAPES:
        escaped = escaped.replace(char, replacement)
    return "".join(_unicode_escape(char) if ord(char) > 127 else char for char in escaped)


def _unicode_escape(char: str) -> str:
    """\\uN? control words for one character, as UTF-16 signed code units."""
    data = char.encode("utf-16-le")
    units = (int.from_bytes(data[i:i + 2], "little", signed=True) for i in range(0, len(data), 2))
    return "".join(f"\\u{unit}?" for unit in units)


def _wrapped(text: str, limit: int, alignment: str) -> str:
    lines = wrap_paragraphs(escape_rtf(text), limit)
    return f"\\par{alignment} ".join(lines)


def build_rtf(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
) -> str:
    parts = [_HEADER]
    for block in build_blocks(elements, custom_names):
        match block.kind:
            case BlockKind.CHARACTER:
                name = escape_rtf(block.text.upper())
                parts.append(f"\\par\\par\\qc\\b {name}\\b0\\par")
            case BlockKind.DIALOGUE:
                text = _wrapped(block.text, DIALOGUE_WRAP, _CENTER)
                parts.append(f"\\qc {text}\\par")
            case BlockKind.PARENTHETICAL:
                text = _wrapped(block.text, DIALOGUE_WRAP, _CENTER)
                parts.append(f"\\qc\\i {text}\\i0\\par")
            case BlockKind.ACTION:
                text = _wrapped(block.text, ACTION_WRAP, _LEFT)
                parts.append(f"\\par\\par\\ql {text}\\par")
    parts.append("}")
    return "".join(parts)


def export_rtf(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
) -> bytes:
    """RTF document bytes. Every non-ASCII character is escaped, so the output is 7-bit."""
    return build_rtf(elements, custom_names).encode("ascii")
