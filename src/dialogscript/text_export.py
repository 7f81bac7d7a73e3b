"""Plain-text export."""

from __future__ import annotations

from collections.abc import Sequence

from .models import ScreenplayElement, Speaker
from .script_blocks import BlockKind, build_blocks


def export_text(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
) -> str:
    """Render a script as ``NAME: line`` paragraphs separated by blank lines.

    The name is printed once per run; later lines of the same run stand
    alone. Actions are uppercased, parentheticals wrapped in parentheses.
    """
    parts: list[str] = []
    pending_label: str | None = None

    for block in build_blocks(elements, custom_names):
        match block.kind:
            case BlockKind.CHARACTER:
                pending_label = block.text
                continue
            case BlockKind.DIALOGUE | BlockKind.PARENTHETICAL:
                if pending_label is not None:
                    parts.append(f"{pending_label}: {block.text}\n\n")
                    pending_label = None
                else:
                    parts.append(f"{block.text}\n\n")
            case BlockKind.ACTION:
                parts.append(f"{block.text}\n\n")

    return "".join(parts)
