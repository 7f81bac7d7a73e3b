"""Shared walk over a script, producing the blocks every export format renders.

Character cues are decided here once, so all formats agree on when a name
is printed and when it carries (CONT'D) or a delivery extension.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from .grouping import group_elements, should_show_contd, should_show_speaker_label
from .models import ElementType, GroupedElement, ScreenplayElement, Speaker

CONTD = "(CONT'D)"


class BlockKind(Enum):
    CHARACTER = "Character"
    DIALOGUE = "Dialogue"
    PARENTHETICAL = "Parenthetical"
    ACTION = "Action"


@dataclass(frozen=True)
class ScriptBlock:
    kind: BlockKind
    text: str
    speaker: Speaker | None = None
    element_id: str | None = None


def character_label(name: str, extension: str | None, contd: bool) -> str:
    """Name followed by (CONT'D), or else the delivery extension if any."""
    if contd:
        return f"{name} {CONTD}"
    if extension:
        return f"{name} {extension}"
    return name


def build_blocks(
    elements: Sequence[ScreenplayElement],
    custom_names: dict[Speaker, str] | None = None,
) -> list[ScriptBlock]:
    groups = group_elements(elements)
    blocks: list[ScriptBlock] = []
    for index, group in enumerate(groups):
        if group.speaker is None:
            for member in group.members:
                blocks.append(
                    ScriptBlock(
                        kind=BlockKind.ACTION,
                        text=member.content.upper(),
                        element_id=member.id,
                    )
                )
            continue
        blocks.extend(_speaker_blocks(index, groups, group.speaker, custom_names))
    return blocks


def _speaker_blocks(
    index: int,
    groups: Sequence[GroupedElement],
    speaker: Speaker,
    custom_names: dict[Speaker, str] | None,
) -> list[ScriptBlock]:
    group = groups[index]
    name = speaker.display_name(custom_names)
    show_label = should_show_speaker_label(index, groups)
    contd = show_label and should_show_contd(index, groups)

    blocks: list[ScriptBlock] = []
    cue_open = False
    cue_extension: str | None = None

    def cue(extension: str | None, with_contd: bool) -> None:
        blocks.append(
            ScriptBlock(
                kind=BlockKind.CHARACTER,
                text=character_label(name, extension, with_contd),
                speaker=speaker,
            )
        )

    for position, member in enumerate(group.members):
        if member.type is ElementType.PARENTHETICAL:
            if not cue_open:
                cue_extension = _upcoming_extension(group.members[position:])
                if show_label:
                    cue(cue_extension, contd)
                cue_open = True
            blocks.append(
                ScriptBlock(
                    kind=BlockKind.PARENTHETICAL,
                    text=f"({member.content})",
                    speaker=speaker,
                    element_id=member.id,
                )
            )
            continue

        extension = member.type.character_extension
        if not cue_open:
            if show_label:
                cue(extension, contd)
            cue_open = True
            cue_extension = extension
        elif extension != cue_extension:
            # Same speaker switching delivery channel mid-run
            cue(extension, False)
            cue_extension = extension
        blocks.append(
            ScriptBlock(
                kind=BlockKind.DIALOGUE,
                text=member.content,
                speaker=speaker,
                element_id=member.id,
            )
        )
    return blocks


def _upcoming_extension(members: Sequence[ScreenplayElement]) -> str | None:
    for member in members:
        if member.type.is_dialogue_like:
            return member.type.character_extension
    return None


_WORD_SEPARATOR_RE = re.compile(r"[ \t]")


def wrap_words(
    text: str,
    limit: float,
    measure: Callable[[str], float] = len,
) -> list[str]:
    """Greedy word wrap of a single paragraph.

    Words are accumulated while ``measure(line + " " + word) <= limit``.
    A word longer than the limit gets a line of its own and is not split.
    """
    lines: list[str] = []
    current = ""
    for word in _WORD_SEPARATOR_RE.split(text):
        candidate = word if not current else f"{current} {word}"
        if measure(candidate) <= limit:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def wrap_paragraphs(
    text: str,
    limit: float,
    measure: Callable[[str], float] = len,
) -> list[str]:
    """Wrap text that may contain hard line breaks."""
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(wrap_words(paragraph, limit, measure) or [""])
    return lines
