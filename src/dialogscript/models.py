"""Data models for screenplay dialogue sessions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

DEFAULT_TITLE = "New Dialogue"


class Speaker(Enum):
    A = "A"
    B = "B"

    def display_name(self, custom_names: dict[Speaker, str] | None = None) -> str:
        """Custom name when one is set and non-empty, otherwise the raw value."""
        if custom_names:
            name = custom_names.get(self)
            if name:
                return name
        return self.value

    def toggle(self) -> Speaker:
        members = list(Speaker)
        return members[(members.index(self) + 1) % len(members)]


class ElementType(Enum):
    DIALOGUE = "Dialogue"
    PARENTHETICAL = "Parenthetical"
    ACTION = "Action"
    OFF_SCREEN = "Off Screen"
    VOICE_OVER = "Voice Over"
    TEXT = "Text"

    @property
    def requires_speaker(self) -> bool:
        return self is not ElementType.ACTION

    @property
    def is_dialogue_like(self) -> bool:
        """Dialogue and its delivery variants (O.S., V.O., TEXT)."""
        return self not in (ElementType.PARENTHETICAL, ElementType.ACTION)

    @property
    def character_extension(self) -> str | None:
        return _CHARACTER_EXTENSIONS.get(self)

    @property
    def fdx_type(self) -> str:
        if self.is_dialogue_like:
            return "Dialogue"
        return self.value


_CHARACTER_EXTENSIONS = {
    ElementType.OFF_SCREEN: "(O.S.)",
    ElementType.VOICE_OVER: "(V.O.)",
    ElementType.TEXT: "(TEXT)",
}


def new_id() -> str:
    return str(uuid.uuid4()).upper()


@dataclass(frozen=True)
class ScreenplayElement:
    """One line of a script.

    Parenthetical content is stored without its surrounding parentheses.
    """

    type: ElementType
    content: str
    speaker: Speaker | None = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.type.requires_speaker and self.speaker is None:
            raise ValueError(f"{self.type.value} element requires a speaker")
        if not self.type.requires_speaker and self.speaker is not None:
            raise ValueError(f"{self.type.value} element cannot carry a speaker")

    @property
    def requires_speaker(self) -> bool:
        return self.type.requires_speaker


@dataclass(frozen=True)
class GroupedElement:
    """A run of consecutive elements shown under one speaker (derived, never stored)."""

    anchor_id: str
    speaker: Speaker | None
    members: tuple[ScreenplayElement, ...]


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class Session:
    title: str = DEFAULT_TITLE
    elements: list[ScreenplayElement] = field(default_factory=list)
    custom_speaker_names: dict[Speaker, str] = field(default_factory=dict)
    flagged_element_ids: set[str] = field(default_factory=set)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_utcnow)
    last_modified: datetime = field(default_factory=_utcnow)

    @property
    def element_count(self) -> int:
        return len(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def speaker_name(self, speaker: Speaker) -> str:
        return speaker.display_name(self.custom_speaker_names)

    def is_flagged(self, element_id: str) -> bool:
        return element_id in self.flagged_element_ids

    def index_of(self, element_id: str) -> int | None:
        for i, element in enumerate(self.elements):
            if element.id == element_id:
                return i
        return None

    def has_content_changes(self, other: Session) -> bool:
        """Whether any content-affecting field differs from ``other``.

        Timestamps and element ids are not content.
        """
        if self.title != other.title:
            return True
        if len(self.elements) != len(other.elements):
            return True
        for mine, theirs in zip(self.elements, other.elements):
            if (mine.type, mine.content, mine.speaker) != (
                theirs.type, theirs.content, theirs.speaker,
            ):
                return True
        if _effective_names(self.custom_speaker_names) != _effective_names(
            other.custom_speaker_names
        ):
            return True
        return self.flagged_element_ids != other.flagged_element_ids

    @staticmethod
    def generate_title(elements: list[ScreenplayElement]) -> str:
        """First three words of the opening element, with '...' when truncated."""
        if not elements:
            return DEFAULT_TITLE
        words = elements[0].content.split()
        if not words:
            return DEFAULT_TITLE
        title = " ".join(words[:3])
        return title + "..." if len(words) > 3 else title


def _effective_names(names: dict[Speaker, str]) -> dict[Speaker, str]:
    # An empty override behaves exactly like no override
    return {speaker: name for speaker, name in names.items() if name}
