"""Element sequencing: transition rules applied when a script grows or changes.

Every function here is pure. Element lists are never mutated in place; the
updated list is returned to the caller, which owns the session.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .models import ElementType, ScreenplayElement, Speaker


@dataclass(frozen=True)
class AppendResult:
    element: ScreenplayElement
    elements: list[ScreenplayElement]
    next_type: ElementType
    next_speaker: Speaker
    # True when the parenthetical rule overrode the requested type or speaker
    corrected: bool = False


def shape_content(content: str, element_type: ElementType) -> str:
    """Trim and normalize submitted text for the given element type."""
    text = content.strip()
    if element_type is ElementType.PARENTHETICAL:
        if len(text) > 2 and text.startswith("(") and text.endswith(")"):
            text = text[1:-1]
        return text
    if text and text[0].islower():
        text = text[0].upper() + text[1:]
    return text


def append_element(
    content: str,
    requested_type: ElementType,
    requested_speaker: Speaker,
    elements: list[ScreenplayElement],
    insert_at: int | None = None,
) -> AppendResult | None:
    """Add a new element and work out the defaults for the next input.

    Returns None (and changes nothing) when ``content`` is blank.
    ``insert_at`` places the element before the given index instead of at
    the end; the transition rules then look at the element preceding that
    position.
    """
    if not content.strip():
        return None

    position = len(elements) if insert_at is None else max(0, min(insert_at, len(elements)))
    previous = elements[position - 1] if position > 0 else None

    element_type = requested_type
    speaker = requested_speaker
    corrected = False
    if previous is not None and previous.type is ElementType.PARENTHETICAL:
        if element_type is not ElementType.DIALOGUE:
            element_type = ElementType.DIALOGUE
            corrected = True
        if previous.speaker is not None and speaker is not previous.speaker:
            speaker = previous.speaker
            corrected = True

    text = shape_content(content, element_type)
    element = ScreenplayElement(
        type=element_type,
        content=text,
        speaker=speaker if element_type.requires_speaker else None,
    )
    updated = list(elements)
    updated.insert(position, element)

    next_type, next_speaker = _next_defaults(element_type, speaker, previous)
    return AppendResult(
        element=element,
        elements=updated,
        next_type=next_type,
        next_speaker=next_speaker,
        corrected=corrected,
    )


def _next_defaults(
    element_type: ElementType,
    speaker: Speaker,
    previous: ScreenplayElement | None,
) -> tuple[ElementType, Speaker]:
    match element_type:
        case ElementType.PARENTHETICAL:
            return ElementType.DIALOGUE, speaker
        case ElementType.DIALOGUE:
            if (
                previous is not None
                and previous.type is ElementType.PARENTHETICAL
                and previous.speaker is speaker
            ):
                return ElementType.DIALOGUE, speaker
            return ElementType.DIALOGUE, speaker.toggle()
        case _:
            # action and the dialogue variants
            return ElementType.DIALOGUE, speaker.toggle()


def next_speaker_from_history(elements: list[ScreenplayElement]) -> Speaker:
    """Whose turn it is, recomputed from the script alone.

    The opposite of the most recent speaking, non-parenthetical element;
    the first speaker when nobody has spoken yet.
    """
    for element in reversed(elements):
        if (
            element.type.requires_speaker
            and element.type is not ElementType.PARENTHETICAL
            and element.speaker is not None
        ):
            return element.speaker.toggle()
    return next(iter(Speaker))


def edit_element(
    element_id: str,
    new_content: str,
    new_speaker: Speaker | None,
    new_type: ElementType,
    elements: list[ScreenplayElement],
) -> list[ScreenplayElement]:
    """Replace one element in place, keeping its id and position.

    Neighbouring elements are not re-validated. Unknown ids and blank
    content leave the list unchanged.
    """
    text = shape_content(new_content, new_type)
    if not text:
        return list(elements)

    updated = list(elements)
    for i, element in enumerate(updated):
        if element.id != element_id:
            continue
        speaker = new_speaker if new_type.requires_speaker else None
        if new_type.requires_speaker and speaker is None:
            speaker = element.speaker or next(iter(Speaker))
        updated[i] = replace(element, type=new_type, content=text, speaker=speaker)
        break
    return updated


def delete_element(
    element_id: str,
    elements: list[ScreenplayElement],
    flagged_ids: set[str],
) -> tuple[list[ScreenplayElement], set[str]]:
    """Remove an element and any flag it carried."""
    remaining = [element for element in elements if element.id != element_id]
    return remaining, flagged_ids - {element_id}
