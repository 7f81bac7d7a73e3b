"""Partition a script into runs of consecutive same-speaker elements."""

from __future__ import annotations

from collections.abc import Sequence

from .models import ElementType, GroupedElement, ScreenplayElement


def group_elements(elements: Sequence[ScreenplayElement]) -> list[GroupedElement]:
    """Group consecutive speaking elements that share a speaker.

    Parentheticals and dialogue from the same speaker merge into one run.
    Actions (and any speaker-less element) become single-element groups.
    A group's anchor id is the id of its first member.
    """
    groups: list[GroupedElement] = []
    i = 0
    while i < len(elements):
        element = elements[i]
        if element.requires_speaker and element.speaker is not None:
            j = i + 1
            while (
                j < len(elements)
                and elements[j].requires_speaker
                and elements[j].speaker is element.speaker
            ):
                j += 1
            groups.append(
                GroupedElement(
                    anchor_id=element.id,
                    speaker=element.speaker,
                    members=tuple(elements[i:j]),
                )
            )
            i = j
        else:
            groups.append(
                GroupedElement(anchor_id=element.id, speaker=None, members=(element,))
            )
            i += 1
    return groups


def flatten_groups(groups: Sequence[GroupedElement]) -> list[ScreenplayElement]:
    return [member for group in groups for member in group.members]


def should_show_speaker_label(index: int, groups: Sequence[GroupedElement]) -> bool:
    """Show a character name unless the previous group has the same speaker."""
    if index == 0:
        return True
    return groups[index].speaker is not groups[index - 1].speaker


def should_show_contd(index: int, groups: Sequence[GroupedElement]) -> bool:
    """Whether the speaker of ``groups[index]`` resumes after an action line.

    Walks back to the nearest group with a speaker. CONT'D applies only if
    that speaker is the same one and at least one action lies in between.
    """
    current = groups[index].speaker
    if current is None:
        return False

    saw_action = False
    for group in reversed(groups[:index]):
        if group.speaker is None:
            if any(m.type is ElementType.ACTION for m in group.members):
                saw_action = True
            continue
        return group.speaker is current and saw_action
    return False
