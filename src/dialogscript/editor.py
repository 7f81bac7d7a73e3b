"""Editing context for one open session.

``ScriptEditor`` is created by the embedding application for each open
session and passed around explicitly. It owns the "what comes next"
selection and the undo slot; all script rules live in ``sequencer``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .history import (
    AddElement,
    DeleteElement,
    EditElement,
    RenameSpeaker,
    RenameTitle,
    ToggleFlag,
    UndoAction,
    UndoHistory,
)
from .models import DEFAULT_TITLE, ElementType, ScreenplayElement, Session, Speaker
from .sequencer import (
    AppendResult,
    append_element,
    delete_element,
    edit_element,
    next_speaker_from_history,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitOutcome:
    element: ScreenplayElement
    # The parenthetical rule replaced the requested type or speaker
    corrected: bool = False
    edited: bool = False


class ScriptEditor:
    def __init__(self, session: Session, history: UndoHistory | None = None):
        self.session = session
        self.history = history if history is not None else UndoHistory()
        self.next_type = ElementType.DIALOGUE
        self.next_speaker = next_speaker_from_history(session.elements)
        self.editing_id: str | None = None

    # -- selection ---------------------------------------------------------

    def resync(self) -> None:
        """Recompute whose turn it is after a bulk change."""
        self.next_speaker = next_speaker_from_history(self.session.elements)
        self.next_type = ElementType.DIALOGUE

    def begin_edit(self, element_id: str) -> ScreenplayElement | None:
        index = self.session.index_of(element_id)
        if index is None:
            return None
        element = self.session.elements[index]
        self.editing_id = element_id
        self.next_type = element.type
        if element.speaker is not None:
            self.next_speaker = element.speaker
        return element

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.resync()

    # -- mutations ---------------------------------------------------------

    def submit(
        self,
        content: str,
        element_type: ElementType | None = None,
        speaker: Speaker | None = None,
    ) -> SubmitOutcome | None:
        """Append a new element, or apply the pending edit.

        Defaults to the pre-selected type and speaker. Blank content is
        ignored and returns None.
        """
        element_type = element_type or self.next_type
        speaker = speaker or self.next_speaker

        if self.editing_id is not None:
            return self._apply_edit(content, element_type, speaker)

        result = append_element(content, element_type, speaker, self.session.elements)
        if result is None:
            return None
        self._accept(result)
        return SubmitOutcome(element=result.element, corrected=result.corrected)

    def insert_parenthetical_before(self, element_id: str, content: str) -> SubmitOutcome | None:
        """Insert a parenthetical directly above a dialogue line.

        Only plain dialogue targets that are not already preceded by a
        parenthetical are accepted; anything else returns None.
        """
        index = self.session.index_of(element_id)
        if index is None:
            return None
        target = self.session.elements[index]
        if target.type is not ElementType.DIALOGUE:
            return None
        if index > 0 and self.session.elements[index - 1].type is ElementType.PARENTHETICAL:
            return None
        result = append_element(
            content,
            ElementType.PARENTHETICAL,
            target.speaker,
            self.session.elements,
            insert_at=index,
        )
        if result is None:
            return None
        self.session.elements = result.elements
        self.history.record(AddElement(result.element, index))
        return SubmitOutcome(element=result.element, corrected=result.corrected)

    def _accept(self, result: AppendResult) -> None:
        self.session.elements = result.elements
        self.next_type = result.next_type
        self.next_speaker = result.next_speaker
        self.history.record(AddElement(result.element))
        if result.corrected:
            log.debug("Element after parenthetical forced to dialogue by %s", result.element.speaker)

    def _apply_edit(
        self, content: str, element_type: ElementType, speaker: Speaker,
    ) -> SubmitOutcome | None:
        editing_id = self.editing_id
        index = self.session.index_of(editing_id) if editing_id else None
        if index is None:
            self.editing_id = None
            return None
        if not content.strip():
            return None
        old = self.session.elements[index]
        updated = edit_element(old.id, content, speaker, element_type, self.session.elements)
        new = updated[index]
        self.session.elements = updated
        self.history.record(EditElement(old=old, new=new))
        self.editing_id = None
        self.resync()
        return SubmitOutcome(element=new, edited=True)

    def delete(self, element_id: str) -> bool:
        index = self.session.index_of(element_id)
        if index is None:
            return False
        element = self.session.elements[index]
        self.history.record(
            DeleteElement(element, index, was_flagged=self.session.is_flagged(element_id))
        )
        self.session.elements, self.session.flagged_element_ids = delete_element(
            element_id, self.session.elements, self.session.flagged_element_ids,
        )
        if self.editing_id == element_id:
            self.editing_id = None
        self.resync()
        return True

    def toggle_flag(self, element_id: str) -> bool:
        """Flip the flag on an element. Returns whether it is now flagged."""
        was_add = element_id not in self.session.flagged_element_ids
        self.history.record(ToggleFlag(element_id, was_add))
        self._set_flag(element_id, was_add)
        return was_add

    def rename_speaker(self, speaker: Speaker, name: str) -> None:
        trimmed = name.strip()
        old_name = self.session.custom_speaker_names.get(speaker)
        new_name = trimmed or None
        self.history.record(RenameSpeaker(speaker, old_name, new_name))
        self._set_speaker_name(speaker, new_name)

    def rename_title(self, title: str) -> None:
        new_title = title.strip() or DEFAULT_TITLE
        self.history.record(RenameTitle(self.session.title, new_title))
        self.session.title = new_title

    # -- undo / redo -------------------------------------------------------

    def undo(self) -> UndoAction | None:
        action = self.history.take_undo()
        if action is not None:
            self._revert(action)
            self.resync()
        return action

    def redo(self) -> UndoAction | None:
        action = self.history.take_redo()
        if action is not None:
            self._reapply(action)
            self.resync()
        return action

    def _revert(self, action: UndoAction) -> None:
        session = self.session
        match action:
            case AddElement(element=element):
                session.elements, session.flagged_element_ids = delete_element(
                    element.id, session.elements, session.flagged_element_ids,
                )
            case DeleteElement(element=element, index=index, was_flagged=was_flagged):
                elements = list(session.elements)
                if 0 <= index <= len(elements):
                    elements.insert(index, element)
                else:
                    elements.append(element)
                session.elements = elements
                if was_flagged:
                    session.flagged_element_ids.add(element.id)
            case EditElement(old=old):
                self._replace(old)
            case ToggleFlag(element_id=element_id, was_add=was_add):
                self._set_flag(element_id, not was_add)
            case RenameSpeaker(speaker=speaker, old_name=old_name):
                self._set_speaker_name(speaker, old_name)
            case RenameTitle(old_title=old_title):
                session.title = old_title
            case _:
                log.warning("Cannot undo %s from a script editor", type(action).__name__)

    def _reapply(self, action: UndoAction) -> None:
        session = self.session
        match action:
            case AddElement(element=element, index=index):
                if session.index_of(element.id) is None:
                    elements = list(session.elements)
                    if index is not None and 0 <= index <= len(elements):
                        elements.insert(index, element)
                    else:
                        elements.append(element)
                    session.elements = elements
            case DeleteElement(element=element):
                session.elements, session.flagged_element_ids = delete_element(
                    element.id, session.elements, session.flagged_element_ids,
                )
            case EditElement(new=new):
                self._replace(new)
            case ToggleFlag(element_id=element_id, was_add=was_add):
                self._set_flag(element_id, was_add)
            case RenameSpeaker(speaker=speaker, new_name=new_name):
                self._set_speaker_name(speaker, new_name)
            case RenameTitle(new_title=new_title):
                session.title = new_title
            case _:
                log.warning("Cannot redo %s from a script editor", type(action).__name__)

    # -- helpers -----------------------------------------------------------

    def _replace(self, element: ScreenplayElement) -> None:
        index = self.session.index_of(element.id)
        if index is None:
            return
        elements = list(self.session.elements)
        elements[index] = element
        self.session.elements = elements

    def _set_flag(self, element_id: str, flagged: bool) -> None:
        if flagged:
            self.session.flagged_element_ids.add(element_id)
        else:
            self.session.flagged_element_ids.discard(element_id)

    def _set_speaker_name(self, speaker: Speaker, name: str | None) -> None:
        if name:
            self.session.custom_speaker_names[speaker] = name
        else:
            self.session.custom_speaker_names.pop(speaker, None)
