"""Single-slot undo/redo.

Only the most recent action can be undone. Recording a new action discards
any pending redo. Undoing moves the action to the redo slot and redoing
moves it back.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import ScreenplayElement, Session, Speaker


@dataclass(frozen=True)
class AddElement:
    element: ScreenplayElement
    index: int | None = None


@dataclass(frozen=True)
class DeleteElement:
    element: ScreenplayElement
    index: int
    was_flagged: bool = False


@dataclass(frozen=True)
class EditElement:
    old: ScreenplayElement
    new: ScreenplayElement


@dataclass(frozen=True)
class ToggleFlag:
    element_id: str
    was_add: bool


@dataclass(frozen=True)
class RenameSpeaker:
    speaker: Speaker
    old_name: str | None
    new_name: str | None


@dataclass(frozen=True)
class RenameTitle:
    old_title: str
    new_title: str


@dataclass(frozen=True)
class DeleteSession:
    session: Session
    index: int


@dataclass(frozen=True)
class RenameSession:
    session_id: str
    old_title: str
    new_title: str


UndoAction = (
    AddElement
    | DeleteElement
    | EditElement
    | ToggleFlag
    | RenameSpeaker
    | RenameTitle
    | DeleteSession
    | RenameSession
)


def describe(action: UndoAction) -> str:
    match action:
        case AddElement():
            return "Add Element"
        case DeleteElement():
            return "Delete Element"
        case EditElement():
            return "Edit Element"
        case ToggleFlag(was_add=was_add):
            return "Flag Element" if was_add else "Unflag Element"
        case RenameSpeaker():
            return "Rename Speaker"
        case RenameTitle():
            return "Rename Dialogue"
        case DeleteSession():
            return "Delete Dialogue"
        case RenameSession():
            return "Rename Dialogue"
    raise TypeError(f"Unknown undo action: {action!r}")


class UndoHistory:
    """Holds at most one undoable and one redoable action."""

    def __init__(self) -> None:
        self._undo: UndoAction | None = None
        self._redo: UndoAction | None = None

    @property
    def can_undo(self) -> bool:
        return self._undo is not None

    @property
    def can_redo(self) -> bool:
        return self._redo is not None

    @property
    def description(self) -> str:
        """Label for the undo/redo prompt; 'Redo' while a redo is pending."""
        if self._redo is not None:
            return "Redo"
        if self._undo is not None:
            return describe(self._undo)
        return ""

    def record(self, action: UndoAction) -> None:
        self._undo = action
        self._redo = None

    def take_undo(self) -> UndoAction | None:
        action = self._undo
        if action is not None:
            self._redo = action
            self._undo = None
        return action

    def take_redo(self) -> UndoAction | None:
        action = self._redo
        if action is not None:
            self._undo = action
            self._redo = None
        return action

    def clear(self) -> None:
        self._undo = None
        self._redo = None
