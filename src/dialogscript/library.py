"""JSON-file-backed collection of saved sessions."""

from __future__ import annotations

import copy
import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from .codec import session_from_dict, session_to_dict
from .errors import SessionDecodeError, SessionNotFoundError
from .history import DeleteSession, RenameSession, UndoHistory
from .models import Session

log = logging.getLogger(__name__)

_DEFAULT_LIBRARY_DIR = Path.home() / ".local" / "share" / "dialogscript"
_DEFAULT_LIBRARY_PATH = _DEFAULT_LIBRARY_DIR / "sessions.json"


class SortOption(Enum):
    ALPHABETICAL = "alphabetical"
    DATE_EDITED = "date_edited"
    DATE_ADDED = "date_added"


class SessionLibrary:
    """Persistent list of sessions, kept sorted by the chosen option."""

    def __init__(
        self,
        library_path: Path | None = None,
        *,
        sort_option: SortOption = SortOption.ALPHABETICAL,
        history: UndoHistory | None = None,
    ):
        self.path = library_path or _DEFAULT_LIBRARY_PATH
        self.sort_option = sort_option
        self.history = history if history is not None else UndoHistory()
        self.sessions: list[Session] = []
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            log.warning("Failed to load session library, starting fresh")
            return
        if not isinstance(raw, list):
            log.warning("Session library is not a list, starting fresh")
            return

        for record in raw:
            try:
                self.sessions.append(session_from_dict(record))
            except SessionDecodeError:
                log.warning("Skipping unreadable session record", exc_info=True)
        self._sort()
        log.debug("Loaded %d sessions from %s", len(self.sessions), self.path)

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps([session_to_dict(s) for s in self.sessions], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def _sort(self) -> None:
        match self.sort_option:
            case SortOption.DATE_ADDED:
                self.sessions.sort(key=lambda s: s.created_at, reverse=True)
            case SortOption.DATE_EDITED:
                self.sessions.sort(key=lambda s: s.last_modified, reverse=True)
            case SortOption.ALPHABETICAL:
                self.sessions.sort(key=lambda s: s.title.casefold())

    def set_sort_option(self, option: SortOption) -> None:
        self.sort_option = option
        self._sort()

    def get(self, session_id: str) -> Session:
        """A working copy of a stored session; pass it back to ``update`` to save."""
        return copy.deepcopy(self.sessions[self._index(session_id)])

    def _index(self, session_id: str) -> int:
        for i, session in enumerate(self.sessions):
            if session.id == session_id:
                return i
        raise SessionNotFoundError(f"No session with id {session_id}")

    def add(self, session: Session) -> None:
        self.sessions.append(session)
        self._sort()
        self._save()

    def update(self, session: Session) -> bool:
        """Store a new version of a session. Returns whether its content changed.

        ``last_modified`` only moves when the content differs from the stored copy.
        """
        index = self._index(session.id)
        stored = self.sessions[index]
        changed = session.has_content_changes(stored)
        if changed:
            session.last_modified = datetime.now(tz=timezone.utc)
        else:
            session.last_modified = stored.last_modified
        self.sessions[index] = session
        self._sort()
        self._save()
        return changed

    def rename(self, session_id: str, title: str) -> None:
        session = self.sessions[self._index(session_id)]
        self.history.record(RenameSession(session_id, session.title, title))
        self._set_title(session, title)

    def delete(self, session_id: str) -> Session:
        index = self._index(session_id)
        session = self.sessions.pop(index)
        self.history.record(DeleteSession(session, index))
        self._save()
        log.info("Deleted session %s (%s)", session.id, session.title)
        return session

    def undo(self) -> None:
        match self.history.take_undo():
            case DeleteSession(session=session, index=index):
                if 0 <= index <= len(self.sessions):
                    self.sessions.insert(index, session)
                else:
                    self.sessions.append(session)
                self._sort()
                self._save()
            case RenameSession(session_id=session_id, old_title=old_title):
                self._set_title(self.sessions[self._index(session_id)], old_title)
            case None:
                pass
            case action:
                log.warning("Cannot undo %s from the session library", type(action).__name__)

    def redo(self) -> None:
        match self.history.take_redo():
            case DeleteSession(session=session):
                self.sessions = [s for s in self.sessions if s.id != session.id]
                self._save()
            case RenameSession(session_id=session_id, new_title=new_title):
                self._set_title(self.sessions[self._index(session_id)], new_title)
            case None:
                pass
            case action:
                log.warning("Cannot redo %s from the session library", type(action).__name__)

    def _set_title(self, session: Session, title: str) -> None:
        session.title = title
        session.last_modified = datetime.now(tz=timezone.utc)
        self._sort()
        self._save()
