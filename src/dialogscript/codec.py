"""Encode and decode persisted session records.

Records are JSON objects. Older records stored a flat ``textlines`` list of
speaker/text pairs instead of ``elements``; those are migrated to dialogue
elements when loaded.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .errors import SessionDecodeError, SessionNotFoundError
from .models import DEFAULT_TITLE, ElementType, ScreenplayElement, Session, Speaker, new_id

log = logging.getLogger(__name__)


def session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "id": session.id,
        "createdAt": session.created_at.isoformat(),
        "lastModified": session.last_modified.isoformat(),
        "title": session.title,
        "elements": [element_to_dict(e) for e in session.elements],
        "customSpeakerNames": {
            speaker.value: name for speaker, name in session.custom_speaker_names.items()
        },
        "flaggedElementIds": sorted(session.flagged_element_ids),
    }


def element_to_dict(element: ScreenplayElement) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": element.id,
        "type": element.type.value,
        "content": element.content,
    }
    if element.speaker is not None:
        data["speaker"] = element.speaker.value
    return data


def session_from_dict(data: Any) -> Session:
    """Build a Session from a decoded record, migrating legacy layouts."""
    if not isinstance(data, dict):
        raise SessionDecodeError(f"Session record must be an object, got {type(data).__name__}")

    try:
        if "elements" in data:
            elements = [_parse_element(e) for e in data.get("elements") or []]
        else:
            elements = _migrate_textlines(data.get("textlines") or [])

        flagged = data.get("flaggedElementIds")
        if flagged is None:
            flagged = data.get("flaggedTextIds", [])

        now = datetime.now(tz=timezone.utc)
        return Session(
            id=str(data.get("id") or new_id()),
            created_at=_parse_timestamp(data.get("createdAt"), now),
            last_modified=_parse_timestamp(data.get("lastModified"), now),
            title=str(data.get("title") or DEFAULT_TITLE),
            elements=elements,
            custom_speaker_names=_parse_custom_names(data.get("customSpeakerNames")),
            flagged_element_ids={str(i) for i in flagged},
        )
    except SessionDecodeError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise SessionDecodeError(f"Invalid session record: {e}") from e


def _parse_element(raw: Any) -> ScreenplayElement:
    if not isinstance(raw, dict):
        raise SessionDecodeError("Element must be an object")
    element_type = ElementType(raw["type"])
    speaker_raw = raw.get("speaker")
    speaker = Speaker(speaker_raw) if speaker_raw is not None else None
    if not element_type.requires_speaker:
        speaker = None
    return ScreenplayElement(
        id=str(raw.get("id") or new_id()),
        type=element_type,
        content=str(raw.get("content", "")),
        speaker=speaker,
    )


def _migrate_textlines(textlines: list[Any]) -> list[ScreenplayElement]:
    elements: list[ScreenplayElement] = []
    for line in textlines:
        if not isinstance(line, dict):
            raise SessionDecodeError("Legacy text line must be an object")
        elements.append(
            ScreenplayElement(
                id=str(line.get("id") or new_id()),
                type=ElementType.DIALOGUE,
                content=str(line["text"]),
                speaker=Speaker(line["speaker"]),
            )
        )
    if elements:
        log.debug("Migrated %d legacy text lines to dialogue elements", len(elements))
    return elements


def _parse_custom_names(raw: Any) -> dict[Speaker, str]:
    """Accept ``{"A": "Anna"}`` or the legacy flat ``["A", "Anna", ...]`` form."""
    if not raw:
        return {}
    if isinstance(raw, list):
        if len(raw) % 2:
            raise SessionDecodeError("Custom speaker names list must have key/value pairs")
        pairs = zip(raw[::2], raw[1::2])
    elif isinstance(raw, dict):
        pairs = raw.items()
    else:
        raise SessionDecodeError("Custom speaker names must be an object or list")

    names: dict[Speaker, str] = {}
    for key, name in pairs:
        try:
            speaker = Speaker(key)
        except ValueError:
            log.warning("Ignoring custom name for unknown speaker %r", key)
            continue
        if name:
            names[speaker] = str(name)
    return names


def _parse_timestamp(value: str | int | float | None, default: datetime) -> datetime:
    """Parse an ISO string or epoch number (seconds or millis) into a datetime."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        if value > 1e12:
            value = value / 1000
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return _parse_timestamp(float(value), default)
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise SessionDecodeError(f"Unreadable timestamp: {value!r}") from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise SessionDecodeError(f"Unreadable timestamp: {value!r}")


def dumps_session(session: Session) -> str:
    return json.dumps(session_to_dict(session), indent=2, ensure_ascii=False)


def loads_session(text: str) -> Session:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SessionDecodeError(f"Session is not valid JSON: {e}") from e
    return session_from_dict(data)


def read_session(path: Path) -> Session:
    """Load a session file. Missing files and corrupt files fail differently."""
    path = Path(path).expanduser()
    if not path.exists():
        raise SessionNotFoundError(f"Session file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SessionDecodeError(f"Session file is not UTF-8: {path}") from e
    session = loads_session(text)
    log.debug("Loaded session %s (%d elements) from %s", session.id, session.element_count, path)
    return session


def write_session(session: Session, path: Path) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_session(session) + "\n", encoding="utf-8")
    log.info("Saved session %s to %s", session.id, path)
    return path
