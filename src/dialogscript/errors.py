"""Exception types raised across module boundaries."""

from __future__ import annotations


class DialogScriptError(Exception):
    """Base class for dialogscript errors."""


class SessionDecodeError(DialogScriptError, ValueError):
    """A persisted session record is corrupt or cannot be migrated."""


class SessionNotFoundError(DialogScriptError, LookupError):
    """No session exists under the requested id or path."""
