from __future__ import annotations


class EditorError(Exception):
    """Base class for site editor errors."""


class InvalidPath(EditorError, ValueError):
    """A dotted path cannot be resolved against the document tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class StructuralViolation(EditorError):
    """An operation would break the header/footer frame of a document."""


class GenerationFailure(EditorError):
    """The content generator failed or returned unusable content."""


class RecordStoreUnavailable(EditorError):
    """The record store backend is not configured or not reachable."""


class SessionNotLoadedError(EditorError, RuntimeError):
    """An editing command was issued before a document was loaded."""


__all__ = [
    "EditorError",
    "InvalidPath",
    "StructuralViolation",
    "GenerationFailure",
    "RecordStoreUnavailable",
    "SessionNotLoadedError",
]
