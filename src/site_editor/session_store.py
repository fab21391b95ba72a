from __future__ import annotations

import threading
import uuid
from datetime import datetime
from typing import Dict

from .session import EditingSession


class SessionStore:
    """In-memory registry of editing sessions keyed by session id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, EditingSession] = {}
        self._lock = threading.Lock()

    def create_session(self, *, label: str | None = None) -> EditingSession:
        with self._lock:
            session = EditingSession(session_id=self._generate_id(label))
            self._sessions[session.session_id] = session
            return session

    def get_session(self, session_id: str) -> EditingSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def drop_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def _generate_id(self, label: str | None) -> str:
        suffix = uuid.uuid4().hex[:8]
        if label:
            safe = "".join(char if char.isalnum() else "-" for char in label.lower()).strip("-")
            return f"site_{safe}_{suffix}"
        ts = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        return f"site_{ts}_{suffix}"


__all__ = ["SessionStore"]
