from __future__ import annotations

import itertools
import threading
from typing import Dict, List, Optional

from storage.base import ChatStore, MessageRecord, Role, SessionRecord, utc_now


class InMemoryChatStore(ChatStore):
    """Process-local store used by tests and `DATABASE_URL=memory://`."""

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionRecord] = {}
        self._messages: List[MessageRecord] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def initialize(self) -> None:
        return None

    def create_session_if_absent(self, session_id: str) -> bool:
        with self._lock:
            if session_id in self._sessions:
                return False
            now = utc_now()
            self._sessions[session_id] = SessionRecord(id=session_id, created_at=now, updated_at=now)
            return True

    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._sessions.get(session_id)

    def touch_session(self, session_id: str) -> None:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is not None:
                self._sessions[session_id] = current.model_copy(update={"updated_at": utc_now()})

    def insert_message(self, session_id: str, role: Role, content: str) -> MessageRecord:
        with self._lock:
            record = MessageRecord(
                id=next(self._ids),
                session_id=session_id,
                role=Role(role),
                content=content,
                created_at=utc_now(),
            )
            self._messages.append(record)
            return record

    def list_recent_messages(self, session_id: str, limit: int) -> List[MessageRecord]:
        with self._lock:
            owned = [m for m in self._messages if m.session_id == session_id]
        return list(reversed(owned))[:limit]

    def list_all_messages(self, session_id: str) -> List[MessageRecord]:
        with self._lock:
            return [m for m in self._messages if m.session_id == session_id]

    def list_sessions(self) -> List[SessionRecord]:
        with self._lock:
            sessions = list(self._sessions.values())
        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)
