"""Server-side conversation memory.

Sessions are created lazily from client-generated identifiers and touched on
every persisted message. The context window is the last N messages of a
session, handed to providers oldest-first.
"""
from __future__ import annotations

import logging
from typing import List

from storage.base import ChatStore, MessageRecord


logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_WINDOW = 10


class SessionManager:
    def __init__(self, store: ChatStore) -> None:
        self.store = store

    def ensure_session(self, session_id: str) -> str:
        if self.store.create_session_if_absent(session_id):
            logger.info("Created session %s", session_id)
        return session_id

    def touch_session(self, session_id: str) -> None:
        self.store.touch_session(session_id)


def get_recent_context(
    store: ChatStore, session_id: str, limit: int = DEFAULT_CONTEXT_WINDOW
) -> List[MessageRecord]:
    # Bound against newest-first, then flip for prompt assembly.
    recent = store.list_recent_messages(session_id, limit)
    recent.reverse()
    return recent
