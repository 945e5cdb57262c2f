"""Store contract shared by the SQL and in-memory backends.

Sessions are keyed by a client-generated identifier. Messages form an
append-only log per session, ordered by the sequence number the store assigns
on insert.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionRecord(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime


class MessageRecord(BaseModel):
    id: int = Field(..., description="Store-assigned, monotonically increasing")
    session_id: str
    role: Role
    content: str
    created_at: datetime


class ChatStore(ABC):
    @abstractmethod
    def initialize(self) -> None:
        """Prepare the backing storage (create tables, etc)."""

    def close(self) -> None:
        """Release connections held by the store."""
        return None

    @abstractmethod
    def create_session_if_absent(self, session_id: str) -> bool:
        """Insert the session row unless it exists. Returns True when created."""

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    def touch_session(self, session_id: str) -> None:
        ...

    @abstractmethod
    def insert_message(self, session_id: str, role: Role, content: str) -> MessageRecord:
        ...

    @abstractmethod
    def list_recent_messages(self, session_id: str, limit: int) -> List[MessageRecord]:
        """Newest first."""

    @abstractmethod
    def list_all_messages(self, session_id: str) -> List[MessageRecord]:
        """Oldest first."""

    @abstractmethod
    def list_sessions(self) -> List[SessionRecord]:
        """Most recently updated first."""
