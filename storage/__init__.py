from storage.base import ChatStore, MessageRecord, Role, SessionRecord
from storage.memory import InMemoryChatStore
from storage.sql import SQLChatStore


def build_store(database_url: str) -> ChatStore:
    if database_url.startswith("memory://"):
        return InMemoryChatStore()
    return SQLChatStore(database_url)


__all__ = [
    "ChatStore",
    "InMemoryChatStore",
    "MessageRecord",
    "Role",
    "SQLChatStore",
    "SessionRecord",
    "build_store",
]
