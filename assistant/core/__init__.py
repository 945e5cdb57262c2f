from assistant.core.docs import DocEntry, build_reference_text, load_docs
from assistant.core.memory import DEFAULT_CONTEXT_WINDOW, SessionManager, get_recent_context

__all__ = [
    "DEFAULT_CONTEXT_WINDOW",
    "DocEntry",
    "SessionManager",
    "build_reference_text",
    "get_recent_context",
    "load_docs",
]
