"""Per-message chat flow.

Order matters: the user message is persisted before the context window is
read, so providers see the triggering message as the newest context entry,
and the session is touched once per message written.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from assistant.core.docs import DocEntry, build_reference_text
from assistant.core.memory import SessionManager, get_recent_context
from assistant.errors import ChatValidationError, ProviderError
from assistant.providers import GenerationProvider, GenerationResult, build_provider
from config.settings import Settings
from storage.base import ChatStore, Role


logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings, Sequence[DocEntry]], GenerationProvider]


class ChatOrchestrator:
    def __init__(
        self,
        settings: Settings,
        store: ChatStore,
        docs: Sequence[DocEntry],
        provider_factory: Optional[ProviderFactory] = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.docs = tuple(docs)
        self.sessions = SessionManager(store)
        self.provider_factory = provider_factory or build_provider
        self.reference_text = build_reference_text(self.docs)

    def handle_chat_message(self, session_id: Optional[str], user_message: Optional[str]) -> GenerationResult:
        if not session_id or not user_message:
            raise ChatValidationError("sessionId and message are required")

        self.sessions.ensure_session(session_id)
        self._save_message(session_id, Role.USER, user_message)

        context = get_recent_context(self.store, session_id, self.settings.context_window)

        provider = self.provider_factory(self.settings, self.docs)
        logger.info(
            "Dispatching session=%s provider=%s context_messages=%s",
            session_id,
            provider.kind.value,
            len(context),
        )
        try:
            result = provider.generate(user_message, context, self.reference_text)
        except ProviderError:
            logger.warning("No assistant reply stored for session=%s; user turn left unanswered", session_id)
            raise

        self._save_message(session_id, Role.ASSISTANT, result.reply)
        logger.info("Reply stored for session=%s tokens_used=%s", session_id, result.tokens_used)
        return result

    def _save_message(self, session_id: str, role: Role, content: str) -> None:
        self.store.insert_message(session_id, role, content)
        self.sessions.touch_session(session_id)
