"""Offline keyword-matching provider.

Needs no API key and never fails, so it is the default provider for local
development and tests.
"""
from __future__ import annotations

from typing import Sequence

from assistant.core.docs import DocEntry
from assistant.providers.base import GenerationProvider, GenerationResult, ProviderKind
from storage.base import MessageRecord


GREETINGS = ("hi", "hello", "hey", "good morning", "good afternoon", "good evening")

GREETING_REPLY = (
    "Hello! I'm your support assistant. I can help you with questions about "
    "password reset and refund policy. How can I assist you today?"
)
THANKS_REPLY = "You're welcome! Is there anything else I can help you with?"

# (keyword in message, substring of title)
TOPIC_RULES = (
    ("refund", "Refund"),
    ("password", "Password"),
)


class MockProvider(GenerationProvider):
    kind = ProviderKind.MOCK

    def __init__(self, docs: Sequence[DocEntry]) -> None:
        self.docs = tuple(docs)

    def generate(
        self,
        user_message: str,
        context: Sequence[MessageRecord],
        reference_text: str,
    ) -> GenerationResult:
        lower_message = user_message.lower()

        if any(greeting in lower_message for greeting in GREETINGS):
            return GenerationResult(GREETING_REPLY, 0)

        if "thank" in lower_message:
            return GenerationResult(THANKS_REPLY, 0)

        for doc in self.docs:
            if self._matches(lower_message, doc):
                return GenerationResult(doc.content, 0)

        return GenerationResult(self.fallback_reply(), 0)

    @staticmethod
    def _matches(lower_message: str, doc: DocEntry) -> bool:
        keywords = doc.title.lower().split()
        if any(keyword in lower_message for keyword in keywords):
            return True
        return any(
            keyword in lower_message and title_part in doc.title
            for keyword, title_part in TOPIC_RULES
        )

    def fallback_reply(self) -> str:
        topics = " and ".join(doc.title.lower() for doc in self.docs)
        return f"Sorry, I don't have information about that. I can help you with: {topics}."
