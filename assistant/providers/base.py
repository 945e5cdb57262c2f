from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple, Sequence

from storage.base import MessageRecord


class ProviderKind(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    MOCK = "mock"


class GenerationResult(NamedTuple):
    reply: str
    tokens_used: int


class GenerationProvider(ABC):
    kind: ProviderKind

    @abstractmethod
    def generate(
        self,
        user_message: str,
        context: Sequence[MessageRecord],
        reference_text: str,
    ) -> GenerationResult:
        """Produce a reply for `user_message` given prior turns and grounding docs."""
