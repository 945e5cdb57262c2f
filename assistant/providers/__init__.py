from __future__ import annotations

from typing import Sequence

from assistant.core.docs import DocEntry
from assistant.errors import ConfigurationError
from assistant.providers.base import GenerationProvider, GenerationResult, ProviderKind
from assistant.providers.gemini import GeminiProvider
from assistant.providers.mock import MockProvider
from assistant.providers.openai import OpenAIProvider
from config.settings import Settings


def resolve_provider_kind(value: str) -> ProviderKind:
    try:
        return ProviderKind((value or "").strip().lower())
    except ValueError:
        options = ", ".join(f'"{kind.value}"' for kind in ProviderKind)
        raise ConfigurationError(f"Invalid LLM_PROVIDER {value!r}. Use {options}") from None


def build_provider(settings: Settings, docs: Sequence[DocEntry]) -> GenerationProvider:
    kind = resolve_provider_kind(settings.llm_provider)
    if kind is ProviderKind.GEMINI:
        return GeminiProvider(settings)
    if kind is ProviderKind.OPENAI:
        return OpenAIProvider(settings)
    return MockProvider(docs)


__all__ = [
    "GeminiProvider",
    "GenerationProvider",
    "GenerationResult",
    "MockProvider",
    "OpenAIProvider",
    "ProviderKind",
    "build_provider",
    "resolve_provider_kind",
]
