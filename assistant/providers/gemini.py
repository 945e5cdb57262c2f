from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from assistant.core.prompt import build_transcript_prompt
from assistant.errors import ConfigurationError, ProviderError
from assistant.providers.base import GenerationProvider, GenerationResult, ProviderKind
from config.settings import Settings
from storage.base import MessageRecord


logger = logging.getLogger(__name__)


def build_chat_model(settings: Settings) -> ChatGoogleGenerativeAI:
    if not settings.llm_api_key:
        raise ConfigurationError("LLM_API_KEY not set. Please configure it in environment or .env")

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.llm_api_key,
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )


def _message_text(message: BaseMessage) -> str:
    content: Any = message.content
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    raise ProviderError(f"Unexpected Gemini content type: {type(content).__name__}")


class GeminiProvider(GenerationProvider):
    kind = ProviderKind.GEMINI

    def __init__(self, settings: Settings, llm: Optional[BaseChatModel] = None) -> None:
        self.llm = llm if llm is not None else build_chat_model(settings)

    def generate(
        self,
        user_message: str,
        context: Sequence[MessageRecord],
        reference_text: str,
    ) -> GenerationResult:
        prompt = build_transcript_prompt(user_message, context, reference_text)

        try:
            response = self.llm.invoke([HumanMessage(content=prompt)])
        except Exception as exc:
            logger.error("Gemini API error: %s", exc)
            raise ProviderError("Failed to get response from AI") from exc

        reply = _message_text(response)
        if not reply:
            raise ProviderError("Gemini returned an empty reply")

        usage = getattr(response, "usage_metadata", None) or {}
        tokens_used = int(usage.get("total_tokens") or 0)
        return GenerationResult(reply, tokens_used)
