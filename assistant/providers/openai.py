from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from assistant.core.prompt import build_system_prompt
from assistant.errors import ConfigurationError, ProviderError
from assistant.providers.base import GenerationProvider, GenerationResult, ProviderKind
from config.settings import Settings
from storage.base import MessageRecord


logger = logging.getLogger(__name__)


def build_messages(
    user_message: str, context: Sequence[MessageRecord], reference_text: str
) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": build_system_prompt(reference_text)}]
    for msg in context:
        messages.append({"role": msg.role.value, "content": msg.content})
    messages.append({"role": "user", "content": user_message})
    return messages


def _parse_completion(data: Any) -> GenerationResult:
    try:
        reply = data["choices"][0]["message"]["content"]
        tokens_used = int(data["usage"]["total_tokens"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ProviderError("Malformed OpenAI response payload") from exc
    if not isinstance(reply, str):
        raise ProviderError("Malformed OpenAI response payload")
    return GenerationResult(reply, tokens_used)


class OpenAIProvider(GenerationProvider):
    kind = ProviderKind.OPENAI

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        if not settings.llm_api_key:
            raise ConfigurationError("LLM_API_KEY not set. Please configure it in environment or .env")
        self.settings = settings
        self.transport = transport

    def generate(
        self,
        user_message: str,
        context: Sequence[MessageRecord],
        reference_text: str,
    ) -> GenerationResult:
        payload = {
            "model": self.settings.openai_model,
            "messages": build_messages(user_message, context, reference_text),
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_output_tokens,
        }
        headers = {"Authorization": f"Bearer {self.settings.llm_api_key}"}

        try:
            with httpx.Client(timeout=self.settings.llm_timeout_seconds, transport=self.transport) as client:
                response = client.post(self.settings.openai_api_url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise ProviderError("Failed to get response from AI") from exc
        except ValueError as exc:
            raise ProviderError("OpenAI returned a non-JSON body") from exc

        return _parse_completion(data)
