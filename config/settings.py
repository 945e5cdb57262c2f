from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

DEFAULT_DOCS_PATH = Path(__file__).resolve().parents[1] / "assistant" / "data" / "docs.json"


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.llm_provider: str = os.getenv("LLM_PROVIDER", "mock")
        self.llm_api_key: Optional[str] = os.getenv("LLM_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest")
        self.openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
        self.openai_api_url: str = os.getenv(
            "OPENAI_API_URL", "https://api.openai.com/v1/chat/completions"
        )
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.7"))
        self.max_output_tokens: int = int(os.getenv("MAX_OUTPUT_TOKENS", "500"))
        self.llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///support.db")
        self.docs_path: Path = Path(os.getenv("DOCS_PATH", str(DEFAULT_DOCS_PATH)))
        self.context_window: int = int(os.getenv("CONTEXT_WINDOW", "10"))
        self.api_prefix: str = os.getenv("API_PREFIX", "/api")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
