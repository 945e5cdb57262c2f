"""
Shared pytest configuration.

This file ensures the project root is on sys.path so that `import app`
works consistently in all tests, and provides in-memory wiring for the
chat service.
"""

import sys
from pathlib import Path

import pytest


# Ensure project root is importable for test modules.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from assistant.core.docs import load_docs  # noqa: E402
from config.settings import DEFAULT_DOCS_PATH, Settings  # noqa: E402
from storage import InMemoryChatStore, SQLChatStore  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    cfg = Settings()
    cfg.llm_provider = "mock"
    cfg.llm_api_key = None
    cfg.database_url = "memory://"
    cfg.context_window = 10
    cfg.api_prefix = "/api"
    return cfg


@pytest.fixture
def docs():
    return load_docs(DEFAULT_DOCS_PATH)


@pytest.fixture
def memory_store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def sql_store(tmp_path) -> SQLChatStore:
    store = SQLChatStore(f"sqlite:///{tmp_path / 'support.db'}")
    store.initialize()
    return store


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")
