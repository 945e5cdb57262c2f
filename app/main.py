from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Sequence

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from assistant.chat import ChatOrchestrator, ProviderFactory
from assistant.core.docs import DocEntry, load_docs
from assistant.errors import ChatValidationError
from config.settings import Settings, get_settings
from storage import ChatStore, build_store


logger = logging.getLogger("support_chat")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId", description="Client-generated session id")
    message: Optional[str] = Field(default=None, description="User's latest message")

    @field_validator("session_id", "message", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: Any) -> Any:
        # Clients may send numeric session ids.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_orchestrator(request: Request) -> ChatOrchestrator:
    return request.app.state.orchestrator


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


router = APIRouter(tags=["chat"])


@router.post("/chat")
def chat(req: ChatRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    logger.info(
        "Incoming chat: session_id=%s message_len=%s",
        req.session_id,
        len(req.message or ""),
    )
    try:
        reply, tokens_used = orchestrator.handle_chat_message(req.session_id, req.message)
    except ChatValidationError as exc:
        return _error(400, str(exc))
    except Exception as e:
        logger.exception("Chat error: %s", e)
        return _error(500, "Failed to process chat message")

    return {"reply": reply, "tokensUsed": tokens_used}


@router.get("/conversations/{session_id}")
def get_conversation(session_id: str, store: ChatStore = Depends(get_store)):
    try:
        messages = store.list_all_messages(session_id)
    except Exception as e:
        logger.exception("Fetch conversation error: %s", e)
        return _error(500, "Failed to fetch conversation")

    return {
        "sessionId": session_id,
        "messages": [
            {"role": m.role.value, "content": m.content, "created_at": m.created_at.isoformat()}
            for m in messages
        ],
    }


@router.get("/sessions")
def list_sessions(store: ChatStore = Depends(get_store)):
    try:
        sessions = store.list_sessions()
    except Exception as e:
        logger.exception("Fetch sessions error: %s", e)
        return _error(500, "Failed to fetch sessions")

    return {"sessions": [{"id": s.id, "lastUpdated": s.updated_at.isoformat()} for s in sessions]}


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ChatStore] = None,
    docs: Optional[Sequence[DocEntry]] = None,
    provider_factory: Optional[ProviderFactory] = None,
) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings.database_url)
    docs = tuple(docs) if docs is not None else load_docs(settings.docs_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.initialize()
        logger.info("Config: provider=%s key_set=%s", settings.llm_provider, bool(settings.llm_api_key))
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Support Chat Assistant", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = ChatOrchestrator(settings, store, docs, provider_factory=provider_factory)

    # CORS: allow local frontend during development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected request %s: %s", request.url.path, exc.errors())
        return _error(400, "sessionId and message are required")

    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    return app


logging.basicConfig(level=get_settings().log_level, format="[%(asctime)s] %(levelname)s - %(message)s")

app = create_app()
