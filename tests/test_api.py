import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from assistant.providers.mock import GREETING_REPLY
from storage import InMemoryChatStore, SQLChatStore


@pytest.fixture
def client(settings, memory_store, docs):
    app = create_app(settings=settings, store=memory_store, docs=docs)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_chat_greeting_then_conversation(client):
    resp = client.post("/api/chat", json={"sessionId": "s1", "message": "hi"})

    assert resp.status_code == 200
    assert resp.json() == {"reply": GREETING_REPLY, "tokensUsed": 0}

    conversation = client.get("/api/conversations/s1").json()
    assert conversation["sessionId"] == "s1"
    assert [m["role"] for m in conversation["messages"]] == ["user", "assistant"]
    assert [m["content"] for m in conversation["messages"]] == ["hi", GREETING_REPLY]
    assert all("created_at" in m for m in conversation["messages"])


@pytest.mark.parametrize(
    "body",
    [{}, {"sessionId": "s1"}, {"message": "hi"}, {"sessionId": "", "message": "hi"}],
)
def test_chat_missing_fields_is_bad_request(client, memory_store, body):
    resp = client.post("/api/chat", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "sessionId and message are required"}
    assert memory_store.list_sessions() == []


def test_unknown_provider_is_server_error_but_message_kept(client, settings):
    settings.llm_provider = "not-a-provider"

    resp = client.post("/api/chat", json={"sessionId": "s2", "message": "refund?"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process chat message"}
    messages = client.get("/api/conversations/s2").json()["messages"]
    assert [(m["role"], m["content"]) for m in messages] == [("user", "refund?")]


def test_unknown_conversation_is_empty(client):
    assert client.get("/api/conversations/nobody").json() == {"sessionId": "nobody", "messages": []}


def test_sessions_most_recent_first(client):
    client.post("/api/chat", json={"sessionId": "a", "message": "hi"})
    client.post("/api/chat", json={"sessionId": "b", "message": "hi"})
    client.post("/api/chat", json={"sessionId": "a", "message": "thanks"})

    sessions = client.get("/api/sessions").json()["sessions"]

    assert [s["id"] for s in sessions] == ["a", "b"]
    assert all(s["lastUpdated"] for s in sessions)


class BrokenStore(InMemoryChatStore):
    def list_sessions(self):
        raise RuntimeError("disk gone")

    def list_all_messages(self, session_id):
        raise RuntimeError("disk gone")


def test_store_failures_are_server_errors(settings, docs):
    app = create_app(settings=settings, store=BrokenStore(), docs=docs)
    with TestClient(app) as client:
        assert client.get("/api/sessions").status_code == 500
        resp = client.get("/api/conversations/s1")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch conversation"}


def test_sqlite_backed_app_persists_across_instances(settings, docs, tmp_path):
    url = f"sqlite:///{tmp_path / 'chat.db'}"

    with TestClient(create_app(settings=settings, store=SQLChatStore(url), docs=docs)) as client:
        assert client.post("/api/chat", json={"sessionId": "s1", "message": "password help"}).status_code == 200

    with TestClient(create_app(settings=settings, store=SQLChatStore(url), docs=docs)) as client:
        messages = client.get("/api/conversations/s1").json()["messages"]

    assert [m["role"] for m in messages] == ["user", "assistant"]
    assert messages[1]["content"] == docs[0].content


def test_numeric_session_id_is_accepted(client):
    resp = client.post("/api/chat", json={"sessionId": 123, "message": "hi"})

    assert resp.status_code == 200
    assert resp.json()["reply"] == GREETING_REPLY
    assert [m["role"] for m in client.get("/api/conversations/123").json()["messages"]] == ["user", "assistant"]


@pytest.mark.parametrize(
    "body",
    [{"sessionId": "s1", "message": {"text": "hi"}}, {"sessionId": ["s1"], "message": "hi"}, {"sessionId": True}],
)
def test_malformed_chat_body_is_bad_request(client, memory_store, body):
    resp = client.post("/api/chat", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "sessionId and message are required"}
    assert memory_store.list_sessions() == []


class ClosingStore(InMemoryChatStore):
    def __init__(self):
        super().__init__()
        self.closed = False

    def close(self):
        self.closed = True


def test_store_is_closed_on_shutdown(settings, docs):
    store = ClosingStore()

    with TestClient(create_app(settings=settings, store=store, docs=docs)) as client:
        assert client.get("/health").status_code == 200
        assert store.closed is False

    assert store.closed is True
