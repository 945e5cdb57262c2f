from assistant.core.memory import SessionManager, get_recent_context
from storage import Role


def test_ensure_session_returns_identifier_and_keeps_created_at(store):
    manager = SessionManager(store)

    assert manager.ensure_session("s1") == "s1"
    created = store.get_session("s1").created_at
    assert manager.ensure_session("s1") == "s1"

    assert store.get_session("s1").created_at == created
    assert len(store.list_sessions()) == 1


def test_recent_context_is_empty_for_new_session(store):
    SessionManager(store).ensure_session("s1")
    assert get_recent_context(store, "s1") == []


def test_recent_context_returns_last_ten_oldest_first(store):
    SessionManager(store).ensure_session("s1")
    for i in range(21):
        role = Role.USER if i % 2 == 0 else Role.ASSISTANT
        store.insert_message("s1", role, f"m{i}")

    context = get_recent_context(store, "s1", limit=10)

    assert [m.content for m in context] == [f"m{i}" for i in range(11, 21)]


def test_recent_context_shorter_than_limit(store):
    SessionManager(store).ensure_session("s1")
    store.insert_message("s1", Role.USER, "only")

    assert [m.content for m in get_recent_context(store, "s1", limit=10)] == ["only"]
