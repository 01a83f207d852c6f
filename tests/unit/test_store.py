"""Tests for session stores."""

import json

import pytest

from domscribr.schema import MessageRecord, Session
from domscribr.store import JsonSessionStore, MemorySessionStore, SessionStoreError, parse_sessions


def make_record(seq=1):
    return MessageRecord(
        id=f"id:{seq}",
        sequence=seq,
        role="assistant",
        text="Hello",
        captured_at="2026-10-17T12:00:00.000Z",
    )


class TestJsonSessionStore:
    """Tests for JsonSessionStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return JsonSessionStore(tmp_path / "nested" / "sessions.json")

    def test_missing_file_loads_empty(self, store):
        assert store.load() == {}

    def test_save_and_load(self, store):
        sessions = {7: Session(recording=True, messages=[make_record()], last_captured_at="t")}
        store.save(sessions)

        loaded = store.load()

        assert list(loaded) == [7]
        assert loaded[7].recording is True
        assert loaded[7].messages[0].id == "id:1"
        assert loaded[7].last_captured_at == "t"

    def test_file_uses_wire_names(self, store):
        store.save({3: Session(messages=[make_record()])})
        data = json.loads(store.path.read_text())
        assert data["version"] == "1.0"
        entry = data["sessions"]["3"]
        assert "lastCapturedAt" in entry
        assert "capturedAt" in entry["messages"][0]

    def test_no_temp_files_left(self, store):
        store.save({1: Session()})
        store.save({1: Session(), 2: Session()})
        assert [p.name for p in store.path.parent.iterdir()] == ["sessions.json"]

    def test_corrupt_file_raises(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        with pytest.raises(SessionStoreError):
            store.load()


class TestParseSessions:
    """Tests for parse_sessions."""

    def test_rejects_non_object(self):
        with pytest.raises(SessionStoreError):
            parse_sessions([])

    def test_rejects_bad_context_id(self):
        with pytest.raises(SessionStoreError):
            parse_sessions({"version": "1.0", "sessions": {"tab": {}}})

    def test_rejects_bad_session(self):
        with pytest.raises(SessionStoreError):
            parse_sessions({"version": "1.0", "sessions": {"1": {"messages": "nope"}}})

    def test_rejects_unknown_version(self):
        with pytest.raises(SessionStoreError, match="version"):
            parse_sessions({"version": "2.0", "sessions": {}})
        with pytest.raises(SessionStoreError, match="version"):
            parse_sessions({"sessions": {}})

    def test_accepts_current_version(self):
        assert parse_sessions({"version": "1.0", "sessions": {"4": {}}})[4].recording is False


class TestMemorySessionStore:
    """Tests for MemorySessionStore."""

    def test_round_trip_copies(self):
        store = MemorySessionStore()
        session = Session(messages=[make_record()])
        store.save({1: session})
        session.messages.clear()

        assert len(store.load()[1].messages) == 1
        assert store.saves == 1
