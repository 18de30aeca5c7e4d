"""
Tests for the bounded system and login logs.
"""

import json

import pytest
from unittest.mock import MagicMock

from src.signage.event_log import (
    LOGIN_LOG_KEY,
    SYSTEM_LOG_KEY,
    LogBuffer,
    LoginLog,
    SystemLog,
)
from src.signage.notifications import Signal


class TestLogBuffer:
    """Tests for the generic newest-first buffer."""

    def test_rejects_non_positive_size(self, storage):
        with pytest.raises(ValueError):
            LogBuffer(storage, "k", 0)

    def test_append_stamps_id_and_timestamp(self, storage):
        buffer = LogBuffer(storage, "k", 5)
        record = buffer.append({"message": "hi"})
        assert record["id"]
        assert record["timestamp"] > 0

    def test_newest_first_and_bounded(self, storage):
        buffer = LogBuffer(storage, "k", 3)
        for n in range(5):
            buffer.append({"n": n})
        assert [r["n"] for r in buffer.read()] == [4, 3, 2]

    def test_ids_are_unique(self, storage):
        buffer = LogBuffer(storage, "k", 100)
        ids = {buffer.append({})["id"] for _ in range(50)}
        assert len(ids) == 50

    def test_corrupt_blob_reads_empty(self, storage):
        storage.set("k", "{oops")
        assert LogBuffer(storage, "k", 5).read() == []

    def test_non_list_blob_reads_empty(self, storage):
        storage.set("k", json.dumps({"not": "a list"}))
        assert LogBuffer(storage, "k", 5).read() == []

    def test_deeply_nested_blob_reads_empty(self, storage):
        storage.set("k", "[" * 100000 + "]" * 100000)
        buffer = LogBuffer(storage, "k", 5)
        assert buffer.read() == []
        buffer.append({"n": 1})
        assert len(buffer) == 1

    def test_append_over_corrupt_blob_recovers(self, storage):
        storage.set("k", "{oops")
        buffer = LogBuffer(storage, "k", 5)
        buffer.append({"n": 1})
        assert len(buffer) == 1

    def test_rebuilt_from_storage_each_read(self, storage):
        LogBuffer(storage, "k", 5).append({"n": 1})
        assert len(LogBuffer(storage, "k", 5)) == 1

    def test_unserializable_record_is_dropped(self, storage):
        buffer = LogBuffer(storage, "k", 5)
        assert buffer.append({"bad": object()}) is None
        assert buffer.read() == []


class TestSystemLog:
    """Tests for SystemLog."""

    def test_append_and_list(self, system_log):
        system_log.append("error", "Widget", "Weather fetch failed", stack="trace")
        entries = system_log.list()
        assert len(entries) == 1
        assert entries[0].level == "error"
        assert entries[0].source == "Widget"
        assert entries[0].stack == "trace"

    def test_sixty_appends_keep_newest_fifty(self, system_log):
        for n in range(60):
            system_log.append("info", "test", f"message {n}")

        entries = system_log.list()

        assert len(entries) == 50
        assert entries[0].message == "message 59"
        assert entries[-1].message == "message 10"
        assert "message 9" not in {e.message for e in entries}

    def test_unknown_level_stored_as_info(self, system_log):
        assert system_log.append("fatal", "x", "y").level == "info"

    def test_append_publishes_log_changed(self, system_log, notifier):
        callback = MagicMock()
        notifier.subscribe(Signal.LOG_CHANGED, callback)

        entry = system_log.append("warn", "x", "y")

        callback.assert_called_once()
        signal, payload = callback.call_args[0]
        assert signal is Signal.LOG_CHANGED
        assert payload["id"] == entry.id

    def test_clear(self, system_log, storage, notifier):
        callback = MagicMock()
        system_log.append("info", "x", "y")
        notifier.subscribe(Signal.LOG_CHANGED, callback)

        system_log.clear()

        assert system_log.list() == []
        assert storage.get(SYSTEM_LOG_KEY) is None
        callback.assert_called_once_with(Signal.LOG_CHANGED, None)

    def test_stored_as_json_array(self, system_log, storage):
        system_log.append("info", "x", "y")
        stored = json.loads(storage.get(SYSTEM_LOG_KEY))
        assert isinstance(stored, list)
        assert stored[0]["message"] == "y"

    def test_malformed_record_skipped(self, storage):
        storage.set(SYSTEM_LOG_KEY, (
            '[{"id": "a", "timestamp": 1e400, "level": "info", "source": "x", "message": "bad"},'
            ' {"id": "b", "timestamp": 5, "level": "info", "source": "x", "message": "ok"}]'
        ))
        assert [e.message for e in SystemLog(storage).list()] == ["ok"]

    def test_deeply_nested_blob_lists_empty(self, storage):
        storage.set(SYSTEM_LOG_KEY, "[" * 100000 + "]" * 100000)
        log = SystemLog(storage)
        assert log.list() == []
        assert log.append("error", "x", "recovered") is not None
        assert len(log) == 1

    def test_works_on_broken_storage(self, broken_storage):
        log = SystemLog(broken_storage)
        log.append("error", "x", "y")
        assert len(log.list()) == 1


class TestLoginLog:
    """Tests for LoginLog."""

    def test_record_attempt(self, login_log):
        entry = login_log.record_attempt(
            "admin@school.edu", False, "wrong_passcode",
            user_agent="Kiosk/1.0", screen={"width": 1920, "height": 1080},
        )
        assert entry.success is False
        assert entry.reason == "wrong_passcode"
        assert login_log.list()[0].screen == {"width": 1920, "height": 1080}

    def test_unknown_reason_normalized(self, login_log):
        assert login_log.record_attempt("a@b.c", False, "brute force").reason == "unknown"

    def test_bounded_to_two_hundred(self, login_log):
        for n in range(205):
            login_log.record_attempt(f"user{n}@school.edu", True, "success")
        entries = login_log.list()
        assert len(entries) == 200
        assert entries[0].email == "user204@school.edu"

    def test_does_not_publish(self, storage, notifier):
        callback = MagicMock()
        notifier.subscribe(Signal.LOG_CHANGED, callback)
        LoginLog(storage).record_attempt("a@b.c", True, "success")
        callback.assert_not_called()

    def test_independent_of_system_log(self, login_log, system_log, storage):
        login_log.record_attempt("a@b.c", True, "success")
        assert system_log.list() == []
        assert storage.get(LOGIN_LOG_KEY) is not None

    def test_clear(self, login_log):
        login_log.record_attempt("a@b.c", True, "success")
        login_log.clear()
        assert len(login_log) == 0
