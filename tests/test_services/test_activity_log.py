"""Tests for the bounded admin activity log."""

from aura_inn.services.activity_log import ActivityLog


class TestActivityLog:
    def test_newest_first(self):
        log = ActivityLog()
        log.record("first")
        log.record("second")

        assert [e["message"] for e in log.entries()] == ["second", "first"]

    def test_entries_have_timestamps(self):
        log = ActivityLog()
        log.record("Booking #1 confirmed")

        entry = log.entries()[0]
        assert entry["timestamp"].endswith("+00:00")

    def test_keeps_only_most_recent(self):
        log = ActivityLog(maxlen=3)
        for i in range(5):
            log.record(f"event {i}")

        assert len(log) == 3
        assert [e["message"] for e in log.entries()] == ["event 4", "event 3", "event 2"]

    def test_record_logs_message(self, caplog):
        import logging

        with caplog.at_level(logging.INFO, logger="aura_inn.services.activity_log"):
            ActivityLog().record("Cleared all booking records")

        assert "Cleared all booking records" in caplog.text
