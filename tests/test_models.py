"""Tests for Store and LogEntry."""

from datetime import datetime, timedelta, timezone

import pytest

from storesync.models import LogEntry, Store, parse_timestamp


class TestParseTimestamp:

    def test_zulu_suffix(self):
        ts = parse_timestamp("2024-01-01T00:00:00Z")
        assert ts == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_offset(self):
        ts = parse_timestamp("2024-01-01T02:00:00+02:00")
        assert ts.utcoffset() == timedelta(hours=2)

    def test_http_date(self):
        ts = parse_timestamp("Mon, 01 Jan 2024 00:00:00 GMT")
        assert ts == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert ts.utcoffset() == timedelta(0)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestStore:

    def test_from_dict(self):
        store = Store.from_dict({
            "name": "shopA",
            "status": "Active",
            "created": "2024-01-01T00:00:00Z",
        })

        assert store.name == "shopA"
        assert store.status == "Active"
        assert store.created == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_unknown_status_kept_verbatim(self):
        store = Store.from_dict({
            "name": "shopB",
            "status": "ComingSoon",
            "created": "2024-01-01T00:00:00Z",
        })

        assert store.status == "ComingSoon"

    def test_missing_field(self):
        with pytest.raises(KeyError):
            Store.from_dict({"name": "shopA", "status": "Active"})

    def test_to_dict(self):
        store = Store("shopA", "Active", datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert store.to_dict() == {
            "name": "shopA",
            "status": "Active",
            "created": "2024-01-01T00:00:00+00:00",
        }


class TestLogEntry:

    def test_format(self):
        entry = LogEntry("Initiating teardown for shopA...", datetime(2024, 1, 1, 9, 5, 7))
        assert entry.format() == "[09:05:07] Initiating teardown for shopA..."

    def test_timestamp_defaults_to_now(self):
        before = datetime.now()
        entry = LogEntry("hello")
        after = datetime.now()

        assert before <= entry.timestamp <= after

    def test_to_dict(self):
        entry = LogEntry("hello", datetime(2024, 1, 1, 12, 0, 0))
        d = entry.to_dict()

        assert d["message"] == "hello"
        assert d["timestamp"] == "2024-01-01T12:00:00"
        assert d["line"] == "[12:00:00] hello"
