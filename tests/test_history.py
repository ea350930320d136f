"""Tests for the session index builder."""

import json
from unittest.mock import patch

import pytest

from claudash.history import HistoryReadError, build_session_index, load_session_index

from conftest import ms


def _lines(*records):
    return [r if isinstance(r, str) else json.dumps(r) for r in records]


class TestBuildSessionIndex:
    def test_one_summary_per_session(self):
        lines = _lines(
            {"sessionId": "a", "project": "/p", "timestamp": 10, "display": "first"},
            {"sessionId": "b", "project": "/q", "timestamp": 20, "display": "other"},
            {"sessionId": "a", "project": "/p", "timestamp": 30, "display": "second"},
            {"sessionId": "a", "project": "/p", "timestamp": 25, "display": "third"},
        )
        sessions = build_session_index(lines)
        assert sorted(s.session_id for s in sessions) == ["a", "b"]

        a = next(s for s in sessions if s.session_id == "a")
        assert a.message_count == 3
        assert a.timestamp == 10
        assert a.last_timestamp == 30
        assert a.first_message == "first"

    def test_first_seen_fields_never_overwritten(self):
        lines = _lines(
            {"sessionId": "a", "project": "/p", "timestamp": 50, "display": "start"},
            {"sessionId": "a", "project": "/elsewhere", "timestamp": 5, "display": "older"},
        )
        (a,) = build_session_index(lines)
        assert a.project == "/p"
        assert a.first_message == "start"
        assert a.timestamp == 50
        assert a.last_timestamp == 50
        assert a.last_timestamp >= a.timestamp

    def test_invalid_lines_do_not_count(self):
        lines = _lines(
            {"sessionId": "a", "project": "/p", "timestamp": 1},
            '{"sessionId": "a", "project": "/p", "timest',
            {"sessionId": "a", "project": "/p"},
            {"sessionId": "a", "timestamp": 9},
            {"project": "/p", "timestamp": 9},
            {"sessionId": "a", "project": "/p", "timestamp": 2},
        )
        (a,) = build_session_index(lines)
        assert a.message_count == 2
        assert a.last_timestamp == 2

    def test_non_finite_timestamps_skipped(self):
        lines = [
            json.dumps({"sessionId": "a", "project": "/p", "timestamp": 1}),
            '{"sessionId": "b", "project": "/p", "timestamp": Infinity}',
            '{"sessionId": "c", "project": "/p", "timestamp": NaN}',
            '{"sessionId": "d", "project": "/p", "timestamp": 1e400}',
        ]
        assert [s.session_id for s in build_session_index(lines)] == ["a"]

    def test_sorted_by_last_activity_descending(self):
        lines = _lines(
            {"sessionId": "old", "project": "/p", "timestamp": 100},
            {"sessionId": "mid", "project": "/p", "timestamp": 200},
            {"sessionId": "new", "project": "/q", "timestamp": 150},
            {"sessionId": "new", "project": "/q", "timestamp": 300},
        )
        sessions = build_session_index(lines)
        assert [s.session_id for s in sessions] == ["new", "mid", "old"]
        stamps = [s.last_timestamp for s in sessions]
        assert stamps == sorted(stamps, reverse=True)

    def test_empty_input(self):
        assert build_session_index([]) == []
        assert build_session_index(["", "  "]) == []


class TestLoadSessionIndex:
    def test_reads_history_file(self, claude_dir):
        sessions = load_session_index(claude_dir)
        assert [s.session_id for s in sessions] == ["session-003", "session-002", "session-001"]

        s1 = sessions[2]
        assert s1.message_count == 3
        assert s1.timestamp == ms(2025, 1, 20, 10, 0)
        assert s1.last_timestamp == ms(2025, 1, 20, 10, 5)

    def test_missing_history_is_empty(self, tmp_path):
        assert load_session_index(tmp_path / "nowhere") == []

    def test_env_override(self, claude_dir, monkeypatch):
        monkeypatch.setenv("CLAUDASH_CLAUDE_DIR", str(claude_dir))
        assert len(load_session_index()) == 3

    def test_unreadable_history_is_fatal(self, claude_dir):
        with patch("pathlib.Path.read_text", side_effect=PermissionError("denied")):
            with pytest.raises(HistoryReadError, match="denied"):
                load_session_index(claude_dir)

    def test_unusable_history_path_is_fatal(self, tmp_path):
        with pytest.raises(HistoryReadError):
            load_session_index(tmp_path / ("x" * 300))

    def test_invalid_bytes_do_not_abort(self, tmp_path):
        (tmp_path / "history.jsonl").write_bytes(
            b'{"sessionId": "s", "project": "/p", "timestamp": 1, "display": "caf\xe9"}\n'
            b'\xff\xfe garbage\n'
        )
        (session,) = load_session_index(tmp_path)
        assert session.session_id == "s"
        assert session.first_message.startswith("caf")
