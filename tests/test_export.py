"""Tests for export functionality."""

import json

import pytest

from claudash.core import SessionDetail, SessionStats, UserMessage
from claudash.export import detail_to_json, detail_to_markdown


@pytest.fixture
def sample_detail():
    return SessionDetail(
        session_id="session-001",
        project_path="/Users/test/dev/myapp",
        first_user_message=UserMessage("Fix the login bug in auth.ts", 1_736_935_200_000, "u1"),
        last_user_message=UserMessage("Looks good, thanks!", 1_736_935_260_000, "u3"),
        stats=SessionStats(
            total_messages=3, user_messages=2, assistant_messages=1, tool_calls=2,
            total_tokens=1500, duration=60_000, tools=frozenset({"Read", "Bash"}),
        ),
        git_branch="main",
        cwd="/Users/test/dev/myapp",
    )


class TestMarkdownExport:
    def test_includes_title_and_metadata(self, sample_detail):
        result = detail_to_markdown(sample_detail)
        assert result.startswith("# Session session-001\n")
        assert "**Project:** /Users/test/dev/myapp" in result
        assert "**Git branch:** main" in result

    def test_includes_stats(self, sample_detail):
        result = detail_to_markdown(sample_detail)
        assert "- Messages: 3 (2 user, 1 assistant)" in result
        assert "- Tools used: Bash, Read" in result
        assert "- Duration: 1m 0s" in result

    def test_includes_messages(self, sample_detail):
        result = detail_to_markdown(sample_detail)
        assert "## First message" in result
        assert "Fix the login bug in auth.ts" in result
        assert "## Last message" in result

    def test_too_large_note(self, sample_detail):
        stub = SessionDetail(
            session_id="big", project_path="/p", first_user_message=None,
            last_user_message=None, stats=SessionStats(), too_large=True,
        )
        result = detail_to_markdown(stub)
        assert "too large" in result
        assert "## First message" not in result


class TestJsonExport:
    def test_valid_json(self, sample_detail):
        data = json.loads(detail_to_json(sample_detail))
        assert data["session_id"] == "session-001"
        assert data["project_path"] == "/Users/test/dev/myapp"
        assert data["too_large"] is False
        assert data["entry_count"] == 0

    def test_stats_and_messages(self, sample_detail):
        data = json.loads(detail_to_json(sample_detail))
        assert data["stats"]["tools"] == ["Bash", "Read"]
        assert data["stats"]["total_tokens"] == 1500
        assert data["first_user_message"] == {
            "content": "Fix the login bug in auth.ts",
            "timestamp": 1_736_935_200_000,
            "uuid": "u1",
        }

    def test_missing_messages_are_null(self):
        detail = SessionDetail(
            session_id="s", project_path="/p", first_user_message=None,
            last_user_message=None, stats=SessionStats(),
        )
        data = json.loads(detail_to_json(detail))
        assert data["first_user_message"] is None
        assert data["last_user_message"] is None
