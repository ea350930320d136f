"""Shared test fixtures for claudash."""

import json
from datetime import datetime, timezone

import pytest

from claudash.core import SessionSummary


def ms(*args) -> int:
    """Epoch millis for a UTC datetime."""
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def write_jsonl(path, records):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def summary(session_id, project, last_timestamp, message_count=1, first_message="hi", timestamp=None):
    return SessionSummary(
        session_id=session_id,
        project=project,
        first_message=first_message,
        message_count=message_count,
        timestamp=timestamp if timestamp is not None else last_timestamp,
        last_timestamp=last_timestamp,
    )


@pytest.fixture
def transcript_lines():
    """A realistic transcript: root prompt, tool round trip, follow-up prompt.

    Includes:
    - A root user prompt (parentUuid null) with string content
    - Assistant text + tool_use blocks with usage
    - A user tool_result entry (block content, newest timestamp)
    - A non-message entry carrying gitBranch/cwd later in the file
    """
    return [
        json.dumps({
            "type": "file-history-snapshot",
            "snapshot": {"files": []},
        }),
        json.dumps({
            "type": "user",
            "parentUuid": None,
            "uuid": "uuid-001",
            "timestamp": "2025-01-20T10:00:00Z",
            "gitBranch": "main",
            "cwd": "/Users/testuser/dev/myapp",
            "message": {"role": "user", "content": "Help me refactor the auth module"},
        }),
        json.dumps({
            "type": "assistant",
            "parentUuid": "uuid-001",
            "uuid": "uuid-002",
            "timestamp": "2025-01-20T10:00:30Z",
            "gitBranch": "feature/other",
            "message": {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "Let me read the current code."},
                    {"type": "tool_use", "id": "toolu_001", "name": "Read", "input": {"file_path": "/src/auth.ts"}},
                ],
                "usage": {"input_tokens": 1200, "output_tokens": 300},
            },
        }),
        json.dumps({
            "type": "user",
            "parentUuid": "uuid-002",
            "uuid": "uuid-003",
            "timestamp": "2025-01-20T10:00:31Z",
            "message": {"role": "user", "content": [
                {"type": "tool_result", "tool_use_id": "toolu_001", "content": "export function authenticate() {}"},
            ]},
        }),
        json.dumps({
            "type": "assistant",
            "parentUuid": "uuid-003",
            "uuid": "uuid-004",
            "timestamp": "2025-01-20T10:01:00Z",
            "message": {
                "role": "assistant",
                "content": [
                    {"type": "tool_use", "id": "toolu_002", "name": "Edit", "input": {"file_path": "/src/auth.ts"}},
                    {"type": "tool_use", "id": "toolu_003", "name": "Read", "input": {"file_path": "/src/jwt.ts"}},
                ],
                "usage": {"input_tokens": 2000, "output_tokens": 500, "cache_read_input_tokens": 9999},
            },
        }),
        json.dumps({
            "type": "user",
            "parentUuid": "uuid-004",
            "uuid": "uuid-005",
            "timestamp": "2025-01-20T10:05:00Z",
            "message": {"role": "user", "content": "Looks good, now split it into separate files"},
        }),
        json.dumps({
            "type": "user",
            "parentUuid": "uuid-005",
            "uuid": "uuid-006",
            "timestamp": "2025-01-20T10:06:00Z",
            "message": {"role": "user", "content": [
                {"type": "tool_result", "tool_use_id": "toolu_004", "content": "ok"},
            ]},
        }),
    ]


@pytest.fixture
def claude_dir(tmp_path, transcript_lines):
    """Synthetic ~/.claude with a history log and one transcript.

    Sessions:
    - session-001 in /Users/testuser/dev/myapp: 3 events, transcript present
    - session-002 in /Users/testuser/dev/myapp: 1 event, no transcript
    - session-003 in /Users/testuser/dev/api: 2 events, most recent overall
    """
    root = tmp_path / ".claude"
    history = [
        {"sessionId": "session-001", "project": "/Users/testuser/dev/myapp",
         "timestamp": ms(2025, 1, 20, 10, 0), "display": "Help me refactor the auth module"},
        {"sessionId": "session-002", "project": "/Users/testuser/dev/myapp",
         "timestamp": ms(2025, 1, 20, 12, 0), "display": "Write tests for the API"},
        {"sessionId": "session-001", "project": "/Users/testuser/dev/myapp",
         "timestamp": ms(2025, 1, 20, 10, 5), "display": "Looks good, now split it"},
        "{not json",
        {"sessionId": "session-003", "project": "/Users/testuser/dev/api",
         "timestamp": ms(2025, 1, 21, 9, 0), "display": "Why is /users returning 500?"},
        {"sessionId": "session-001", "project": "/Users/testuser/dev/myapp",
         "timestamp": ms(2025, 1, 20, 10, 3), "display": "and the tests"},
        {"sessionId": "session-003", "project": "/Users/testuser/dev/api",
         "timestamp": ms(2025, 1, 21, 9, 30), "display": "Fix it"},
    ]
    write_jsonl(root / "history.jsonl", history)
    write_jsonl(root / "projects" / "-Users-testuser-dev-myapp" / "session-001.jsonl", transcript_lines)
    return root
