"""Build the session index from history.jsonl."""

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import get_history_path
from .core import SessionSummary
from .records import iter_records, parse_history_event

logger = logging.getLogger(__name__)


class HistoryReadError(Exception):
    """The event log exists but could not be read."""


def build_session_index(lines: Iterable[str], source: object = "<input>") -> list[SessionSummary]:
    """Aggregate history lines by sessionId, most recently active first.

    The first event of a session fixes its project, first message and start
    time; later events only bump the count and the last-active timestamp.
    """
    sessions: dict[str, SessionSummary] = {}

    for record in iter_records(lines, source):
        event = parse_history_event(record)
        if event is None:
            continue

        session = sessions.get(event.session_id)
        if session is None:
            sessions[event.session_id] = SessionSummary(
                session_id=event.session_id,
                project=event.project,
                first_message=event.display,
                message_count=1,
                timestamp=event.timestamp,
                last_timestamp=event.timestamp,
            )
            continue

        session.message_count += 1
        session.last_timestamp = max(session.last_timestamp, event.timestamp)

    return sorted(sessions.values(), key=lambda s: s.last_timestamp, reverse=True)


def load_session_index(claude_dir: Path | None = None) -> list[SessionSummary]:
    """Read history.jsonl and return its session summaries.

    A missing log means no sessions. Any other read failure raises
    HistoryReadError; no partial index is returned.
    """
    history_path = get_history_path(claude_dir)

    try:
        text = history_path.read_text(encoding="utf-8", errors="replace")
    except (FileNotFoundError, NotADirectoryError):
        logger.info("No history file at %s", history_path)
        return []
    except OSError as e:
        raise HistoryReadError(f"Cannot read {history_path}: {e}") from e

    sessions = build_session_index(text.split("\n"), source=history_path)
    logger.debug("Indexed %d sessions from %s", len(sessions), history_path)
    return sessions
