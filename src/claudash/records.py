"""Line-level decoding for history.jsonl and session transcripts.

Both files are append-only JSONL and the last line may be half written, so
anything that does not decode to a JSON object is dropped without raising.
"""

import json
import logging
import math
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone
from typing import Any

from .core import HistoryEvent, TranscriptEntry

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_record(line: str) -> dict | None:
    """Decode one JSONL line. Returns None for blank or malformed input.

    NaN and Infinity literals count as malformed.
    """
    line = line.strip()
    if not line:
        return None
    try:
        record = json.loads(line, parse_constant=_reject_constant)
    except ValueError:
        return None
    if not isinstance(record, dict):
        return None
    return record


def iter_records(lines: Iterable[str], source: object = "<input>") -> Iterator[dict]:
    """Yield every decodable record, logging the line numbers of the rest."""
    for line_num, line in enumerate(lines, 1):
        record = parse_record(line)
        if record is None:
            if line.strip():
                logger.debug("Skipping malformed line %s:%d", source, line_num)
            continue
        yield record


def parse_history_event(record: dict) -> HistoryEvent | None:
    """Build a HistoryEvent, or None when sessionId/project/timestamp is missing."""
    session_id = record.get("sessionId")
    project = record.get("project")
    timestamp = record.get("timestamp")

    if not session_id or not project or not timestamp:
        return None
    if not isinstance(session_id, str) or not isinstance(project, str):
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    if isinstance(timestamp, float) and not math.isfinite(timestamp):
        return None

    display = record.get("display")
    return HistoryEvent(
        session_id=session_id,
        project=project,
        timestamp=int(timestamp),
        display=display if isinstance(display, str) else "",
    )


def parse_transcript_entry(record: dict) -> TranscriptEntry:
    """Lift the fields the loader needs out of a transcript record."""
    message = record.get("message")
    parent_uuid = record.get("parentUuid")
    git_branch = record.get("gitBranch")
    cwd = record.get("cwd")

    return TranscriptEntry(
        type=str(record.get("type", "")),
        uuid=record.get("uuid"),
        parent_uuid=parent_uuid,
        is_root="parentUuid" in record and parent_uuid is None,
        message=message if isinstance(message, dict) else {},
        timestamp=to_millis(record.get("timestamp")),
        git_branch=git_branch if isinstance(git_branch, str) and git_branch else None,
        cwd=cwd if isinstance(cwd, str) and cwd else None,
        raw=record,
    )


def to_millis(value: Any) -> int | None:
    """Normalise an epoch-millis number or ISO 8601 string to epoch millis."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def extract_text(content: Any) -> str:
    """Return plain text from message content, ignoring tool blocks."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""

    parts = []
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str):
                parts.append(text)
        elif isinstance(block, str):
            parts.append(block)
    return "\n".join(parts)
