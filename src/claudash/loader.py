"""Load, summarise and cache a single session transcript."""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Iterable
from pathlib import Path

from .config import MAX_CACHE_SIZE, MAX_TRANSCRIPT_BYTES, get_transcript_path
from .core import LoadFailure, SessionDetail, SessionStats, TranscriptEntry, UserMessage
from .records import extract_text, iter_records, parse_transcript_entry

logger = logging.getLogger(__name__)

LoadResult = SessionDetail | LoadFailure | None


class SessionCache:
    """Bounded session-id -> SessionDetail map with first-in, first-out eviction.

    Reads do not refresh an entry's position; only insertion order counts.
    """

    def __init__(self, capacity: int = MAX_CACHE_SIZE):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: OrderedDict[str, SessionDetail] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    def get(self, session_id: str) -> SessionDetail | None:
        return self._entries.get(session_id)

    def put(self, session_id: str, detail: SessionDetail) -> None:
        self._entries[session_id] = detail
        if len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted %s from session cache", evicted)

    def clear(self) -> None:
        self._entries.clear()


class SessionDetailLoader:
    """Resolves a session's transcript and turns it into a SessionDetail.

    One loader (and its cache) is meant to live for the whole process.
    ``load`` never raises for per-session problems; it returns:

    - ``SessionDetail`` on success, or a stub with ``too_large=True`` when
      the transcript is over the size limit
    - ``None`` when the transcript does not exist
    - ``LoadFailure`` when it exists but cannot be read
    """

    def __init__(
        self,
        claude_dir: Path | None = None,
        cache: SessionCache | None = None,
        max_file_size: int = MAX_TRANSCRIPT_BYTES,
    ):
        self.claude_dir = claude_dir
        self.cache = cache if cache is not None else SessionCache()
        self.max_file_size = max_file_size
        self._lock = threading.Lock()

    def transcript_path(self, session_id: str, project_path: str) -> Path:
        return get_transcript_path(project_path, session_id, self.claude_dir)

    def load(self, session_id: str, project_path: str) -> LoadResult:
        # Check-build-insert must be atomic so two callers never build the
        # same session or race an eviction.
        with self._lock:
            cached = self.cache.get(session_id)
            if cached is not None:
                return cached

            result = self._load_from_disk(session_id, project_path)
            if isinstance(result, SessionDetail) and not result.too_large:
                self.cache.put(session_id, result)
            return result

    def _load_from_disk(self, session_id: str, project_path: str) -> LoadResult:
        path = self.transcript_path(session_id, project_path)

        try:
            size = path.stat().st_size
        except (FileNotFoundError, NotADirectoryError):
            logger.debug("No transcript for %s at %s", session_id, path)
            return None
        except OSError as e:
            logger.warning("Failed to stat transcript %s: %s", path, e)
            return LoadFailure(session_id=session_id, path=path, reason=str(e))

        if size > self.max_file_size:
            logger.warning("Session file too large: %dMB - skipping %s", size // (1024 * 1024), path)
            return too_large_stub(session_id, project_path, size)

        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Failed to read transcript %s: %s", path, e)
            return LoadFailure(session_id=session_id, path=path, reason=str(e))

        entries = [parse_transcript_entry(r) for r in iter_records(text.split("\n"), path)]
        return build_session_detail(session_id, project_path, entries)


def build_session_detail(session_id: str, project_path: str, entries: Iterable[TranscriptEntry]) -> SessionDetail:
    """Summarise decoded transcript entries (kept in file order)."""
    entries = tuple(entries)
    return SessionDetail(
        session_id=session_id,
        project_path=project_path,
        first_user_message=first_user_message(entries),
        last_user_message=last_user_message(entries),
        stats=calculate_stats(entries),
        git_branch=next((e.git_branch for e in entries if e.git_branch), None),
        cwd=next((e.cwd for e in entries if e.cwd), None),
        entries=entries,
    )


def too_large_stub(session_id: str, project_path: str, size: int) -> SessionDetail:
    """Placeholder detail for a transcript that was not parsed."""
    now = int(time.time() * 1000)
    size_mb = round(size / (1024 * 1024))
    return SessionDetail(
        session_id=session_id,
        project_path=project_path,
        first_user_message=UserMessage(content=f"[Session file too large: {size_mb}MB]", timestamp=now),
        last_user_message=UserMessage(content="[File too large to load]", timestamp=now),
        stats=SessionStats(),
        git_branch=None,
        cwd=project_path,
        entries=(),
        too_large=True,
    )


def first_user_message(entries: Iterable[TranscriptEntry]) -> UserMessage | None:
    """The conversation root: first user entry whose parentUuid is null."""
    for entry in entries:
        if entry.type == "user" and entry.is_root:
            return UserMessage(
                content=extract_text(entry.content),
                timestamp=entry.timestamp,
                uuid=entry.uuid,
            )
    return None


def last_user_message(entries: Iterable[TranscriptEntry]) -> UserMessage | None:
    """Latest user prompt by timestamp.

    Entries with block content are tool results, not prompts, and are skipped.
    """
    latest: TranscriptEntry | None = None

    for entry in entries:
        if entry.type != "user" or not isinstance(entry.content, str):
            continue
        if latest is None:
            latest = entry
        elif entry.timestamp is not None and (latest.timestamp is None or entry.timestamp > latest.timestamp):
            latest = entry

    if latest is None:
        return None
    return UserMessage(content=latest.content, timestamp=latest.timestamp, uuid=latest.uuid)


def calculate_stats(entries: Iterable[TranscriptEntry]) -> SessionStats:
    user_messages = 0
    assistant_messages = 0
    tool_calls = 0
    total_tokens = 0
    tools: set[str] = set()
    first_ts: int | None = None
    last_ts: int | None = None

    for entry in entries:
        if entry.type == "user":
            user_messages += 1
        elif entry.type == "assistant":
            assistant_messages += 1

            usage = entry.usage
            if usage:
                total_tokens += _token_count(usage.get("input_tokens")) + _token_count(usage.get("output_tokens"))

            content = entry.content
            if isinstance(content, list):
                for block in content:
                    if isinstance(block, dict) and block.get("type") == "tool_use":
                        tool_calls += 1
                        name = block.get("name")
                        if isinstance(name, str) and name:
                            tools.add(name)

        if entry.timestamp is not None:
            if first_ts is None or entry.timestamp < first_ts:
                first_ts = entry.timestamp
            if last_ts is None or entry.timestamp > last_ts:
                last_ts = entry.timestamp

    return SessionStats(
        total_messages=user_messages + assistant_messages,
        user_messages=user_messages,
        assistant_messages=assistant_messages,
        tool_calls=tool_calls,
        total_tokens=total_tokens,
        duration=last_ts - first_ts if first_ts is not None and last_ts is not None else 0,
        tools=frozenset(tools),
    )


def _token_count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)
