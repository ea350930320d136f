"""Core data models for claudash."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union


@dataclass(frozen=True)
class HistoryEvent:
    """One line of history.jsonl."""

    session_id: str
    project: str  # absolute project path
    timestamp: int  # epoch millis
    display: str = ""  # preview of the prompt


@dataclass
class SessionSummary:
    """Aggregate of every history event sharing one session id."""

    session_id: str
    project: str
    first_message: str
    message_count: int
    timestamp: int  # first seen
    last_timestamp: int  # max seen


@dataclass(frozen=True)
class TranscriptEntry:
    """A decoded line of a session transcript.

    Only the fields the loader reads are lifted out; the full record is kept
    in ``raw``.
    """

    type: str
    uuid: Optional[str] = None
    parent_uuid: Optional[str] = None
    is_root: bool = False  # parentUuid present and null
    message: dict = field(default_factory=dict)
    timestamp: Optional[int] = None  # epoch millis, normalised
    git_branch: Optional[str] = None
    cwd: Optional[str] = None
    raw: dict = field(default_factory=dict)

    @property
    def content(self) -> Any:
        return self.message.get("content")

    @property
    def usage(self) -> Optional[dict]:
        usage = self.message.get("usage")
        return usage if isinstance(usage, dict) else None


@dataclass(frozen=True)
class UserMessage:
    """A user prompt picked out of a transcript."""

    content: str
    timestamp: Optional[int] = None
    uuid: Optional[str] = None


@dataclass(frozen=True)
class SessionStats:
    total_messages: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    tool_calls: int = 0
    total_tokens: int = 0
    duration: int = 0  # millis
    tools: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SessionDetail:
    """Everything shown for one session, derived from its transcript."""

    session_id: str
    project_path: str
    first_user_message: Optional[UserMessage]
    last_user_message: Optional[UserMessage]
    stats: SessionStats
    git_branch: Optional[str] = None
    cwd: Optional[str] = None
    entries: tuple[TranscriptEntry, ...] = ()
    too_large: bool = False  # degraded stub, transcript not parsed


@dataclass(frozen=True)
class LoadFailure:
    """A transcript that exists but could not be read."""

    session_id: str
    path: Path
    reason: str


@dataclass(frozen=True)
class HeaderItem:
    """Non-selectable project heading in the grouped list."""

    project: str
    session_count: int
    total_messages: int


@dataclass(frozen=True)
class SessionRow:
    """Selectable list row bound to one session."""

    session: SessionSummary


ListItem = Union[HeaderItem, SessionRow]
