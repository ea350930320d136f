"""Formatting helpers for timestamps, numbers and text display."""

import os
import time
from datetime import datetime, timezone

from .core import SessionDetail, SessionSummary


def _now_ms() -> int:
    return int(time.time() * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert Unix milliseconds timestamp to local datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).astimezone()


def format_time(timestamp_ms: int | None, now_ms: int | None = None) -> str:
    """Relative time ('5m ago'), or a date once it is a month old."""
    if timestamp_ms is None:
        return "unknown"
    now_ms = now_ms if now_ms is not None else _now_ms()
    diff = now_ms - timestamp_ms

    minutes = diff // 60_000
    hours = diff // 3_600_000
    days = diff // 86_400_000

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    return ms_to_datetime(timestamp_ms).strftime("%Y-%m-%d")


def format_duration(ms: int) -> str:
    seconds = ms // 1000
    minutes = seconds // 60
    hours = minutes // 60

    if seconds < 60:
        return f"{seconds}s"
    if minutes < 60:
        return f"{minutes}m {seconds % 60}s"
    return f"{hours}h {minutes % 60}m"


def format_number(num: int) -> str:
    """1234 -> '1.2K', 2500000 -> '2.5M'."""
    if num < 1000:
        return str(num)
    if num < 1_000_000:
        return f"{num / 1000:.1f}K"
    return f"{num / 1_000_000:.1f}M"


def format_path(full_path: str, home: str | None = None) -> str:
    """Replace the home directory prefix with '~'."""
    home = home if home is not None else os.path.expanduser("~")
    if home and (full_path == home or full_path.startswith(home + "/")):
        return "~" + full_path[len(home):]
    return full_path


def truncate(text: str, max_length: int) -> str:
    """Truncate text to max_length, ending with '...' if cut."""
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def first_line(text: str | None) -> str:
    if not text:
        return ""
    return text.split("\n", 1)[0]


def wrap_text(text: str, max_width: int) -> list[str]:
    """Greedy word wrap, paragraph by paragraph.

    Words longer than max_width get a line of their own.
    """
    lines: list[str] = []

    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            if len(current + word) > max_width:
                if current:
                    lines.append(current.strip())
                current = word + " "
            else:
                current += word + " "
        lines.append(current.strip())

    return lines


def recency_color(timestamp_ms: int, now_ms: int | None = None) -> str:
    """'green' within a day, 'yellow' within a week, otherwise 'gray'."""
    now_ms = now_ms if now_ms is not None else _now_ms()
    hours = (now_ms - timestamp_ms) / 3_600_000
    if hours < 24:
        return "green"
    if hours < 168:
        return "yellow"
    return "gray"


def format_session_list_item(session: SessionSummary, now_ms: int | None = None, home: str | None = None) -> str:
    path = format_path(session.project, home)
    first_msg = truncate(first_line(session.first_message), 50)
    when = format_time(session.last_timestamp, now_ms)
    return f"{path} • {session.message_count} msgs • {first_msg} • {when}"


def format_header(project: str, session_count: int, total_messages: int) -> str:
    return f"{project} ({session_count} sessions, {total_messages} messages)"


def detail_lines(detail: SessionDetail, width: int = 80, now_ms: int | None = None,
                 home: str | None = None) -> list[str]:
    """Plain-text body of the session detail panel."""
    stats = detail.stats
    wrap_width = max(10, width - 8)
    lines = ["Session Details", ""]

    lines.append(f"Project: {format_path(detail.project_path, home)}")
    lines.append(f"Session ID: {detail.session_id}")
    if detail.git_branch:
        lines.append(f"Git Branch: {detail.git_branch}")
    if detail.cwd:
        lines.append(f"Working Directory: {format_path(detail.cwd, home)}")
    lines.append("")

    lines.append("Statistics")
    lines.append(
        f"  Messages: {stats.user_messages} user, {stats.assistant_messages} assistant "
        f"({stats.total_messages} total)"
    )
    lines.append(f"  Tool Calls: {stats.tool_calls}")
    if stats.tools:
        lines.append(f"  Tools Used: {', '.join(sorted(stats.tools))}")
    if stats.total_tokens > 0:
        lines.append(f"  Tokens: {format_number(stats.total_tokens)}")
    if stats.duration > 0:
        lines.append(f"  Duration: {format_duration(stats.duration)}")
    lines.append("")

    first = detail.first_user_message
    if first:
        lines.append("First Message")
        lines.append(f"Time: {format_time(first.timestamp, now_ms)}")
        lines.append("")
        lines.extend(f"  {line}" for line in wrap_text(first.content, wrap_width))
        lines.append("")

    last = detail.last_user_message
    # Only shown when it is a different prompt from the root
    if last and (first is None or last.uuid is None or last.uuid != first.uuid):
        lines.append("Last Message")
        lines.append(f"Time: {format_time(last.timestamp, now_ms)}")
        lines.append("")
        lines.extend(f"  {line}" for line in wrap_text(last.content, wrap_width))
        lines.append("")

    return lines
