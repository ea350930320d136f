"""Export session details to Markdown and JSON formats."""

import json

from .core import SessionDetail, UserMessage
from .formatting import format_duration, ms_to_datetime


def _iso(timestamp_ms: int | None) -> str | None:
    return ms_to_datetime(timestamp_ms).isoformat() if timestamp_ms is not None else None


def _message_to_dict(msg: UserMessage | None) -> dict | None:
    if msg is None:
        return None
    return {
        "content": msg.content,
        "timestamp": msg.timestamp,
        "uuid": msg.uuid,
    }


def detail_to_markdown(detail: SessionDetail) -> str:
    """Export a session summary as clean Markdown."""
    stats = detail.stats
    lines = [f"# Session {detail.session_id}", ""]

    lines.append(f"**Project:** {detail.project_path}")
    if detail.git_branch:
        lines.append(f"**Git branch:** {detail.git_branch}")
    if detail.cwd:
        lines.append(f"**Working directory:** {detail.cwd}")
    if detail.too_large:
        lines.append("**Note:** transcript too large, not parsed")
    lines.extend(["", "## Statistics", ""])

    lines.append(f"- Messages: {stats.total_messages} ({stats.user_messages} user, {stats.assistant_messages} assistant)")
    lines.append(f"- Tool calls: {stats.tool_calls}")
    if stats.tools:
        lines.append(f"- Tools used: {', '.join(sorted(stats.tools))}")
    lines.append(f"- Tokens: {stats.total_tokens}")
    lines.append(f"- Duration: {format_duration(stats.duration)}")

    for title, msg in (("First message", detail.first_user_message), ("Last message", detail.last_user_message)):
        if msg is None:
            continue
        ts = _iso(msg.timestamp)
        lines.extend(["", f"## {title}" + (f" ({ts})" if ts else ""), ""])
        lines.append(msg.content)

    return "\n".join(lines) + "\n"


def detail_to_json(detail: SessionDetail) -> str:
    """Export a session summary as structured JSON (entries are omitted)."""
    stats = detail.stats
    data = {
        "session_id": detail.session_id,
        "project_path": detail.project_path,
        "git_branch": detail.git_branch,
        "cwd": detail.cwd,
        "too_large": detail.too_large,
        "first_user_message": _message_to_dict(detail.first_user_message),
        "last_user_message": _message_to_dict(detail.last_user_message),
        "stats": {
            "total_messages": stats.total_messages,
            "user_messages": stats.user_messages,
            "assistant_messages": stats.assistant_messages,
            "tool_calls": stats.tool_calls,
            "total_tokens": stats.total_tokens,
            "duration": stats.duration,
            "tools": sorted(stats.tools),
        },
        "entry_count": len(detail.entries),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
