"""Path resolution for Claude Code data files."""

import os
from pathlib import Path

HISTORY_FILE = "history.jsonl"
PROJECTS_DIR = "projects"
TRANSCRIPT_SUFFIX = ".jsonl"

# Keep details for the 100 most recently loaded sessions
MAX_CACHE_SIZE = 100
# Transcripts above this size are not parsed
MAX_TRANSCRIPT_BYTES = 100 * 1024 * 1024


def get_claude_dir() -> Path:
    """Return the Claude data directory (``~/.claude`` unless overridden)."""
    env = os.environ.get("CLAUDASH_CLAUDE_DIR")
    if env:
        return Path(env)

    return Path.home() / ".claude"


def get_history_path(claude_dir: Path | None = None) -> Path:
    """Return the path to the append-only event log."""
    root = claude_dir if claude_dir is not None else get_claude_dir()
    return root / HISTORY_FILE


def get_projects_path(claude_dir: Path | None = None) -> Path:
    """Return the directory holding per-project transcript folders."""
    root = claude_dir if claude_dir is not None else get_claude_dir()
    return root / PROJECTS_DIR


def encode_project_path(project_path: str) -> str:
    """Convert '/home/melvin/foo' to '-home-melvin-foo'."""
    return project_path.replace("/", "-")


def get_transcript_path(project_path: str, session_id: str, claude_dir: Path | None = None) -> Path:
    """Return <claude_dir>/projects/<encoded project>/<session_id>.jsonl"""
    return get_projects_path(claude_dir) / encode_project_path(project_path) / f"{session_id}{TRANSCRIPT_SUFFIX}"
