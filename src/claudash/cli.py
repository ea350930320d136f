"""CLI entry point for claudash."""

import logging
import shutil
from pathlib import Path

import click

from .core import HeaderItem, LoadFailure, SessionSummary
from .export import detail_to_json, detail_to_markdown
from .formatting import detail_lines, format_path, format_time
from .history import HistoryReadError, load_session_index
from .loader import SessionDetailLoader
from .navigation import build_grouped_items

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool, log_file: Path | None, console: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    if log_file is not None:
        logging.basicConfig(level=level, filename=str(log_file), format=LOG_FORMAT)
    elif console:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        # curses owns the terminal
        package_logger = logging.getLogger("claudash")
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False


def _load_index(claude_dir: Path | None) -> list[SessionSummary]:
    try:
        return load_session_index(claude_dir)
    except HistoryReadError as e:
        raise click.ClickException(str(e)) from e


def _find_session(sessions: list[SessionSummary], session_id: str) -> SessionSummary:
    """Exact match, else a unique prefix match."""
    for session in sessions:
        if session.session_id == session_id:
            return session

    matches = [s for s in sessions if s.session_id.startswith(session_id)]
    if not matches:
        raise click.ClickException(f"Session '{session_id}' not found.")
    if len(matches) > 1:
        raise click.ClickException(f"Session id '{session_id}' is ambiguous ({len(matches)} matches).")
    return matches[0]


@click.group(invoke_without_command=True)
@click.option("--claude-dir", type=click.Path(file_okay=False, path_type=Path), envvar="CLAUDASH_CLAUDE_DIR",
              default=None, help="Claude data directory (default: ~/.claude).")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write log records to this file.")
@click.pass_context
def main(ctx: click.Context, claude_dir: Path | None, verbose: bool, log_file: Path | None):
    """Browse Claude Code sessions grouped by project.

    Without a subcommand, opens the interactive dashboard.
    """
    ctx.ensure_object(dict)
    ctx.obj["claude_dir"] = claude_dir

    interactive = ctx.invoked_subcommand is None
    _configure_logging(verbose, log_file, console=not interactive)
    if not interactive:
        return

    click.echo("Loading sessions...")
    sessions = _load_index(claude_dir)
    click.echo(f"Found {len(sessions)} sessions")
    if not sessions:
        click.echo("No sessions found in history.jsonl")
        return

    from .tui import run

    run(sessions, SessionDetailLoader(claude_dir))


@main.command("list")
@click.argument("limit", type=click.IntRange(min=1), default=10)
@click.pass_context
def list_projects(ctx: click.Context, limit: int):
    """Print the LIMIT most recently active projects."""
    sessions = _load_index(ctx.obj["claude_dir"])
    items = build_grouped_items(sessions)

    click.echo("Recent Claude Code Sessions\n")

    shown = 0
    for index, item in enumerate(items):
        if not isinstance(item, HeaderItem):
            continue
        if shown == limit:
            break
        # Rows under a heading are newest first
        latest = items[index + 1].session
        first_message = latest.first_message
        preview = first_message[:60] + ("..." if len(first_message) > 60 else "")

        click.echo(f"{format_path(item.project)}")
        click.echo(f"   Last active: {format_time(latest.last_timestamp)}")
        click.echo(f"   Sessions: {item.session_count} | Messages: {item.total_messages}")
        click.echo(f'   Latest: "{preview}"')
        click.echo("")
        shown += 1

    click.echo(f"Showing {shown} most recent projects ({len(sessions)} total sessions)")


@main.command()
@click.argument("session_id")
@click.option("--format", "fmt", type=click.Choice(["text", "md", "json"]), default="text",
              help="Output format.")
@click.pass_context
def show(ctx: click.Context, session_id: str, fmt: str):
    """Summarise one session (full id or unique prefix)."""
    claude_dir = ctx.obj["claude_dir"]
    session = _find_session(_load_index(claude_dir), session_id)

    result = SessionDetailLoader(claude_dir).load(session.session_id, session.project)
    if result is None:
        raise click.ClickException(f"Transcript for session '{session.session_id}' not found.")
    if isinstance(result, LoadFailure):
        raise click.ClickException(f"Failed to read {result.path}: {result.reason}")

    if fmt == "json":
        click.echo(detail_to_json(result))
    elif fmt == "md":
        click.echo(detail_to_markdown(result), nl=False)
    else:
        width = shutil.get_terminal_size().columns
        click.echo("\n".join(detail_lines(result, width)))
