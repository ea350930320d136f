"""Main TUI application loop.

Manages curses setup/teardown, view state (list or detail, plus the error
and help overlays), input dispatch and the render loop. Clipboard copies run
in the background; their results come back through a queue and are shown as
a notification that disappears after a moment.
"""

import curses
import os
import queue
import time
from dataclasses import dataclass

from ..clipboard import Clipboard, ClipboardResult
from ..core import LoadFailure, SessionDetail, SessionSummary
from ..formatting import detail_lines
from ..loader import SessionDetailLoader
from ..navigation import SessionNavigator
from . import detail_pane, list_pane

VIEW_LIST = "LIST"
VIEW_DETAIL = "DETAIL"
OVERLAY_ERROR = "ERROR"
OVERLAY_HELP = "HELP"

NOTIFICATION_SECONDS = 1.5
PAGE_STEP = 10

_KEY_ESC = 27
_ENTER_KEYS = (curses.KEY_ENTER, ord("\n"), ord("\r"))

_TITLE = " ClauDash - Claude Code Session Dashboard"
_TITLE_HINT = " Press ? for help | q to quit"
_LIST_HINTS = " ↑↓/j/k: Navigate | Enter/→: Details | c: Copy path | q: Quit"
_DETAIL_HINTS = " j/k: Scroll | g/G: Top/Bottom | PgUp/PgDn: Page | Esc/q/←: Back"

_HELP = [
    "ClauDash - Keyboard Shortcuts",
    "",
    "Navigation",
    "  ↑/k         Move up",
    "  ↓/j         Move down",
    "  PageUp      Page up",
    "  PageDown    Page down",
    "  g/Home      Go to top",
    "  G/End       Go to bottom",
    "",
    "Actions",
    "  Enter/→     View session details",
    "  c           Copy project path to clipboard",
    "  ←/Escape    Go back / Close",
    "",
    "General",
    "  ?           Show this help",
    "  q           Quit",
    "  Ctrl+C      Quit",
    "",
    "Press any key to close...",
]


@dataclass
class _Notification:
    message: str
    ok: bool
    expires_at: float


class _State:
    """Mutable state container for the TUI."""

    def __init__(self, sessions: list[SessionSummary]) -> None:
        self.nav = SessionNavigator.from_sessions(sessions)
        self.view = VIEW_LIST
        self.overlay: str | None = None
        self.scroll_offset = 0
        self.detail: SessionDetail | None = None
        self.detail_lines: list[str] = []
        self.detail_scroll = 0
        self.body_height = 1
        self.error: str | None = None
        self.notification: _Notification | None = None
        self.results: "queue.SimpleQueue[ClipboardResult]" = queue.SimpleQueue()


def _init_colors() -> dict:
    """Initialize curses color pairs and return their ids by name."""
    curses.start_color()
    curses.use_default_colors()

    color_defs = {
        "bar": (curses.COLOR_WHITE, curses.COLOR_BLUE),
        "selected": (curses.COLOR_WHITE, curses.COLOR_BLUE),
        "project": (curses.COLOR_CYAN, -1),
        "green": (curses.COLOR_GREEN, -1),
        "yellow": (curses.COLOR_YELLOW, -1),
        "gray": (curses.COLOR_WHITE, -1),
        "error": (curses.COLOR_RED, -1),
        "loading": (curses.COLOR_YELLOW, -1),
        "notify_ok": (curses.COLOR_BLACK, curses.COLOR_GREEN),
        "notify_fail": (curses.COLOR_BLACK, curses.COLOR_RED),
    }
    pairs = {}
    for pair_id, (name, (fg, bg)) in enumerate(color_defs.items(), start=1):
        curses.init_pair(pair_id, fg, bg)
        pairs[name] = pair_id
    return pairs


def _draw_bar(stdscr: "curses.window", row: int, text: str, width: int, pair: int) -> None:
    try:
        stdscr.addstr(row, 0, text[:width].ljust(width), curses.color_pair(pair) | curses.A_BOLD)
    except curses.error:
        # Writing to the very last cell can raise on some terminals
        pass


def _draw_box(stdscr: "curses.window", lines: list[str], attr: int) -> None:
    """Draw a bordered box centred on the screen."""
    max_y, max_x = stdscr.getmaxyx()
    inner = min(max_x - 4, max(len(line) for line in lines) + 2)
    if inner <= 0:
        return
    height = min(max_y, len(lines) + 2)
    top = max(0, (max_y - height) // 2)
    left = max(0, (max_x - inner - 2) // 2)

    rows = ["┌" + "─" * inner + "┐"]
    rows += ["│" + (" " + line)[:inner].ljust(inner) + "│" for line in lines[: height - 2]]
    rows.append("└" + "─" * inner + "┘")
    for offset, text in enumerate(rows):
        try:
            stdscr.addstr(top + offset, left, text, attr)
        except curses.error:
            pass


def _render(stdscr: "curses.window", state: _State, pairs: dict) -> None:
    """Perform a full render of the TUI."""
    stdscr.erase()
    max_y, max_x = stdscr.getmaxyx()

    if max_y < 5 or max_x < 20:
        try:
            stdscr.addstr(0, 0, "Terminal too small")
        except curses.error:
            pass
        stdscr.noutrefresh()
        curses.doupdate()
        return

    _draw_bar(stdscr, 0, _TITLE, max_x, pairs["bar"])
    _draw_bar(stdscr, 1, _TITLE_HINT, max_x, pairs["bar"])

    body_y = 2
    state.body_height = max_y - 3

    if state.view == VIEW_DETAIL and state.detail is not None:
        state.detail_lines = detail_lines(state.detail, max_x)
        state.detail_scroll = min(state.detail_scroll, detail_pane.max_scroll(state.detail_lines, state.body_height))
        detail_pane.draw(stdscr, state.detail_lines, state.detail_scroll, pairs,
                         x=0, y=body_y, width=max_x, height=state.body_height)
        hints = _DETAIL_HINTS
    else:
        state.scroll_offset = list_pane.ensure_cursor_visible(state.nav, state.scroll_offset, state.body_height)
        list_pane.draw(stdscr, state.nav, state.scroll_offset, pairs,
                       x=0, y=body_y, width=max_x, height=state.body_height)
        hints = _LIST_HINTS

    _draw_bar(stdscr, max_y - 1, hints, max_x, pairs["bar"])

    if state.overlay == OVERLAY_ERROR:
        _draw_box(stdscr, [f"Error: {state.error}", "", "Press Esc, q or Enter to go back"],
                  curses.color_pair(pairs["error"]) | curses.A_BOLD)
    elif state.overlay == OVERLAY_HELP:
        _draw_box(stdscr, _HELP, curses.A_NORMAL)

    if state.notification is not None:
        if time.monotonic() >= state.notification.expires_at:
            state.notification = None
        else:
            pair = pairs["notify_ok"] if state.notification.ok else pairs["notify_fail"]
            _draw_box(stdscr, [state.notification.message], curses.color_pair(pair))

    stdscr.noutrefresh()
    curses.doupdate()


def _open_detail(stdscr: "curses.window", state: _State, loader: SessionDetailLoader, pairs: dict) -> None:
    """Load the highlighted session and switch to the detail view, or show an error."""
    session = state.nav.current
    if session is None:
        return

    _draw_box(stdscr, ["Loading session details..."], curses.color_pair(pairs["loading"]))
    stdscr.refresh()

    result = loader.load(session.session_id, session.project)
    if isinstance(result, SessionDetail):
        state.detail = result
        state.detail_scroll = 0
        state.view = VIEW_DETAIL
    elif isinstance(result, LoadFailure):
        state.error = f"Could not load session details ({result.reason})"
        state.overlay = OVERLAY_ERROR
    else:
        state.error = "Could not load session details (transcript not found)"
        state.overlay = OVERLAY_ERROR


def _copy_current(state: _State, clipboard: Clipboard) -> None:
    session = state.nav.current
    if session is None:
        return
    future = clipboard.copy(session.project)
    future.add_done_callback(lambda f: state.results.put(f.result()))


def _drain_results(state: _State) -> None:
    while True:
        try:
            result = state.results.get_nowait()
        except queue.Empty:
            return
        state.notification = _Notification(result.message, result.ok, time.monotonic() + NOTIFICATION_SECONDS)


def _handle_click(state: _State) -> None:
    try:
        _, _, mouse_y, _, _ = curses.getmouse()
    except curses.error:
        return
    row = mouse_y - 2
    if 0 <= row < state.body_height:
        state.nav.select(state.scroll_offset + row)


def _handle_list_key(key: int, state: _State) -> str | None:
    """Handle keypress in the list view. Returns 'quit', 'open', 'copy' or None."""
    nav = state.nav
    if key in (curses.KEY_UP, ord("k")):
        nav.up(1)
    elif key in (curses.KEY_DOWN, ord("j")):
        nav.down(1)
    elif key == curses.KEY_PPAGE:
        nav.up(PAGE_STEP)
    elif key == curses.KEY_NPAGE:
        nav.down(PAGE_STEP)
    elif key in (curses.KEY_HOME, ord("g")):
        nav.top()
    elif key in (curses.KEY_END, ord("G")):
        nav.bottom()
    elif key == curses.KEY_MOUSE:
        _handle_click(state)
    elif key in _ENTER_KEYS or key == curses.KEY_RIGHT:
        return "open"
    elif key == ord("c"):
        return "copy"
    elif key == ord("?"):
        state.overlay = OVERLAY_HELP
    elif key in (ord("q"), ord("Q"), _KEY_ESC):
        return "quit"
    return None


def _handle_detail_key(key: int, state: _State) -> None:
    limit = detail_pane.max_scroll(state.detail_lines, state.body_height)
    if key in (curses.KEY_DOWN, ord("j")):
        state.detail_scroll = min(limit, state.detail_scroll + 1)
    elif key in (curses.KEY_UP, ord("k")):
        state.detail_scroll = max(0, state.detail_scroll - 1)
    elif key == curses.KEY_NPAGE:
        state.detail_scroll = min(limit, state.detail_scroll + PAGE_STEP)
    elif key == curses.KEY_PPAGE:
        state.detail_scroll = max(0, state.detail_scroll - PAGE_STEP)
    elif key in (curses.KEY_HOME, ord("g")):
        state.detail_scroll = 0
    elif key in (curses.KEY_END, ord("G")):
        state.detail_scroll = limit
    elif key == ord("?"):
        state.overlay = OVERLAY_HELP
    elif key in (ord("q"), _KEY_ESC, curses.KEY_LEFT):
        # Back to the list; its cursor and scroll are untouched
        state.view = VIEW_LIST
        state.detail = None


def _main(stdscr: "curses.window", sessions: list[SessionSummary],
          loader: SessionDetailLoader, clipboard: Clipboard) -> None:
    """Curses main function, run inside curses.wrapper."""
    curses.curs_set(0)
    stdscr.keypad(True)
    stdscr.timeout(100)  # keep notifications and resizes responsive
    curses.mousemask(curses.ALL_MOUSE_EVENTS)
    pairs = _init_colors()

    state = _State(sessions)

    while True:
        _drain_results(state)
        _render(stdscr, state, pairs)

        try:
            key = stdscr.getch()
        except curses.error:
            continue

        if key == -1:
            continue
        if key == curses.KEY_RESIZE:
            stdscr.clear()
            continue

        if state.overlay == OVERLAY_HELP:
            state.overlay = None
            continue
        if state.overlay == OVERLAY_ERROR:
            if key in (_KEY_ESC, ord("q"), curses.KEY_LEFT) or key in _ENTER_KEYS:
                state.overlay = None
                state.error = None
            continue

        if state.view == VIEW_DETAIL:
            _handle_detail_key(key, state)
            continue

        action = _handle_list_key(key, state)
        if action == "quit":
            break
        elif action == "open":
            _open_detail(stdscr, state, loader, pairs)
        elif action == "copy":
            _copy_current(state, clipboard)


def run(sessions: list[SessionSummary], loader: SessionDetailLoader,
        clipboard: Clipboard | None = None) -> None:
    """Entry point for the TUI. Sets up curses and runs the main loop."""
    clipboard = clipboard if clipboard is not None else Clipboard()
    os.environ.setdefault("ESCDELAY", "25")
    try:
        curses.wrapper(_main, sessions, loader, clipboard)
    except KeyboardInterrupt:
        pass
    finally:
        clipboard.shutdown()
