"""List pane renderer.

Draws the grouped session list: a bold project heading followed by one
indented row per session, coloured by how recently it was active.
"""

import curses

from ..core import HeaderItem
from ..formatting import format_header, format_path, format_session_list_item, recency_color
from ..navigation import SessionNavigator


def ensure_cursor_visible(nav: SessionNavigator, scroll_offset: int, height: int) -> int:
    """Return a scroll offset that keeps the cursor (and its heading, if adjacent) on screen."""
    if nav.cursor is None or height <= 0:
        return 0
    top = nav.cursor
    if top > 0 and nav.is_header(top - 1):
        top -= 1
    if top < scroll_offset:
        return top
    if nav.cursor >= scroll_offset + height:
        return nav.cursor - height + 1
    return scroll_offset


def draw(stdscr: "curses.window", nav: SessionNavigator, scroll_offset: int,
         pairs: dict[str, int], x: int, y: int, width: int, height: int) -> None:
    """Render the visible slice of the grouped list.

    Args:
        stdscr: The curses window to draw on.
        nav: Navigator holding the items and cursor.
        scroll_offset: Index of the first visible item.
        pairs: Colour pair ids keyed by name ("header", "selected", "green", ...).
        x: Starting column of the pane.
        y: Starting row of the pane.
        width: Width of the pane in columns.
        height: Height of the pane in rows.
    """
    for row in range(height):
        index = scroll_offset + row
        if index >= len(nav.items):
            _put(stdscr, y + row, x, "", width, curses.A_NORMAL)
            continue

        item = nav.items[index]
        if isinstance(item, HeaderItem):
            text = format_header(format_path(item.project), item.session_count, item.total_messages)
            attr = curses.color_pair(pairs["project"]) | curses.A_BOLD
        else:
            text = "  " + format_session_list_item(item.session)
            if index == nav.cursor:
                attr = curses.color_pair(pairs["selected"]) | curses.A_BOLD
            else:
                color = recency_color(item.session.last_timestamp)
                attr = curses.color_pair(pairs[color])
                if color == "gray":
                    attr |= curses.A_DIM

        _put(stdscr, y + row, x, text, width, attr)


def _put(stdscr: "curses.window", row: int, col: int, text: str, width: int, attr: int) -> None:
    try:
        stdscr.addstr(row, col, text[:width].ljust(width), attr)
    except curses.error:
        pass
