"""Detail pane renderer: a scrollable text panel for one session."""

import curses

# Section titles drawn bold
_SECTIONS = {"Session Details", "Statistics", "First Message", "Last Message"}


def max_scroll(lines: list[str], height: int) -> int:
    return max(0, len(lines) - height)


def draw(stdscr: "curses.window", lines: list[str], scroll: int, pairs: dict[str, int],
         x: int, y: int, width: int, height: int) -> None:
    """Render lines[scroll:] into the pane, keeping a one-column margin."""
    content_width = max(1, width - 2)
    for row in range(height):
        index = scroll + row
        text = lines[index] if index < len(lines) else ""
        attr = curses.A_BOLD | curses.color_pair(pairs["project"]) if text in _SECTIONS else curses.A_NORMAL
        try:
            stdscr.addstr(y + row, x + 1, text[:content_width].ljust(content_width), attr)
        except curses.error:
            pass
