"""curses front end for browsing sessions."""

from .app import run

__all__ = ["run"]
