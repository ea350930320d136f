"""Grouped, header-aware session list and its cursor.

Sessions are shown under one heading per project. Headings are landmarks
only: every cursor operation finishes on a session row (or leaves the cursor
where it was).
"""

from collections.abc import Iterable, Sequence

from .core import HeaderItem, ListItem, SessionRow, SessionSummary


def build_grouped_items(sessions: Iterable[SessionSummary]) -> list[ListItem]:
    """Lay sessions out as [header, row, row, header, row, ...].

    Projects are ordered by their most recently active session, and sessions
    within a project by last activity, newest first.
    """
    grouped: dict[str, list[SessionSummary]] = {}
    for session in sessions:
        grouped.setdefault(session.project, []).append(session)

    groups = sorted(
        grouped.items(),
        key=lambda item: max(s.last_timestamp for s in item[1]),
        reverse=True,
    )

    items: list[ListItem] = []
    for project, project_sessions in groups:
        items.append(HeaderItem(
            project=project,
            session_count=len(project_sessions),
            total_messages=sum(s.message_count for s in project_sessions),
        ))
        for session in sorted(project_sessions, key=lambda s: s.last_timestamp, reverse=True):
            items.append(SessionRow(session))

    return items


class SessionNavigator:
    """Cursor over a grouped item list that never rests on a header.

    ``cursor`` is None only when the list holds no rows at all.
    """

    def __init__(self, items: Sequence[ListItem]):
        self.items: tuple[ListItem, ...] = tuple(items)
        self.cursor: int | None = self._first_row()

    @classmethod
    def from_sessions(cls, sessions: Iterable[SessionSummary]) -> "SessionNavigator":
        return cls(build_grouped_items(sessions))

    def __len__(self) -> int:
        return len(self.items)

    def is_header(self, index: int) -> bool:
        return isinstance(self.items[index], HeaderItem)

    @property
    def current(self) -> SessionSummary | None:
        """The session under the cursor."""
        if self.cursor is None:
            return None
        item = self.items[self.cursor]
        return item.session if isinstance(item, SessionRow) else None

    @property
    def rows(self) -> list[int]:
        """Indexes of all selectable items, in display order."""
        return [i for i, item in enumerate(self.items) if isinstance(item, SessionRow)]

    def down(self, step: int = 1) -> int | None:
        if self.cursor is None:
            return None
        target = self.cursor + step
        while 0 <= target < len(self.items) and self.is_header(target):
            target += 1
        if 0 <= target < len(self.items):
            self.cursor = target
        return self.cursor

    def up(self, step: int = 1) -> int | None:
        if self.cursor is None:
            return None
        target = self.cursor - step
        while 0 <= target < len(self.items) and self.is_header(target):
            target -= 1
        if 0 <= target < len(self.items):
            self.cursor = target
        return self.cursor

    def top(self) -> int | None:
        first = self._first_row()
        if first is not None:
            self.cursor = first
        return self.cursor

    def bottom(self) -> int | None:
        for index in range(len(self.items) - 1, -1, -1):
            if not self.is_header(index):
                self.cursor = index
                break
        return self.cursor

    def select(self, index: int) -> int | None:
        """Point directly at an item, snapping forward past headers."""
        if not 0 <= index < len(self.items):
            return self.cursor
        while index < len(self.items) and self.is_header(index):
            index += 1
        if index < len(self.items):
            self.cursor = index
        return self.cursor

    def _first_row(self) -> int | None:
        for index, item in enumerate(self.items):
            if isinstance(item, SessionRow):
                return index
        return None
