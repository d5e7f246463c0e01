"""Input history and the navigation cursor for the REPL prompt."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class HistoryStore:
    """In-memory log of submitted inputs.

    Entries are stored verbatim in order of submission, newest last.
    An entry identical to the one immediately before it is not stored
    again; non-adjacent repeats are kept.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []

    def try_add(self, text: str) -> bool:
        """Append text unless it repeats the newest entry. Returns True if added."""
        if self._entries and self._entries[-1] == text:
            logger.debug("Skipping consecutive duplicate history entry")
            return False
        self._entries.append(text)
        logger.debug("Recorded history entry %d", len(self._entries) - 1)
        return True

    @property
    def count(self) -> int:
        """Number of stored entries."""
        return len(self._entries)

    def get(self, index: int) -> str:
        """Return the entry at index. Negative or out-of-range indexes raise IndexError."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"History index {index} out of range (count={len(self._entries)})")
        return self._entries[index]

    @property
    def entries(self) -> tuple[str, ...]:
        """Read-only view of all entries, oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class NotNavigating:
    """The user is editing and has not started browsing history."""


@dataclass(frozen=True)
class Navigating:
    """The user is browsing history at ``index``.

    ``index`` equal to the history count is the one-past-end position:
    browsing moved past the newest entry and the snapshot is showing.
    """

    index: int


CursorState = NotNavigating | Navigating

NOT_NAVIGATING = NotNavigating()


class NavigationCursor:
    """Position within a HistoryStore plus the snapshot of the edit in progress.

    The cursor only holds state; the transitions live in
    ``reprise.tui.navigation`` and receive the store and buffer explicitly.
    """

    def __init__(self) -> None:
        self.state: CursorState = NOT_NAVIGATING
        self.snapshot: str = ""

    @property
    def index(self) -> int | None:
        """Current browsing index, or None when not navigating."""
        if isinstance(self.state, Navigating):
            return self.state.index
        return None

    @property
    def is_navigating(self) -> bool:
        """True while a browsing session is active (including one-past-end)."""
        return isinstance(self.state, Navigating)

    def begin(self, snapshot: str, index: int) -> None:
        """Start a browsing session, capturing the buffer content."""
        self.snapshot = snapshot
        self.state = Navigating(index)

    def move_to(self, index: int) -> None:
        """Move within the current browsing session."""
        self.state = Navigating(index)

    def reset(self) -> None:
        """Leave browsing and drop the snapshot."""
        self.state = NOT_NAVIGATING
        self.snapshot = ""

    def __repr__(self) -> str:
        return f"NavigationCursor(state={self.state!r})"
