"""History navigation commands and the submission hook.

Each command takes the history store, the cursor and the buffer as
arguments so the state machine can be driven without a running app.
Boundary conditions (empty history, oldest entry, not browsing) are
no-ops rather than errors.
"""

from __future__ import annotations

import logging

from reprise.tui.buffer import TextBuffer
from reprise.tui.history import HistoryStore, Navigating, NavigationCursor

logger = logging.getLogger(__name__)


def previous_history(history: HistoryStore, cursor: NavigationCursor, buffer: TextBuffer) -> None:
    """Show the next older entry, starting a browsing session if needed."""
    if history.count == 0:
        return
    state = cursor.state
    if not isinstance(state, Navigating) or state.index == history.count:
        # Fresh session, or re-entry from the one-past-end position
        newest = history.count - 1
        cursor.begin(buffer.get_content(), newest)
        buffer.set_content(history.get(newest))
        return
    if state.index > 0:
        cursor.move_to(state.index - 1)
        buffer.set_content(history.get(state.index - 1))


def next_history(history: HistoryStore, cursor: NavigationCursor, buffer: TextBuffer) -> None:
    """Show the next newer entry, or the snapshot once past the newest."""
    state = cursor.state
    if not isinstance(state, Navigating):
        return
    if state.index < history.count - 1:
        cursor.move_to(state.index + 1)
        buffer.set_content(history.get(state.index + 1))
    elif state.index == history.count - 1:
        buffer.set_content(cursor.snapshot)
        cursor.move_to(history.count)


class SubmissionRecorder:
    """Records finalized submissions into a history store.

    Register an instance as a kernel submission hook so every submission
    reaches history synchronously, before evaluation starts.

    Args:
        history: Store receiving the submitted text.
        cursor: Cursor of the same session.
        reset_on_submit: When True, every submission ends the browsing
            session. When False the cursor keeps its position and the
            snapshot is recaptured on the next re-entry.
    """

    def __init__(
        self,
        history: HistoryStore,
        cursor: NavigationCursor,
        *,
        reset_on_submit: bool = False,
    ) -> None:
        self.history = history
        self.cursor = cursor
        self.reset_on_submit = reset_on_submit

    def __call__(self, text: str) -> bool:
        added = self.history.try_add(text)
        if self.reset_on_submit:
            self.cursor.reset()
        logger.debug("Submission recorded=%s cursor=%r", added, self.cursor)
        return added


def submit_input(
    history: HistoryStore,
    cursor: NavigationCursor,
    buffer: TextBuffer,
    *,
    reset_on_submit: bool = False,
) -> bool:
    """Record the buffer content as a submission. Returns True if it was added."""
    recorder = SubmissionRecorder(history, cursor, reset_on_submit=reset_on_submit)
    return recorder(buffer.get_content())
