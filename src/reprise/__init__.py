"""reprise: interactive multi-kernel REPL with input history recall."""

from reprise.config import ReplConfig
from reprise.kernel import CompositeKernel, create_default_kernel
from reprise.tui.buffer import LineBuffer, TextBuffer
from reprise.tui.history import HistoryStore, Navigating, NavigationCursor, NotNavigating
from reprise.tui.navigation import (
    SubmissionRecorder,
    next_history,
    previous_history,
    submit_input,
)

__version__ = "0.1.0"

__all__ = [
    "CompositeKernel",
    "HistoryStore",
    "LineBuffer",
    "Navigating",
    "NavigationCursor",
    "NotNavigating",
    "ReplConfig",
    "SubmissionRecorder",
    "TextBuffer",
    "create_default_kernel",
    "next_history",
    "previous_history",
    "submit_input",
]
