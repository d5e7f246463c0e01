"""Multi-line prompt widget."""

from textual import events
from textual.message import Message
from textual.widgets import TextArea

NEWLINE_KEYS = frozenset({"shift+enter", "alt+enter", "ctrl+j"})


class InputSubmitted(Message):
    """Posted with the raw prompt text when the user presses Enter."""

    def __init__(self, text: str) -> None:
        super().__init__()
        self.text = text


class InputArea(TextArea):
    """Input widget for the REPL prompt.

    Enter submits, Shift+Enter, Alt+Enter or Ctrl+J insert a newline.
    Submitted text is passed on exactly as typed. Up on the first line and
    Down on the last line request history navigation; elsewhere they move
    the caret between lines. While the completion popup is open the
    arrows, Tab, Enter and Escape drive the popup instead.

    The app sets ``evaluation_in_progress`` and ``completion_active``;
    the widget only reads them to decide what a key means.
    """

    DEFAULT_CSS = """
    InputArea {
        height: auto;
        min-height: 1;
        max-height: 10;
        border: none;
    }
    InputArea:focus {
        border: none;
    }
    """

    BINDINGS = []  # TextArea bindings replaced by _on_key

    class CompletionNavigate(Message):
        """Move the popup selection ("next" or "prev")."""

        def __init__(self, direction: str) -> None:
            super().__init__()
            self.direction = direction

    class CompletionAccept(Message):
        """Take the selected completion."""

    class CompletionDismiss(Message):
        """Close the popup."""

    class FocusToggle(Message):
        """Tab pressed outside completion mode."""

    class HistoryNavigate(Message):
        """Recall an older ("prev") or newer ("next") history entry."""

        def __init__(self, direction: str) -> None:
            super().__init__()
            self.direction = direction

    class EvaluationCancelled(Message):
        """Escape pressed on an empty prompt while an evaluation runs."""

    def __init__(self) -> None:
        super().__init__(language=None, show_line_numbers=False)
        self.evaluation_in_progress = False
        self.completion_active = False

    def _on_first_line(self) -> bool:
        return self.cursor_location[0] == 0

    def _on_last_line(self) -> bool:
        return self.cursor_location[0] >= self.document.line_count - 1

    def _completion_message(self, key: str) -> Message | None:
        if key in ("tab", "enter"):
            return InputArea.CompletionAccept()
        if key == "down":
            return InputArea.CompletionNavigate("next")
        if key == "up":
            return InputArea.CompletionNavigate("prev")
        if key == "escape":
            return InputArea.CompletionDismiss()
        return None

    def _handle_key(self, key: str) -> bool:
        """Act on a prompt key. Returns False to leave it to TextArea."""
        if self.completion_active:
            message = self._completion_message(key)
            if message is not None:
                self.post_message(message)
                return True

        if key == "tab":
            self.post_message(InputArea.FocusToggle())
        elif key == "up" and self._on_first_line():
            self.post_message(InputArea.HistoryNavigate("prev"))
        elif key == "down" and self._on_last_line():
            self.post_message(InputArea.HistoryNavigate("next"))
        elif key in NEWLINE_KEYS:
            self.insert("\n")
        elif key == "enter":
            self._submit()
        elif key == "escape":
            if self.text:
                self.text = ""
            elif self.evaluation_in_progress:
                self.post_message(InputArea.EvaluationCancelled())
        else:
            return False
        return True

    def _submit(self) -> None:
        text = self.text
        if not text.strip():
            return
        self.post_message(InputSubmitted(text))
        self.text = ""

    async def _on_key(self, event: events.Key) -> None:
        if self._handle_key(event.key):
            event.prevent_default()
            event.stop()
            return
        await super()._on_key(event)
