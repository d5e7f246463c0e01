"""Transcript pane of the REPL."""

from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Markdown, Static


class OutputArea(VerticalScroll):
    """Scrolling list of submissions, kernel output and system messages.

    Kernel output is always shown verbatim. ``markdown_enabled`` only
    affects system markdown such as the /help text.
    """

    DEFAULT_CSS = """
    OutputArea {
        height: 1fr;
        padding: 0 1;
    }
    OutputArea:focus {
        border: solid #8bc34a;
    }
    OutputArea .submission {
        margin-top: 1;
        color: $accent;
    }
    OutputArea .elapsed {
        color: $text-muted;
    }
    OutputArea .error-output {
        color: $error;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.markdown_enabled = True

    def _append(self, *widgets: Widget) -> None:
        self.mount(*widgets)
        self.scroll_end(animate=False)

    def add_submission(self, text: str) -> None:
        """Echo a submission; continuation lines are indented under the marker."""
        first, *rest = text.split("\n")
        echoed = "\n".join([f"❯ {first}", *(f"  {line}" for line in rest)])
        self._append(Static(echoed, classes="submission", markup=False))

    def add_result(self, text: str, elapsed_seconds: float, *, error: bool = False) -> None:
        """Show kernel output (if any) and the run time."""
        widgets: list[Widget] = []
        if text:
            widgets.append(
                Static(text, classes="error-output" if error else "result", markup=False)
            )
        widgets.append(Static(f"[{elapsed_seconds:.2f}s]", classes="elapsed", markup=False))
        self._append(*widgets)

    def add_system_message(self, text: str) -> None:
        self._append(Static(text, classes="system-message", markup=False))

    def add_system_markdown(self, text: str) -> None:
        """Like add_system_message, rendered as markdown while enabled."""
        if self.markdown_enabled:
            self._append(Markdown(text))
        else:
            self.add_system_message(text)

    def clear(self) -> None:
        self.remove_children()
