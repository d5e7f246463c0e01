"""Slash-command completion list shown above the prompt."""

from textual.widgets import Static


class CompletionPopup(Static):
    """Lists the slash commands matching what has been typed.

    Display only: the app decides what to show and reads back the
    selection. Hidden while empty.
    """

    DEFAULT_CSS = """
    CompletionPopup {
        height: auto;
        max-height: 8;
        display: none;
        border: solid $accent;
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__("", markup=False)
        self._choices: list[tuple[str, str]] = []
        self._cursor = 0

    @property
    def is_visible(self) -> bool:
        return len(self._choices) > 0

    @property
    def selected_value(self) -> str | None:
        """Command name under the highlight, or None when empty."""
        return self._choices[self._cursor][0] if self._choices else None

    def show_items(self, items: list[tuple[str, str]], selected: int = 0) -> None:
        """Show (command_name, description) pairs; selected is clamped."""
        self._choices = list(items)
        last = len(self._choices) - 1
        self._cursor = max(0, min(selected, last))
        self._redraw()

    def hide(self) -> None:
        self.show_items([])

    def select_next(self) -> int:
        """Highlight the following item, wrapping to the first."""
        return self._move(1)

    def select_prev(self) -> int:
        """Highlight the preceding item, wrapping to the last."""
        return self._move(-1)

    def _move(self, delta: int) -> int:
        if self._choices:
            self._cursor = (self._cursor + delta) % len(self._choices)
            self._redraw()
        return self._cursor

    def _redraw(self) -> None:
        self.display = self.is_visible
        width = max((len(name) for name, _ in self._choices), default=0)
        rows = []
        for i, (name, desc) in enumerate(self._choices):
            marker = ">" if i == self._cursor else " "
            rows.append(f"{marker} {name.ljust(width)}  {desc}")
        self.update("\n".join(rows))
