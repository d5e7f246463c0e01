"""Input buffer collaborators for history navigation."""

from typing import Protocol

from textual.widgets import TextArea


class TextBuffer(Protocol):
    """The part of an editable buffer that history navigation needs."""

    def get_content(self) -> str: ...

    def set_content(self, text: str) -> None: ...


class LineBuffer:
    """Plain in-memory buffer.

    Used for scripted submissions and wherever no widget is attached.
    """

    def __init__(self, content: str = "") -> None:
        self.content = content

    def get_content(self) -> str:
        return self.content

    def set_content(self, text: str) -> None:
        self.content = text

    def __repr__(self) -> str:
        return f"LineBuffer({self.content!r})"


class TextAreaBuffer:
    """Adapts a Textual TextArea to the TextBuffer protocol.

    Setting content places the caret after the last character so the
    user can keep typing at the end of a recalled entry.
    """

    def __init__(self, text_area: TextArea) -> None:
        self._text_area = text_area

    def get_content(self) -> str:
        return self._text_area.text

    def set_content(self, text: str) -> None:
        self._text_area.text = text
        self._text_area.move_cursor(self._text_area.document.end)
