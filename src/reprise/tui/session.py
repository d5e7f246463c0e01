"""REPL session transcript."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class Exchange:
    """One evaluated submission."""

    code: str
    output: str
    stats: str

    def to_markdown(self) -> list[str]:
        lines = ["", "```", self.code, "```", ""]
        if self.output:
            lines += ["```text", self.output, "```", ""]
        return lines + [self.stats, "", "---"]


class ReplSession:
    """Keeps submissions and their output for transcript export.

    Only evaluated submissions are kept; slash commands and rejected
    input never appear in a transcript.

    Args:
        title: Heading used in the transcript metadata.
    """

    def __init__(self, title: str = "reprise") -> None:
        self.title = title
        self._exchanges: list[Exchange] = []

    @property
    def exchange_count(self) -> int:
        return len(self._exchanges)

    def add_exchange(self, code: str, output: str, stats: str) -> None:
        self._exchanges.append(Exchange(code, output, stats))

    def clear(self) -> None:
        self._exchanges.clear()

    def format_transcript(self) -> str:
        """Render the session as markdown, one fenced block per submission."""
        now = datetime.now()
        lines = [
            "# Session Transcript",
            "",
            f"- **Date:** {now:%Y-%m-%d %H:%M:%S}",
            f"- **Session:** {self.title}",
            f"- **Submissions:** {self.exchange_count}",
            "",
            "---",
        ]
        for exchange in self._exchanges:
            lines.extend(exchange.to_markdown())
        return "\n".join(lines)

    def write_transcript(self, filename: str | None) -> str:
        """Save the transcript and return the path written.

        Without a filename a timestamped ``session-*.md`` in the current
        directory is used. Missing parent directories are created.
        """
        path = Path(filename or f"session-{datetime.now():%Y-%m-%d-%H%M%S}.md")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.format_transcript())
        return str(path)
