"""Kernel-selection directives inside a submission.

A line consisting only of ``#!name`` routes the lines after it to the
kernel called ``name``. Text before the first directive goes to the
default kernel.
"""

import re
from dataclasses import dataclass

_DIRECTIVE_RE = re.compile(r"^#!([A-Za-z][\w.+-]*)\s*$")


@dataclass(frozen=True)
class DirectiveChunk:
    """A run of code addressed to one kernel."""

    kernel: str
    code: str


def parse_directive(line: str) -> str | None:
    """Return the kernel name if line is a directive, else None."""
    match = _DIRECTIVE_RE.match(line.strip())
    return match.group(1).lower() if match else None


def split_directives(code: str, default: str) -> list[DirectiveChunk]:
    """Split a submission into per-kernel chunks.

    Chunks with only whitespace are dropped, so a submission made of
    directives alone yields an empty list.
    """
    chunks: list[DirectiveChunk] = []
    kernel = default
    lines: list[str] = []

    def flush() -> None:
        text = "\n".join(lines)
        if text.strip():
            chunks.append(DirectiveChunk(kernel=kernel, code=text))

    for line in code.split("\n"):
        name = parse_directive(line)
        if name is None:
            lines.append(line)
            continue
        flush()
        kernel = name
        lines = []
    flush()
    return chunks
