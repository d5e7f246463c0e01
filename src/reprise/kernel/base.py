"""Kernel interface and execution results."""

from dataclasses import dataclass


class KernelError(Exception):
    """Kernel could not accept a submission."""

    pass


class UnknownKernelError(KernelError):
    """A directive or setting named a kernel that is not registered."""

    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(f"Unknown kernel: {name!r} (available: {', '.join(known)})")
        self.name = name
        self.known = known


@dataclass
class ExecutionResult:
    """Result of evaluating one chunk of code."""

    kernel: str
    status: str
    stdout: str
    stderr: str
    return_value: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when evaluation finished without error."""
        return self.status == "ok"

    def format_output(self) -> str:
        """Combine the visible parts of the result for display."""
        parts = [self.stdout.rstrip("\n"), self.stderr.rstrip("\n")]
        if self.return_value is not None:
            parts.append(self.return_value)
        if self.error:
            parts.append(self.error.rstrip("\n"))
        return "\n".join(p for p in parts if p)


class Kernel:
    """Evaluates code for one language.

    Subclasses set ``name`` and implement ``execute``. User-code failures
    are reported through the returned ExecutionResult, not raised.
    """

    name = ""

    def execute(self, code: str) -> ExecutionResult:
        raise NotImplementedError

    def reset(self) -> None:
        """Discard any state kept between submissions."""
