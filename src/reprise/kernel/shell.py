"""Shell kernel running submissions through the system shell."""

import logging
import subprocess

from reprise.kernel.base import ExecutionResult, Kernel

logger = logging.getLogger(__name__)

DEFAULT_SHELL_TIMEOUT = 30.0  # seconds per submission


class ShellKernel(Kernel):
    """Runs each submission as a shell script in a fresh process."""

    name = "shell"

    def __init__(self, timeout: float = DEFAULT_SHELL_TIMEOUT, cwd: str | None = None) -> None:
        self.timeout = timeout
        self.cwd = cwd

    def execute(self, code: str) -> ExecutionResult:
        try:
            proc = subprocess.run(
                code,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.cwd,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning("Shell command timed out after %ss", self.timeout)
            return ExecutionResult(
                kernel=self.name,
                status="error",
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
                error=f"Command timed out after {self.timeout:g} seconds",
            )
        except OSError as e:
            return ExecutionResult(
                kernel=self.name, status="error", stdout="", stderr="", error=str(e)
            )

        error = None
        if proc.returncode != 0:
            error = f"Exit status {proc.returncode}"
        return ExecutionResult(
            kernel=self.name,
            status="error" if error else "ok",
            stdout=proc.stdout,
            stderr=proc.stderr,
            error=error,
        )


def _as_text(data: str | bytes | None) -> str:
    """Normalize partial output captured before a timeout."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
