"""In-process Python kernel."""

import ast
import sys
import threading
import traceback
from io import StringIO
from typing import Any

from reprise.kernel.base import ExecutionResult, Kernel

# sys.stdout and sys.stderr are process-wide; one capture at a time
_STDIO_LOCK = threading.Lock()


class PythonKernel(Kernel):
    """Executes Python source in a namespace that persists across submissions.

    When the last statement is an expression its repr is returned as the
    result, the way the interactive interpreter echoes values.
    """

    name = "python"

    def __init__(self) -> None:
        self.namespace: dict[str, Any] = {"__name__": "__reprise__"}

    def execute(self, code: str) -> ExecutionResult:
        """Execute Python code and return results."""
        stdout_capture = StringIO()
        stderr_capture = StringIO()
        return_value = None
        error = None

        with _STDIO_LOCK:
            old_stdout = sys.stdout
            old_stderr = sys.stderr

            try:
                sys.stdout = stdout_capture
                sys.stderr = stderr_capture

                body, last_expr = _split_last_expression(code)
                if body is not None:
                    exec(compile(body, "<reprise>", "exec"), self.namespace)
                if last_expr is not None:
                    value = eval(compile(last_expr, "<reprise>", "eval"), self.namespace)
                    if value is not None:
                        self.namespace["_"] = value
                        return_value = repr(value)

            except Exception:
                error = traceback.format_exc()
            finally:
                sys.stdout = old_stdout
                sys.stderr = old_stderr

        return ExecutionResult(
            kernel=self.name,
            status="error" if error else "ok",
            stdout=stdout_capture.getvalue(),
            stderr=stderr_capture.getvalue(),
            return_value=return_value,
            error=error,
        )

    def variables(self) -> dict[str, str]:
        """List non-private variables and their types."""
        return {
            k: type(v).__name__
            for k, v in self.namespace.items()
            if not k.startswith("_")
        }

    def reset(self) -> None:
        self.namespace = {"__name__": "__reprise__"}


def _split_last_expression(code: str) -> tuple[ast.Module | None, ast.Expression | None]:
    """Split code into statements to exec and a trailing expression to eval.

    Syntax errors propagate so they are reported like any other failure.
    """
    tree = ast.parse(code, "<reprise>", "exec")
    if not tree.body or not isinstance(tree.body[-1], ast.Expr):
        return tree, None
    last = tree.body.pop()
    expr = ast.Expression(body=last.value)  # type: ignore[attr-defined]
    body = tree if tree.body else None
    return body, expr
