"""Kernels that evaluate REPL submissions."""

from reprise.kernel.base import ExecutionResult, Kernel, KernelError, UnknownKernelError
from reprise.kernel.composite import CompositeKernel
from reprise.kernel.directives import DirectiveChunk, split_directives
from reprise.kernel.python import PythonKernel
from reprise.kernel.shell import DEFAULT_SHELL_TIMEOUT, ShellKernel


def create_default_kernel(
    default: str = "python", shell_timeout: float = DEFAULT_SHELL_TIMEOUT
) -> CompositeKernel:
    """Create a composite kernel with the built-in language kernels."""
    return CompositeKernel(
        [PythonKernel(), ShellKernel(timeout=shell_timeout)],
        default=default,
    )


__all__ = [
    "CompositeKernel",
    "DirectiveChunk",
    "ExecutionResult",
    "Kernel",
    "KernelError",
    "PythonKernel",
    "ShellKernel",
    "UnknownKernelError",
    "create_default_kernel",
    "split_directives",
]
