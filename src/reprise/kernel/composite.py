"""Composite kernel routing submissions to language kernels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from reprise.kernel.base import ExecutionResult, Kernel, UnknownKernelError
from reprise.kernel.directives import split_directives

logger = logging.getLogger(__name__)

SubmissionHook = Callable[[str], object]


class CompositeKernel:
    """Front door for submissions.

    Every submission is first passed, unmodified, to the registered
    submission hooks. Only then is it split on ``#!name`` directives and
    evaluated chunk by chunk. Hooks therefore see a submission even when
    evaluation later fails or is still running.

    Args:
        kernels: Language kernels, addressed by their ``name``.
        default: Name of the kernel used for text without a directive.
    """

    def __init__(self, kernels: Iterable[Kernel], default: str) -> None:
        self._kernels: dict[str, Kernel] = {k.name: k for k in kernels}
        self._hooks: list[SubmissionHook] = []
        self._default = ""
        self.set_default(default)

    @property
    def default_name(self) -> str:
        """Name of the kernel used when no directive is given."""
        return self._default

    @property
    def kernel_names(self) -> list[str]:
        """Sorted names of registered kernels."""
        return sorted(self._kernels)

    def set_default(self, name: str) -> None:
        """Change the default kernel. Raises UnknownKernelError for unknown names."""
        name = name.lower()
        if name not in self._kernels:
            raise UnknownKernelError(name, self.kernel_names)
        self._default = name

    def get(self, name: str) -> Kernel:
        """Look up a kernel by name."""
        try:
            return self._kernels[name]
        except KeyError:
            raise UnknownKernelError(name, self.kernel_names) from None

    def add_submission_hook(self, hook: SubmissionHook) -> None:
        """Call hook with the full text of every submission, before evaluation."""
        self._hooks.append(hook)

    def submit(self, code: str) -> list[ExecutionResult]:
        """Record and evaluate a submission.

        Raises:
            UnknownKernelError: A directive names an unregistered kernel.
                Hooks have already run when this is raised.
        """
        self.record(code)
        return self.evaluate(code)

    def record(self, code: str) -> None:
        """Pass a submission to every hook without evaluating it."""
        for hook in self._hooks:
            hook(code)

    def evaluate(self, code: str, default: str | None = None) -> list[ExecutionResult]:
        """Evaluate a submission chunk by chunk, stopping at the first error.

        Safe to call from a worker thread; hooks are not involved. Pass
        ``default`` to pin the kernel used for text without a directive.
        """
        chunks = split_directives(code, default or self._default)
        # Resolve every target before running anything
        targets = [(self.get(chunk.kernel), chunk.code) for chunk in chunks]

        results: list[ExecutionResult] = []
        for kernel, chunk_code in targets:
            logger.debug("Executing %d chars on kernel %s", len(chunk_code), kernel.name)
            result = kernel.execute(chunk_code)
            results.append(result)
            if not result.ok:
                logger.info("Kernel %s reported an error", kernel.name)
                break
        return results

    def reset(self) -> None:
        """Reset state in all kernels."""
        for kernel in self._kernels.values():
            kernel.reset()
