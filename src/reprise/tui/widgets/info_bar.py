"""Two-line status bar above the prompt."""

from dataclasses import dataclass

from textual.widgets import Static


@dataclass
class InfoBarState:
    """What the status bar shows, kept apart from the widget for testing.

    Line one names the default kernel and the history size. Line two
    holds the evaluation phase and, while one is known, the run time.
    """

    kernel: str
    history_count: int = 0
    phase: str = "Ready"
    elapsed: float | None = None

    def set_history_count(self, count: int) -> None:
        self.history_count = count

    def set_running(self, elapsed: float) -> None:
        """Running phase; the dot count cycles with elapsed time."""
        dots = int(elapsed * 3) % 3 + 1
        self.phase = "Running" + ("." * dots).ljust(3)
        self.elapsed = elapsed

    def set_done(self, elapsed: float, chunks: int) -> None:
        self.phase = f"Done ({chunks} chunk{'' if chunks == 1 else 's'})"
        self.elapsed = elapsed

    def set_error(self, elapsed: float) -> None:
        self.phase = "Error"
        self.elapsed = elapsed

    def set_cancelled(self) -> None:
        self.phase = "Cancelled"
        self.elapsed = None

    def reset(self) -> None:
        self.phase = "Ready"
        self.elapsed = None

    def render_lines(self) -> tuple[str, str]:
        """Return the two status lines."""
        timing = "" if self.elapsed is None else f" | Time: {self.elapsed:.1f}s"
        return (
            f"Kernel: {self.kernel} │ History: {self.history_count}",
            f"Phase: {self.phase}{timing}",
        )


class InfoBar(Static):
    """Status bar widget; every update re-renders from InfoBarState."""

    DEFAULT_CSS = """
    InfoBar {
        height: auto;
        padding: 0 1;
        border: solid $accent;
    }
    """

    def __init__(self, kernel: str) -> None:
        state = InfoBarState(kernel=kernel)
        super().__init__("\n".join(state.render_lines()), markup=False)
        self._state = state

    def _show(self) -> None:
        self.update("\n".join(self._state.render_lines()))

    def update_kernel(self, kernel: str) -> None:
        self._state.kernel = kernel
        self._show()

    def update_history_count(self, count: int) -> None:
        self._state.set_history_count(count)
        self._show()

    def update_running(self, elapsed: float) -> None:
        self._state.set_running(elapsed)
        self._show()

    def update_done(self, elapsed: float, chunks: int) -> None:
        self._state.set_done(elapsed, chunks)
        self._show()

    def update_error(self, elapsed: float) -> None:
        self._state.set_error(elapsed)
        self._show()

    def update_cancelled(self) -> None:
        self._state.set_cancelled()
        self._show()

    def reset_phase(self) -> None:
        """Back to Ready, used a moment after an evaluation finishes."""
        self._state.reset()
        self._show()
