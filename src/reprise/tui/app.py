"""Main Textual application for the reprise REPL."""

from __future__ import annotations

import time
from collections.abc import Callable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widgets import Static, TextArea
from textual.worker import Worker

from reprise.config import ReplConfig
from reprise.kernel import CompositeKernel, ExecutionResult, KernelError, PythonKernel
from reprise.tui.buffer import TextAreaBuffer
from reprise.tui.commands import CommandRegistry
from reprise.tui.history import HistoryStore, NavigationCursor
from reprise.tui.navigation import SubmissionRecorder, next_history, previous_history
from reprise.tui.session import ReplSession
from reprise.tui.widgets.completion_popup import CompletionPopup
from reprise.tui.widgets.info_bar import InfoBar
from reprise.tui.widgets.input_area import InputArea, InputSubmitted
from reprise.tui.widgets.output_area import OutputArea

REPRISE_GREEN = "#8bc34a"

HELP_BAR = "↑↓: history │ Ctrl+J: newline │ #!name: kernel │ Esc×2: cancel │ /: commands"

PHASE_RESET_DELAY = 2.0  # seconds the Done/Error phase stays visible


def _completion_prefix(raw_text: str) -> str | None:
    """Return the slash word being typed, or None when not completing."""
    if " " in raw_text or "\n" in raw_text:
        return None
    return raw_text if raw_text.startswith("/") else None


class ReplApp(App[None]):
    """Textual app for an interactive multi-kernel REPL.

    The app owns one history store and one navigation cursor and passes
    them explicitly to the navigation commands. Submissions reach the
    history through a kernel submission hook, synchronously and before
    evaluation starts in a worker thread.

    Args:
        kernel: Composite kernel receiving submissions.
        config: Session settings; defaults are used when omitted.
        history: Pre-populated history store, mainly for tests.
    """

    CSS = f"""
    Screen {{
        layout: vertical;
        border: solid {REPRISE_GREEN};
    }}
    #input-row {{
        height: auto;
        min-height: 1;
        max-height: 10;
    }}
    #input-row:focus-within {{
        border: solid {REPRISE_GREEN};
    }}
    #prompt {{
        width: 2;
        height: 1;
        color: {REPRISE_GREEN};
    }}
    #input-row InputArea {{
        width: 1fr;
    }}
    #help-bar {{
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }}
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        kernel: CompositeKernel,
        config: ReplConfig | None = None,
        history: HistoryStore | None = None,
    ) -> None:
        super().__init__()
        self._kernel = kernel
        self._config = config or ReplConfig()
        self._history = history if history is not None else HistoryStore()
        self._cursor = NavigationCursor()
        self._kernel.add_submission_hook(
            SubmissionRecorder(
                self._history,
                self._cursor,
                reset_on_submit=self._config.reset_history_on_submit,
            )
        )
        self._command_registry = CommandRegistry()
        self._session = ReplSession()
        self._evaluation_in_progress = False
        self._submission_id = 0
        self._start_time = 0.0
        self._timer_handle: Timer | None = None
        self._phase_reset_handle: Timer | None = None
        self._worker_handle: Worker[object] | None = None
        self._register_builtin_commands()

    @property
    def history(self) -> HistoryStore:
        """History store of this session."""
        return self._history

    @property
    def cursor(self) -> NavigationCursor:
        """History navigation cursor of this session."""
        return self._cursor

    @property
    def _output(self) -> OutputArea:
        return self.query_one(OutputArea)

    @property
    def _info_bar(self) -> InfoBar:
        return self.query_one(InfoBar)

    @property
    def _input(self) -> InputArea:
        return self.query_one(InputArea)

    def _register_builtin_commands(self) -> None:
        builtins: list[tuple[str, Callable[[str], object], str, tuple[str, ...]]] = [
            ("/help", self._cmd_help, "Show available commands", ("/?",)),
            ("/history", self._cmd_history, "List submitted inputs", ()),
            ("/kernel", self._cmd_kernel, "Show or set the default kernel [name]", ()),
            ("/vars", self._cmd_vars, "List Python variables", ()),
            ("/reset", self._cmd_reset, "Reset kernel state", ()),
            ("/clear", self._cmd_clear, "Clear the output pane", ()),
            ("/write", self._cmd_write, "Save session transcript [filename]", ()),
            ("/markdown", self._cmd_markdown, "Toggle markdown rendering", ()),
            ("/theme", self._cmd_theme, "Toggle dark/light theme", ()),
            ("/quit", self._cmd_quit, "Exit", ("/exit",)),
        ]
        for name, handler, description, aliases in builtins:
            self._command_registry.register(name, handler, description, aliases=aliases)

    def register_command(
        self,
        name: str,
        handler: Callable[[str], object],
        description: str,
        *,
        threaded: bool = False,
    ) -> None:
        """Add a slash command, e.g. from a script embedding the app.

        Threaded handlers run in a worker and must update widgets through
        ``app.call_from_thread()``.
        """
        self._command_registry.register(name, handler, description, threaded=threaded)

    def compose(self) -> ComposeResult:
        yield OutputArea()
        yield InfoBar(kernel=self._kernel.default_name)
        yield CompletionPopup()
        with Horizontal(id="input-row"):
            yield Static("❯", id="prompt")
            yield InputArea()
        yield Static(HELP_BAR, id="help-bar")

    def on_mount(self) -> None:
        self._output.markdown_enabled = self._config.markdown
        self._info_bar.update_history_count(self._history.count)
        try:
            self._input.focus()
        except NoMatches:
            pass  # not mounted yet

    # --- Completion popup ---

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Offer slash-command completions for a bare ``/word``."""
        prefix = _completion_prefix(self._input.text)
        matches = self._command_registry.completions(prefix) if prefix else []
        if matches:
            self.query_one(CompletionPopup).show_items(matches)
            self._input.completion_active = True
        else:
            self._hide_completions()

    def _hide_completions(self) -> None:
        self.query_one(CompletionPopup).hide()
        self._input.completion_active = False

    def on_input_area_completion_navigate(self, event: InputArea.CompletionNavigate) -> None:
        popup = self.query_one(CompletionPopup)
        if event.direction == "next":
            popup.select_next()
        else:
            popup.select_prev()

    def on_input_area_completion_accept(self, event: InputArea.CompletionAccept) -> None:
        choice = self.query_one(CompletionPopup).selected_value
        self._hide_completions()
        if choice:
            TextAreaBuffer(self._input).set_content(f"{choice} ")

    def on_input_area_completion_dismiss(self, event: InputArea.CompletionDismiss) -> None:
        self._hide_completions()

    # --- History and focus ---

    def on_input_area_history_navigate(self, event: InputArea.HistoryNavigate) -> None:
        """Recall history into the prompt."""
        step = previous_history if event.direction == "prev" else next_history
        step(self._history, self._cursor, TextAreaBuffer(self._input))

    def on_input_area_focus_toggle(self, event: InputArea.FocusToggle) -> None:
        self._output.focus()

    def on_key(self, event: events.Key) -> None:
        # Tab in the transcript returns to the prompt
        if event.key == "tab" and self._output.has_focus:
            event.prevent_default()
            event.stop()
            self._input.focus()

    # --- Submission and evaluation ---

    def on_input_submitted(self, event: InputSubmitted) -> None:
        """Dispatch a slash command or record and evaluate a submission."""
        self._hide_completions()
        text = event.text

        if self._command_registry.is_command(text):
            self._run_command(text)
            return

        if self._evaluation_in_progress:
            self._output.add_system_message(
                "An evaluation is already running. Press Esc twice to cancel it first."
            )
            return

        # History is written here, before the worker starts
        self._kernel.record(text)
        self._info_bar.update_history_count(self._history.count)
        self._output.add_submission(text)
        self._run_evaluation(text)

    def _run_command(self, text: str) -> None:
        resolved = self._command_registry.resolve(text)
        if resolved is None:
            self._output.add_system_message(f"Unknown command: {text.split()[0]}")
        elif resolved.threaded:
            self.run_worker(lambda: resolved.handler(resolved.args), thread=True)
        else:
            resolved.handler(resolved.args)

    def _run_evaluation(self, code: str) -> None:
        if self._phase_reset_handle is not None:
            # Drop the Ready reset still pending from the last evaluation
            self._phase_reset_handle.stop()
            self._phase_reset_handle = None
        self._submission_id += 1
        self._evaluation_in_progress = True
        self._input.evaluation_in_progress = True
        self._start_time = time.time()
        self._info_bar.update_running(0.0)
        self._timer_handle = self.set_interval(0.1, self._tick_timer)
        self._worker_handle = self.run_worker(
            self._make_evaluation_runner(code, self._kernel.default_name),
            thread=True,
            exit_on_error=False,
        )

    def _make_evaluation_runner(
        self, code: str, default: str
    ) -> Callable[[], list[ExecutionResult] | None]:
        """Build the worker function for one submission.

        The default kernel is pinned when the submission is made. Results
        are posted back only while the submission id still matches, so a
        cancelled evaluation finishing late is silently dropped.
        """
        my_id = self._submission_id

        def post(callback: Callable[..., object], *args: object) -> None:
            if self._submission_id == my_id:
                self.call_from_thread(callback, my_id, *args)

        def run() -> list[ExecutionResult] | None:
            try:
                results = self._kernel.evaluate(code, default=default)
            except KernelError as exc:
                post(self._on_evaluation_error, str(exc))
                return None
            except Exception as exc:
                post(self._on_evaluation_error, f"{type(exc).__name__}: {exc}")
                return None
            post(self._on_evaluation_complete, code, results)
            return results

        return run

    def _tick_timer(self) -> None:
        if self._evaluation_in_progress:
            self._info_bar.update_running(time.time() - self._start_time)

    def _on_evaluation_complete(
        self, submission_id: int, code: str, results: list[ExecutionResult]
    ) -> None:
        if submission_id != self._submission_id:
            return
        elapsed = time.time() - self._start_time
        self._stop_evaluation()

        failed = not all(r.ok for r in results)
        text = "\n".join(filter(None, (r.format_output() for r in results)))
        self._output.add_result(text, elapsed, error=failed)

        if failed:
            self._info_bar.update_error(elapsed)
        else:
            self._info_bar.update_done(elapsed, len(results))
        self._phase_reset_handle = self.set_timer(PHASE_RESET_DELAY, self._info_bar.reset_phase)

        kernels = ", ".join(dict.fromkeys(r.kernel for r in results)) or "none"
        self._session.add_exchange(code, text, f"---\nKernels: {kernels} | {elapsed:.2f}s")

    def _on_evaluation_error(self, submission_id: int, error_msg: str) -> None:
        """Report a submission the composite kernel could not route."""
        if submission_id != self._submission_id:
            return
        self._stop_evaluation()
        self._output.add_system_message(f"Error: {error_msg}")
        self._info_bar.reset_phase()

    def on_input_area_evaluation_cancelled(self, event: InputArea.EvaluationCancelled) -> None:
        """Abandon the running evaluation.

        A blocking kernel call cannot be interrupted, so the submission id
        is bumped and its result is discarded when it arrives.
        """
        self._submission_id += 1
        if self._worker_handle is not None:
            self._worker_handle.cancel()
            self._worker_handle = None
        self._stop_evaluation()
        self._info_bar.update_cancelled()
        self._output.add_system_message("Evaluation cancelled.")

    def _stop_evaluation(self) -> None:
        self._evaluation_in_progress = False
        self._input.evaluation_in_progress = False
        if self._timer_handle is not None:
            self._timer_handle.stop()
            self._timer_handle = None

    # --- Built-in command handlers ---

    def _cmd_help(self, args: str) -> None:
        lines = ["**Available commands:**", ""]
        lines += [f"- `{name}` {desc}" for name, desc in self._command_registry.list_commands()]
        lines += [
            "",
            "Start a line with `#!<kernel>` to send the following lines to another kernel.",
        ]
        self._output.add_system_markdown("\n".join(lines))

    def _cmd_history(self, args: str) -> None:
        """List history entries, oldest first."""
        if self._history.count == 0:
            self._output.add_system_message("History is empty.")
            return
        lines = []
        for i, entry in enumerate(self._history.entries):
            first, *rest = entry.split("\n")
            lines.append(f"{i:4d}  {first}")
            lines.extend(f"      {line}" for line in rest)
        self._output.add_system_message("\n".join(lines))

    def _cmd_kernel(self, args: str) -> None:
        """Show or change the default kernel."""
        name = args.strip()
        if name:
            try:
                self._kernel.set_default(name)
            except KernelError as e:
                self._output.add_system_message(str(e))
                return
            self._info_bar.update_kernel(self._kernel.default_name)
            self._output.add_system_message(f"Default kernel: {self._kernel.default_name}")
        else:
            available = ", ".join(self._kernel.kernel_names)
            self._output.add_system_message(
                f"Default kernel: {self._kernel.default_name} (available: {available})"
            )

    def _cmd_vars(self, args: str) -> None:
        try:
            kernel = self._kernel.get(PythonKernel.name)
        except KernelError as e:
            self._output.add_system_message(str(e))
            return
        if not isinstance(kernel, PythonKernel):
            self._output.add_system_message("The python kernel does not expose variables.")
            return
        variables = kernel.variables()
        if not variables:
            self._output.add_system_message("No variables defined yet.")
            return
        lines = ["Variables:"]
        lines += [f"  {name} ({type_name})" for name, type_name in sorted(variables.items())]
        self._output.add_system_message("\n".join(lines))

    def _cmd_reset(self, args: str) -> None:
        """Reset kernel state. Input history is kept."""
        self._kernel.reset()
        self._output.add_system_message("Kernel state reset.")

    def _cmd_clear(self, args: str) -> None:
        self._output.clear()

    def _cmd_write(self, args: str) -> None:
        """Save the session transcript, adding ``.md`` when missing."""
        if self._session.exchange_count == 0:
            self._output.add_system_message("Nothing to save - no submissions yet.")
            return
        filename = args.strip()
        if filename and not filename.lower().endswith(".md"):
            filename += ".md"
        try:
            path = self._session.write_transcript(filename or None)
        except OSError as e:
            self._output.add_system_message(f"Error saving: {e}")
            return
        self._output.add_system_message(
            f"Session saved to {path} ({self._session.exchange_count} submissions)"
        )

    def _cmd_markdown(self, args: str) -> None:
        output = self._output
        output.markdown_enabled = not output.markdown_enabled
        output.add_system_message(
            f"Markdown rendering: {'ON' if output.markdown_enabled else 'OFF'}"
        )

    def _cmd_theme(self, args: str) -> None:
        self.action_toggle_dark()
        mode = "dark" if self.current_theme.dark else "light"
        self._output.add_system_message(f"Theme: {mode}")

    def _cmd_quit(self, args: str) -> None:
        self.exit()
