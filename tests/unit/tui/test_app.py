"""Tests for the main ReplApp."""

from pathlib import Path
from unittest.mock import MagicMock

from textual.pilot import Pilot
from textual.widgets import Markdown, Static

from reprise.config import ReplConfig
from reprise.kernel import ExecutionResult, create_default_kernel
from reprise.tui.app import ReplApp
from reprise.tui.history import HistoryStore, Navigating, NotNavigating
from reprise.tui.widgets.completion_popup import CompletionPopup
from reprise.tui.widgets.info_bar import InfoBar
from reprise.tui.widgets.input_area import InputArea
from reprise.tui.widgets.output_area import OutputArea


def make_app(*entries: str, config: ReplConfig | None = None) -> ReplApp:
    """Build an app whose history already holds entries."""
    history = HistoryStore()
    for entry in entries:
        history.try_add(entry)
    return ReplApp(kernel=create_default_kernel(), config=config, history=history)


def output_texts(app: ReplApp) -> list[str]:
    return [str(s.render()) for s in app.query_one(OutputArea).query(Static)]


async def submit(pilot: Pilot[None], text: str) -> None:
    """Type text into the input and press enter, waiting for evaluation."""
    app = pilot.app
    app.query_one(InputArea).text = text
    await pilot.press("enter")
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestReplAppComposition:
    """Tests for ReplApp layout."""

    async def test_app_has_four_widgets(self) -> None:
        """App composes output area, info bar, completion popup, and input area."""
        app = make_app()
        async with app.run_test() as pilot:
            assert pilot.app.query_one(OutputArea)
            assert pilot.app.query_one(InfoBar)
            assert pilot.app.query_one(CompletionPopup)
            assert pilot.app.query_one(InputArea)

    async def test_builtin_commands_registered(self) -> None:
        """Built-in commands are registered on startup."""
        app = make_app()
        async with app.run_test() as pilot:
            names = [name for name, _desc in pilot.app._command_registry.list_commands()]
            for expected in ("/help", "/history", "/kernel", "/vars", "/write", "/quit"):
                assert expected in names

    async def test_register_custom_command(self) -> None:
        """Custom commands can be registered before run."""
        handler = MagicMock()
        app = make_app()
        app.register_command("/custom", handler, "Custom command")
        async with app.run_test() as pilot:
            pilot.app.query_one(InputArea).text = "/custom arg"
            await pilot.press("enter")
            await pilot.pause()
            handler.assert_called_once_with("arg")

    async def test_help_bar_mentions_history(self) -> None:
        """Help bar shows the history keys."""
        app = make_app()
        async with app.run_test() as pilot:
            help_bar = pilot.app.query_one("#help-bar", Static)
            assert "history" in str(help_bar.render()).lower()


class TestHistoryNavigation:
    """Tests for up/down arrow history recall."""

    async def test_up_with_empty_history_keeps_input(self) -> None:
        """Up arrow with no history leaves the input untouched."""
        app = make_app()
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            input_area.text = "hi"
            await pilot.press("up")
            await pilot.pause()
            assert input_area.text == "hi"
            assert pilot.app.cursor.state == NotNavigating()

    async def test_up_arrow_walks_back_and_clamps(self) -> None:
        """Up arrow shows newer entries first and stops at the oldest."""
        app = make_app("1", "2")
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            input_area.text = "hi"
            await pilot.press("up")
            await pilot.pause()
            assert input_area.text == "2"
            await pilot.press("up")
            await pilot.pause()
            await pilot.press("up")
            await pilot.pause()
            assert input_area.text == "1"
            assert pilot.app.cursor.index == 0

    async def test_down_past_newest_restores_draft(self) -> None:
        """Down arrow past the newest entry brings back what was typed."""
        app = make_app("1")
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            input_area.text = "hi"
            await pilot.press("up")
            await pilot.pause()
            await pilot.press("down")
            await pilot.pause()
            assert input_area.text == "hi"
            assert pilot.app.cursor.state == Navigating(1)

    async def test_down_without_browsing_does_nothing(self) -> None:
        """Down arrow before browsing leaves the input alone."""
        app = make_app("1")
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            input_area.text = "hi"
            await pilot.press("down")
            await pilot.pause()
            assert input_area.text == "hi"

    async def test_recalled_multiline_entry_is_verbatim(self) -> None:
        """A multi-line directive entry comes back exactly as submitted."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "#!python\n123")
            await pilot.press("up")
            await pilot.pause()
            assert pilot.app.query_one(InputArea).text == "#!python\n123"


class TestSubmission:
    """Tests for submitting code."""

    async def test_submission_is_evaluated_and_recorded(self) -> None:
        """Code is added to history and its result shown."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "6 * 7")
            assert pilot.app.history.entries == ("6 * 7",)
            assert "42" in output_texts(pilot.app)
            assert pilot.app._session.exchange_count == 1

    async def test_repeating_a_submission_is_recorded_once(self) -> None:
        """Consecutive identical submissions produce one entry."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "1")
            await submit(pilot, "1")
            assert pilot.app.history.count == 1

    async def test_info_bar_tracks_history_count(self) -> None:
        """The info bar shows the number of entries."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "x = 1")
            line1, _ = pilot.app.query_one(InfoBar)._state.render_lines()
            assert "History: 1" in line1

    async def test_failed_submission_is_still_recorded(self) -> None:
        """Errors show a traceback; the input stays in history."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "1 / 0")
            assert pilot.app.history.entries == ("1 / 0",)
            assert any("ZeroDivisionError" in t for t in output_texts(pilot.app))

    async def test_unknown_directive_reports_error(self) -> None:
        """A directive naming no kernel is reported and still recorded."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "#!cobol\nDISPLAY 'HI'")
            assert pilot.app.history.count == 1
            assert any("Unknown kernel" in t for t in output_texts(pilot.app))
            assert pilot.app._evaluation_in_progress is False

    async def test_slash_commands_not_recorded(self) -> None:
        """Commands are dispatched, not added to history."""
        app = make_app()
        async with app.run_test() as pilot:
            # Trailing space keeps the completion popup closed
            pilot.app.query_one(InputArea).text = "/history "
            await pilot.press("enter")
            await pilot.pause()
            assert pilot.app.history.count == 0
            assert "History is empty." in output_texts(pilot.app)

    async def test_cursor_kept_after_submit(self) -> None:
        """Submitting while browsing leaves the cursor where it was."""
        app = make_app("1", "2", "3")
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            await pilot.press("up")
            await pilot.pause()
            await pilot.press("up")
            await pilot.pause()
            assert input_area.text == "2"
            await pilot.press("enter")
            await pilot.pause()
            await pilot.app.workers.wait_for_complete()
            await pilot.pause()
            assert pilot.app.cursor.index == 1
            assert pilot.app.history.entries == ("1", "2", "3", "2")

    async def test_reset_history_on_submit(self) -> None:
        """With the reset option, submitting ends browsing."""
        app = make_app("1", "2", config=ReplConfig(reset_history_on_submit=True))
        async with app.run_test() as pilot:
            await pilot.press("up")
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            await pilot.app.workers.wait_for_complete()
            await pilot.pause()
            assert pilot.app.cursor.state == NotNavigating()
            await pilot.press("up")
            await pilot.pause()
            assert pilot.app.query_one(InputArea).text == "2"


class TestEvaluationGuard:
    """Tests that new submissions are rejected while one is running."""

    async def test_submission_rejected_while_running(self) -> None:
        """A second submission shows a message and is not recorded."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._evaluation_in_progress = True
            pilot.app.query_one(InputArea).text = "rejected"
            await pilot.press("enter")
            await pilot.pause()
            assert "rejected" not in pilot.app.history.entries
            assert any("already running" in t.lower() for t in output_texts(pilot.app))

    async def test_double_escape_cancels(self) -> None:
        """Double escape stops a running evaluation and shows Cancelled."""
        app = make_app()
        async with app.run_test() as pilot:
            input_area = pilot.app.query_one(InputArea)
            pilot.app._evaluation_in_progress = True
            input_area.evaluation_in_progress = True
            input_area.text = "some text"
            id_before = pilot.app._submission_id
            await pilot.press("escape")
            await pilot.pause()
            assert input_area.text == ""
            await pilot.press("escape")
            await pilot.pause()
            assert pilot.app._evaluation_in_progress is False
            assert pilot.app._submission_id > id_before
            _, line2 = pilot.app.query_one(InfoBar)._state.render_lines()
            assert "Cancelled" in line2

    async def test_new_evaluation_stops_pending_phase_reset(self) -> None:
        """The Ready reset scheduled by a finished evaluation does not hit the next one."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "1")
            assert pilot.app._phase_reset_handle is not None
            pilot.app.query_one(InputArea).text = "import time\ntime.sleep(0.5)"
            await pilot.press("enter")
            await pilot.pause()
            assert pilot.app._phase_reset_handle is None
            _, line2 = pilot.app.query_one(InfoBar)._state.render_lines()
            assert line2.startswith("Phase: Running")
            await pilot.app.workers.wait_for_complete()
            await pilot.pause()

    async def test_stale_result_ignored(self) -> None:
        """A result posted for an old submission id is discarded."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._submission_id = 5
            before = len(output_texts(pilot.app))
            stale = ExecutionResult(kernel="python", status="ok", stdout="stale\n", stderr="")
            pilot.app._on_evaluation_complete(4, "old", [stale])
            await pilot.pause()
            assert len(output_texts(pilot.app)) == before
            assert pilot.app._session.exchange_count == 0


class TestCommands:
    """Tests for built-in slash commands."""

    async def test_help_renders_markdown(self) -> None:
        """The /help command lists commands."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._cmd_help("")
            await pilot.pause()
            assert len(pilot.app.query_one(OutputArea).query(Markdown)) == 1

    async def test_history_lists_entries(self) -> None:
        """The /history command numbers entries and indents continuation lines."""
        app = make_app("x = 1", "#!shell\necho hi")
        async with app.run_test() as pilot:
            pilot.app._cmd_history("")
            await pilot.pause()
            listing = output_texts(pilot.app)[-1]
            assert "   0  x = 1" in listing
            assert "   1  #!shell" in listing
            assert "      echo hi" in listing

    async def test_kernel_switch(self) -> None:
        """The /kernel command changes the default kernel."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._cmd_kernel("shell")
            await pilot.pause()
            assert pilot.app._kernel.default_name == "shell"
            line1, _ = pilot.app.query_one(InfoBar)._state.render_lines()
            assert "Kernel: shell" in line1

    async def test_kernel_unknown_name(self) -> None:
        """An unknown kernel name is reported and ignored."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._cmd_kernel("cobol")
            await pilot.pause()
            assert pilot.app._kernel.default_name == "python"
            assert any("Unknown kernel" in t for t in output_texts(pilot.app))

    async def test_vars_after_assignment(self) -> None:
        """The /vars command shows Python variables."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "answer = 42")
            pilot.app._cmd_vars("")
            await pilot.pause()
            assert any("answer (int)" in t for t in output_texts(pilot.app))

    async def test_reset_keeps_history(self) -> None:
        """The /reset command clears kernel state but not history."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "answer = 42")
            pilot.app._cmd_reset("")
            pilot.app._cmd_vars("")
            await pilot.pause()
            assert pilot.app.history.count == 1
            assert "No variables defined yet." in output_texts(pilot.app)

    async def test_write_transcript(self, tmp_path: Path) -> None:
        """The /write command saves the session."""
        app = make_app()
        async with app.run_test() as pilot:
            await submit(pilot, "print('saved')")
            target = tmp_path / "log"
            pilot.app._cmd_write(str(target))
            await pilot.pause()
            content = (tmp_path / "log.md").read_text()
            assert "print('saved')" in content
            assert "saved" in content

    async def test_write_with_nothing_to_save(self) -> None:
        """The /write command refuses an empty session."""
        app = make_app()
        async with app.run_test() as pilot:
            pilot.app._cmd_write("")
            await pilot.pause()
            assert any("Nothing to save" in t for t in output_texts(pilot.app))
