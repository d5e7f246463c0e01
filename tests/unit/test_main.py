"""Tests for the command-line entry point."""

from unittest.mock import patch

import pytest

from reprise.__main__ import build_parser, main, run_once
from reprise.kernel import create_default_kernel


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep tests from attaching handlers to the package logger."""
    with patch("reprise.__main__.setup_logging") as mock_setup:
        yield mock_setup


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults_are_none(self) -> None:
        """Unset options defer to the environment and config defaults."""
        args = build_parser().parse_args([])
        assert args.kernel is None
        assert args.execute is None
        assert args.shell_timeout is None
        assert args.reset_history_on_submit is None

    def test_options(self) -> None:
        args = build_parser().parse_args(
            ["-k", "shell", "-e", "ls", "--shell-timeout", "3", "--reset-history-on-submit"]
        )
        assert args.kernel == "shell"
        assert args.execute == "ls"
        assert args.shell_timeout == 3.0
        assert args.reset_history_on_submit is True


class TestRunOnce:
    """Tests for run_once."""

    def test_success_prints_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_once(create_default_kernel(), "1 + 1") == 0
        assert capsys.readouterr().out == "2\n"

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_once(create_default_kernel(), "1 / 0") == 1
        assert "ZeroDivisionError" in capsys.readouterr().err

    def test_unknown_kernel(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_once(create_default_kernel(), "#!cobol\nx") == 1
        assert "Unknown kernel: 'cobol'" in capsys.readouterr().err


class TestMain:
    """Tests for main."""

    def test_execute_runs_once(self, capsys: pytest.CaptureFixture[str], no_logging_setup) -> None:
        assert main(["-e", "print('hi')"]) == 0
        assert capsys.readouterr().out == "hi\n"
        no_logging_setup.assert_called_once_with("WARNING", None, console=True)

    def test_execute_with_shell_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-k", "shell", "-e", "echo from-shell"]) == 0
        assert capsys.readouterr().out == "from-shell\n"

    def test_bad_kernel_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["-k", "cobol", "-e", "x"])
        assert exc_info.value.code == 2
        assert "Unknown kernel" in capsys.readouterr().err

    def test_bad_config_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--shell-timeout", "-1", "-e", "x"])
        assert exc_info.value.code == 2
        assert "must be positive" in capsys.readouterr().err

    def test_interactive_starts_app(self, no_logging_setup) -> None:
        with patch("reprise.__main__.ReplApp") as mock_app:
            assert main([]) == 0
        mock_app.return_value.run.assert_called_once()
        assert mock_app.call_args.kwargs["config"].default_kernel == "python"
        no_logging_setup.assert_called_once_with("WARNING", None, console=False)
