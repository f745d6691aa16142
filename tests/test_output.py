"""Tests for the output system.

Covers:
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- NO_COLOR / TERM=dumb color disabling
- Rich markup escaping
- Logging configuration
- Global instance management
"""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from tsrestgen import output as output_module
from tsrestgen.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture
def tsrestgen_logger():
    """Yield the package logger and restore its state afterwards."""
    logger = logging.getLogger("tsrestgen")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_print_data_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).print_data("const a = 1;\n")
        captured = capsys.readouterr()
        assert captured.out == "const a = 1;\n"
        assert captured.err == ""

    def test_print_data_adds_final_newline(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).print_data("x")
        assert capsys.readouterr().out == "x\n"

    def test_diagnostics_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True)
        out.info("reading")
        out.success("done")
        out.warning("careful")
        out.error("boom")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == ["reading", "done", "Warning: careful", "Error: boom"]


# ------------------------------------------------------------------ #
# Quiet / verbose
# ------------------------------------------------------------------ #


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_and_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True, quiet=True)
        out.info("reading")
        out.success("done")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_warnings_and_errors(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True, quiet=True)
        out.warning("careful")
        out.error("boom")
        assert capsys.readouterr().err.splitlines() == ["Warning: careful", "Error: boom"]

    def test_debug_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("details")
        assert capsys.readouterr().err == ""

    def test_debug_shown_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(no_color=True, verbose=True)
        out.debug("details")
        assert capsys.readouterr().err == "[debug] details\n"
        assert out.is_verbose
        assert not out.is_quiet


# ------------------------------------------------------------------ #
# Color
# ------------------------------------------------------------------ #


class TestColor:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False

    def test_markup_in_messages_is_escaped(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        OutputManager().error("unexpected [bold]token[/bold]")
        assert "unexpected [bold]token[/bold]" in capsys.readouterr().err


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def test_not_verbose_leaves_logger_alone(self, tsrestgen_logger: logging.Logger) -> None:
        before = list(tsrestgen_logger.handlers)
        OutputManager(no_color=True).configure_logging()
        assert tsrestgen_logger.handlers == before

    def test_verbose_installs_single_handler(self, tsrestgen_logger: logging.Logger) -> None:
        out = OutputManager(no_color=True, verbose=True)
        out.configure_logging()
        out.configure_logging()
        rich_handlers = [h for h in tsrestgen_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert tsrestgen_logger.level == logging.DEBUG


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalOutput:
    def test_get_output_creates_default(self) -> None:
        reset_output()
        out = get_output()
        assert isinstance(out, OutputManager)
        assert get_output() is out

    def test_set_output(self) -> None:
        custom = OutputManager(quiet=True)
        set_output(custom)
        assert get_output() is custom

    def test_module_helpers_delegate(self, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(no_color=True, verbose=True))
        output_module.print_data("data")
        output_module.info("info")
        output_module.debug("dbg")
        output_module.error("bad")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert captured.err.splitlines() == ["info", "[debug] dbg", "Error: bad"]
