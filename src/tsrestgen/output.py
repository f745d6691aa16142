"""Terminal output with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- generated source only (when ``--output -`` is used), so the
  contract can be piped straight into another tool.
* **stderr** -- every diagnostic: progress, success, warnings, errors.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and the
  ``--no-color`` CLI flag.

:class:`OutputManager` holds the Rich consoles and quiet/verbose flags.  One
instance is installed by :func:`~tsrestgen.app.generate` via
:func:`set_output`, and the module-level helpers (:func:`info`,
:func:`error`, ...) delegate to it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


class OutputManager:
    """Route CLI output to the right stream with optional Rich styling.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational and success messages.
        verbose: Show debug messages and library log records.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unchanged, adding a final newline if missing."""
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        sys.stdout.flush()

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _emit(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=False)

    def info(self, message: str) -> None:
        """Print an informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, escape(message))

    def success(self, message: str) -> None:
        """Print a green success message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning. NOT suppressed by ``--quiet``."""
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error. Never suppressed."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message. Only shown with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Logging
    # ------------------------------------------------------------------ #

    def configure_logging(self) -> None:
        """Route ``tsrestgen`` log records to stderr when verbose.

        Library modules only log at DEBUG level, so nothing is attached
        unless ``--verbose`` was given.
        """
        if not self._verbose:
            return
        logger = logging.getLogger("tsrestgen")
        for existing in [h for h in logger.handlers if isinstance(h, RichHandler)]:
            logger.removeHandler(existing)
        handler = RichHandler(console=self._stderr, show_time=False, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Used by the test suite."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
