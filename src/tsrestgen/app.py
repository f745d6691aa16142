"""Typer application and CLI entry point for tsrestgen.

The CLI has a single command::

    tsrestgen INPUT -o OUTPUT [--no-format] [--prettier CMD] [--quiet|--verbose]

``INPUT`` is a file path, an ``http(s)://`` URL or ``-`` for stdin;
``OUTPUT`` is a file path or ``-`` for stdout.  Any
:class:`~tsrestgen.exceptions.TsRestGenError` is reported on stderr and the
process exits with the error's ``exit_code``; nothing is written to
``OUTPUT`` in that case.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`tsrestgen.config`: Generator configuration resolution.
    :mod:`tsrestgen.output`: Output formatting initialised in :func:`generate`.
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from tsrestgen import __version__
from tsrestgen.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="tsrestgen",
    help="Generate a ts-rest contract with Zod schemas from an OpenAPI 3.0/3.1 spec.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tsrestgen {__version__}")
        raise typer.Exit()


@app.command()
def generate(
    input: str = typer.Argument(
        ..., help="OpenAPI document: file path, http(s) URL, or '-' for stdin."
    ),
    output: str = typer.Option(
        ..., "--output", "-o", help="File to write the contract to, or '-' for stdout."
    ),
    format: Optional[bool] = typer.Option(
        None,
        "--format/--no-format",
        help="Run prettier over the generated source (default: on).",
    ),
    prettier: Optional[str] = typer.Option(
        None, "--prettier", help="Command used to run prettier."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable colored output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Generate a ts-rest contract from an OpenAPI document."""
    from tsrestgen.config import resolve_config
    from tsrestgen.exceptions import TsRestGenError
    from tsrestgen.generator import generate_contract
    from tsrestgen.output import OutputManager, set_output

    out = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(out)
    out.configure_logging()

    try:
        config = resolve_config(cli_format=format, cli_prettier=prettier)
        out.debug(f"Configuration: {config.model_dump()}")
        source = generate_contract(input, config)
    except TsRestGenError as exc:
        out.error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if output == "-":
        out.print_data(source)
        return

    try:
        Path(output).write_text(source, encoding="utf-8")
    except OSError as exc:
        out.error(f"Failed to write {output}: {exc}")
        raise typer.Exit(EXIT_GENERIC_FAILURE) from exc

    out.success(f"Contract written to {output}")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``tsrestgen`` console script.

    Unhandled :class:`~tsrestgen.exceptions.TsRestGenError` instances cause
    a clean exit with the error's ``exit_code``.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from tsrestgen.exceptions import TsRestGenError
        from tsrestgen.output import error

        if isinstance(exc, TsRestGenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        raise
