"""Typer application and CLI entry point for openapi2lua.

The CLI is a thin shell around :mod:`openapi2lua.pipeline`: it resolves the
configuration from flags, environment, and the project file, installs the
global :class:`~openapi2lua.output.OutputManager`, and runs the pipeline.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a Ctrl-C handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

Usage::

    openapi2lua --spec openapi.json --out client.lua --name Client
    openapi2lua -s https://example.com/openapi.yaml -o - > client.lua

See Also:
    :mod:`openapi2lua.config`: Configuration precedence.
    :mod:`openapi2lua.output`: Output formatting used for diagnostics.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from openapi2lua import __version__
from openapi2lua.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="openapi2lua",
    help="Generate a Lua API client from an OpenAPI spec.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"openapi2lua {__version__}")
        raise typer.Exit()


@app.command()
def generate(
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="OpenAPI spec file, URL, or '-' for stdin. Defaults to openapi.json."
    ),
    out: Optional[str] = typer.Option(
        None, "--out", "-o", help="Output Lua file, or '-' for stdout. Defaults to client.lua."
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Lua client table name. Defaults to Client."
    ),
    no_headers: bool = typer.Option(
        False, "--no-headers", help="Omit base headers and header merging."
    ),
    no_query: bool = typer.Option(
        False, "--no-query", help="Omit query-string encoding."
    ),
    no_receiver_call: bool = typer.Option(
        False,
        "--no-receiver-call",
        help="Generated functions do not accept the namespace as a leading argument.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Generate a Lua API client from an OpenAPI spec.

    Every static path segment becomes a nested table and every operation a
    function on it, e.g. ``GET /users/{id}/flags`` becomes
    ``client.users.flags.get(id, options)``.

    Raises:
        typer.Exit: With the error's exit code when configuration, spec
            loading, or writing the output fails.
    """
    from openapi2lua.config import resolve_config
    from openapi2lua.exceptions import InvalidUsageError, Openapi2LuaError
    from openapi2lua.output import OutputManager, error, set_output, success
    from openapi2lua.pipeline import generate_client, write_client

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        if quiet and verbose:
            raise InvalidUsageError("--quiet and --verbose cannot be combined")
        config = resolve_config(
            cli_spec=spec,
            cli_out=out,
            cli_name=name,
            cli_header_support=False if no_headers else None,
            cli_query_support=False if no_query else None,
            cli_receiver_call=False if no_receiver_call else None,
        )
        source = generate_client(config)
        write_client(source, config.out)
    except Openapi2LuaError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if config.out != "-":
        success(f"Generated {config.out}")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from openapi2lua.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``openapi2lua`` console script.

    Expected failures are reported by :func:`generate` itself. Anything else
    produces a crash log and a generic failure exit.

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
        from openapi2lua.output import error

        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
