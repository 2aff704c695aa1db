"""cli.py – Command-line front end for the ccdb compiler semantics.

Usage::

    ccdb analyze -- gcc -Iinc -c foo.c -o foo.o
    ccdb flags -- gcc -Wl,--as-needed -c foo.c
    ccdb recognize /usr/bin/x86_64-linux-gnu-g++-11

Everything after ``--`` is the argv of the intercepted compiler call; the
current environment is used as the call's environment.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, NoReturn

import structlog
import typer
from rich.console import Console
from rich.table import Table

from ccdb.config import load_config
from ccdb.core import Command
from ccdb.gcc import parse_flags

app = typer.Typer(
    help="Reconstruct per-source compiler invocations from GNU compiler calls.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

ccdb analyze -- gcc -c foo.c bar.c     Entries for one compiler call

ccdb flags -- cc -O2 -Wl,-z,now x.c    Show how each flag is classified

ccdb recognize /usr/bin/arm-none-eabi-gcc   Exit 0 if it is a GNU compiler

[dim]Compiler allow/deny lists are read from ccdb.toml ([compilers] recognize/exclude).[/dim]""",
)

ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-C",
    help="Path to ccdb.toml (default: search upward from the current directory).",
)
JsonOption: bool = typer.Option(False, "--json", help="Output as JSON.")
VerboseOption: bool = typer.Option(False, "--verbose", "-v", help="Print debug logs to stderr.")

_err_console = Console(stderr=True)
out_console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Send ``ccdb`` log records to stderr; debug level when *verbose*.

    Reads ``CCDB_LOG_LEVEL`` (default: WARNING) when not verbose.
    """
    level_name = "DEBUG" if verbose else os.environ.get("CCDB_LOG_LEVEL", "WARNING").upper()
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "WARNING"

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    # --- structlog configure ---
    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    # --- stdlib logging configure ---
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.TimeStamper(fmt="iso", utc=True),
                        structlog.dev.ConsoleRenderer(colors=False),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "loggers": {
                "ccdb": {"handlers": ["stderr"], "level": level_name, "propagate": False},
            },
        }
    )


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {msg}")
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def _command(argv: list[str] | None, cwd: Path | None, *, json_mode: bool) -> Command:
    if not argv:
        error_exit("no compiler command given (pass it after '--')", json_mode=json_mode)
    working_dir = (cwd or Path.cwd()).absolute()
    return Command.from_argv(argv, working_dir, environment=dict(os.environ))


@app.command()
def analyze(
    argv: list[str] | None = typer.Argument(None, help="Compiler argv, program name first."),
    cwd: Path | None = typer.Option(None, "--cwd", help="Working directory of the call."),
    config: Path | None = ConfigOption,
    json_output: bool = JsonOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the compilation database entries for one compiler call."""
    setup_logging(verbose)
    command = _command(argv, cwd, json_mode=json_output)
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_output)

    tool = cfg.tool()
    entries = tool.compilations(command) if tool.recognize(command.program) else []

    if json_output:
        json_print([entry.to_dict() for entry in entries])
        return
    if not entries:
        out_console.print("[dim]No compilation entries.[/dim]")
        return
    table = Table(show_header=True, header_style="bold", border_style="dim")
    table.add_column("File")
    table.add_column("Output")
    table.add_column("Arguments")
    for entry in entries:
        table.add_row(str(entry.file), str(entry.output or ""), " ".join(entry.arguments))
    out_console.print(table)


@app.command()
def flags(
    argv: list[str] | None = typer.Argument(None, help="Compiler argv, program name first."),
    json_output: bool = JsonOption,
) -> None:
    """Show how each argument of a compiler call is classified."""
    command = _command(argv, None, json_mode=json_output)
    classified = parse_flags(command)

    if json_output:
        json_print([{"category": f.category.value, "arguments": list(f.arguments)} for f in classified])
        return
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Category")
    table.add_column("Arguments")
    for flag in classified:
        table.add_row(flag.category.name, " ".join(flag.arguments))
    out_console.print(table)


@app.command()
def recognize(
    program: Path = typer.Argument(..., help="Path of the executable."),
    config: Path | None = ConfigOption,
) -> None:
    """Exit 0 if PROGRAM is a GNU-compatible compiler driver, 1 otherwise."""
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as exc:
        error_exit(str(exc), code=2)
    if cfg.tool().recognize(program):
        out_console.print(f"{program}: GNU compiler")
        return
    out_console.print(f"{program}: not a GNU compiler")
    raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
