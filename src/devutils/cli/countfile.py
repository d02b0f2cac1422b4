"""
countfile - print line, word, character and byte counts.
"""

from pathlib import Path
from typing import Optional

import typer

from devutils.cli.common import CONTEXT_SETTINGS, print_file_error, resolve_config, version_option
from devutils.countfile import CountStats, count_file, count_stream, format_stats, total_of
from devutils.errors import FileReadError

PROGRAM = "countfile"


def countfile(
    ctx: typer.Context,
    files: Optional[list[str]] = typer.Argument(
        None, help="Files to count; standard input when omitted"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option(PROGRAM), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Print line, word, character and byte counts for each FILE."""
    cfg = resolve_config(ctx, PROGRAM, config_path, verbose)
    buffer_size = cfg.countfile.buffer_size

    if not files:
        try:
            stats = count_stream(typer.get_binary_stream("stdin"), buffer_size, name="stdin")
        except FileReadError as e:
            print_file_error(PROGRAM, "stdin", e.reason)
            raise typer.Exit(1)
        typer.echo(format_stats(stats))
        return

    counted: list[CountStats] = []
    exit_code = 0
    for name in files:
        try:
            stats = count_file(name, buffer_size)
        except FileReadError as e:
            print_file_error(PROGRAM, e.path, e.reason)
            exit_code = 1
            continue
        counted.append(stats)
        typer.echo(format_stats(stats, name))

    if len(counted) > 1:
        typer.echo(format_stats(total_of(counted), "total"))

    if exit_code:
        raise typer.Exit(exit_code)


app = typer.Typer(
    name=PROGRAM,
    help="Print line, word, character and byte counts",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)
app.command()(countfile)


if __name__ == "__main__":
    app()
