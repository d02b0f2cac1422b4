"""
dev-diff - compare two files line by line.

Exit status is 0 if the files are the same, 1 if they differ and 2 on
trouble.
"""

from pathlib import Path
from typing import Optional

import typer

from devutils.cli.common import (
    CONTEXT_SETTINGS,
    print_error,
    print_file_error,
    print_usage_hint,
    resolve_config,
    version_option,
)
from devutils.diff import DiffOptions, DiffStatus, compare_files
from devutils.errors import FileReadError

PROGRAM = "diff"


def diff(
    ctx: typer.Context,
    files: Optional[list[str]] = typer.Argument(None, metavar="FILE1 FILE2", help="Files to compare"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Ignore case differences"),
    ignore_all_space: bool = typer.Option(
        False, "--ignore-all-space", "-w", help="Ignore all white space"
    ),
    brief: bool = typer.Option(False, "--brief", "-q", help="Report only when files differ"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option(PROGRAM), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Compare files line by line."""
    resolve_config(ctx, PROGRAM, config_path, verbose)

    if not files or len(files) != 2:
        print_error(PROGRAM, "missing operand" if not files or len(files) < 2 else "extra operand")
        print_usage_hint(PROGRAM)
        raise typer.Exit(int(DiffStatus.TROUBLE))

    options = DiffOptions(ignore_case=ignore_case, ignore_whitespace=ignore_all_space)
    try:
        result = compare_files(files[0], files[1], options)
    except FileReadError as e:
        print_file_error(PROGRAM, e.path, e.reason)
        raise typer.Exit(int(DiffStatus.TROUBLE))

    output = result.format(brief=brief)
    if output:
        typer.echo(output, nl=False)

    raise typer.Exit(int(result.status))


app = typer.Typer(
    name="dev-diff",
    help="Compare files line by line",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)
app.command()(diff)


if __name__ == "__main__":
    app()
