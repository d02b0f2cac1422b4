"""
cloc - count code, comment and blank lines per language.
"""

from pathlib import Path
from typing import Optional

import typer

from devutils.cli.common import (
    CONTEXT_SETTINGS,
    console,
    print_error,
    print_file_error,
    print_usage_hint,
    resolve_config,
    version_option,
)
from devutils.cloc import ClocScanner, ReportFormat, render_json, render_table, render_text

PROGRAM = "cloc"


def cloc(
    ctx: typer.Context,
    paths: Optional[list[str]] = typer.Argument(
        None, metavar="PATH...", help="Files and directories to count"
    ),
    output_format: ReportFormat = typer.Option(
        ReportFormat.TEXT, "--format", "-f", case_sensitive=False, help="Report format"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Gitignore-style pattern to skip (repeatable)"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option(PROGRAM), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Count lines of code, comments and blank lines in files and directories."""
    cfg = resolve_config(ctx, PROGRAM, config_path, verbose)

    if not paths:
        print_error(PROGRAM, "missing operand")
        print_usage_hint(PROGRAM)
        raise typer.Exit(1)

    scanner = ClocScanner(
        ignore_patterns=list(cfg.cloc.ignore_patterns) + list(exclude or []),
        skip_hidden=cfg.cloc.skip_hidden,
        sniff_bytes=cfg.cloc.header_sniff_bytes,
        use_mmap=cfg.cloc.use_mmap,
    )
    result = scanner.run(paths)

    for path, reason in result.failed:
        print_file_error(PROGRAM, path, reason)

    if output_format is ReportFormat.JSON:
        typer.echo(render_json(result.aggregate, result.failed))
    elif output_format is ReportFormat.TABLE:
        console.print(render_table(result.aggregate))
    else:
        typer.echo(render_text(result.aggregate), nl=False)

    if not result.ok:
        raise typer.Exit(1)


app = typer.Typer(
    name=PROGRAM,
    help="Count lines of code per language",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)
app.command()(cloc)


if __name__ == "__main__":
    app()
