"""
dev-hexdump - display file contents in hexadecimal, decimal or octal.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

import typer

from devutils.cli.common import (
    CONTEXT_SETTINGS,
    print_error,
    print_file_error,
    resolve_config,
    version_option,
)
from devutils.core.file_io import STDIN_NAME, describe_os_error
from devutils.hexdump import HexdumpFormat, HexdumpOptions, dump_stream, parse_offset

logger = logging.getLogger(__name__)

PROGRAM = "hexdump"

_FORMAT_KEY = "devutils.hexdump.format"

_FLAG_FORMATS = {
    "canonical": HexdumpFormat.CANONICAL,
    "one_byte_hex": HexdumpFormat.ONE_BYTE_HEX,
    "two_byte_decimal": HexdumpFormat.TWO_BYTE_DECIMAL,
    "two_byte_octal": HexdumpFormat.TWO_BYTE_OCTAL,
}


def _select_format(ctx: typer.Context, param: typer.CallbackParam, value: bool) -> bool:
    if value:
        ctx.meta[_FORMAT_KEY] = _FLAG_FORMATS[param.name]
    return value


def _dump(stream: BinaryIO, name: str, options: HexdumpOptions) -> bool:
    try:
        for line in dump_stream(stream, options):
            typer.echo(line)
    except OSError as e:
        print_file_error(PROGRAM, name, describe_os_error(e))
        return False
    return True


def hexdump(
    ctx: typer.Context,
    files: Optional[list[str]] = typer.Argument(
        None, help="Files to dump; standard input when omitted"
    ),
    canonical: bool = typer.Option(
        False, "-C", callback=_select_format, help="Canonical hex+ASCII display"
    ),
    one_byte_hex: bool = typer.Option(
        False, "-x", callback=_select_format, help="One-byte hex display"
    ),
    two_byte_decimal: bool = typer.Option(
        False, "-d", callback=_select_format, help="Two-byte decimal display"
    ),
    two_byte_octal: bool = typer.Option(
        False, "-o", callback=_select_format, help="Two-byte octal display"
    ),
    skip: Optional[str] = typer.Option(
        None, "-s", metavar="OFFSET", help="Skip OFFSET bytes from input"
    ),
    length: Optional[str] = typer.Option(
        None, "-n", metavar="LENGTH", help="Interpret only LENGTH bytes of input"
    ),
    no_squeeze: bool = typer.Option(
        False, "-v", help="Display all input data (no duplicate suppression)"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option(PROGRAM), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Display file contents in hexadecimal format."""
    cfg = resolve_config(ctx, PROGRAM, config_path, verbose)

    skip_bytes = parse_offset(skip) if skip is not None else 0
    if skip_bytes < 0:
        print_error(PROGRAM, "invalid skip value")
        raise typer.Exit(1)

    length_limit = parse_offset(length) if length is not None else None
    if length_limit is not None and length_limit <= 0:
        print_error(PROGRAM, "invalid length value")
        raise typer.Exit(1)

    try:
        options = HexdumpOptions(
            format=ctx.meta.get(_FORMAT_KEY, HexdumpFormat.CANONICAL),
            skip=skip_bytes,
            length=length_limit,
            suppress_duplicates=cfg.hexdump.suppress_duplicates and not no_squeeze,
            bytes_per_line=cfg.hexdump.bytes_per_line,
        )
    except ValueError as e:
        print_error(PROGRAM, str(e))
        raise typer.Exit(1)

    if not files:
        if not _dump(typer.get_binary_stream("stdin"), STDIN_NAME, options):
            raise typer.Exit(1)
        return

    exit_code = 0
    for name in files:
        try:
            f = open(name, "rb")
        except OSError as e:
            print_file_error(PROGRAM, name, describe_os_error(e))
            exit_code = 1
            continue
        with f:
            logger.debug(f"Dumping {name} ({options.format.value})")
            if not _dump(f, name, options):
                exit_code = 1

    if exit_code:
        raise typer.Exit(exit_code)


app = typer.Typer(
    name="dev-hexdump",
    help="Display file contents in hexadecimal format",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)
app.command()(hexdump)


if __name__ == "__main__":
    app()
