"""
checksum - calculate CRC32, Adler-32 or BSD sum checksums of files.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from devutils.checksum import ChecksumAlgorithm, checksum_file, checksum_stream, verify_lines
from devutils.cli.common import (
    CONTEXT_SETTINGS,
    print_error,
    print_file_error,
    resolve_config,
    version_option,
)
from devutils.core.file_io import STDIN_NAME
from devutils.errors import FileReadError

logger = logging.getLogger(__name__)

PROGRAM = "checksum"

# ctx.meta key holding the algorithm picked by the last algorithm flag
_ALGORITHM_KEY = "devutils.checksum.algorithm"

_FLAG_ALGORITHMS = {
    "crc32": ChecksumAlgorithm.CRC32,
    "bsd_sum": ChecksumAlgorithm.BSD,
    "adler32": ChecksumAlgorithm.ADLER32,
}


def _select_algorithm(ctx: typer.Context, param: typer.CallbackParam, value: bool) -> bool:
    # Click processes options in command line order, so the last flag wins
    if value:
        ctx.meta[_ALGORITHM_KEY] = _FLAG_ALGORITHMS[param.name]
    return value


def _read_check_file(verify: Path) -> list[str]:
    if str(verify) == "-":
        stream = typer.get_binary_stream("stdin")
        return stream.read().decode("utf-8", errors="surrogateescape").splitlines()
    try:
        return verify.read_text(encoding="utf-8", errors="surrogateescape").splitlines()
    except OSError as e:
        print_file_error(PROGRAM, str(verify), e.strerror or str(e))
        raise typer.Exit(1)


def checksum(
    ctx: typer.Context,
    files: Optional[list[str]] = typer.Argument(
        None, help="Files to checksum; standard input when omitted or '-'"
    ),
    crc32: bool = typer.Option(
        False, "--crc32", "-c", callback=_select_algorithm, help="Calculate CRC32 checksum (default)"
    ),
    bsd_sum: bool = typer.Option(
        False, "--sum", "-s", callback=_select_algorithm, help="Calculate BSD sum checksum"
    ),
    adler32: bool = typer.Option(
        False, "--adler32", "-a", callback=_select_algorithm, help="Calculate Adler-32 checksum"
    ),
    verify: Optional[Path] = typer.Option(
        None, "--verify", "-v", help="Verify checksums listed in FILE"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Don't print filenames"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option(PROGRAM), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Calculate checksums for files."""
    cfg = resolve_config(ctx, PROGRAM, config_path, verbose)

    algorithm = ctx.meta.get(_ALGORITHM_KEY)
    if algorithm is None:
        try:
            algorithm = ChecksumAlgorithm(cfg.checksum.algorithm.lower())
        except ValueError:
            print_error(PROGRAM, f"unknown algorithm in configuration: {cfg.checksum.algorithm}")
            raise typer.Exit(2)
    chunk_size = cfg.checksum.chunk_size

    if verify is not None:
        lines = _read_check_file(verify)
        entries, malformed = verify_lines(lines, algorithm, chunk_size)
        for entry in entries:
            typer.echo(entry.format_line())
        if malformed:
            print_error(PROGRAM, f"WARNING: {malformed} line(s) improperly formatted")
        failed = sum(1 for entry in entries if not entry.ok)
        if failed:
            print_error(PROGRAM, f"WARNING: {failed} computed checksum(s) did NOT match")
        if failed or malformed or not entries:
            raise typer.Exit(1)
        return

    exit_code = 0
    for name in files or ["-"]:
        try:
            if name == "-":
                result = checksum_stream(
                    typer.get_binary_stream("stdin"), algorithm, STDIN_NAME, chunk_size
                )
            else:
                result = checksum_file(name, algorithm, chunk_size)
        except FileReadError as e:
            print_file_error(PROGRAM, e.path, e.reason)
            exit_code = 1
            continue
        logger.debug(f"{result.name}: {result.bytes_processed} bytes, {algorithm.label}")
        typer.echo(result.format_line(quiet))

    if exit_code:
        raise typer.Exit(exit_code)


app = typer.Typer(
    name=PROGRAM,
    help="Calculate checksums for files",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)
app.command()(checksum)


if __name__ == "__main__":
    app()
