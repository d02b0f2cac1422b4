"""
CLI for dev-utils.

Each tool is a standalone Typer application (checksum, countfile, dev-diff,
dev-hexdump, cloc); the dev-utils command bundles them as subcommands.
"""

from pathlib import Path
from typing import Optional

import typer

from devutils.cli import checksum as checksum_cli
from devutils.cli import cloc as cloc_cli
from devutils.cli import countfile as countfile_cli
from devutils.cli import diff as diff_cli
from devutils.cli import hexdump as hexdump_cli
from devutils.cli.common import (
    CONTEXT_SETTINGS,
    print_error,
    setup_logging,
    version_option,
)
from devutils.core.config import load_config
from devutils.errors import ConfigError

app = typer.Typer(
    name="dev-utils",
    help="Developer utilities: checksum, countfile, diff, hexdump and cloc",
    add_completion=False,
    no_args_is_help=True,
    context_settings=CONTEXT_SETTINGS,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Configuration file (YAML or JSON)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_option("dev-utils"), is_eager=True,
        help="Output version information and exit",
    ),
):
    """Developer utilities."""
    try:
        cfg = load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        print_error("dev-utils", str(e))
        raise typer.Exit(2)

    setup_logging(cfg.logging, verbose)
    ctx.obj = cfg


app.command("checksum")(checksum_cli.checksum)
app.command("countfile")(countfile_cli.countfile)
app.command("diff")(diff_cli.diff)
app.command("hexdump")(hexdump_cli.hexdump)
app.command("cloc")(cloc_cli.cloc)


if __name__ == "__main__":
    app()
