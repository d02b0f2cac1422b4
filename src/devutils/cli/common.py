"""
Shared plumbing for the command line tools: consoles, configuration,
logging setup and the GNU-style version and error output.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from devutils import PACKAGE_NAME, __version__
from devutils.core.config import DevUtilsConfig, LoggingConfig, load_config
from devutils.errors import ConfigError

# Initialize Rich Consoles
console = Console()
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

VERSION_TEMPLATE = """{name} ({package}) {version}
Copyright (C) 2025 AnmiTaliDev
License GPLv3+: GNU GPL version 3 or later <https://gnu.org/licenses/gpl.html>.
This is free software: you are free to change and redistribute it.
There is NO WARRANTY, to the extent permitted by law."""


def version_text(program: str) -> str:
    return VERSION_TEMPLATE.format(name=program, package=PACKAGE_NAME, version=__version__)


def version_option(program: str) -> Callable[[bool], None]:
    """Build an eager --version callback that prints the banner for program."""

    def _callback(value: bool) -> None:
        if value:
            typer.echo(version_text(program))
            raise typer.Exit()

    return _callback


def print_error(program: str, message: str) -> None:
    """Print 'program: message' on stderr."""
    err_console.print(f"[bold red]{escape(program)}:[/bold red] {escape(message)}")


def print_file_error(program: str, name: str, reason: str) -> None:
    """Print 'program: name: reason' on stderr."""
    print_error(program, f"{name}: {reason}")


def print_usage_hint(program: str) -> None:
    err_console.print(f"Try '{escape(program)} --help' for more information.")


def setup_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """
    Configure the root logger to write to stderr.

    Args:
        config: Logging section of the configuration
        verbose: Force DEBUG level regardless of config
    """
    level = logging.DEBUG if verbose else logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(level=level, format=config.format, force=True)


def resolve_config(
    ctx: typer.Context,
    program: str,
    config_path: Optional[Path] = None,
    verbose: bool = False,
) -> DevUtilsConfig:
    """
    Return the configuration for a command invocation.

    The umbrella command stores a loaded config on ctx.obj, used unless the
    command was given its own --config. Otherwise the config comes from
    --config, DEVUTILS_CONFIG or the packaged defaults.
    Invalid configuration is fatal.
    """
    if isinstance(ctx.obj, DevUtilsConfig) and config_path is None:
        cfg = ctx.obj
        if verbose:
            setup_logging(cfg.logging, verbose=True)
        return cfg

    try:
        cfg = load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        print_error(program, str(e))
        raise typer.Exit(2)

    setup_logging(cfg.logging, verbose)
    return cfg
