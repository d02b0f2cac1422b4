"""
Core Layer - configuration and shared file access helpers.
"""

from devutils.core.config import (
    ChecksumConfig,
    ClocConfig,
    CountfileConfig,
    DevUtilsConfig,
    HexdumpConfig,
    LoggingConfig,
    load_config,
)
from devutils.core.file_io import STDIN_NAME, describe_os_error, iter_chunks, open_buffer

__all__ = [
    # Config
    "DevUtilsConfig",
    "ClocConfig",
    "ChecksumConfig",
    "CountfileConfig",
    "HexdumpConfig",
    "LoggingConfig",
    "load_config",
    # File access
    "STDIN_NAME",
    "describe_os_error",
    "iter_chunks",
    "open_buffer",
]
