"""
Configuration module for dev-utils.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

from devutils.errors import ConfigError

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Environment variable naming a config file for the standalone tools
CONFIG_ENV_VAR = "DEVUTILS_CONFIG"


@lru_cache(maxsize=1)
def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        return {}

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        return yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        return {}


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


@dataclass
class ClocConfig:
    """Configuration for the lines-of-code counter."""

    ignore_patterns: list[str] = field(
        default_factory=lambda: list(_get_default("cloc", "ignore_patterns", []))
    )
    skip_hidden: bool = field(default_factory=lambda: _get_default("cloc", "skip_hidden", True))
    header_sniff_bytes: int = field(
        default_factory=lambda: _get_default("cloc", "header_sniff_bytes", 4096)
    )
    use_mmap: bool = field(default_factory=lambda: _get_default("cloc", "use_mmap", True))


@dataclass
class ChecksumConfig:
    """Configuration for the checksum tool."""

    algorithm: str = field(
        default_factory=lambda: _get_default("checksum", "algorithm", "crc32")
    )
    chunk_size: int = field(
        default_factory=lambda: _get_default("checksum", "chunk_size", 8192)
    )


@dataclass
class CountfileConfig:
    """Configuration for the countfile tool."""

    buffer_size: int = field(
        default_factory=lambda: _get_default("countfile", "buffer_size", 16384)
    )


@dataclass
class HexdumpConfig:
    """Configuration for the hexdump tool."""

    bytes_per_line: int = field(
        default_factory=lambda: _get_default("hexdump", "bytes_per_line", 16)
    )
    suppress_duplicates: bool = field(
        default_factory=lambda: _get_default("hexdump", "suppress_duplicates", True)
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(name)s - %(levelname)s - %(message)s"
        )
    )


_SECTIONS = {
    "cloc": ClocConfig,
    "checksum": ChecksumConfig,
    "countfile": CountfileConfig,
    "hexdump": HexdumpConfig,
    "logging": LoggingConfig,
}


@dataclass
class DevUtilsConfig:
    """Main configuration class for dev-utils."""

    cloc: ClocConfig = field(default_factory=ClocConfig)
    checksum: ChecksumConfig = field(default_factory=ChecksumConfig)
    countfile: CountfileConfig = field(default_factory=CountfileConfig)
    hexdump: HexdumpConfig = field(default_factory=HexdumpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "DevUtilsConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            DevUtilsConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigError: If the file format is unsupported or the content is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                raise ConfigError(f"Unsupported config file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration file {path}: expected a mapping")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "DevUtilsConfig":
        """Create DevUtilsConfig from a dictionary."""
        config = cls()

        for section, section_cls in _SECTIONS.items():
            if section not in data:
                continue
            values = data[section] or {}
            known = {f.name for f in fields(section_cls)}
            unknown = set(values) - known
            if unknown:
                raise ConfigError(
                    f"Unknown keys in [{section}]: {', '.join(sorted(unknown))}"
                )
            setattr(config, section, section_cls(**values))

        return config

    def apply_env_overrides(self) -> "DevUtilsConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: DEVUTILS_<SECTION>_<KEY>
        Examples:
            - DEVUTILS_CHECKSUM_ALGORITHM
            - DEVUTILS_HEXDUMP_BYTES_PER_LINE
            - DEVUTILS_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Cloc config
            "DEVUTILS_CLOC_SKIP_HIDDEN": ("cloc", "skip_hidden", _parse_bool),
            "DEVUTILS_CLOC_HEADER_SNIFF_BYTES": ("cloc", "header_sniff_bytes", int),
            "DEVUTILS_CLOC_USE_MMAP": ("cloc", "use_mmap", _parse_bool),
            # Checksum config
            "DEVUTILS_CHECKSUM_ALGORITHM": ("checksum", "algorithm", str),
            "DEVUTILS_CHECKSUM_CHUNK_SIZE": ("checksum", "chunk_size", int),
            # Countfile config
            "DEVUTILS_COUNTFILE_BUFFER_SIZE": ("countfile", "buffer_size", int),
            # Hexdump config
            "DEVUTILS_HEXDUMP_BYTES_PER_LINE": ("hexdump", "bytes_per_line", int),
            "DEVUTILS_HEXDUMP_SUPPRESS_DUPLICATES": ("hexdump", "suppress_duplicates", _parse_bool),
            # Logging config
            "DEVUTILS_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                try:
                    setattr(section_obj, key, converter(value))
                except ValueError as e:
                    raise ConfigError(f"Invalid value for {env_var}: {value!r}") from e

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ConfigError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ConfigError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> DevUtilsConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, falls back to the
            DEVUTILS_CONFIG environment variable, then to defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        DevUtilsConfig instance
    """
    if config_path is None and apply_env:
        config_path = os.environ.get(CONFIG_ENV_VAR) or None

    if config_path:
        config = DevUtilsConfig.from_file(config_path)
    else:
        config = DevUtilsConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
