"""
Language registry for mapping file extensions to comment syntax.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

import yaml

from .models import LanguageSyntax

logger = logging.getLogger(__name__)

# Default path to the languages configuration file
_DEFAULT_LANGUAGES_CONFIG = Path(__file__).parent / "languages.yaml"

# Extension shared by C and C++ headers; resolved by sniffing content
HEADER_EXTENSION = ".h"
HEADER_CPP_LANGUAGE = "C++"

# Keywords whose presence in a header marks it as C++
CPP_KEYWORDS: tuple[bytes, ...] = (
    b"class",
    b"namespace",
    b"template",
    b"typename",
    b"operator",
    b"virtual",
    b"public:",
    b"private:",
    b"protected:",
    b"friend",
)

DEFAULT_SNIFF_BYTES = 4096


def extension_of(path: Path | str) -> str:
    """
    Return the extension of a file name, from the last dot on.

    Unlike Path.suffix, a leading dot counts: '.bashrc' -> '.bashrc'.
    """
    name = Path(path).name
    idx = name.rfind(".")
    return name[idx:] if idx >= 0 else ""


def looks_like_cpp(content: bytes) -> bool:
    """Check a header prefix for C++-only keywords."""
    return any(keyword in content for keyword in CPP_KEYWORDS)


class LanguageRegistry:
    """
    Ordered table of LanguageSyntax descriptors with lookup by extension.

    The table is built once (normally from languages.yaml) and its entries
    are immutable. Extensions are matched case-sensitively and the first
    language declaring an extension wins.

    Example:
        >>> registry = LanguageRegistry()
        >>> registry.detect(".py").name
        'Python'

        >>> # Load from custom config
        >>> registry = LanguageRegistry.from_yaml("custom_languages.yaml")
    """

    def __init__(self, load_defaults: bool = True):
        """
        Initialize the language registry.

        Args:
            load_defaults: If True, load the bundled language table from languages.yaml.
        """
        self._languages: list[LanguageSyntax] = []
        self._extension_to_language: dict[str, LanguageSyntax] = {}

        if load_defaults:
            self._load_from_yaml(_DEFAULT_LANGUAGES_CONFIG)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "LanguageRegistry":
        """
        Create a LanguageRegistry from a YAML configuration file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            LanguageRegistry instance with loaded languages

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the config file format is invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Languages config not found: {config_path}")

        registry = cls(load_defaults=False)
        registry._load_from_yaml(config_path)
        return registry

    @classmethod
    def from_syntaxes(cls, syntaxes: Iterable[LanguageSyntax]) -> "LanguageRegistry":
        """Create a LanguageRegistry from already-built descriptors."""
        registry = cls(load_defaults=False)
        for syntax in syntaxes:
            registry.register(syntax)
        return registry

    def _load_from_yaml(self, config_path: Path) -> None:
        """
        Load language descriptors from a YAML file.

        Expected format:
            - id: 1
              name: C
              extensions: [".c", ".h"]
              line_comment: "//"
              block_start: "/*"
              block_end: "*/"
        """
        if not config_path.exists():
            logger.warning(f"Languages config not found: {config_path}, using empty registry")
            return

        try:
            content = config_path.read_text(encoding="utf-8")
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse languages config: {e}")
            raise ValueError(f"Invalid YAML in languages config: {e}") from e

        if data is None:
            return

        if not isinstance(data, list):
            raise ValueError(
                f"Invalid languages config format: expected list, got {type(data)}"
            )

        for entry in data:
            try:
                syntax = LanguageSyntax(
                    id=int(entry["id"]),
                    name=str(entry["name"]),
                    extensions=tuple(str(ext) for ext in entry["extensions"]),
                    line_comment=str(entry["line_comment"]),
                    block_start=str(entry["block_start"]),
                    block_end=str(entry["block_end"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid language entry {entry!r}: {e}") from e
            self.register(syntax)

    def register(self, syntax: LanguageSyntax) -> "LanguageRegistry":
        """
        Append a language to the table.

        Extensions already claimed by an earlier language keep their owner.

        Args:
            syntax: Descriptor to add

        Returns:
            Self for method chaining

        Raises:
            ValueError: If the id or name is already registered
        """
        for existing in self._languages:
            if existing.id == syntax.id:
                raise ValueError(f"Duplicate language id {syntax.id} ({syntax.name})")
            if existing.name == syntax.name:
                raise ValueError(f"Duplicate language name {syntax.name}")

        self._languages.append(syntax)
        for ext in syntax.extensions:
            if ext in self._extension_to_language:
                logger.debug(
                    f"Extension {ext} already mapped to "
                    f"{self._extension_to_language[ext].name}, ignoring for {syntax.name}"
                )
                continue
            self._extension_to_language[ext] = syntax
        return self

    def detect(self, extension: str) -> LanguageSyntax | None:
        """
        Detect language from a file extension.

        Args:
            extension: File extension including the dot (e.g., '.py')

        Returns:
            LanguageSyntax or None if not recognized
        """
        return self._extension_to_language.get(extension)

    def detect_from_path(
        self, file_path: Path | str, sniff_bytes: int = DEFAULT_SNIFF_BYTES
    ) -> LanguageSyntax | None:
        """
        Detect language from a file path.

        Headers ('.h') are ambiguous between C and C++: up to sniff_bytes of
        the file are searched for C++ keywords. This is a heuristic and may
        misclassify.

        Args:
            file_path: Path to the file
            sniff_bytes: Header prefix size inspected for C++ keywords

        Returns:
            LanguageSyntax or None if not recognized
        """
        ext = extension_of(file_path)
        syntax = self.detect(ext)
        if syntax is None or ext != HEADER_EXTENSION:
            return syntax

        cpp = self.get_by_name(HEADER_CPP_LANGUAGE)
        if cpp is None:
            return syntax

        try:
            with open(file_path, "rb") as f:
                head = f.read(sniff_bytes)
        except OSError as e:
            logger.debug(f"Cannot sniff header {file_path}: {e}; assuming {syntax.name}")
            return syntax

        return cpp if looks_like_cpp(head) else syntax

    def get_by_name(self, name: str) -> LanguageSyntax | None:
        """Look up a language by display name."""
        for syntax in self._languages:
            if syntax.name == name:
                return syntax
        return None

    def is_supported(self, extension: str) -> bool:
        """Check if an extension is registered."""
        return extension in self._extension_to_language

    def __iter__(self) -> Iterator[LanguageSyntax]:
        return iter(tuple(self._languages))

    def __len__(self) -> int:
        return len(self._languages)


# Global default registry instance, built once at import
_default_registry = LanguageRegistry()


def get_default_registry() -> LanguageRegistry:
    """Get the global default language registry."""
    return _default_registry
