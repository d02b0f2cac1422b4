"""Exception types for dev-utils."""


class DevUtilsError(Exception):
    """Base exception for dev-utils errors."""

    pass


class FileReadError(DevUtilsError):
    """A file could not be opened, mapped or read.

    Carries the path and the underlying OS error message so that command
    line front ends can print ``tool: path: reason`` lines.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnsupportedLanguageError(DevUtilsError):
    """No language in the registry matches the file."""

    def __init__(self, path: str):
        super().__init__(f"{path}: unsupported language")
        self.path = path


class ChecksumFormatError(DevUtilsError):
    """A line in a checksum list could not be parsed."""

    pass


class ConfigError(DevUtilsError):
    """Configuration could not be loaded or is invalid."""

    pass
