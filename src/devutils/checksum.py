"""
Checksum calculation: CRC32, Adler-32 and the BSD 16-bit rotating sum.

Each algorithm keeps a small running state that is fed chunk by chunk, so
files of any size are processed in constant memory.
"""

import logging
import re
import zlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from devutils.core.file_io import STDIN_NAME, describe_os_error, iter_chunks
from devutils.errors import ChecksumFormatError, FileReadError

logger = logging.getLogger(__name__)

# Constants for checksum calculation
DEFAULT_CHUNK_SIZE = 8192
ADLER32_MODULUS = 65521


class ChecksumAlgorithm(str, Enum):
    CRC32 = "crc32"
    ADLER32 = "adler32"
    BSD = "bsd"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ChecksumAlgorithm.CRC32: "CRC32",
    ChecksumAlgorithm.ADLER32: "ADLER32",
    ChecksumAlgorithm.BSD: "BSD",
}


class ChecksumState(ABC):
    """Running checksum over a sequence of chunks."""

    algorithm: ChecksumAlgorithm

    def __init__(self) -> None:
        self.bytes_processed = 0

    def update(self, data: bytes) -> "ChecksumState":
        self._update(data)
        self.bytes_processed += len(data)
        return self

    @abstractmethod
    def _update(self, data: bytes) -> None:
        pass

    @property
    @abstractmethod
    def value(self) -> int:
        """Checksum of everything fed so far, as an unsigned 32-bit int."""
        pass


class Crc32State(ChecksumState):
    """CRC-32 (IEEE 802.3, reflected polynomial 0xEDB88320)."""

    algorithm = ChecksumAlgorithm.CRC32

    def __init__(self) -> None:
        super().__init__()
        self._crc = 0

    def _update(self, data: bytes) -> None:
        self._crc = zlib.crc32(data, self._crc)

    @property
    def value(self) -> int:
        return self._crc & 0xFFFFFFFF


class Adler32State(ChecksumState):
    """Adler-32: two sums modulo 65521 packed as (b << 16) | a."""

    algorithm = ChecksumAlgorithm.ADLER32

    def __init__(self) -> None:
        super().__init__()
        self._adler = 1

    def _update(self, data: bytes) -> None:
        self._adler = zlib.adler32(data, self._adler)

    @property
    def value(self) -> int:
        return self._adler & 0xFFFFFFFF


class BsdSumState(ChecksumState):
    """BSD sum: 16-bit checksum rotated right by one bit before each add."""

    algorithm = ChecksumAlgorithm.BSD

    def __init__(self) -> None:
        super().__init__()
        self._sum = 0

    def _update(self, data: bytes) -> None:
        checksum = self._sum
        for byte in data:
            checksum = ((checksum >> 1) + ((checksum & 1) << 15) + byte) & 0xFFFF
        self._sum = checksum

    @property
    def value(self) -> int:
        return self._sum


_STATES: dict[ChecksumAlgorithm, type[ChecksumState]] = {
    ChecksumAlgorithm.CRC32: Crc32State,
    ChecksumAlgorithm.ADLER32: Adler32State,
    ChecksumAlgorithm.BSD: BsdSumState,
}


def new_state(algorithm: ChecksumAlgorithm | str) -> ChecksumState:
    """Create a fresh running state for an algorithm."""
    return _STATES[ChecksumAlgorithm(algorithm)]()


def checksum_bytes(data: bytes, algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.CRC32) -> int:
    """Checksum of an in-memory buffer."""
    return new_state(algorithm).update(data).value


@dataclass
class ChecksumResult:
    """
    Checksum of one input.

    Attributes:
        value: Checksum as unsigned 32-bit integer
        algorithm: Algorithm used
        bytes_processed: Number of input bytes
        name: File name, or '(standard input)'
    """

    value: int
    algorithm: ChecksumAlgorithm
    bytes_processed: int
    name: str

    @property
    def hex(self) -> str:
        return f"{self.value:08x}"

    def format_line(self, quiet: bool = False) -> str:
        """Format as 'xxxxxxxx  name', or just the digest when quiet."""
        return self.hex if quiet else f"{self.hex}  {self.name}"


def checksum_stream(
    stream: BinaryIO,
    algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.CRC32,
    name: str = STDIN_NAME,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ChecksumResult:
    """
    Checksum everything readable from a binary stream.

    Raises:
        FileReadError: If reading fails
    """
    state = new_state(algorithm)
    try:
        for chunk in iter_chunks(stream, chunk_size):
            state.update(chunk)
    except OSError as e:
        raise FileReadError(name, describe_os_error(e)) from e

    return ChecksumResult(
        value=state.value,
        algorithm=state.algorithm,
        bytes_processed=state.bytes_processed,
        name=name,
    )


def checksum_file(
    file_path: Path | str,
    algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.CRC32,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ChecksumResult:
    """
    Checksum a file.

    Raises:
        FileReadError: If the file cannot be opened or read
    """
    name = str(file_path)
    try:
        f = open(file_path, "rb")
    except OSError as e:
        raise FileReadError(name, describe_os_error(e)) from e

    with f:
        return checksum_stream(f, algorithm, name=name, chunk_size=chunk_size)


# "<8 hex digits><two spaces><name>", as written by checksum_file output
_CHECK_LINE = re.compile(r"^(?P<digest>[0-9a-fA-F]{1,8})  (?P<name>.+)$")


@dataclass
class VerifyEntry:
    """One line of a checksum list and its verification outcome."""

    name: str
    expected: int
    actual: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.actual == self.expected

    def format_line(self) -> str:
        if self.error is not None:
            return f"{self.name}: FAILED open or read"
        return f"{self.name}: {'OK' if self.ok else 'FAILED'}"


def parse_check_line(line: str) -> tuple[int, str]:
    """
    Parse a 'digest  name' line.

    Raises:
        ChecksumFormatError: If the line is not in that format
    """
    match = _CHECK_LINE.match(line.rstrip("\r\n"))
    if match is None:
        raise ChecksumFormatError(f"improperly formatted checksum line: {line.rstrip()!r}")
    return int(match.group("digest"), 16), match.group("name")


def verify_lines(
    lines: Iterator[str] | list[str],
    algorithm: ChecksumAlgorithm | str = ChecksumAlgorithm.CRC32,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    base_dir: Path | None = None,
) -> tuple[list[VerifyEntry], int]:
    """
    Recompute and compare every checksum listed in lines.

    Blank lines are ignored. Relative names are resolved against base_dir
    when given.

    Returns:
        Tuple of (entries in input order, number of malformed lines)
    """
    entries: list[VerifyEntry] = []
    malformed = 0

    for line_no, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            expected, name = parse_check_line(line)
        except ChecksumFormatError as e:
            logger.debug(f"line {line_no}: {e}")
            malformed += 1
            continue

        entry = VerifyEntry(name=name, expected=expected)
        target = Path(name)
        if base_dir is not None and not target.is_absolute():
            target = base_dir / target
        try:
            entry.actual = checksum_file(target, algorithm, chunk_size).value
        except FileReadError as e:
            entry.error = e.reason
        entries.append(entry)

    return entries, malformed
