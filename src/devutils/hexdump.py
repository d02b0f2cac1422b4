"""
Hexadecimal, decimal and octal dumps of binary input.

Input is regrouped into fixed-width lines regardless of how the underlying
reads are split, so offsets always advance by whole lines. Offsets printed
are absolute positions in the input, including any skipped prefix.
"""

import io
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

logger = logging.getLogger(__name__)

DEFAULT_BYTES_PER_LINE = 16
READ_SIZE = 4096

DUPLICATE_MARKER = "*"

_PRINTABLE = range(0x20, 0x7F)


class HexdumpFormat(str, Enum):
    CANONICAL = "canonical"
    ONE_BYTE_HEX = "one-byte-hex"
    TWO_BYTE_DECIMAL = "two-byte-decimal"
    TWO_BYTE_OCTAL = "two-byte-octal"


@dataclass(frozen=True)
class HexdumpOptions:
    """
    Dump settings.

    Attributes:
        format: Line layout
        skip: Bytes to skip from the start of each input
        length: Maximum bytes to dump per input, None for no limit
        suppress_duplicates: Collapse repeated lines into a single '*'
        bytes_per_line: Input bytes shown per output line
    """

    format: HexdumpFormat = HexdumpFormat.CANONICAL
    skip: int = 0
    length: int | None = None
    suppress_duplicates: bool = True
    bytes_per_line: int = DEFAULT_BYTES_PER_LINE

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValueError("invalid skip value")
        if self.length is not None and self.length <= 0:
            raise ValueError("invalid length value")
        if self.bytes_per_line <= 0 or self.bytes_per_line % 2:
            raise ValueError(f"bytes_per_line must be a positive even number, got {self.bytes_per_line}")


_INTEGER_PREFIX = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def parse_offset(text: str) -> int:
    """
    Parse a number the way strtoll(text, NULL, 0) does.

    '0x' introduces hex, a leading '0' octal, anything else is decimal.
    Parsing stops at the first character that does not fit; text with no
    leading number parses as 0.
    """
    match = _INTEGER_PREFIX.match(text)
    if match is None:
        return 0

    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def format_canonical(data: bytes, offset: int, width: int = DEFAULT_BYTES_PER_LINE) -> str:
    """Offset, hex bytes in two groups of eight, and the printable characters."""
    parts = [f"{offset:08x}  "]
    for i in range(width):
        parts.append(f"{data[i]:02x}" if i < len(data) else "  ")
        if i % 2 == 1:
            parts.append(" ")
        if i == 7:
            parts.append(" ")
    ascii_text = "".join(chr(b) if b in _PRINTABLE else "." for b in data)
    parts.append(f" |{ascii_text}|")
    return "".join(parts)


def format_one_byte_hex(data: bytes, offset: int) -> str:
    return f"{offset:08x} " + "".join(f" {b:02x}" for b in data)


def _words(data: bytes) -> Iterator[int]:
    """Little-endian 16-bit words; an odd trailing byte stands alone."""
    for i in range(0, len(data), 2):
        yield int.from_bytes(data[i : i + 2], "little")


def format_two_byte_decimal(data: bytes, offset: int) -> str:
    return f"{offset:08x} " + "".join(f" {word:05d}" for word in _words(data))


def format_two_byte_octal(data: bytes, offset: int) -> str:
    return f"{offset:08x} " + "".join(f" {word:06o}" for word in _words(data))


def format_line(data: bytes, offset: int, options: HexdumpOptions) -> str:
    """Render one line of input in the selected format."""
    if options.format is HexdumpFormat.CANONICAL:
        return format_canonical(data, offset, options.bytes_per_line)
    if options.format is HexdumpFormat.ONE_BYTE_HEX:
        return format_one_byte_hex(data, offset)
    if options.format is HexdumpFormat.TWO_BYTE_DECIMAL:
        return format_two_byte_decimal(data, offset)
    return format_two_byte_octal(data, offset)


def skip_input(stream: BinaryIO, count: int) -> int:
    """
    Position a stream count bytes in.

    Seekable streams are seeked; pipes and terminals are read and discarded.

    Returns:
        The number of bytes actually skipped
    """
    if count <= 0:
        return 0

    try:
        seekable = stream.seekable()
    except (OSError, ValueError):
        seekable = False

    if seekable:
        try:
            stream.seek(count, io.SEEK_SET)
            return count
        except OSError as e:
            logger.debug(f"seek failed, skipping by reading: {e}")

    skipped = 0
    while skipped < count:
        chunk = stream.read(min(READ_SIZE, count - skipped))
        if not chunk:
            break
        skipped += len(chunk)
    return skipped


def iter_lines(stream: BinaryIO, options: HexdumpOptions) -> Iterator[tuple[int, bytes]]:
    """
    Yield (absolute offset, line bytes) pairs after applying skip and length.

    Every line holds bytes_per_line bytes except possibly the last.
    """
    offset = skip_input(stream, options.skip)
    remaining = options.length
    width = options.bytes_per_line
    pending = b""

    while remaining is None or remaining > 0:
        want = READ_SIZE if remaining is None else min(READ_SIZE, remaining)
        chunk = stream.read(want)
        if not chunk:
            break
        if remaining is not None:
            remaining -= len(chunk)

        pending += chunk
        full = len(pending) - len(pending) % width
        for start in range(0, full, width):
            yield offset, pending[start : start + width]
            offset += width
        pending = pending[full:]

    if pending:
        yield offset, pending


def dump_stream(stream: BinaryIO, options: HexdumpOptions | None = None) -> Iterator[str]:
    """
    Yield the output lines for one input.

    With suppression on, a full line equal to the one before it is replaced
    by a single '*' line for the whole run of repeats. Short final lines are
    never suppressed.
    """
    options = options or HexdumpOptions()
    previous: bytes | None = None
    in_run = False

    for offset, data in iter_lines(stream, options):
        if (
            options.suppress_duplicates
            and data == previous
            and len(data) == options.bytes_per_line
        ):
            if not in_run:
                yield DUPLICATE_MARKER
                in_run = True
            continue

        in_run = False
        previous = data
        yield format_line(data, offset, options)


def dump_bytes(data: bytes, options: HexdumpOptions | None = None) -> list[str]:
    """Dump an in-memory buffer."""
    return list(dump_stream(io.BytesIO(data), options))
