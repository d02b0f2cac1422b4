"""
Line, word, character and byte counts in the style of wc.

Words are maximal runs of bytes outside the C-locale whitespace set. The
in-word flag survives chunk boundaries, so a word split across two reads is
counted once.
"""

import logging
import mmap
import os
import re
import stat
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from devutils.core.file_io import describe_os_error, iter_chunks
from devutils.errors import FileReadError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 16 * 1024

_WHITESPACE = b" \t\n\v\f\r"
_WORD = re.compile(rb"[^ \t\n\v\f\r]+")


@dataclass
class CountStats:
    """Counts for one input, or the running total over several."""

    lines: int = 0
    words: int = 0
    chars: int = 0
    bytes: int = 0

    def __iadd__(self, other: "CountStats") -> "CountStats":
        self.lines += other.lines
        self.words += other.words
        self.chars += other.chars
        self.bytes += other.bytes
        return self


class WordCounter:
    """Incremental counter fed with successive chunks of one input."""

    def __init__(self) -> None:
        self.stats = CountStats()
        self._in_word = False

    def update(self, chunk: bytes) -> "WordCounter":
        if not chunk:
            return self

        stats = self.stats
        stats.lines += chunk.count(b"\n")
        stats.bytes += len(chunk)
        # Byte-oriented: one char per byte
        stats.chars += len(chunk)

        words = len(_WORD.findall(chunk))
        # A run touching the start continues the word from the previous chunk
        if words and self._in_word and chunk[0] not in _WHITESPACE:
            words -= 1
        stats.words += words
        self._in_word = chunk[-1] not in _WHITESPACE
        return self


def count_bytes(data: bytes) -> CountStats:
    """Count an in-memory buffer."""
    return WordCounter().update(data).stats


def count_stream(stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE, name: str = "") -> CountStats:
    """
    Count everything readable from a binary stream.

    Raises:
        FileReadError: If reading fails
    """
    counter = WordCounter()
    try:
        for chunk in iter_chunks(stream, buffer_size):
            counter.update(chunk)
    except OSError as e:
        raise FileReadError(name, describe_os_error(e)) from e
    return counter.stats


def count_file(file_path: Path | str, buffer_size: int = DEFAULT_BUFFER_SIZE) -> CountStats:
    """
    Count a file.

    Regular files larger than buffer_size are memory-mapped and counted in
    slices; everything else is read in buffer_size chunks.

    Raises:
        FileReadError: If the file cannot be opened or read
    """
    name = str(file_path)
    try:
        f = open(file_path, "rb")
    except OSError as e:
        raise FileReadError(name, describe_os_error(e)) from e

    with f:
        try:
            st = os.fstat(f.fileno())
        except OSError as e:
            raise FileReadError(name, describe_os_error(e)) from e

        if stat.S_ISREG(st.st_mode) and st.st_size > buffer_size:
            try:
                with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
                    counter = WordCounter()
                    for start in range(0, len(mapped), buffer_size):
                        counter.update(mapped[start : start + buffer_size])
                    return counter.stats
            except (OSError, ValueError) as e:
                logger.debug(f"mmap failed for {name}, falling back to reads: {e}")

        return count_stream(f, buffer_size, name=name)


def format_stats(stats: CountStats, name: str | None = None) -> str:
    """Format a result row: four right-aligned fields and an optional name."""
    row = f"{stats.lines:8d} {stats.words:8d} {stats.chars:8d} {stats.bytes:8d}"
    return f"{row} {name}" if name else row


def total_of(results: Iterable[CountStats]) -> CountStats:
    total = CountStats()
    for stats in results:
        total += stats
    return total
