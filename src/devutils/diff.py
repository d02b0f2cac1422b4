"""
Positional line-by-line file comparison.

Line n of the first file is compared with line n of the second; there is no
longest-common-subsequence alignment, so an inserted line shows up as a run
of changes. Lines are handled as raw bytes and keep their terminators in
the output.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import IntEnum
from itertools import zip_longest
from pathlib import Path

from devutils.core.file_io import describe_os_error
from devutils.errors import FileReadError

logger = logging.getLogger(__name__)

_CASE_FOLD = bytes.maketrans(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ", b"abcdefghijklmnopqrstuvwxyz"
)


class DiffStatus(IntEnum):
    """Exit status of a comparison."""

    SAME = 0
    DIFFERENT = 1
    TROUBLE = 2


@dataclass(frozen=True)
class DiffOptions:
    ignore_case: bool = False
    ignore_whitespace: bool = False


def normalize_line(line: bytes, options: DiffOptions) -> bytes:
    """
    Reduce a line to the form used for comparison.

    ignore_whitespace drops spaces and tabs only; ignore_case folds ASCII
    upper case letters.
    """
    if options.ignore_whitespace:
        line = line.translate(None, b" \t")
    if options.ignore_case:
        line = line.translate(_CASE_FOLD)
    return line


@dataclass(frozen=True)
class DiffHunk:
    """
    One differing line position.

    Attributes:
        line_no: 1-based line number
        old: Line from the first file, None past its end
        new: Line from the second file, None past its end
    """

    line_no: int
    old: bytes | None
    new: bytes | None

    @property
    def kind(self) -> str:
        if self.old is None:
            return "a"
        if self.new is None:
            return "d"
        return "c"

    def format(self) -> bytes:
        n = self.line_no
        if self.old is None:
            return b"%da%d\n> %s" % (n - 1, n, self.new)
        if self.new is None:
            return b"%dd%d\n< %s" % (n, n - 1, self.old)
        return b"%dc%d\n< %s---\n> %s" % (n, n, self.old, self.new)


def diff_lines(
    old_lines: Iterable[bytes], new_lines: Iterable[bytes], options: DiffOptions | None = None
) -> Iterator[DiffHunk]:
    """Yield a hunk for every position where the two line sequences differ."""
    options = options or DiffOptions()
    for line_no, (old, new) in enumerate(zip_longest(old_lines, new_lines), 1):
        if old is None or new is None:
            yield DiffHunk(line_no, old, new)
        elif normalize_line(old, options) != normalize_line(new, options):
            yield DiffHunk(line_no, old, new)


@dataclass
class DiffResult:
    """Outcome of comparing two files."""

    hunks: list[DiffHunk]
    old_name: str
    new_name: str

    @property
    def status(self) -> DiffStatus:
        return DiffStatus.DIFFERENT if self.hunks else DiffStatus.SAME

    def format(self, brief: bool = False) -> bytes:
        if not self.hunks:
            return b""
        if brief:
            return f"Files {self.old_name} and {self.new_name} differ\n".encode()
        return b"".join(hunk.format() for hunk in self.hunks)


def _read_lines(file_path: Path | str) -> list[bytes]:
    try:
        with open(file_path, "rb") as f:
            return f.readlines()
    except OSError as e:
        raise FileReadError(str(file_path), describe_os_error(e)) from e


def compare_files(
    old_path: Path | str, new_path: Path | str, options: DiffOptions | None = None
) -> DiffResult:
    """
    Compare two files line by line.

    Raises:
        FileReadError: If either file cannot be opened or read
    """
    old_lines = _read_lines(old_path)
    new_lines = _read_lines(new_path)
    hunks = list(diff_lines(old_lines, new_lines, options))
    logger.debug(f"{old_path} vs {new_path}: {len(hunks)} differing lines")
    return DiffResult(hunks=hunks, old_name=str(old_path), new_name=str(new_path))
