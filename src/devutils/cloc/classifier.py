"""
Line classifier - counts code, comment and blank lines in a byte buffer.

A single left-to-right pass over the raw bytes tracks whether the cursor is
in code, a line comment, a block comment or a string literal. Each line is
classified when its newline is reached, or at the end of the buffer for a
final line without a newline.

Rules, in priority order at each position:

1. newline: classify the line and reset the per-line flags; a line comment
   ends here, block comments and strings carry over
2. whitespace: skipped
3. quote outside comments: a string starts, the line has code
4. remembered quote inside a string, not preceded by a backslash: the
   string ends with that quote
5. anything else inside a string: consumed literally as code, so lines
   continuing a multi-line string are not blank
6. block start marker outside comments
7. block end marker inside a block comment
8. line comment marker outside comments
9. any other byte outside comments is code
"""

import logging
from enum import Enum

from .models import FileLineCounts, LanguageSyntax

logger = logging.getLogger(__name__)

_NEWLINE = 0x0A
_BACKSLASH = 0x5C
_QUOTES = frozenset(b"\"'")
# Same set as C isspace() in the "C" locale
_WHITESPACE = frozenset(b" \t\n\v\f\r")


class ScanState(Enum):
    """Where the cursor currently is."""

    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"


class LineClassifier:
    """
    Classifies every line of a buffer for one language.

    The instance only holds the language's markers; all scan state lives
    in the classify() call, so one classifier can be reused across files.
    """

    def __init__(self, syntax: LanguageSyntax):
        self.syntax = syntax
        self._line_marker = syntax.line_comment_bytes
        self._block_start = syntax.block_start_bytes
        self._block_end = syntax.block_end_bytes

    def classify(self, buffer: bytes, counts: FileLineCounts | None = None) -> FileLineCounts:
        """
        Classify all lines of a buffer.

        Args:
            buffer: Raw file content (bytes, bytearray, memoryview or mmap)
            counts: Optional accumulator to populate; a new one is created if None

        Returns:
            The populated FileLineCounts
        """
        if counts is None:
            counts = FileLineCounts()
        counts.language_id = self.syntax.id

        size = len(buffer)
        counts.size_bytes = size
        if size == 0:
            return counts

        line_marker = self._line_marker
        block_start = self._block_start
        block_end = self._block_end

        state = ScanState.CODE
        quote = 0
        has_code = False
        has_comment = False
        pos = 0

        while pos < size:
            byte = buffer[pos]

            if byte == _NEWLINE:
                _close_line(counts, state, has_code, has_comment)

                if state is ScanState.LINE_COMMENT:
                    state = ScanState.CODE
                has_code = False
                has_comment = False
                pos += 1
                continue

            if byte in _WHITESPACE:
                pos += 1
                continue

            if state is ScanState.STRING:
                has_code = True
                if byte == quote and buffer[pos - 1] != _BACKSLASH:
                    state = ScanState.CODE
                pos += 1
                continue

            if state is ScanState.CODE and byte in _QUOTES:
                state = ScanState.STRING
                quote = byte
                has_code = True
                pos += 1
                continue

            if state is ScanState.CODE and _matches(buffer, pos, block_start):
                state = ScanState.BLOCK_COMMENT
                has_comment = True
                pos += len(block_start)
                continue

            if state is ScanState.BLOCK_COMMENT and _matches(buffer, pos, block_end):
                state = ScanState.CODE
                has_comment = True
                pos += len(block_end)
                continue

            if state is ScanState.CODE and _matches(buffer, pos, line_marker):
                state = ScanState.LINE_COMMENT
                has_comment = True
                pos += len(line_marker)
                continue

            if state is ScanState.CODE:
                has_code = True
            pos += 1

        # Final line without a trailing newline is classified exactly once
        if buffer[size - 1] != _NEWLINE:
            _close_line(counts, state, has_code, has_comment)

        return counts


def _close_line(
    counts: FileLineCounts, state: ScanState, has_code: bool, has_comment: bool
) -> None:
    """Add one line to the category its scan flags select."""
    if state is ScanState.LINE_COMMENT or state is ScanState.BLOCK_COMMENT:
        counts.comment += 1
    elif has_code:
        counts.code += 1
    elif has_comment:
        counts.comment += 1
    else:
        counts.blank += 1


def _matches(buffer: bytes, pos: int, marker: bytes) -> bool:
    """Literal marker match at pos; never reads past the end of the buffer."""
    end = pos + len(marker)
    return end <= len(buffer) and buffer[pos:end] == marker


def classify_buffer(buffer: bytes, syntax: LanguageSyntax) -> FileLineCounts:
    """Classify a buffer with the given language syntax."""
    return LineClassifier(syntax).classify(buffer)
