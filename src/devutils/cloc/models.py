"""
Data models for the lines-of-code counter.
"""

from dataclasses import dataclass, field
from pathlib import Path

# Identifier reserved for "no language"; never present in the registry
LANG_NONE = 0


@dataclass(frozen=True)
class LanguageSyntax:
    """
    Comment conventions and file extensions of one language.

    Attributes:
        id: Numeric language identifier (1..n, 0 is reserved)
        name: Display name used in reports ('C', 'Python', ...)
        extensions: Extensions including the dot, in declaration order
        line_comment: Marker starting a comment that runs to end of line
        block_start: Marker opening a multi-line comment
        block_end: Marker closing a multi-line comment
    """

    id: int
    name: str
    extensions: tuple[str, ...]
    line_comment: str
    block_start: str
    block_end: str

    def __post_init__(self) -> None:
        if self.id == LANG_NONE:
            raise ValueError(f"Language id {LANG_NONE} is reserved")
        for marker in (self.line_comment, self.block_start, self.block_end):
            if not marker:
                raise ValueError(f"Empty comment marker for language {self.name}")

    # Byte forms of the markers; the classifier compares raw bytes
    @property
    def line_comment_bytes(self) -> bytes:
        return self.line_comment.encode("ascii")

    @property
    def block_start_bytes(self) -> bytes:
        return self.block_start.encode("ascii")

    @property
    def block_end_bytes(self) -> bytes:
        return self.block_end.encode("ascii")


@dataclass
class FileLineCounts:
    """
    Line classification result for a single file.

    Attributes:
        code: Lines holding code
        comment: Lines inside or starting a comment
        blank: Lines with nothing but whitespace
        size_bytes: Size of the classified buffer
        path: File the counts belong to (None for anonymous buffers)
        language_id: Identifier of the syntax used
    """

    code: int = 0
    comment: int = 0
    blank: int = 0
    size_bytes: int = 0
    path: Path | None = None
    language_id: int = LANG_NONE

    @property
    def total(self) -> int:
        return self.code + self.comment + self.blank


@dataclass
class LanguageTotals:
    """Accumulated counts for one language across a scan."""

    name: str
    files: int = 0
    code: int = 0
    comment: int = 0
    blank: int = 0
    size_bytes: int = 0

    @property
    def total(self) -> int:
        return self.code + self.comment + self.blank

    def to_dict(self) -> dict[str, int | str]:
        return {
            "language": self.name,
            "files": self.files,
            "code": self.code,
            "comment": self.comment,
            "blank": self.blank,
            "total": self.total,
            "bytes": self.size_bytes,
        }


@dataclass
class LanguageAggregate:
    """
    Per-language totals for a whole scan.

    Languages keep the order in which they were first seen.
    """

    languages: dict[int, LanguageTotals] = field(default_factory=dict)

    def add(self, counts: FileLineCounts, syntax: "LanguageSyntax") -> None:
        """Fold one file's counts into the totals for its language."""
        totals = self.languages.get(syntax.id)
        if totals is None:
            totals = LanguageTotals(name=syntax.name)
            self.languages[syntax.id] = totals

        totals.files += 1
        totals.code += counts.code
        totals.comment += counts.comment
        totals.blank += counts.blank
        totals.size_bytes += counts.size_bytes

    def __iter__(self):
        return iter(self.languages.values())

    def __len__(self) -> int:
        return len(self.languages)

    def grand_total(self) -> LanguageTotals:
        """Sum over all languages."""
        total = LanguageTotals(name="Total")
        for lang in self.languages.values():
            total.files += lang.files
            total.code += lang.code
            total.comment += lang.comment
            total.blank += lang.blank
            total.size_bytes += lang.size_bytes
        return total
