"""
Directory scanner for the lines-of-code counter.

Walks directories depth-first, detects each file's language and feeds its
bytes to the LineClassifier, folding the counts into a LanguageAggregate.
"""

import logging
import os
import stat
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

from devutils.core.file_io import describe_os_error, open_buffer
from devutils.errors import DevUtilsError, FileReadError, UnsupportedLanguageError

from .classifier import LineClassifier
from .language_registry import DEFAULT_SNIFF_BYTES, LanguageRegistry, get_default_registry
from .models import FileLineCounts, LanguageAggregate, LanguageSyntax

logger = logging.getLogger(__name__)


@dataclass
class ClocResult:
    """
    Outcome of counting a set of paths.

    Attributes:
        aggregate: Per-language totals
        files: Counts of every classified file, in scan order
        failed: (path, reason) for every path that could not be processed
    """

    aggregate: LanguageAggregate = field(default_factory=LanguageAggregate)
    files: list[FileLineCounts] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class ClocScanner:
    """
    Counts lines of code in files and directory trees.

    Provides:
    - Depth-first directory traversal, hidden entries skipped
    - Gitignore-style exclusion patterns (using pathspec library)
    - Language detection through a LanguageRegistry
    - Memory-mapped reads of regular files
    - Per-file error reporting that never aborts the scan
    """

    def __init__(
        self,
        registry: LanguageRegistry | None = None,
        ignore_patterns: list[str] | None = None,
        skip_hidden: bool = True,
        sniff_bytes: int = DEFAULT_SNIFF_BYTES,
        use_mmap: bool = True,
    ):
        """
        Initialize the ClocScanner.

        Args:
            registry: LanguageRegistry for language detection.
                      If None, uses the global default registry.
            ignore_patterns: Gitignore-style patterns excluded from directory scans.
            skip_hidden: Skip entries whose name starts with '.'.
            sniff_bytes: Bytes of a '.h' file inspected to tell C from C++.
            use_mmap: Memory-map regular files instead of reading them.
        """
        self._registry = registry or get_default_registry()
        self._ignore_patterns: list[str] = list(ignore_patterns or [])
        self._skip_hidden = skip_hidden
        self._sniff_bytes = sniff_bytes
        self._use_mmap = use_mmap
        self._classifiers: dict[int, LineClassifier] = {}
        self._pathspec: pathspec.PathSpec | None = None
        self._update_pathspec()

    def _update_pathspec(self) -> None:
        """Update the pathspec matcher from current ignore patterns."""
        if self._ignore_patterns:
            self._pathspec = pathspec.PathSpec.from_lines("gitwildmatch", self._ignore_patterns)
        else:
            self._pathspec = None

    def set_ignore_patterns(self, patterns: list[str]) -> None:
        """Set ignore patterns using gitignore syntax."""
        self._ignore_patterns = list(patterns)
        self._update_pathspec()

    def _classifier_for(self, syntax: LanguageSyntax) -> LineClassifier:
        classifier = self._classifiers.get(syntax.id)
        if classifier is None:
            classifier = LineClassifier(syntax)
            self._classifiers[syntax.id] = classifier
        return classifier

    def _should_ignore(self, path: Path, root_path: Path, is_dir: bool) -> bool:
        """
        Check if a directory entry should be skipped.

        Args:
            path: Entry to check
            root_path: Root directory for relative path calculation
            is_dir: Whether the entry is a directory

        Returns:
            True if the entry should be skipped
        """
        if self._skip_hidden and path.name.startswith("."):
            return True

        if self._pathspec is None:
            return False

        try:
            rel_path_str = str(path.relative_to(root_path)).replace("\\", "/")
        except ValueError:
            return False

        if is_dir:
            return self._pathspec.match_file(rel_path_str) or self._pathspec.match_file(
                rel_path_str + "/"
            )
        return self._pathspec.match_file(rel_path_str)

    def count_file(self, file_path: Path | str) -> tuple[FileLineCounts, LanguageSyntax]:
        """
        Detect the language of a file and classify its lines.

        Args:
            file_path: File to count

        Returns:
            Tuple of (counts, syntax used)

        Raises:
            UnsupportedLanguageError: If no language matches the file
            FileReadError: If the file cannot be read
        """
        file_path = Path(file_path)
        syntax = self._registry.detect_from_path(file_path, self._sniff_bytes)
        if syntax is None:
            raise UnsupportedLanguageError(str(file_path))

        counts = FileLineCounts(path=file_path)
        with open_buffer(file_path, use_mmap=self._use_mmap) as buffer:
            self._classifier_for(syntax).classify(buffer, counts)

        logger.debug(
            f"{file_path}: {syntax.name} code={counts.code} "
            f"comment={counts.comment} blank={counts.blank}"
        )
        return counts, syntax

    def scan(self, root_path: Path | str, result: ClocResult | None = None) -> Iterator[FileLineCounts]:
        """
        Recursively scan a directory and yield counts for each supported file.

        Files of unknown language are skipped silently. Unreadable files and
        directories are logged and recorded in result.failed when a result
        is given.

        Args:
            root_path: Root directory to scan
            result: Optional ClocResult collecting failures

        Yields:
            FileLineCounts for every classified file, depth-first
        """
        root_path = Path(root_path)
        yield from self._scan_directory(root_path, root_path, result)

    def _scan_directory(
        self, current_path: Path, root_path: Path, result: ClocResult | None
    ) -> Iterator[FileLineCounts]:
        try:
            entries = sorted(os.scandir(current_path), key=lambda e: e.name)
        except OSError as e:
            reason = describe_os_error(e)
            logger.debug(f"Error accessing directory: {current_path} - {reason}")
            if result is not None:
                result.failed.append((str(current_path), reason))
            return

        for entry in entries:
            path = Path(entry.path)
            try:
                # lstat semantics: symbolic links are neither dirs nor files here
                mode = entry.stat(follow_symlinks=False).st_mode
            except OSError as e:
                logger.debug(f"Cannot stat {path}: {e}")
                continue

            is_dir = stat.S_ISDIR(mode)
            if self._should_ignore(path, root_path, is_dir):
                logger.debug(f"Ignoring: {path}")
                continue

            if is_dir:
                yield from self._scan_directory(path, root_path, result)
            elif stat.S_ISREG(mode):
                try:
                    counts, syntax = self.count_file(path)
                except UnsupportedLanguageError:
                    logger.debug(f"Skipping file of unknown language: {path}")
                    continue
                except FileReadError as e:
                    logger.debug(f"Error reading file: {path} - {e.reason}")
                    if result is not None:
                        result.failed.append((str(path), e.reason))
                    continue

                if result is not None:
                    result.aggregate.add(counts, syntax)
                    result.files.append(counts)
                yield counts

    def run(self, paths: Iterable[Path | str]) -> ClocResult:
        """
        Count every file and directory tree named in paths.

        A path that does not exist, names an unsupported file, or cannot be
        read is recorded as failed; the remaining paths are still counted.

        Args:
            paths: Files and directories to count

        Returns:
            ClocResult with per-language totals and failures
        """
        result = ClocResult()

        for raw_path in paths:
            path = Path(raw_path)
            try:
                st = os.stat(path)
            except OSError as e:
                reason = describe_os_error(e)
                logger.debug(f"Cannot access {path}: {reason}")
                result.failed.append((str(raw_path), reason))
                continue

            if stat.S_ISDIR(st.st_mode):
                for _ in self.scan(path, result):
                    pass
                continue

            try:
                counts, syntax = self.count_file(path)
            except DevUtilsError as e:
                reason = e.reason if isinstance(e, FileReadError) else "unsupported language"
                logger.debug(f"Error processing file: {path} - {reason}")
                result.failed.append((str(raw_path), reason))
                continue

            result.aggregate.add(counts, syntax)
            result.files.append(counts)

        return result
