"""
Cloc module for dev-utils.

Counts code, comment and blank lines per language with a byte-level line
classifier, extension-based language detection and a depth-first scanner.
"""

from .classifier import LineClassifier, ScanState, classify_buffer
from .language_registry import LanguageRegistry, extension_of, get_default_registry
from .models import FileLineCounts, LanguageAggregate, LanguageSyntax, LanguageTotals
from .report import ReportFormat, render_json, render_table, render_text
from .scanner import ClocResult, ClocScanner

__all__ = [
    # Classifier
    "LineClassifier",
    "ScanState",
    "classify_buffer",
    # Models
    "FileLineCounts",
    "LanguageAggregate",
    "LanguageSyntax",
    "LanguageTotals",
    # Language registry
    "LanguageRegistry",
    "extension_of",
    "get_default_registry",
    # Scanner
    "ClocResult",
    "ClocScanner",
    # Reporting
    "ReportFormat",
    "render_json",
    "render_table",
    "render_text",
]
