"""
Report rendering for the lines-of-code counter.

The text layout reproduces the classic fixed-width summary; a Rich table
and JSON are available for interactive and machine use.
"""

import json
from enum import Enum

from rich.table import Table

from .models import LanguageAggregate, LanguageTotals

TEXT_HEADER = "Language     Files     Code  Comments    Blank    Total"
TEXT_RULE = "-" * 54


class ReportFormat(str, Enum):
    TEXT = "text"
    TABLE = "table"
    JSON = "json"


def _text_row(totals: LanguageTotals) -> str:
    return (
        f"{totals.name:<10} {totals.files:7d} {totals.code:8d} "
        f"{totals.comment:9d} {totals.blank:8d} {totals.total:8d}"
    )


def render_text(aggregate: LanguageAggregate) -> str:
    """Render the fixed-width summary, one row per language plus totals."""
    lines = ["", TEXT_HEADER, TEXT_RULE]
    lines.extend(_text_row(totals) for totals in aggregate)
    lines.append(TEXT_RULE)

    grand = aggregate.grand_total()
    lines.append(_text_row(grand))
    return "\n".join(lines) + "\n"


def render_table(aggregate: LanguageAggregate) -> Table:
    """Render the summary as a Rich table."""
    table = Table(
        title="Lines of Code",
        title_style="bold cyan",
        border_style="blue",
        show_header=True,
        header_style="bold white",
        show_footer=True,
    )

    grand = aggregate.grand_total()
    table.add_column("Language", style="green", no_wrap=True, footer="Total")
    table.add_column("Files", justify="right", footer=str(grand.files))
    table.add_column("Code", justify="right", style="bold", footer=str(grand.code))
    table.add_column("Comments", justify="right", style="dim cyan", footer=str(grand.comment))
    table.add_column("Blank", justify="right", style="dim", footer=str(grand.blank))
    table.add_column("Total", justify="right", footer=str(grand.total))

    for totals in aggregate:
        table.add_row(
            totals.name,
            str(totals.files),
            str(totals.code),
            str(totals.comment),
            str(totals.blank),
            str(totals.total),
        )

    return table


def render_json(aggregate: LanguageAggregate, failed: list[tuple[str, str]] | None = None) -> str:
    """Render the summary as JSON."""
    payload = {
        "languages": [totals.to_dict() for totals in aggregate],
        "total": aggregate.grand_total().to_dict(),
        "errors": [{"path": path, "reason": reason} for path, reason in failed or []],
    }
    return json.dumps(payload, indent=2)
