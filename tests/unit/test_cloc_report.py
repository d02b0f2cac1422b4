"""
Tests for cloc report rendering.
"""

import json

from rich.console import Console

from devutils.cloc.models import FileLineCounts, LanguageAggregate
from devutils.cloc.report import TEXT_HEADER, TEXT_RULE, render_json, render_table, render_text
from devutils.cloc.language_registry import get_default_registry


def _aggregate() -> LanguageAggregate:
    registry = get_default_registry()
    aggregate = LanguageAggregate()
    c = registry.get_by_name("C")
    aggregate.add(FileLineCounts(code=6, comment=2, blank=3, size_bytes=100), c)
    aggregate.add(FileLineCounts(code=4, comment=1, blank=1, size_bytes=50), c)
    aggregate.add(FileLineCounts(code=7, comment=0, blank=2, size_bytes=70), registry.get_by_name("Python"))
    return aggregate


class TestTextReport:
    def test_exact_layout(self):
        expected = (
            "\n"
            "Language     Files     Code  Comments    Blank    Total\n"
            "------------------------------------------------------\n"
            "C                2       10         3        4       17\n"
            "Python           1        7         0        2        9\n"
            "------------------------------------------------------\n"
            "Total            3       17         3        6       26\n"
        )

        assert render_text(_aggregate()) == expected

    def test_empty_aggregate(self):
        text = render_text(LanguageAggregate())

        assert text.splitlines()[1:3] == [TEXT_HEADER, TEXT_RULE]
        assert text.splitlines()[-1].startswith("Total            0")

    def test_rule_matches_header_width(self):
        assert len(TEXT_RULE) == 54


class TestJsonReport:
    def test_structure(self):
        data = json.loads(render_json(_aggregate(), [("x.c", "Permission denied")]))

        assert [lang["language"] for lang in data["languages"]] == ["C", "Python"]
        assert data["languages"][0]["bytes"] == 150
        assert data["total"]["total"] == 26
        assert data["errors"] == [{"path": "x.c", "reason": "Permission denied"}]

    def test_no_errors(self):
        assert json.loads(render_json(_aggregate()))["errors"] == []


class TestTableReport:
    def test_table_renders_languages_and_totals(self):
        console = Console(record=True, width=100)
        console.print(render_table(_aggregate()))
        output = console.export_text()

        assert "Python" in output
        assert "Total" in output
        assert "26" in output
