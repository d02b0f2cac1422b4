"""
Integration tests for the command line tools.

Tests output formats, exit codes and error handling of each tool and of
the dev-utils umbrella command.
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from devutils.cli import app as umbrella_app
from devutils.cli.checksum import app as checksum_app
from devutils.cli.cloc import app as cloc_app
from devutils.cli.countfile import app as countfile_app
from devutils.cli.diff import app as diff_app
from devutils.cli.hexdump import app as hexdump_app
from devutils.cloc import scanner as scanner_module
from devutils.errors import FileReadError

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DEVUTILS_CONFIG", "DEVUTILS_CHECKSUM_ALGORITHM", "DEVUTILS_LOGGING_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestVersionAndHelp:
    """GNU-style --version and -h/--help."""

    @pytest.mark.parametrize(
        "app,name",
        [
            (checksum_app, "checksum"),
            (countfile_app, "countfile"),
            (diff_app, "diff"),
            (hexdump_app, "hexdump"),
            (cloc_app, "cloc"),
        ],
    )
    def test_version(self, app, name):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == f"{name} (dev-utils) 1.0.0"
        assert lines[1] == "Copyright (C) 2025 AnmiTaliDev"
        assert lines[-1] == "There is NO WARRANTY, to the extent permitted by law."

    def test_short_help(self):
        result = runner.invoke(checksum_app, ["-h"])

        assert result.exit_code == 0
        assert "--adler32" in result.stdout

    def test_umbrella_help_lists_tools(self):
        result = runner.invoke(umbrella_app, ["--help"])

        assert result.exit_code == 0
        for name in ("checksum", "countfile", "diff", "hexdump", "cloc"):
            assert name in result.stdout


class TestChecksumCLI:
    def test_stdin(self):
        result = runner.invoke(checksum_app, [], input=b"123456789")

        assert result.exit_code == 0
        assert result.stdout == "cbf43926  (standard input)\n"

    def test_quiet(self):
        result = runner.invoke(checksum_app, ["-q"], input=b"123456789")

        assert result.stdout == "cbf43926\n"

    def test_algorithm_flags_last_wins(self, workdir):
        path = workdir / "w.txt"
        path.write_bytes(b"Wikipedia")

        adler = runner.invoke(checksum_app, ["-c", "-a", str(path)])
        crc = runner.invoke(checksum_app, ["-a", "-c", "-q", str(path)])

        assert adler.stdout == f"11e60398  {path}\n"
        assert crc.exit_code == 0
        assert crc.stdout.strip() != "11e60398"

    def test_bsd_sum(self):
        result = runner.invoke(checksum_app, ["--sum", "-q"], input=b"abc")

        assert result.stdout == "000040ac\n"

    def test_missing_file_continues(self, workdir):
        good = workdir / "good.txt"
        good.write_bytes(b"123456789")

        result = runner.invoke(checksum_app, [str(workdir / "missing"), str(good)])

        assert result.exit_code == 1
        assert "checksum:" in result.output
        assert "No such file or directory" in result.output
        assert f"cbf43926  {good}" in result.output

    def test_verify(self, workdir, monkeypatch):
        (workdir / "a.txt").write_bytes(b"123456789")
        (workdir / "b.txt").write_bytes(b"changed")
        listing = workdir / "sums.txt"
        listing.write_text("cbf43926  a.txt\ncbf43926  b.txt\n")
        monkeypatch.chdir(workdir)

        result = runner.invoke(checksum_app, ["--verify", str(listing)])

        assert result.exit_code == 1
        assert "a.txt: OK" in result.output
        assert "b.txt: FAILED" in result.output

    def test_verify_all_ok(self, workdir, monkeypatch):
        (workdir / "a.txt").write_bytes(b"123456789")
        listing = workdir / "sums.txt"
        listing.write_text("cbf43926  a.txt\n")
        monkeypatch.chdir(workdir)

        result = runner.invoke(checksum_app, ["-v", str(listing)])

        assert result.exit_code == 0
        assert result.stdout == "a.txt: OK\n"

    def test_verify_malformed_line_reported_once(self, workdir, monkeypatch):
        (workdir / "a.txt").write_bytes(b"123456789")
        listing = workdir / "sums.txt"
        listing.write_text("not a checksum line\ncbf43926  a.txt\n")
        monkeypatch.chdir(workdir)

        result = runner.invoke(checksum_app, ["-v", str(listing)])

        assert result.exit_code == 1
        assert result.output.splitlines() == [
            "a.txt: OK",
            "checksum: WARNING: 1 line(s) improperly formatted",
        ]


class TestCountfileCLI:
    def test_stdin_has_no_name(self):
        result = runner.invoke(countfile_app, [], input=b"hello world\n")

        assert result.exit_code == 0
        assert result.stdout == "       1        2       12       12\n"

    def test_total_row_for_multiple_files(self, workdir):
        a, b = workdir / "a.txt", workdir / "b.txt"
        a.write_bytes(b"one\n")
        b.write_bytes(b"two three\n")

        result = runner.invoke(countfile_app, [str(a), str(b)])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == f"       1        1        4        4 {a}"
        assert lines[2] == "       2        3       14       14 total"

    def test_error_sets_exit_status(self, workdir):
        a = workdir / "a.txt"
        a.write_bytes(b"x\n")

        result = runner.invoke(countfile_app, [str(a), str(workdir / "nope")])

        assert result.exit_code == 1
        assert f"countfile: {workdir / 'nope'}: No such file or directory" in result.output
        assert "total" not in result.output


class TestDiffCLI:
    @pytest.fixture
    def pair(self, workdir):
        a, b = workdir / "a.txt", workdir / "b.txt"
        a.write_bytes(b"same\nold\n")
        b.write_bytes(b"same\nOLD\nextra\n")
        return a, b

    def test_differences(self, pair):
        result = runner.invoke(diff_app, [str(pair[0]), str(pair[1])])

        assert result.exit_code == 1
        assert result.stdout == "2c2\n< old\n---\n> OLD\n2a3\n> extra\n"

    def test_ignore_case(self, pair):
        result = runner.invoke(diff_app, ["-i", str(pair[0]), str(pair[1])])

        assert result.stdout == "2a3\n> extra\n"

    def test_brief(self, pair):
        result = runner.invoke(diff_app, ["-q", str(pair[0]), str(pair[1])])

        assert result.stdout == f"Files {pair[0]} and {pair[1]} differ\n"

    def test_same_files(self, pair):
        result = runner.invoke(diff_app, [str(pair[0]), str(pair[0])])

        assert result.exit_code == 0
        assert result.stdout == ""

    def test_missing_operand(self, pair):
        result = runner.invoke(diff_app, [str(pair[0])])

        assert result.exit_code == 2
        assert "missing operand" in result.output

    def test_unreadable_file(self, pair, workdir):
        result = runner.invoke(diff_app, [str(pair[0]), str(workdir / "missing")])

        assert result.exit_code == 2


class TestHexdumpCLI:
    def test_canonical_default(self):
        result = runner.invoke(hexdump_app, [], input=b"ABC")

        assert result.exit_code == 0
        assert result.stdout == "00000000  4142 43" + " " * 34 + " |ABC|\n"

    def test_format_flags(self):
        result = runner.invoke(hexdump_app, ["-x"], input=b"ABC")

        assert result.stdout == "00000000  41 42 43\n"

    def test_last_format_flag_wins(self):
        result = runner.invoke(hexdump_app, ["-x", "-d"], input=b"\x01\x02")

        assert result.stdout == "00000000  00513\n"

    def test_skip_and_length(self):
        result = runner.invoke(hexdump_app, ["-x", "-s", "0x2", "-n", "2"], input=b"\x00\x01\x02\x03\x04")

        assert result.stdout == "00000002  02 03\n"

    def test_no_squeeze(self):
        squeezed = runner.invoke(hexdump_app, ["-x"], input=bytes(48))
        verbose = runner.invoke(hexdump_app, ["-x", "-v"], input=bytes(48))

        assert squeezed.stdout.splitlines()[1] == "*"
        assert len(verbose.stdout.splitlines()) == 3

    def test_invalid_skip(self):
        result = runner.invoke(hexdump_app, ["-s", "-1"], input=b"x")

        assert result.exit_code == 1
        assert "invalid skip value" in result.output

    def test_invalid_length(self):
        result = runner.invoke(hexdump_app, ["-n", "0"], input=b"x")

        assert result.exit_code == 1
        assert "invalid length value" in result.output

    def test_missing_file(self, workdir):
        result = runner.invoke(hexdump_app, [str(workdir / "nope")])

        assert result.exit_code == 1
        assert "No such file or directory" in result.output


class TestClocCLI:
    @pytest.fixture
    def tree(self, workdir):
        (workdir / "src").mkdir()
        (workdir / "src" / "main.c").write_text("int x = 1;\n\n// comment\n")
        (workdir / "vendor").mkdir()
        (workdir / "vendor" / "dep.c").write_text("int y;\n")
        return workdir

    def test_text_report(self, tree):
        result = runner.invoke(cloc_app, [str(tree / "src")])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == ""
        assert lines[1] == "Language     Files     Code  Comments    Blank    Total"
        assert lines[3] == "C                1        1         1        1        3"
        assert lines[5] == "Total            1        1         1        1        3"

    def test_exclude(self, tree):
        result = runner.invoke(cloc_app, ["--format", "json", "--exclude", "vendor/", str(tree)])

        data = json.loads(result.stdout)
        assert data["total"]["files"] == 1

    def test_json_without_exclude(self, tree):
        result = runner.invoke(cloc_app, ["--format", "json", str(tree)])

        assert json.loads(result.stdout)["total"]["files"] == 2

    def test_table(self, tree):
        result = runner.invoke(cloc_app, ["--format", "table", str(tree)])

        assert result.exit_code == 0
        assert "Lines of Code" in result.stdout

    def test_unsupported_file_is_error(self, tree):
        notes = tree / "notes.txt"
        notes.write_text("hello\n")

        result = runner.invoke(cloc_app, [str(notes)])

        assert result.exit_code == 1
        assert "unsupported language" in result.output

    def test_missing_path(self, tree):
        result = runner.invoke(cloc_app, [str(tree / "missing")])

        assert result.exit_code == 1
        assert "No such file or directory" in result.output

    def test_missing_path_reported_once(self, tree):
        missing = str(tree / "missing")

        result = runner.invoke(cloc_app, [missing])

        error_lines = [line for line in result.output.splitlines() if missing in line]
        assert error_lines == [f"cloc: {missing}: No such file or directory"]

    def test_unreadable_file_in_tree(self, tree, monkeypatch):
        real_open_buffer = scanner_module.open_buffer
        blocked = tree / "vendor" / "dep.c"

        def open_buffer(path, use_mmap=True):
            if Path(path) == blocked:
                raise FileReadError(str(path), "Permission denied")
            return real_open_buffer(path, use_mmap=use_mmap)

        monkeypatch.setattr(scanner_module, "open_buffer", open_buffer)

        result = runner.invoke(cloc_app, [str(tree)])

        assert result.exit_code == 1
        assert f"cloc: {blocked}: Permission denied" in result.output
        assert "Total            1        1         1        1        3" in result.output

    def test_no_paths(self):
        result = runner.invoke(cloc_app, [])

        assert result.exit_code == 1


class TestUmbrellaCLI:
    def test_subcommand(self):
        result = runner.invoke(umbrella_app, ["checksum", "-q"], input=b"123456789")

        assert result.exit_code == 0
        assert result.stdout == "cbf43926\n"

    def test_config_applies_to_subcommand(self, workdir):
        config = workdir / "devutils.yaml"
        config.write_text("checksum:\n  algorithm: adler32\n")

        result = runner.invoke(
            umbrella_app, ["--config", str(config), "checksum", "-q"], input=b"Wikipedia"
        )

        assert result.stdout == "11e60398\n"

    def test_env_config_for_standalone_tool(self, workdir, monkeypatch):
        config = workdir / "devutils.yaml"
        config.write_text("hexdump:\n  suppress_duplicates: false\n")
        monkeypatch.setenv("DEVUTILS_CONFIG", str(config))

        result = runner.invoke(hexdump_app, ["-x"], input=bytes(48))

        assert len(result.stdout.splitlines()) == 3

    def test_invalid_config(self, workdir):
        config = workdir / "devutils.yaml"
        config.write_text("checksum:\n  nope: 1\n")

        result = runner.invoke(umbrella_app, ["--config", str(config), "checksum"], input=b"")

        assert result.exit_code == 2
        assert "nope" in result.output

    def test_version(self):
        result = runner.invoke(umbrella_app, ["--version"])

        assert result.stdout.startswith("dev-utils (dev-utils) 1.0.0\n")
