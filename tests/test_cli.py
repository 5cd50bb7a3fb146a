"""Tests for the tabparse command line (click's CliRunner, no subprocesses)."""

import json
from pathlib import Path

from click.testing import CliRunner

from tabparse import __version__
from tabparse.cli import main


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_tc2json_stdin_to_stdout() -> None:
    result = CliRunner().invoke(main, ["tc2json"], input="Qa1 |")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [item["type"] for item in payload] == ["Chord", "Barline"]


def test_tc2json_file_to_file(tmp_path: Path) -> None:
    source = _write(tmp_path / "piece.tc", "{<rules><pitch>68</pitch></rules>} Ha1 ||")
    target = tmp_path / "piece.json"
    result = CliRunner().invoke(main, ["tc2json", source, str(target), "--pretty"])
    assert result.exit_code == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload[0]["full_tuning"][0] == 68
    assert payload[-1]["double_bar"] is True


def test_tc2json_refuses_to_overwrite(tmp_path: Path) -> None:
    source = _write(tmp_path / "piece.tc", "a1")
    target = _write(tmp_path / "piece.json", "keep")
    result = CliRunner().invoke(main, ["tc2json", source, target])
    assert result.exit_code == 1
    assert "exists" in result.output
    assert Path(target).read_text(encoding="utf-8") == "keep"


def test_tc2json_overwrite(tmp_path: Path) -> None:
    source = _write(tmp_path / "piece.tc", "a1")
    target = _write(tmp_path / "piece.json", "old")
    result = CliRunner().invoke(main, ["tc2json", source, target, "--overwrite"])
    assert result.exit_code == 0
    assert json.loads(Path(target).read_text(encoding="utf-8"))[0]["type"] == "Chord"


def test_tc2json_no_comments() -> None:
    result = CliRunner().invoke(main, ["tc2json", "--no-comments"], input="{note} |")
    assert result.exit_code == 0
    assert [item["type"] for item in json.loads(result.stdout)] == ["Barline"]


def test_tc2json_silent_still_reports_errors() -> None:
    runner = CliRunner()
    quiet = runner.invoke(main, ["tc2json", "--silent"], input="a1")
    assert quiet.exit_code == 0
    assert quiet.stdout == ""

    failing = runner.invoke(main, ["tc2json", "--silent"], input="a1Q")
    assert failing.exit_code == 1
    assert "Unexpected rhythm flag" in failing.output


def test_missing_input_file(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["tc2json", str(tmp_path / "nope.tc")])
    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_main_course_count_option() -> None:
    runner = CliRunner()
    assert runner.invoke(main, ["tc2json"], input="a7").exit_code == 1
    result = runner.invoke(main, ["--main-course-count", "7", "tc2json"], input="a7")
    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["main_courses"][0]["pitch"]["course"] == 7


def test_parse_prints_one_event_per_line() -> None:
    result = CliRunner().invoke(main, ["parse"], input="{>} | Q")
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("PageBreak(")
    assert lines[2].startswith("Rest(")


def test_scan_prints_tokens() -> None:
    result = CliRunner().invoke(main, ["scan"], input="Qa1 |")
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "1\tRHYTHM_FLAG\t0-1\t'Q'"
    assert lines[-1] == "4\tBAR\t4-5\t'|'"


def test_scan_reports_lexical_error() -> None:
    result = CliRunner().invoke(main, ["scan"], input="{open")
    assert result.exit_code == 1
    assert "position 0" in result.output


def test_validate_counts_failures(tmp_path: Path) -> None:
    good = _write(tmp_path / "good.tc", "Qa1 |")
    bad = _write(tmp_path / "bad.tc", "a1-3 |")
    result = CliRunner().invoke(main, ["validate", good, bad])
    assert result.exit_code == 0
    assert "Passed: 1" in result.stdout
    assert "Failed: 1" in result.stdout
    assert "Total: 2" in result.stdout


def test_validate_halt_on_error(tmp_path: Path) -> None:
    bad = _write(tmp_path / "bad.tc", "%")
    good = _write(tmp_path / "good.tc", "a1")
    result = CliRunner().invoke(main, ["--halt-on-error", "validate", bad, good])
    assert result.exit_code == 1
    assert "Failed to parse" in result.output
    assert "Passed:" not in result.output


def test_validate_counts_undecodable_file_as_failed(tmp_path: Path) -> None:
    bad = tmp_path / "bad.tc"
    bad.write_bytes(b"a1 \xff\xfe |")
    good = _write(tmp_path / "good.tc", "Qa1 |")
    result = CliRunner().invoke(main, ["validate", str(bad), good])
    assert result.exit_code == 0
    assert "Passed: 1" in result.stdout
    assert "Failed: 1" in result.stdout
    assert "Total: 2" in result.stdout


def test_tc2json_reports_undecodable_stdin() -> None:
    result = CliRunner().invoke(main, ["tc2json"], input=b"a1 \xff")
    assert result.exit_code == 1
    assert "Unexpected symbol" in result.output
    assert "position 3" in result.output


def test_tc2json_strict_rejects_undecodable_file(tmp_path: Path) -> None:
    source = tmp_path / "bad.tc"
    source.write_bytes(b"a1 \xff")
    result = CliRunner().invoke(main, ["tc2json", str(source), "--strict"])
    assert result.exit_code == 1
    assert "can't decode" in result.output


def test_tc2json_reads_non_ascii_comments() -> None:
    result = CliRunner().invoke(main, ["tc2json"], input="{Café} a1".encode("utf-8"))
    assert result.exit_code == 0
    assert json.loads(result.stdout)[0] == {"type": "Comment", "code": "{Café}"}
