from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")

from click.testing import CliRunner

import csvq
from csvq.cli.main import cli

PEOPLE = "name,age,status\nAnn,30,active\nBo,20,active\nCy,40,inactive\n"


@pytest.fixture
def people_csv(tmp_path: Path) -> Path:
    path = tmp_path / "people.csv"
    path.write_text(PEOPLE, encoding="utf-8")
    return path


def _invoke(*args: str, **kwargs) -> object:  # type: ignore[no-untyped-def]
    return CliRunner().invoke(cli, list(args), **kwargs)


# ==============================================================================
# Where filtering
# ==============================================================================


def test_where_filters_rows(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "csv", "-w", "age > 25 AND status = active")
    assert result.exit_code == 0
    assert result.output == "name,age,status\nAnn,30,active\n"


def test_where_with_parentheses(tmp_path: Path) -> None:
    path = tmp_path / "users.csv"
    path.write_text(
        "name,role,active\nAnn,superadmin,true\nBo,viewer,true\nCy,owner,false\n",
        encoding="utf-8",
    )
    result = _invoke(
        str(path),
        "--header",
        "--output",
        "csv",
        "--where",
        "(role contains admin OR role contains owner) AND active = true",
    )
    assert result.exit_code == 0
    assert result.output == "name,role,active\nAnn,superadmin,true\n"


def test_invalid_where_disables_filtering(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "csv", "-w", "age 25")
    assert result.exit_code == 0
    assert "Warning: Invalid where clause" in result.output
    assert "Filtering disabled" in result.output
    for name in ("Ann", "Bo", "Cy"):
        assert name in result.output


def test_where_unknown_column_matches_nothing(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "csv", "-w", "city = Paris")
    assert result.exit_code == 0
    assert "Warning: Column 'city' in where clause not found in header." in result.output
    assert "Ann" not in result.output
    assert "name,age,status" in result.output


def test_where_without_header_warns(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "--no-header", "-o", "csv", "-w", "age > 1")
    assert result.exit_code == 0
    assert "need a header row" in result.output
    assert "Ann" not in result.output


def test_where_json_output(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "json", "-w", "status != active")
    assert result.exit_code == 0
    assert json.loads(result.output) == [{"name": "Cy", "age": "40", "status": "inactive"}]


# ==============================================================================
# Columns, sorting and formats
# ==============================================================================


def test_select_sort_descending(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-S", "name,age", "-B", "age", "-D", "-o", "csv")
    assert result.exit_code == 0
    assert result.output == "name,age\nCy,40\nAnn,30\nBo,20\n"


def test_sort_by_index_ascending(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-B", "1", "-S", "0", "-o", "csv")
    assert result.output == "name\nBo\nAnn\nCy\n"


def test_unresolved_sort_column_warns(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-B", "zip", "-o", "csv")
    assert result.exit_code == 0
    assert "Could not resolve sort column 'zip'" in result.output
    assert "Ann,30,active\nBo,20,active" in result.output


def test_hide_columns_tsv(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-H", "1", "-o", "tsv")
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "name\tstatus",
        "Ann\tactive",
        "Bo\tactive",
        "Cy\tinactive",
    ]


def test_invalid_hide_index_warns(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-H", "x", "-o", "csv")
    assert "Warning: Invalid column index 'x', skipping" in result.output


def test_markdown_footer_with_text_filter(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "md", "-f", "ann")
    assert result.exit_code == 0
    assert "| Ann | 30 | active |" in result.output
    assert "Bo" not in result.output
    assert result.output.rstrip().endswith("Filtered: 1/3 rows matched")


def test_unknown_format_falls_back_to_table(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-o", "xml")
    assert result.exit_code == 0
    assert "Unknown format 'xml', using table" in result.output
    assert "3 rows" in result.output


def test_output_format_from_environment(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", env={"CSVQ_OUTPUT": "csv"})
    assert result.exit_code == 0
    assert result.output == PEOPLE


def test_default_table_output(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-C")
    assert result.exit_code == 0
    assert "status" in result.output
    assert "inactive" in result.output


# ==============================================================================
# Reading
# ==============================================================================


def test_tab_delimiter_alias(tmp_path: Path) -> None:
    path = tmp_path / "data.tsv"
    path.write_text("a\tb\n1\t2\n", encoding="utf-8")
    result = _invoke(str(path), "-h", "-d", "\\t", "-o", "csv")
    assert result.exit_code == 0
    assert result.output == "a,b\n1,2\n"


def test_skip_header_treats_rest_as_data(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-s", "-o", "csv")
    assert result.output == "Ann,30,active\nBo,20,active\nCy,40,inactive\n"


def test_header_and_comment_are_on_by_default(tmp_path: Path) -> None:
    path = tmp_path / "p.csv"
    path.write_text("# people\nname,age\nAnn,30\nBo,20\n", encoding="utf-8")
    result = _invoke(str(path), "-w", "age > 25", "-o", "csv")
    assert result.exit_code == 0
    assert result.output == "name,age\nAnn,30\n"


def test_skip_header_with_where_matches_nothing(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-s", "-o", "csv", "-w", "age > 1")
    assert result.exit_code == 0
    assert "need a header row" in result.output
    assert "Ann" not in result.output


def test_empty_comment_disables_comment_skipping(tmp_path: Path) -> None:
    path = tmp_path / "c.csv"
    path.write_text("name\n#1\n", encoding="utf-8")
    result = _invoke(str(path), "-c", "", "-o", "csv")
    assert result.exit_code == 0
    assert result.output == "name\n#1\n"


def test_comment_lines_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "c.csv"
    path.write_text("; generated\nname\nAnn\n", encoding="utf-8")
    result = _invoke(str(path), "-c", ";", "-o", "csv")
    assert result.output == "name\nAnn\n"


def test_reads_stdin() -> None:
    result = _invoke("-", "-h", "-o", "csv", input="a,b\n1,2\n")
    assert result.exit_code == 0
    assert result.output == "a,b\n1,2\n"


# ==============================================================================
# Errors and diagnostics
# ==============================================================================


def test_missing_file_exits_1(tmp_path: Path) -> None:
    result = _invoke(str(tmp_path / "nope.csv"))
    assert result.exit_code == 1
    assert "Error: File not found:" in result.output


def test_empty_file_exits_1(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    result = _invoke(str(path))
    assert result.exit_code == 1
    assert "Error: No rows in CSV file" in result.output


def test_bad_delimiter_is_usage_error(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-d", ";;")
    assert result.exit_code == 2
    assert "Invalid --delimiter: delimiter must be a single character" in result.output
    assert "Hint: run `csvq --help`" in result.output


def test_bad_comment_is_usage_error(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-c", "##")
    assert result.exit_code == 2
    assert "Invalid --comment" in result.output


def test_quiet_suppresses_warnings(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-q", "-o", "csv", "-w", "age 25")
    assert result.exit_code == 0
    assert "Warning" not in result.output
    assert result.output == PEOPLE


def test_verbose_reports_match_count(people_csv: Path) -> None:
    result = _invoke(str(people_csv), "-h", "-v", "-o", "csv", "-w", "age > 25")
    assert "2/3 rows matched" in result.output
    assert "Where clause: age > 25" in result.output


def test_log_file_records_warnings(people_csv: Path, tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "csvq.log"
    result = _invoke(str(people_csv), "-h", "-o", "csv", "-w", "age 25", "--log-file", str(log_path))
    assert result.exit_code == 0
    text = log_path.read_text(encoding="utf-8")
    assert "WARNING" in text
    assert "Invalid where clause" in text


def test_version() -> None:
    result = _invoke("--version")
    assert result.exit_code == 0
    assert csvq.__version__ in result.output
