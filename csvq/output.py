"""Output writers: table, CSV, TSV, JSON, Markdown and HTML."""

from __future__ import annotations

import csv
import html
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .columns import cell
from .where.models import Row

OUTPUT_FORMATS = ("table", "csv", "tsv", "json", "markdown", "html")
FORMAT_ALIASES = {"md": "markdown"}

# Cycled per visible column when colours are on.
COLUMN_COLORS = (
    "cyan",
    "yellow",
    "magenta",
    "green",
    "blue",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "red",
)


def normalize_format(name: str | None) -> str | None:
    """Canonical format name, or None if unknown."""
    if name is None:
        return "table"
    key = name.strip().lower()
    key = FORMAT_ALIASES.get(key, key)
    return key if key in OUTPUT_FORMATS else None


@dataclass(frozen=True, slots=True)
class OutputData:
    """What to print: rows already filtered and sorted, plus column order."""

    header: Row | None
    rows: Sequence[Row]
    columns: Sequence[int]
    total_rows: int
    filtered: bool = False

    def header_cells(self) -> list[str]:
        if self.header is None:
            return []
        return [cell(self.header, c) for c in self.columns]

    def cells(self, row: Row) -> list[str]:
        return [cell(row, c) for c in self.columns]


def write_table(data: OutputData, out: TextIO, *, use_colors: bool = False) -> None:
    console = Console(file=out, highlight=False, soft_wrap=False)
    table = Table(show_header=data.header is not None, header_style="bold")
    headers = data.header_cells() or [""] * len(data.columns)
    for pos, name in enumerate(headers):
        style = COLUMN_COLORS[pos % len(COLUMN_COLORS)] if use_colors else None
        table.add_column(Text(name), style=style)
    for row in data.rows:
        table.add_row(*[Text(v) for v in data.cells(row)])
    table.caption = f"{len(data.rows)} rows"
    console.print(table)


def _write_delimited(data: OutputData, out: TextIO, delimiter: str) -> None:
    writer = csv.writer(out, delimiter=delimiter, lineterminator="\n")
    if data.header is not None:
        writer.writerow(data.header_cells())
    for row in data.rows:
        writer.writerow(data.cells(row))


def write_csv(data: OutputData, out: TextIO) -> None:
    _write_delimited(data, out, ",")


def write_tsv(data: OutputData, out: TextIO) -> None:
    _write_delimited(data, out, "\t")


def _json_key(data: OutputData, col: int) -> str:
    if data.header is not None:
        name = cell(data.header, col).strip()
        if name:
            return name
    return f"field_{col}"


def _json_keys(data: OutputData) -> list[str]:
    """One distinct key per visible column; repeats get ``_1``, ``_2``, ..."""
    keys: list[str] = []
    seen: set[str] = set()
    for col in data.columns:
        base = key = _json_key(data, col)
        n = 0
        while key in seen:
            n += 1
            key = f"{base}_{n}"
        seen.add(key)
        keys.append(key)
    return keys


def write_json(data: OutputData, out: TextIO) -> None:
    """One object per row, keyed by trimmed header names."""
    keys = _json_keys(data)
    records: list[dict[str, Any]] = []
    for row in data.rows:
        records.append({k: v.strip() for k, v in zip(keys, data.cells(row))})
    out.write(json.dumps(records, ensure_ascii=False, indent=2) + "\n")


def _md_escape(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def write_markdown(data: OutputData, out: TextIO) -> None:
    if data.header is not None:
        out.write("| " + " | ".join(_md_escape(v) for v in data.header_cells()) + " |\n")
        out.write("|" + " --- |" * len(data.columns) + "\n")
    for row in data.rows:
        out.write("| " + " | ".join(_md_escape(v) for v in data.cells(row)) + " |\n")
    if data.filtered:
        out.write(f"\nFiltered: {len(data.rows)}/{data.total_rows} rows matched\n")


def write_html(data: OutputData, out: TextIO) -> None:
    out.write("<table>\n")
    if data.header is not None:
        out.write("  <thead>\n    <tr>")
        out.write("".join(f"<th>{html.escape(v)}</th>" for v in data.header_cells()))
        out.write("</tr>\n  </thead>\n")
    out.write("  <tbody>\n")
    for row in data.rows:
        out.write("    <tr>")
        out.write("".join(f"<td>{html.escape(v)}</td>" for v in data.cells(row)))
        out.write("</tr>\n")
    out.write("  </tbody>\n</table>\n")


_WRITERS: dict[str, Callable[[OutputData, TextIO], None]] = {
    "csv": write_csv,
    "tsv": write_tsv,
    "json": write_json,
    "markdown": write_markdown,
    "html": write_html,
}


def write_output(fmt: str, data: OutputData, out: TextIO, *, use_colors: bool = False) -> None:
    if fmt == "table":
        write_table(data, out, use_colors=use_colors)
        return
    writer = _WRITERS.get(fmt)
    if writer is None:
        raise ValueError(f"Unknown output format: {fmt}")
    writer(data, out)
