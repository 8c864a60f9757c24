"""CSV loading."""

from __future__ import annotations

import csv
import logging
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    delimiter: str = ","
    comment: str | None = None
    has_header: bool = False
    skip_header: bool = False


@dataclass
class CsvTable:
    """Parsed CSV content.

    ``header`` is None when the file has no header row (or it was skipped).
    Data rows may be ragged.
    """

    header: list[str] | None
    rows: list[list[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        if self.header is not None:
            return len(self.header)
        return max((len(r) for r in self.rows), default=0)


def _is_comment(row: list[str], comment: str | None) -> bool:
    if not comment:
        return False
    return row[0].lstrip().startswith(comment)


def _records(rows: Iterable[list[str]], comment: str | None) -> Iterator[list[str]]:
    # Comments are whole records, so quoted multi-line fields stay intact.
    for row in rows:
        if not row or _is_comment(row, comment):
            continue
        yield row


def parse_rows(lines: Iterable[str], *, delimiter: str = ",", comment: str | None = None) -> list[list[str]]:
    """Parse CSV lines into rows, dropping blank records and comment records."""
    reader = csv.reader(lines, delimiter=delimiter)
    return list(_records(reader, comment))


def read_table(source: TextIO, config: ReaderConfig) -> CsvTable:
    rows = parse_rows(source, delimiter=config.delimiter, comment=config.comment)
    if config.skip_header:
        if rows:
            logger.debug("Skipping first row: %r", rows[0])
        return CsvTable(header=None, rows=rows[1:])
    if config.has_header and rows:
        return CsvTable(header=rows[0], rows=rows[1:])
    return CsvTable(header=None, rows=rows)


def load_table(path: str | Path, config: ReaderConfig) -> CsvTable:
    """Read a CSV file (or stdin for ``-``) into a ``CsvTable``."""
    if str(path) == "-":
        return read_table(sys.stdin, config)
    with Path(path).open(newline="", encoding="utf-8-sig") as f:
        table = read_table(f, config)
    logger.debug("Read %d data rows from %s", len(table.rows), path)
    return table
