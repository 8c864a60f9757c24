from __future__ import annotations

import csv
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

import click

from ..columns import (
    parse_column_selection,
    parse_hidden_columns,
    resolve_column_ref,
    row_matches_pattern,
    sort_rows,
    visible_columns,
)
from ..exceptions import WhereParseError
from ..output import OutputData, normalize_format, write_output
from ..reader import CsvTable, load_table
from ..where import WhereFilter, parse_where
from ..where.models import Row
from .context import CLIContext, render_error
from .errors import CLIError
from .options import QueryOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryResult:
    rows_matched: int
    total_rows: int
    where_active: bool


def compile_where(predicate: str | None, header: Row | None) -> WhereFilter | None:
    """Parse and resolve the --where predicate.

    A predicate that fails to parse disables where-filtering for the run
    instead of aborting it.
    """
    if predicate is None:
        return None
    try:
        where = parse_where(predicate)
    except WhereParseError as exc:
        logger.warning("Invalid where clause: %s. Filtering disabled.", exc)
        return None

    if header is None:
        logger.warning("Where clause columns need a header row (--header); no rows will match.")
    else:
        where.resolve(header)
    logger.info("Where clause: %s", where)
    return where


def _load(options: QueryOptions) -> CsvTable:
    try:
        table = load_table(options.path, options.reader_config())
    except FileNotFoundError as exc:
        raise CLIError(f"File not found: {options.path}", error_type="io_error") from exc
    except OSError as exc:
        raise CLIError(
            f"Cannot read {options.path}: {exc.strerror or exc}", error_type="io_error"
        ) from exc
    except UnicodeDecodeError as exc:
        raise CLIError(
            f"{options.path} is not valid UTF-8 text", error_type="io_error"
        ) from exc
    except csv.Error as exc:
        raise CLIError(
            f"Failed to parse CSV file: {exc}",
            error_type="parse_error",
            hint="Use --delimiter='\\t' for tab-separated files.",
        ) from exc

    if table.header is None and not table.rows:
        raise CLIError("No rows in CSV file", error_type="empty_input")
    if table.column_count == 0:
        raise CLIError("No data to print", error_type="empty_input")
    return table


def run_query(options: QueryOptions, out: TextIO) -> QueryResult:
    """Load, sort, filter and print one CSV file."""
    table = _load(options)
    header = table.header
    rows: list[Row] = list(table.rows)

    if options.sort is not None:
        sort_idx = resolve_column_ref(options.sort, header)
        if sort_idx is None:
            logger.warning("Could not resolve sort column '%s'. Sorting skipped.", options.sort)
        else:
            rows = sort_rows(rows, sort_idx, descending=options.descending)

    hidden, hide_warnings = parse_hidden_columns(options.hide)
    selection, select_warnings = parse_column_selection(options.select, header)
    for msg in hide_warnings + select_warnings:
        logger.warning(msg)
    columns = visible_columns(table.column_count, hidden=hidden, selection=selection)

    fmt = normalize_format(options.output)
    if fmt is None:
        logger.warning("Unknown format '%s', using table", options.output)
        fmt = "table"

    where = compile_where(options.where, header)
    matched = [
        row
        for row in rows
        if row_matches_pattern(row, options.filter_pattern)
        and (where is None or where.matches(row))
    ]

    data = OutputData(
        header=header,
        rows=matched,
        columns=columns,
        total_rows=len(rows),
        filtered=bool(options.filter_pattern) or where is not None,
    )
    write_output(fmt, data, out, use_colors=options.use_colors)
    logger.info("%d/%d rows matched", len(matched), len(rows))
    return QueryResult(
        rows_matched=len(matched),
        total_rows=len(rows),
        where_active=where is not None,
    )


def run_command(ctx: CLIContext, fn: Callable[[], object]) -> None:
    """Run a command body, rendering ``CLIError`` and exiting with its code."""
    try:
        fn()
    except CLIError as exc:
        render_error(ctx, exc)
        raise click.exceptions.Exit(exc.exit_code) from exc
