"""Column visibility, selection, sorting and free-text row filtering."""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence

from .where.evaluator import find_column, parse_number
from .where.models import Row

logger = logging.getLogger(__name__)


def cell(row: Row, index: int) -> str:
    """Field text at ``index``; empty for missing or ragged cells."""
    if index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else value


def _parse_index(token: str) -> int | None:
    token = token.strip()
    if not token or not token.isdigit():
        return None
    return int(token)


def parse_hidden_columns(columns: str | None) -> tuple[set[int], list[str]]:
    """Parse ``"0,2,5"`` into a set of column indices.

    Invalid entries are skipped with a warning.
    """
    hidden: set[int] = set()
    warnings: list[str] = []
    if not columns:
        return hidden, warnings
    for token in columns.split(","):
        idx = _parse_index(token)
        if idx is None:
            warnings.append(f"Invalid column index '{token.strip()}', skipping")
            continue
        hidden.add(idx)
    return hidden, warnings


def resolve_column_ref(ref: str, header: Row | None) -> int | None:
    """Resolve a column given as a 0-based index or, with a header, a name."""
    idx = _parse_index(ref)
    if idx is not None:
        return idx
    if header is None:
        return None
    return find_column(header, ref)


def parse_column_selection(columns: str | None, header: Row | None) -> tuple[list[int], list[str]]:
    """Parse ``"name,age"`` or ``"0,2,1"`` into ordered column indices."""
    selected: list[int] = []
    warnings: list[str] = []
    if not columns:
        return selected, warnings
    for token in columns.split(","):
        token = token.strip()
        if not token:
            continue
        idx = resolve_column_ref(token, header)
        if idx is not None:
            selected.append(idx)
        elif header is None:
            warnings.append(f"Cannot resolve column name '{token}' without header")
        else:
            warnings.append(f"Column '{token}' not found, skipping")
    return selected, warnings


def visible_columns(column_count: int, *, hidden: set[int], selection: Sequence[int]) -> list[int]:
    """Output column order. A selection wins over hidden columns."""
    if selection:
        return list(selection)
    return [i for i in range(column_count) if i not in hidden]


def row_matches_pattern(row: Row, pattern: str | None) -> bool:
    """Case-insensitive substring search across every field of the row."""
    if not pattern:
        return True
    needle = pattern.casefold()
    return any(v is not None and needle in v.casefold() for v in row)


def _compare_cells(a: str, b: str) -> int:
    # Numeric when both cells are complete numbers, text otherwise.
    na = parse_number(a) if a else None
    nb = parse_number(b) if b else None
    if na is not None and nb is not None:
        return (na > nb) - (na < nb)
    fa, fb = a.casefold(), b.casefold()
    return (fa > fb) - (fa < fb)


def sort_rows(rows: Sequence[Row], column: int, *, descending: bool = False) -> list[Row]:
    """Return rows sorted by one column (stable)."""

    def compare(r1: Row, r2: Row) -> int:
        return _compare_cells(cell(r1, column), cell(r2, column))

    return sorted(rows, key=functools.cmp_to_key(compare), reverse=descending)
