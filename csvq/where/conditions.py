"""Condition splitting and clause construction.

A condition is the raw text of one leaf comparison, e.g. ``age >= 25``. The
splitter locates the operator by scanning candidate operator strings in a
fixed longest-first order, so ``age>=25`` is split at ``>=`` and never at the
bare ``>``. Splitting works on offsets into the original predicate; the input
string is never copied or modified.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..exceptions import WhereParseError
from .models import Clause, CompareOp

logger = logging.getLogger(__name__)

# =============================================================================
# Operator Scanning
# =============================================================================

# Scan order is significant: longer operators must be tried before their
# prefixes.
OPERATOR_SCAN_ORDER: tuple[tuple[str, CompareOp], ...] = (
    ("contains", CompareOp.CONTAINS),
    (">=", CompareOp.GREATER_EQ),
    ("<=", CompareOp.LESS_EQ),
    ("!=", CompareOp.NOT_EQUALS),
    (">", CompareOp.GREATER),
    ("<", CompareOp.LESS),
    ("=", CompareOp.EQUALS),
)

_CONTAINS_RE = re.compile("contains", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class OperatorMatch:
    """Location of an operator inside the predicate text."""

    operator: CompareOp
    start: int
    end: int


def find_operator(text: str, start: int = 0, end: int | None = None) -> OperatorMatch | None:
    """Find the first operator candidate present in ``text[start:end]``.

    Candidates are tried in ``OPERATOR_SCAN_ORDER``; the first candidate found
    anywhere in the range wins, even if a later candidate occurs earlier.
    """
    if end is None:
        end = len(text)
    for token, op in OPERATOR_SCAN_ORDER:
        if op is CompareOp.CONTAINS:
            m = _CONTAINS_RE.search(text, start, end)
            pos = m.start() if m else -1
        else:
            pos = text.find(token, start, end)
        if pos != -1:
            return OperatorMatch(op, pos, pos + len(token))
    return None


def _has_operator(text: str) -> bool:
    return find_operator(text) is not None


def trim_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Shrink ``[start, end)`` so it excludes surrounding whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


# =============================================================================
# Splitting
# =============================================================================


@dataclass(frozen=True, slots=True)
class SplitCondition:
    """A condition split into trimmed column and value text."""

    column_name: str
    operator: CompareOp
    value: str
    column_span: tuple[int, int]
    value_span: tuple[int, int]

    @property
    def ambiguous(self) -> bool:
        """True when either side still contains operator-like text."""
        return _has_operator(self.column_name) or _has_operator(self.value)


def split_condition(text: str, start: int = 0, end: int | None = None) -> SplitCondition:
    """Split ``text[start:end]`` into column name, operator and value.

    Raises:
        WhereParseError: If no operator is present, or either side is empty.
    """
    if end is None:
        end = len(text)
    raw = text[start:end].strip()
    if not raw:
        raise WhereParseError("Empty condition", position=start)

    match = find_operator(text, start, end)
    if match is None:
        raise WhereParseError(f"No valid operator in condition: '{raw}'", position=start)

    col_start, col_end = trim_span(text, start, match.start)
    val_start, val_end = trim_span(text, match.end, end)
    column_name = text[col_start:col_end]
    value = text[val_start:val_end]

    if not column_name:
        raise WhereParseError(
            f"Missing column name before '{match.operator.value}' in condition: '{raw}'",
            position=match.start,
        )
    if not value:
        raise WhereParseError(
            f"Missing value after '{match.operator.value}' in condition: '{raw}'",
            position=match.end,
        )

    return SplitCondition(
        column_name=column_name,
        operator=match.operator,
        value=value,
        column_span=(col_start, col_end),
        value_span=(val_start, val_end),
    )


# =============================================================================
# Clause Construction
# =============================================================================


def build_clause(column_name: str, operator: CompareOp, value: str) -> Clause:
    """Build an unresolved clause, tagging ordering operators as numeric."""
    column_name = column_name.strip()
    value = value.strip()
    if not column_name:
        raise WhereParseError("Clause requires a column name")
    if not value:
        raise WhereParseError(f"Clause on column '{column_name}' requires a value")
    return Clause(
        column_name=column_name,
        operator=operator,
        value=value,
        is_numeric=operator.is_ordering,
    )


def parse_condition(text: str, start: int = 0, end: int | None = None) -> Clause:
    """Split a raw condition and build its clause.

    Operator-like text left in the column name or value (``a>b = 1``) cannot be
    disambiguated by the scan; the clause is built as split and a warning is
    logged.
    """
    split = split_condition(text, start, end)
    if split.ambiguous:
        logger.warning(
            "Ambiguous condition '%s': split as column '%s' %s value '%s'",
            text[start:end].strip(),
            split.column_name,
            split.operator.value,
            split.value,
        )
    return build_clause(split.column_name, split.operator, split.value)
