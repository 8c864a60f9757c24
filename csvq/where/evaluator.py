"""Column resolution and row evaluation for where filters."""

from __future__ import annotations

import logging
import math
import operator
from collections.abc import Callable

from .models import Clause, CompareOp, Logic, LogicOp, Node, Row, WhereFilter, iter_clauses

logger = logging.getLogger(__name__)

# =============================================================================
# Column Resolution
# =============================================================================


def find_column(header: Row, name: str) -> int | None:
    """Index of the first header cell equal to ``name``, ignoring case and
    surrounding whitespace. Missing (None) cells never match.
    """
    wanted = name.strip().casefold()
    for idx, cell in enumerate(header):
        if cell is None:
            continue
        if cell.strip().casefold() == wanted:
            return idx
    return None


def resolve(where: WhereFilter, header: Row) -> list[str]:
    """Bind every unresolved clause to its header position.

    Clauses that are already resolved are left alone, so calling this twice is
    harmless. Unknown columns stay unresolved (and will never match); a warning
    is logged and returned for each.
    """
    warnings: list[str] = []
    for clause in iter_clauses(where.root):
        if clause.column_index is not None:
            continue
        idx = find_column(header, clause.column_name)
        if idx is None:
            msg = f"Column '{clause.column_name}' in where clause not found in header."
            logger.warning(msg)
            warnings.append(msg)
            continue
        clause.column_index = idx
        logger.debug("Resolved where column '%s' to index %d", clause.column_name, idx)
    return warnings


# =============================================================================
# Comparators
# =============================================================================

NumericCompare = Callable[[float, float], bool]

_NUMERIC_OPS: dict[CompareOp, NumericCompare] = {
    CompareOp.GREATER: operator.gt,
    CompareOp.LESS: operator.lt,
    CompareOp.GREATER_EQ: operator.ge,
    CompareOp.LESS_EQ: operator.le,
}


def parse_number(text: str) -> float | None:
    """Parse ``text`` as a complete floating-point number, or return None.

    Surrounding whitespace is allowed; any other leftover text is not.
    Python's digit-group underscores ("1_000") are not numbers here.
    """
    if "_" in text:
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None


def _compare_numeric(op: CompareOp, field: str, value: str) -> bool:
    left = parse_number(field)
    right = parse_number(value)
    if left is None or right is None:
        return False
    if math.isnan(left) or math.isnan(right):
        return False
    return _NUMERIC_OPS[op](left, right)


def evaluate_clause(clause: Clause, row: Row) -> bool:
    """Test a single clause against a row.

    An unresolved clause, or a row too short to have the clause's column, does
    not match.
    """
    idx = clause.column_index
    if idx is None or idx >= len(row):
        return False
    raw = row[idx]
    field = "" if raw is None else raw.strip()

    op = clause.operator
    if op is CompareOp.CONTAINS:
        return clause.value.casefold() in field.casefold()
    if op is CompareOp.EQUALS:
        return field.casefold() == clause.value.casefold()
    if op is CompareOp.NOT_EQUALS:
        return field.casefold() != clause.value.casefold()
    return _compare_numeric(op, field, clause.value)


# =============================================================================
# Tree Evaluation
# =============================================================================


def _eval_node(node: Node, row: Row) -> bool:
    if isinstance(node, Logic):
        # Right side is only evaluated when the left side does not decide.
        if node.op is LogicOp.AND:
            return _eval_node(node.left, row) and _eval_node(node.right, row)
        return _eval_node(node.left, row) or _eval_node(node.right, row)
    return evaluate_clause(node.clause, row)


def evaluate(where: WhereFilter, row: Row) -> bool:
    """Return True if ``row`` satisfies the filter.

    A filter without a root matches every row.
    """
    if where.root is None:
        return True
    return _eval_node(where.root, row)
