"""Where predicates: parse, resolve against a header, evaluate per row.

Example:
    from csvq.where import parse_where

    where = parse_where("age > 25 AND (status = active OR role contains admin)")
    where.resolve(header)
    matching = [row for row in rows if where.matches(row)]
"""

from __future__ import annotations

from ..exceptions import WhereParseError
from .conditions import (
    OPERATOR_SCAN_ORDER,
    build_clause,
    find_operator,
    parse_condition,
    split_condition,
)
from .evaluator import evaluate, evaluate_clause, find_column, parse_number, resolve
from .models import (
    Clause,
    CompareOp,
    Condition,
    Logic,
    LogicOp,
    Node,
    Row,
    WhereFilter,
    iter_clauses,
)
from .parser import parse_where

__all__ = [
    "OPERATOR_SCAN_ORDER",
    "Clause",
    "CompareOp",
    "Condition",
    "Logic",
    "LogicOp",
    "Node",
    "Row",
    "WhereFilter",
    "WhereParseError",
    "build_clause",
    "evaluate",
    "evaluate_clause",
    "find_column",
    "find_operator",
    "iter_clauses",
    "parse_condition",
    "parse_number",
    "parse_where",
    "resolve",
    "split_condition",
]
