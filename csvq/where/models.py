"""AST types for where predicates."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

# A row is any positional sequence of fields; ragged rows are legal.
Row = Sequence[str | None]


class CompareOp(Enum):
    """Comparison operators, valued by their surface text."""

    CONTAINS = "contains"
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER = ">"
    LESS = "<"
    GREATER_EQ = ">="
    LESS_EQ = "<="

    @property
    def is_ordering(self) -> bool:
        return self in _ORDERING_OPS


_ORDERING_OPS = frozenset(
    [CompareOp.GREATER, CompareOp.LESS, CompareOp.GREATER_EQ, CompareOp.LESS_EQ]
)


class LogicOp(Enum):
    AND = "AND"
    OR = "OR"


@dataclass
class Clause:
    """A single `column OP value` comparison.

    `column_index` stays None until the clause is resolved against a header.
    """

    column_name: str
    operator: CompareOp
    value: str
    is_numeric: bool
    column_index: int | None = None

    @property
    def resolved(self) -> bool:
        return self.column_index is not None

    def __str__(self) -> str:
        return f"{self.column_name} {self.operator.value} {self.value}"


@dataclass(frozen=True)
class Condition:
    """Leaf node wrapping one clause."""

    clause: Clause

    def __str__(self) -> str:
        return str(self.clause)


@dataclass(frozen=True)
class Logic:
    """AND/OR of exactly two sub-predicates."""

    op: LogicOp
    left: Node
    right: Node

    def __str__(self) -> str:
        return f"({self.left}) {self.op.value} ({self.right})"


Node = Logic | Condition


def iter_clauses(node: Node | None) -> Iterator[Clause]:
    """Yield every clause in the tree, left to right."""
    if node is None:
        return
    if isinstance(node, Logic):
        yield from iter_clauses(node.left)
        yield from iter_clauses(node.right)
    else:
        yield node.clause


@dataclass
class WhereFilter:
    """A compiled where predicate.

    A filter without a root matches every row.
    """

    root: Node | None = None

    @property
    def clauses(self) -> list[Clause]:
        return list(iter_clauses(self.root))

    def resolve(self, header: Row) -> list[str]:
        from .evaluator import resolve

        return resolve(self, header)

    def matches(self, row: Row) -> bool:
        from .evaluator import evaluate

        return evaluate(self, row)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def __str__(self) -> str:
        return "" if self.root is None else str(self.root)
