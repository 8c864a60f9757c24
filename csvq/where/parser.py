"""Recursive descent parser for where predicates.

Grammar (AND binds tighter than OR)::

    expression = term (OR term)*
    term       = factor (AND factor)*
    factor     = "(" expression ")" | condition
    condition  = text up to the next top-level AND, OR, "(" or ")"

Examples::

    age > 25
    age > 25 AND status = active
    (role contains admin OR role contains owner) AND active = true
"""

from __future__ import annotations

import re

from ..exceptions import WhereParseError
from .conditions import parse_condition
from .models import Condition, Logic, LogicOp, Node, WhereFilter

# Keywords are whole words: the neighbouring characters must not be
# alphanumeric or underscore, so "brand" and "order" are never split.
_KEYWORD_RE = re.compile(r"(?<!\w)(AND|OR)(?!\w)", re.IGNORECASE)

MAX_NESTING_DEPTH = 64


class _Parser:
    """Parser state: the predicate text and a cursor into it."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.depth = 0

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1

    def _at_end(self) -> bool:
        self._skip_whitespace()
        return self.pos >= self.length

    def _accept_char(self, ch: str) -> bool:
        self._skip_whitespace()
        if self.pos < self.length and self.text[self.pos] == ch:
            self.pos += 1
            return True
        return False

    def _peek_keyword(self) -> LogicOp | None:
        self._skip_whitespace()
        m = _KEYWORD_RE.match(self.text, self.pos)
        if m is None:
            return None
        return LogicOp(m.group(1).upper())

    def _accept_keyword(self, op: LogicOp) -> bool:
        if self._peek_keyword() is not op:
            return False
        self.pos += len(op.value)
        return True

    def _expect_operand(self, op: LogicOp) -> None:
        """Raise unless something that can start a factor follows ``op``."""
        keyword_pos = self.pos - len(op.value)
        if self._at_end() or self.text[self.pos] == ")" or self._peek_keyword() is not None:
            raise WhereParseError(f"Missing operand after {op.value}", position=keyword_pos)

    def parse(self) -> WhereFilter:
        if self._at_end():
            raise WhereParseError("Empty where clause", position=0)

        root = self._parse_expression()

        if not self._at_end():
            rest = self.text[self.pos :].strip()
            if rest.startswith(")"):
                raise WhereParseError("Mismatched parentheses: unexpected ')'", position=self.pos)
            raise WhereParseError(
                f"Unexpected trailing characters: '{rest}'",
                position=self.pos,
            )
        return WhereFilter(root=root)

    def _parse_expression(self) -> Node:
        """Parse OR chains (lowest precedence)."""
        left = self._parse_term()

        while self._accept_keyword(LogicOp.OR):
            self._expect_operand(LogicOp.OR)
            right = self._parse_term()
            left = Logic(LogicOp.OR, left, right)

        return left

    def _parse_term(self) -> Node:
        """Parse AND chains."""
        left = self._parse_factor()

        while self._accept_keyword(LogicOp.AND):
            self._expect_operand(LogicOp.AND)
            right = self._parse_factor()
            left = Logic(LogicOp.AND, left, right)

        return left

    def _parse_factor(self) -> Node:
        """Parse a parenthesized expression or a single condition."""
        self._skip_whitespace()
        open_pos = self.pos

        if self._accept_char("("):
            self.depth += 1
            if self.depth > MAX_NESTING_DEPTH:
                raise WhereParseError(
                    f"Parentheses nested deeper than {MAX_NESTING_DEPTH} levels",
                    position=open_pos,
                )
            node = self._parse_expression()
            if not self._accept_char(")"):
                raise WhereParseError(
                    "Mismatched parentheses: expected ')'",
                    position=self.pos,
                )
            self.depth -= 1
            return node

        return self._parse_condition()

    def _parse_condition(self) -> Node:
        start = self.pos
        end = self._condition_end(start)
        if end == start:
            raise WhereParseError("Expected a condition", position=start)
        clause = parse_condition(self.text, start, end)
        self.pos = end
        return Condition(clause)

    def _condition_end(self, start: int) -> int:
        """Offset of the first AND/OR keyword or parenthesis at or after ``start``."""
        end = self.length
        m = _KEYWORD_RE.search(self.text, start)
        if m is not None:
            end = m.start()
        for ch in "()":
            paren = self.text.find(ch, start, end)
            if paren != -1:
                end = paren
        return end


def parse_where(predicate: str) -> WhereFilter:
    """Parse a where predicate into an unresolved ``WhereFilter``.

    Args:
        predicate: The boolean expression to parse.

    Returns:
        A filter whose clauses still need resolving against a header.

    Raises:
        WhereParseError: If the predicate is empty or malformed. No partial
            filter is returned.

    Examples:
        >>> where = parse_where("age > 25 AND status = active")
        >>> where.resolve(["name", "age", "status"])
        []
        >>> where.matches(["Ann", "30", "active"])
        True
    """
    if predicate is None or not predicate.strip():
        raise WhereParseError("Empty where clause", position=0)
    return _Parser(predicate).parse()
