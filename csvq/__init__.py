"""csvq: query and format CSV files from the command line."""

from __future__ import annotations

from .exceptions import CsvqError, WhereParseError
from .where import WhereFilter, evaluate, parse_where, resolve

__version__ = "0.3.0"

__all__ = [
    "CsvqError",
    "WhereFilter",
    "WhereParseError",
    "__version__",
    "evaluate",
    "parse_where",
    "resolve",
]
