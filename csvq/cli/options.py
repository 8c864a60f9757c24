"""Validated query options.

Raw click values are normalised here so the runner only sees usable settings.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..reader import ReaderConfig
from .errors import usage_error

_DELIMITER_ALIASES = {"\\t": "\t", "tab": "\t", "\t": "\t"}


class QueryOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    path: str
    has_header: bool = True
    skip_header: bool = False
    use_colors: bool = False
    descending: bool = False
    comment: str | None = "#"
    delimiter: str = ","
    hide: str | None = None
    filter_pattern: str | None = Field(None, alias="filter")
    where: str | None = None
    select: str | None = None
    output: str = "table"
    sort: str | None = None

    @field_validator("delimiter", mode="before")
    @classmethod
    def _normalize_delimiter(cls, value: Any) -> Any:
        if value is None or value == "":
            return ","
        if isinstance(value, str):
            value = _DELIMITER_ALIASES.get(value.lower(), value)
            if len(value) != 1:
                raise ValueError("delimiter must be a single character (use '\\t' for tab)")
        return value

    @field_validator("comment")
    @classmethod
    def _check_comment(cls, value: str | None) -> str | None:
        if not value:
            return None
        if len(value) != 1:
            raise ValueError("comment must be a single character")
        return value

    @field_validator("output", mode="before")
    @classmethod
    def _default_output(cls, value: Any) -> Any:
        return "table" if value is None else value

    def reader_config(self) -> ReaderConfig:
        # A skipped first row is data, never a header.
        return ReaderConfig(
            delimiter=self.delimiter,
            comment=self.comment,
            has_header=self.has_header and not self.skip_header,
            skip_header=self.skip_header,
        )


def build_options(**values: Any) -> QueryOptions:
    """Validate raw option values, turning validation failures into usage errors."""
    try:
        return QueryOptions(**values)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        msg = str(first.get("msg", "invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]
        raise usage_error(f"Invalid --{loc.replace('_', '-')}: {msg}") from exc
