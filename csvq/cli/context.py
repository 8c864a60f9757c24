from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from .errors import CLIError


@dataclass
class CLIContext:
    quiet: bool
    verbosity: int
    log_file: Path | None = None

    def stderr(self) -> Console:
        return Console(file=sys.stderr, force_terminal=False, highlight=False, soft_wrap=True)


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "io_error": "I/O error",
        "parse_error": "Parse error",
        "empty_input": "No data",
    }
    return mapping.get(error_type, "Error")


def render_error(ctx: CLIContext, exc: CLIError) -> None:
    """Print a command failure to stderr. Errors are shown even with --quiet."""
    stderr = ctx.stderr()
    stderr.print(f"Error: {exc.message}", markup=False)
    if ctx.quiet:
        return
    if exc.hint:
        stderr.print(f"Hint: {exc.hint}", markup=False)
    elif exc.error_type == "usage_error":
        stderr.print("Hint: run `csvq --help`", markup=False)
    if ctx.verbosity >= 1:
        stderr.print(f"({_error_title(exc.error_type)}, exit code {exc.exit_code})", markup=False)
