from __future__ import annotations

import sys
from pathlib import Path

import click
from rich_click import RichCommand

import csvq

from .context import CLIContext
from .logging import configure_logging, restore_logging
from .options import build_options
from .runner import run_command, run_query


@click.command(
    name="csvq",
    cls=RichCommand,
    context_settings={"help_option_names": ["--help"], "auto_envvar_prefix": "CSVQ"},
)
@click.argument("file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "-h",
    "--header/--no-header",
    "header",
    default=True,
    show_default=True,
    help="The first row is a header.",
)
@click.option("-s", "--skip-header", is_flag=True, help="Treat the first row as data, not a header.")
@click.option("-C", "--color", "color", is_flag=True, help="Use text colors for each column.")
@click.option("-D", "--desc", "desc", is_flag=True, help="Sort in descending order.")
@click.option(
    "-c",
    "--comment",
    type=str,
    default="#",
    show_default=True,
    help="Comment character; pass an empty string to disable.",
)
@click.option(
    "-d",
    "--delimiter",
    type=str,
    default=",",
    show_default=True,
    help="The CSV delimiter (use '\\t' for tab).",
)
@click.option(
    "-H", "--hide", type=str, default=None, help="Comma-separated column indices to hide (e.g. 0,2,5)."
)
@click.option(
    "-f", "--filter", "filter_pattern", type=str, default=None,
    help="Show only rows containing this text.",
)
@click.option(
    "-w",
    "--where",
    type=str,
    default=None,
    help="Filter rows by a predicate, e.g. \"age > 25 AND (status = active OR role contains admin)\".",
)
@click.option(
    "-S", "--select", type=str, default=None,
    help="Select and order columns (e.g. 'name,age' or '0,2,1').",
)
@click.option(
    "-o",
    "--output",
    type=str,
    default="table",
    show_default=True,
    help="Output format: table, csv, tsv, json, markdown (md), html.",
)
@click.option("-B", "--sort", type=str, default=None, help="Sort by column name or index.")
@click.option("-q", "--quiet", is_flag=True, help="Only report errors on stderr.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also log to this file.")
@click.version_option(version=csvq.__version__, prog_name="csvq")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    file: str,
    header: bool,
    skip_header: bool,
    color: bool,
    desc: bool,
    comment: str | None,
    delimiter: str,
    hide: str | None,
    filter_pattern: str | None,
    where: str | None,
    select: str | None,
    output: str,
    sort: str | None,
    quiet: bool,
    verbose: int,
    log_file: str | None,
) -> None:
    """Query and format CSV files."""
    ctx = CLIContext(
        quiet=quiet,
        verbosity=verbose,
        log_file=Path(log_file) if log_file else None,
    )
    click_ctx.obj = ctx

    previous_logging = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        log_file=ctx.log_file,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))

    def _run() -> None:
        options = build_options(
            path=file,
            has_header=header,
            skip_header=skip_header,
            use_colors=color,
            descending=desc,
            comment=comment,
            delimiter=delimiter,
            hide=hide,
            filter_pattern=filter_pattern,
            where=where,
            select=select,
            output=output,
            sort=sort,
        )
        run_query(options, sys.stdout)

    run_command(ctx, _run)


def main() -> None:
    cli()
