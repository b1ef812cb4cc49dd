"""
fluxline CLI - check line protocol files and query them

Usage:
    fluxline check <file>                # validate and re-encode every line
    fluxline interpret <query>           # show how a query is interpreted
    fluxline query <file> <query>        # load a file and run a query on it
"""

import dataclasses
import json
import sys
import time
from typing import Optional

import click

from fluxline import __version__
from fluxline.cli.formatters import get_formatter
from fluxline.core.executor import BACKENDS
from fluxline.core.ingest import write_lines
from fluxline.core.query import DEFAULT_DATABASE, Session, SessionError
from fluxline.core.store import MemoryStore
from fluxline.protocol.errors import CodecError
from fluxline.protocol.parser import decode
from fluxline.protocol.serializer import encode
from fluxline.sql.parser import QueryError, interpret
from fluxline.utils.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="fluxline")
@click.option(
    "--log-level",
    envvar="FLUXLINE_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for messages on stderr",
)
def cli(log_level: str):
    """
    fluxline - line protocol codec and time-series query engine
    """
    configure_logging(log_level)


@cli.command()
@click.argument("file", type=click.File("r"))
@click.option(
    "--skip-errors",
    is_flag=True,
    help="Report malformed lines and keep going instead of stopping",
)
def check(file, skip_errors: bool):
    """
    Decode every line of FILE and print its canonical encoding

    Examples:

        \b
        $ fluxline check metrics.lp
        $ cat metrics.lp | fluxline check - --skip-errors
    """
    failures = 0
    for line_num, line in enumerate(file, start=1):
        if not line.strip():
            continue
        try:
            click.echo(encode(decode(line)))
        except CodecError as e:
            failures += 1
            click.echo(f"Error: line {line_num}: {e} ({e.kind.name})", err=True)
            if not skip_errors:
                sys.exit(1)

    if failures:
        sys.exit(1)


@cli.command(name="interpret")
@click.argument("query_text", metavar="QUERY")
@click.option("--now", type=int, default=None, help="Value of now() in nanoseconds")
def interpret_command(query_text: str, now: Optional[int]):
    """
    Print the descriptor QUERY is interpreted as, as JSON

    Examples:

        \b
        $ fluxline interpret 'SELECT mean("value") FROM cpu GROUP BY time(1m)'
    """
    try:
        descriptor = interpret(query_text, now_ns=now)
    except QueryError as e:
        click.echo(f"Error: {e} ({e.kind.name})", err=True)
        sys.exit(1)

    payload = dataclasses.asdict(descriptor)
    payload["command"] = descriptor.command.name
    payload["aggregation"] = str(descriptor.aggregation) if descriptor.aggregation else None
    click.echo(json.dumps(payload, indent=2))


@cli.command()
@click.argument("file", type=click.File("r"))
@click.argument("query_text", metavar="QUERY")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json", "csv"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--backend",
    "-b",
    envvar="FLUXLINE_BACKEND",
    type=click.Choice(list(BACKENDS), case_sensitive=False),
    default="python",
    help="Aggregation backend (default: python)",
)
@click.option(
    "--database",
    "-d",
    envvar="FLUXLINE_DATABASE",
    default=DEFAULT_DATABASE,
    show_default=True,
    help="Database the query runs in",
)
@click.option("--now", type=int, default=None, help="Value of now() in nanoseconds")
@click.option(
    "--skip-errors",
    is_flag=True,
    help="Skip malformed lines instead of aborting the load",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--time", "-t", "show_time", is_flag=True, help="Show execution time")
def query(
    file,
    query_text: str,
    format: str,
    backend: str,
    database: str,
    now: Optional[int],
    skip_errors: bool,
    output: Optional[str],
    no_color: bool,
    show_time: bool,
):
    """
    Load line protocol FILE into memory and run QUERY on it

    Examples:

        \b
        $ fluxline query metrics.lp "SHOW MEASUREMENTS"

        \b
        $ fluxline query metrics.lp 'SELECT mean("value") FROM cpu GROUP BY time(1m)' -f json

        \b
        $ fluxline query metrics.lp "SELECT * FROM cpu WHERE time >= 1000ms" -f csv -o out.csv
    """
    fmt = format
    del format
    start_time = time.time()

    store = MemoryStore()
    try:
        write_lines(file.read(), store, on_error="skip" if skip_errors else "abort")
    except CodecError as e:
        click.echo(f"Error: failed to parse line: {e} ({e.kind.name})", err=True)
        sys.exit(1)

    session = Session(store, database=database, backend=backend)
    try:
        result = session.execute(query_text, now_ns=now)
    except QueryError as e:
        click.echo(f"Error: {e} ({e.kind.name})", err=True)
        sys.exit(1)
    except (SessionError, ImportError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    formatter = get_formatter(fmt)
    output_text = formatter.format(
        result,
        no_color=no_color or output is not None or not sys.stdout.isatty(),
        show_footer=not output,
    )

    if show_time:
        elapsed = time.time() - start_time
        output_text += f"Processed {len(result)} rows in {elapsed:.3f}s"

    if output:
        with open(output, "w") as f:
            f.write(output_text)
        click.echo(f"Results written to {output} ({fmt} format)", err=True)
    else:
        click.echo(output_text)


if __name__ == "__main__":
    cli()
