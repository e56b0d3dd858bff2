"""Command-line interface for phrasal."""

import json
import logging
from typing import Any

import click
from rich.console import Console

from phrasal.catalog import build_catalog
from phrasal.context import CheckRecord, check_records_collector
from phrasal.dispatch import bootstrap
from phrasal.errors import AssertionFailedError, PhrasalError, UnknownAssertionError
from phrasal.reports.console import ConsoleReporter
from phrasal.version import __version__


EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_UNKNOWN = 2
EXIT_ERROR = 3


def parse_argument(raw: str) -> Any:
    """Parse a command-line argument as JSON, falling back to the raw string.

    ``3`` becomes an int, ``[1, 2]`` a list and ``'"3"'`` the string ``"3"``;
    phrases such as ``to be a string`` are not JSON and stay strings.
    """
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@click.group()
@click.version_option(__version__, prog_name="phrasal")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log phrasal's own records to stderr at this level",
)
def main(log_level: str | None) -> None:
    """phrasal - phrase-based assertions.

    Example:
        phrasal check 5 "to be greater than" 3
    """
    if log_level:
        logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.option("--async", "use_async", is_flag=True, help="List the check_async registry")
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON")
def catalog(use_async: bool, as_json: bool) -> None:
    """List the built-in assertions in match priority order."""
    kit = bootstrap()
    entries = build_catalog(kit.check_async if use_async else kit.check)
    if as_json:
        click.echo(json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2))
        return
    reporter = ConsoleReporter(Console())
    reporter.print_catalog(entries, title="async assertions" if use_async else "assertions")


@main.command()
@click.argument("subject")
@click.argument("args", nargs=-1)
def check(subject: str, args: tuple[str, ...]) -> None:
    """Evaluate one check against the built-in assertions.

    Arguments are parsed as JSON where possible:

        phrasal check '"hello"' "to be a string" and "to have length" 5
    """
    values = (parse_argument(subject), *(parse_argument(arg) for arg in args))
    reporter = ConsoleReporter(Console())
    records: list[CheckRecord] = []
    try:
        with check_records_collector(records):
            bootstrap().check(*values)
    except AssertionFailedError as err:
        reporter.print_records(records)
        reporter.print_failure(err)
        raise SystemExit(EXIT_FAILED) from err
    except UnknownAssertionError as err:
        reporter.print_error(err)
        raise SystemExit(EXIT_UNKNOWN) from err
    except PhrasalError as err:
        reporter.print_error(err)
        raise SystemExit(EXIT_ERROR) from err
    reporter.print_records(records)
    reporter.print_passed(values)


if __name__ == "__main__":
    main()
