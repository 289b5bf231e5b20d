"""Command-line interface of pytest-atf.

Provides the `run` command, executing a test set configuration file and
writing reports, and the `schema` command, printing the JSON Schema of
test set documents.

Exit codes of `run`: 0 when no test case failed, 1 when at least one
test case failed, 2 when the configuration is invalid or reports cannot
be written.
"""

from pathlib import Path

from click import Choice, argument, echo, group, option
from click import Path as PathParam
from click.exceptions import Exit
from pydantic import ValidationError

from pytest_atf.context import ExecutionContext
from pytest_atf.core import collect, run_test_set
from pytest_atf.errors import ATFError
from pytest_atf.jsonschema import make_schema
from pytest_atf.logs import configure_logging
from pytest_atf.reporting import RENDERERS, Reporter
from pytest_atf.runners import ScriptRunner
from pytest_atf.settings import LOG_LEVELS, ATFSettings

#: Exit code for runs with failed test cases.
EXIT_FAILED = 1
#: Exit code for invalid configurations.
EXIT_ERROR = 2

ConfigFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)

OutputDirectory = PathParam(
    file_okay=False,
    writable=True,
    path_type=Path,
)


@group(help='Command-line utilities for pytest-atf.')
def cli() -> None:
    """Root CLI group for pytest-atf tools."""
    return None


@cli.command(
    name='run',
    help='Execute a test set configuration file and write reports.',
)
@argument('config', type=ConfigFilepath)
@option(
    '--strict/--relaxed',
    default=None,
    help='Reject expectations other than Pass and XFail.',
)
@option(
    '-r', '--report', 'report_formats',
    type=Choice(sorted(RENDERERS), case_sensitive=False),
    multiple=True,
    help='Report type to write. May be repeated.',
)
@option(
    '-o', '--output',
    type=OutputDirectory,
    default=None,
    help='Directory where report files are written.',
)
@option(
    '-l', '--log-level',
    type=Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help='Minimal level of displayed progress messages.',
)
@option(
    '--log-file',
    type=PathParam(dir_okay=False, path_type=Path),
    default=None,
    help='File receiving a copy of the progress messages.',
)
def run(config: Path, strict: bool | None,  # noqa: PLR0913
        report_formats: tuple[str, ...], output: Path | None,
        log_level: str | None, log_file: Path | None) -> None:
    """Execute a test set.

    Args:
        config: Path to the test set configuration file.
        strict: Strict mode override.
        report_formats: Report types override.
        output: Report directory override.
        log_level: Log level override.
        log_file: Log file override.
    """
    try:
        settings = ATFSettings()
    except ValidationError as error:
        echo(f'Invalid settings: {error}', err=True)
        raise Exit(EXIT_ERROR) from error

    configure_logging(log_level or settings.log_level, log_file or settings.log_file)

    try:
        test_set = collect(config, strict=settings.strict if strict is None else strict)
        reporter = Reporter(report_formats or settings.report_formats)

        report = run_test_set(test_set, ExecutionContext(
            runner=ScriptRunner(settings.interpreters),
        ))

        reporter.write(report, output or settings.report_dir)

    except ATFError as error:
        echo(f'{error}', err=True)
        raise Exit(EXIT_ERROR) from error

    summary = ', '.join(
        f'{status}: {count}'
        for status, count in report.summary().items()
        if count
    )
    echo(f'Test set {report.name!r}: {summary or "no test cases"}')

    if report.failed:
        raise Exit(EXIT_FAILED)


@cli.command(
    name='schema',
    help='Print the pytest-atf JSON Schema to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(make_schema())


if __name__ == '__main__':
    cli()
