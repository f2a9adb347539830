"""CLI entry point for elm-test.

Usage:
    elm-test [FILES...] [options]
"""

import json
import os
import sys
from typing import Optional

import click

from . import __version__
from .errors import ElmTestError
from .logging_setup import setup_logger
from .project import find_project_root
from .reporting import ConsoleReporter, JsonReporter
from .runner import RunOptions, RunPipeline, interrupt_on_sigterm
from .settings import ReportFormat, load_settings
from .settings.schema import VALID_REPORT_FORMATS


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("files", nargs=-1, type=click.Path())
@click.option("--compiler", help="Path to the elm executable. Default: elm on PATH.")
@click.option("--seed", type=int, help="Seed for fuzz tests. Default: random.")
@click.option("--fuzz", type=click.IntRange(min=1), help="Runs per fuzz test. Default: 100.")
@click.option(
    "--report",
    type=click.Choice(sorted(VALID_REPORT_FORMATS)),
    help="Output format. Default: console.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    help="Number of worker processes. Default: number of CPUs.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log diagnostics to stderr.")
@click.version_option(__version__, prog_name="elm-test")
def main(
    files: tuple[str, ...],
    compiler: Optional[str],
    seed: Optional[int],
    fuzz: Optional[int],
    report: Optional[str],
    workers: Optional[int],
    verbose: bool,
):
    """Run the Elm tests in FILES (default: everything under tests/)."""
    setup_logger("DEBUG" if verbose else "WARNING")
    report_format = report or ReportFormat.CONSOLE.value

    try:
        project_root = find_project_root()
        settings = load_settings(project_root).merged(
            seed=seed,
            fuzz=fuzz,
            report=report,
            workers=workers,
        )
        report_format = settings.report

        if report_format == ReportFormat.CONSOLE.value:
            print_headline()

        options = RunOptions(
            project_root=project_root,
            paths=[os.path.abspath(f) for f in files],
            settings=settings,
            compiler=compiler,
        )
        with interrupt_on_sigterm():
            result = RunPipeline(options).run()

    except ElmTestError as e:
        output_error(str(e), report_format)
        sys.exit(1)

    except KeyboardInterrupt:
        output_error("Test run interrupted", report_format)
        sys.exit(1)

    if report_format == ReportFormat.JSON.value:
        reporter = JsonReporter()
        click.echo(reporter.to_json_string(reporter.generate(result)))
    else:
        ConsoleReporter().print(result)

    if not result.success:
        sys.exit(1)


def output_error(message: str, report_format: str = ReportFormat.CONSOLE.value):
    """Report a fatal error. JSON reports also get an error object on stdout."""
    click.echo(f"Error: {message}", err=True)

    if report_format == ReportFormat.JSON.value:
        click.echo(json.dumps({"status": "error", "message": message}, ensure_ascii=False))


def print_headline():
    """Print the version headline, e.g.

    elm-test 0.19.1
    ---------------
    """
    headline = f"elm-test {__version__}"
    click.echo(f"\n{headline}\n{'-' * len(headline)}\n")


if __name__ == "__main__":
    main()
