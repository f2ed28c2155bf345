"""
Command-line interface for the IOM .dat to CSV converter.

Usage:
    iom-dat-to-csv /path/to/source /path/to/target
    python -m iom_converter /path/to/source /path/to/target --local-time
"""

from pathlib import Path
from typing import NoReturn, Optional

import click
import typer

from .converter import convert_folder
from .errors import FatalIOError
from .models import ConverterSettings
from .reporting import ConsoleReporter, configure_logging

HELP_TEXT = "\n".join([
    "Converts IOM .dat files to .csv files",
    "usage: iom-dat-to-csv source-folder target-folder",
    "",
    "The parameters are:",
    "  source-folder - the folder containing the IOM .dat files",
    "  target-folder - the folder to write the .csv files to",
    "",
    'example: iom-dat-to-csv "/data/iom" "/data/iom-csv"',
])

app = typer.Typer(
    name="iom-dat-to-csv",
    help="Convert IOM biometric .dat files to CSV",
    add_completion=False,
)


def exit_program(pause: bool) -> NoReturn:
    """Wait for a key press (interactive terminals only) and exit with status 0."""
    typer.echo()
    if pause:
        click.pause("Press any key to exit.")
    raise typer.Exit(0)


@app.command(context_settings={"allow_extra_args": True})
def convert(
    ctx: typer.Context,
    source_folder: Optional[Path] = typer.Argument(
        None,
        help="Folder containing the IOM .dat files",
    ),
    target_folder: Optional[Path] = typer.Argument(
        None,
        help="Folder to write the .csv files to",
    ),
    pattern: str = typer.Option(
        "*.dat",
        "--pattern", "-p",
        help="Glob for source files inside the source folder",
    ),
    local_time: bool = typer.Option(
        False,
        "--local-time",
        help="Use the local time zone for record times instead of UTC",
    ),
    strict_order: bool = typer.Option(
        False,
        "--strict-order",
        help="Reject files whose time stamps go backwards",
    ),
    pause: bool = typer.Option(
        True,
        "--pause/--no-pause",
        help="Wait for a key press before exiting",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Print debug output",
    ),
):
    """
    Convert every .dat file in SOURCE_FOLDER to a CSV file in TARGET_FOLDER.

    Each CSV is named after the time of its first record (YYYYMMDD-HHMMSS.csv).
    """
    configure_logging(verbose)

    if source_folder is None:
        typer.echo(HELP_TEXT)
        exit_program(pause)

    reporter = ConsoleReporter()
    settings = ConverterSettings(
        pattern=pattern,
        local_time=local_time,
        strict_order=strict_order,
    )

    try:
        if target_folder is None or ctx.args:
            raise FatalIOError("Expected 2 arguments: source-folder target-folder")
        convert_folder(source_folder, target_folder, settings=settings, reporter=reporter)
    except (FatalIOError, OSError) as e:
        reporter.fatal(str(e))

    exit_program(pause)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
