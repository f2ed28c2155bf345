"""
Console reporting for conversion runs.

The pipeline talks to a Reporter instead of printing, so parsing and
anchoring stay free of console side effects and tests can swap in their own.
"""

import logging
import sys
from typing import List, Tuple

import typer

LOGGER_NAME = "iom_converter"


class Reporter:
    """Reporter interface. The default implementation discards everything."""

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def fatal(self, message: str) -> None:
        pass


class ConsoleReporter(Reporter):
    """Prints progress and ERROR:/FATAL: lines to standard output."""

    def info(self, message: str) -> None:
        typer.echo(message)

    def warning(self, message: str) -> None:
        typer.echo(typer.style(f"WARNING: {message}", fg=typer.colors.YELLOW))

    def error(self, message: str) -> None:
        typer.echo(typer.style(f"ERROR: {message}", fg=typer.colors.RED))

    def fatal(self, message: str) -> None:
        typer.echo(typer.style(f"FATAL: {message}", fg=typer.colors.RED))


class MemoryReporter(Reporter):
    """Keeps (level, message) pairs in memory."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def fatal(self, message: str) -> None:
        self.messages.append(("fatal", message))

    def lines(self, level: str) -> List[str]:
        return [message for lvl, message in self.messages if lvl == level]


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up the package logger for diagnostic output on stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    # Drop handlers from a previous call so repeated runs don't duplicate lines
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = False

    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    return logger
