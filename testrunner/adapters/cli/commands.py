"""Command-line interface for the report generator.

Parses flags, checks the run preconditions (stdin is a pipe, neither
report exists yet) and feeds stdin through the event decoder into a
ReportPort.
"""

import argparse
import asyncio
import logging
import os
import stat
from collections.abc import Iterable
from pathlib import Path
from typing import IO, Any, TextIO

from testrunner import __version__
from testrunner.adapters.events.go_json import decode_line, iter_events
from testrunner.core.errors import EventDecodeError, PreconditionError
from testrunner.core.models import RunSummary, TestEvent
from testrunner.core.ports import ReportPort

logger = logging.getLogger(__name__)

PROGRAM = "test-runner"

# go test -json can emit very long Output lines
MAX_LINE_BYTES = 64 * 1024 * 1024


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Flags default to None so that unset flags fall through to the
    environment-backed settings.
    """
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Runs Go Tests and Stores the Results in a JSON File.",
        epilog="Example: go test -json ./... | test-runner -d discovery.json -e exec.json",
    )
    parser.add_argument(
        "-t", "--title", dest="title",
        help="the title text shown in the test report (default: test-runner)",
    )
    parser.add_argument(
        "-s", "--size", dest="indicator_size", type=int,
        help="the size (in pixels) of the clickable indicator for test result groups (default: 24)",
    )
    parser.add_argument(
        "-g", "--groupSize", dest="group_size", type=int,
        help="the number of tests per test group indicator (default: 20)",
    )
    parser.add_argument(
        "-e", "--exec", dest="exec_report",
        help="the execution report file (default: exec.report.json)",
    )
    parser.add_argument(
        "-d", "--discovery", dest="discovery_report",
        help="the discovery report file (default: discovery.report.json)",
    )
    parser.add_argument(
        "-l", "--list", dest="list_file",
        help="pre-generated `go list -json` output to read instead of running go",
    )
    parser.add_argument(
        "-v", "--verbose", dest="verbose", action="store_true", default=None,
        help="echo every input line",
    )

    subcommands = parser.add_subparsers(dest="command")
    subcommands.add_parser("version", help="Prints the version of test-runner")
    return parser


def settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Extract the settings overrides from parsed arguments."""
    fields = (
        "title",
        "indicator_size",
        "group_size",
        "exec_report",
        "discovery_report",
        "list_file",
        "verbose",
    )
    return {name: getattr(args, name) for name in fields if getattr(args, name) is not None}


def version_text() -> str:
    return f"{PROGRAM}: v{__version__}"


def check_stdin_piped(stdin: IO[Any]) -> None:
    """Refuse to run when input would be typed at a terminal.

    Raises:
        PreconditionError: If stdin is attached to a terminal.
    """
    if stdin.isatty():
        raise PreconditionError("missing stdin pipe")


def is_pipe(stream: IO[Any]) -> bool:
    """True if the stream reads from a pipe or socket."""
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (AttributeError, OSError, ValueError):
        return False
    return stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode)


def check_targets_absent(paths: Iterable[Path]) -> None:
    """Refuse to overwrite an existing report.

    Raises:
        FileExistsError: If any of the paths already exists.
    """
    for path in paths:
        if path.exists():
            logger.warning(f"{path} already exists. Please specify a new file.")
            raise FileExistsError(f"report file already exists: {path}")


class CLICommandHandler:
    """Runs the report pipeline over an input stream.

    Bridges the streams of the process to the ReportPort. A piped stdin is
    read through the event loop, so signal handlers keep running while the
    upstream process holds the pipe open; any other input is decoded
    lazily. In verbose mode every raw line is echoed to stdout as it is
    read.
    """

    def __init__(self, report: ReportPort, stdout: TextIO, verbose: bool = False):
        """Initialize the CLI command handler.

        Args:
            report: ReportPort implementation to run.
            stdout: Destination of the verbose echo and the timing line.
            verbose: If True, echo each input line.
        """
        self.report = report
        self.stdout = stdout
        self.verbose = verbose

    def _echo(self, line: str) -> None:
        self.stdout.write(line + "\n")
        self.stdout.flush()

    async def read_pipe(self, pipe: IO[Any]) -> list[TestEvent]:
        """Decode every line of a pipe without blocking the event loop.

        Raises:
            EventDecodeError: On the first line that is not a valid event,
                or a line longer than MAX_LINE_BYTES.
        """
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(limit=MAX_LINE_BYTES)
        transport, _ = await loop.connect_read_pipe(
            lambda: asyncio.StreamReaderProtocol(reader), pipe
        )
        echo = self._echo if self.verbose else None
        events: list[TestEvent] = []
        try:
            while True:
                try:
                    raw = await reader.readline()
                except ValueError as e:
                    raise EventDecodeError(
                        len(events) + 1, f"line longer than {MAX_LINE_BYTES} bytes"
                    ) from e
                if not raw:
                    break
                events.append(decode_line(raw, len(events) + 1, echo))
        finally:
            transport.close()
        return events

    async def generate(self, stdin: IO[Any]) -> RunSummary:
        """Generate both reports from the lines of stdin."""
        if is_pipe(stdin):
            events: Iterable[TestEvent] = await self.read_pipe(stdin)
        else:
            events = iter_events(stdin, echo=self._echo if self.verbose else None)
        summary = await self.report.generate(events)
        logger.info(
            f"{summary.tests} tests: {summary.passed} passed, "
            f"{summary.failed} failed ({summary.skipped} skipped)"
        )
        return summary

    def finished(self, elapsed_seconds: float) -> None:
        self.stdout.write(f"[{PROGRAM}] finished in {elapsed_seconds:.3f}s\n")
        self.stdout.flush()
