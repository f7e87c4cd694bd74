"""Composition root for the test-runner report generator.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Argument parsing and configuration loading
- Run precondition checks
- Adapter instantiation
- Core service initialization
- Signal handling and exit codes
"""

import asyncio
import logging
import signal
import sys
import time
from pathlib import Path
from typing import IO, Any, TextIO

from pydantic import ValidationError

from testrunner.adapters.cli.commands import (
    CLICommandHandler,
    build_parser,
    check_stdin_piped,
    check_targets_absent,
    settings_overrides,
    version_text,
)
from testrunner.adapters.golist.listing import GoListingFileAdapter
from testrunner.adapters.golist.query import GoListQueryAdapter
from testrunner.adapters.report.json_file import JsonReportWriter
from testrunner.adapters.source.go_source import GoSourceInspector
from testrunner.config import Settings, load_settings
from testrunner.core.assembler import ReportAssembler
from testrunner.core.models import RunSummary
from testrunner.core.report_service import ReportService
from testrunner.core.resolver import PositionResolver

logger = logging.getLogger(__name__)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Logs go to stderr; stdout carries the verbose echo and the timing line.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )


def build_service(settings: Settings, cwd: Path) -> ReportService:
    """Wire adapters and core services for one run.

    Report paths are resolved against cwd; with a listing file configured
    no package query adapter is created.
    """
    inspector = GoSourceInspector()
    query = None
    listing = None
    if settings.list_file:
        listing = GoListingFileAdapter(cwd / settings.list_file)
        logger.info(f"Package metadata: listing file {settings.list_file}")
    else:
        query = GoListQueryAdapter(
            go_binary=settings.go_binary,
            timeout_seconds=settings.query_timeout_seconds,
        )
        logger.info(f"Package metadata: {settings.go_binary} list")

    writer = JsonReportWriter(
        discovery_path=cwd / settings.discovery_report,
        execution_path=cwd / settings.exec_report,
    )
    return ReportService(
        resolver=PositionResolver(inspector=inspector, query=query),
        assembler=ReportAssembler(),
        writer=writer,
        listing=listing,
    )


_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_signal_handlers(task: asyncio.Task[RunSummary]) -> bool:
    """Cancel the running pipeline on SIGINT or SIGTERM.

    Returns:
        True if handlers were installed.
    """
    try:
        loop = asyncio.get_running_loop()

        def _handle_signal(sig: signal.Signals) -> None:
            logger.warning(f"Caught signal {sig.name}, cancelling report generation")
            task.cancel()

        for sig in _SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, _handle_signal, sig)
        return True
    except (NotImplementedError, RuntimeError):
        # Not available on Windows or outside the main thread
        logger.debug("Signal handlers not available here")
        return False


def _remove_signal_handlers() -> None:
    loop = asyncio.get_running_loop()
    for sig in _SHUTDOWN_SIGNALS:
        loop.remove_signal_handler(sig)


async def bootstrap(
    settings: Settings,
    stdin: IO[Any] | None = None,
    stdout: TextIO | None = None,
    cwd: Path | None = None,
) -> RunSummary:
    """Check preconditions, wire the pipeline and run it once.

    stdin defaults to the binary stdin of the process, so events are decoded
    as UTF-8 whatever the locale.

    Raises:
        PreconditionError: If stdin is not a pipe.
        FileExistsError: If either report already exists.
        Exception: Any failure of the pipeline itself.
    """
    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout
    cwd = cwd if cwd is not None else Path.cwd()
    started = time.monotonic()

    check_stdin_piped(stdin)
    check_targets_absent([cwd / settings.discovery_report, cwd / settings.exec_report])

    logger.debug(
        f"Report '{settings.title}': indicator size {settings.indicator_size}px, "
        f"{settings.group_size} tests per group"
    )
    service = build_service(settings, cwd)
    handler = CLICommandHandler(service, stdout=stdout, verbose=settings.verbose)

    task = asyncio.create_task(handler.generate(stdin))
    installed = _install_signal_handlers(task)
    try:
        summary = await task
    finally:
        if installed:
            _remove_signal_handlers()

    handler.finished(time.monotonic() - started)
    return summary


def main(argv: list[str] | None = None) -> None:
    """Application entry point.

    Exit codes:
        0: Reports written (or version printed)
        1: Invalid configuration, failed precondition or pipeline error
        130: Interrupted (SIGINT/SIGTERM/KeyboardInterrupt)
    """
    args = build_parser().parse_args(argv)
    if args.command == "version":
        print(version_text())
        return

    try:
        settings = load_settings(**settings_overrides(args))
    except ValidationError as e:
        print(f"error: invalid configuration\n{e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_format)

    try:
        asyncio.run(bootstrap(settings))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT), no reports written")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.warning("Report generation cancelled, no reports written")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=settings.log_level == "DEBUG")
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
