"""``go list`` package query adapter.

Implements PackageQueryPort by running ``go list -json <package>`` as a
subprocess for each package.

Invocation format: go list -json <import path>
"""

import asyncio
import json
import logging

from testrunner.core.errors import PackageDescriptionError, PackageQueryError
from testrunner.core.models import PackageMetadata
from testrunner.core.ports import PackageQueryPort

from .description import parse_package_description

logger = logging.getLogger(__name__)


class GoListQueryAdapter(PackageQueryPort):
    """Describes packages by invoking the ``go`` tool."""

    def __init__(
        self,
        go_binary: str = "go",
        timeout_seconds: float | None = None,
        cwd: str | None = None,
    ):
        """Initialize the query adapter.

        Args:
            go_binary: Name or path of the go executable.
            timeout_seconds: Per-invocation limit. None waits indefinitely.
            cwd: Working directory for the subprocess (defaults to ours).
        """
        self.go_binary = go_binary
        self.timeout_seconds = timeout_seconds
        self.cwd = cwd

    def command(self, package: str) -> list[str]:
        return [self.go_binary, "list", "-json", package]

    async def describe(self, package: str) -> PackageMetadata:
        """Run ``go list -json`` for one package and parse its output."""
        stdout = await self._run(package)
        try:
            payload = json.loads(stdout)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Unreadable go list output for {package}: {e}")
            raise PackageQueryError(package, f"unreadable output: {e}") from e

        try:
            return parse_package_description(payload)
        except PackageDescriptionError as e:
            logger.error(f"Malformed package description for {package}: {e}")
            raise

    async def _run(self, package: str) -> bytes:
        """Run the query subprocess and return its stdout.

        The subprocess is killed if the awaiting task is cancelled.

        Raises:
            PackageQueryError: If the tool is missing, times out, or exits
                non-zero.
        """
        command = self.command(package)
        logger.debug(f"Running {' '.join(command)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            logger.error(f"Failed to start {self.go_binary}: {e}")
            raise PackageQueryError(package, f"cannot run {self.go_binary}: {e}") from e

        try:
            async with asyncio.timeout(self.timeout_seconds):
                stdout, stderr = await process.communicate()
        except TimeoutError as e:
            await self._kill(process)
            logger.error(
                f"go list timed out after {self.timeout_seconds}s for {package}"
            )
            raise PackageQueryError(
                package, f"timed out after {self.timeout_seconds} seconds"
            ) from e
        except asyncio.CancelledError:
            await self._kill(process)
            logger.debug(f"go list for {package} cancelled")
            raise

        if process.returncode != 0:
            error_output = (stderr or stdout).decode("utf-8", errors="replace").strip()
            logger.error(
                f"go list exited with {process.returncode} for {package}: {error_output}"
            )
            raise PackageQueryError(
                package, f"exit status {process.returncode}: {error_output}"
            )
        return stdout

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
