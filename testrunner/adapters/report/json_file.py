"""JSON file report writer.

Implements ReportWriterPort by writing the discovery and execution
documents as pretty-printed JSON files. Both documents are serialized and
staged next to their destinations before either is moved into place, so a
failure leaves neither file behind.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from testrunner.core.models import DiscoveryDocument, ExecutionDocument
from testrunner.core.ports import ReportWriterPort

logger = logging.getLogger(__name__)

INDENT = 4


def render(document: dict[str, Any]) -> str:
    """Serialize a document the way the report viewer expects it."""
    return json.dumps(document, indent=INDENT, ensure_ascii=False) + "\n"


class JsonReportWriter(ReportWriterPort):
    """Writes both report documents to two distinct JSON files."""

    def __init__(self, discovery_path: str | Path, execution_path: str | Path):
        """Initialize the writer.

        Args:
            discovery_path: Destination of the discovery document.
            execution_path: Destination of the execution document.

        Raises:
            ValueError: If both paths point at the same file.
        """
        self.discovery_path = Path(discovery_path).resolve()
        self.execution_path = Path(execution_path).resolve()
        if self.discovery_path == self.execution_path:
            raise ValueError(
                f"discovery and execution reports must differ: {self.discovery_path}"
            )

    async def write(
        self, discovery: DiscoveryDocument, execution: ExecutionDocument
    ) -> None:
        """Write both documents, or neither."""
        contents = [
            (self.discovery_path, render(discovery.to_dict())),
            (self.execution_path, render(execution.to_dict())),
        ]
        await asyncio.to_thread(self._write_all, contents)
        logger.info(
            f"Wrote discovery report {self.discovery_path} "
            f"and execution report {self.execution_path}"
        )

    @staticmethod
    def _stage(path: Path, content: str) -> Path:
        """Write content to a temporary sibling of path and return its name."""
        fd, staged = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
        except BaseException:
            Path(staged).unlink(missing_ok=True)
            raise
        return Path(staged)

    def _write_all(self, contents: list[tuple[Path, str]]) -> None:
        for path, _ in contents:
            if path.exists():
                raise FileExistsError(f"report file already exists: {path}")

        staged: list[tuple[Path, Path]] = []
        placed: list[Path] = []
        try:
            for path, content in contents:
                staged.append((self._stage(path, content), path))
            for temp, path in staged:
                os.replace(temp, path)
                placed.append(path)
        except OSError as e:
            logger.error(f"Failed to write reports: {e}", exc_info=True)
            for path in placed:
                path.unlink(missing_ok=True)
            raise
        finally:
            for temp, _ in staged:
                temp.unlink(missing_ok=True)
