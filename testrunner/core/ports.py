"""Port interfaces for the test-runner report generator.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - PackageQueryPort: Describe one package on demand
   - PackageListingPort: Read every package description from a listing
   - SourceInspectorPort: Find function declarations in a source file
   - ReportWriterPort: Persist the discovery and execution documents

2. **Driving Ports** (adapters/external systems call into core)
   - ReportPort: Entry point for a report generation run
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from .models import (
    DiscoveryDocument,
    ExecutionDocument,
    PackageMetadata,
    RunSummary,
    TestEvent,
)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class PackageQueryPort(ABC):
    """Port for describing a single package on demand.

    The resolver calls this once per distinct package, concurrently.
    Implementations must release any external resource (e.g. kill a
    subprocess) when the awaiting task is cancelled.
    """

    @abstractmethod
    async def describe(self, package: str) -> PackageMetadata:
        """Describe a package by import path.

        Args:
            package: Import path as it appears in the test events.

        Returns:
            PackageMetadata for the package.

        Raises:
            PackageQueryError: If the query tool fails or cannot be run.
            PackageDescriptionError: If the tool output is malformed.
        """


class PackageListingPort(ABC):
    """Port for reading a pre-generated listing of package descriptions."""

    @abstractmethod
    async def load(self) -> list[PackageMetadata]:
        """Read every package description in the listing.

        Returns:
            Package descriptions in listing order.

        Raises:
            OSError: If the listing cannot be read.
            PackageDescriptionError: If any record is malformed.
        """


class SourceInspectorPort(ABC):
    """Port for locating top-level function declarations in a source file."""

    @abstractmethod
    def resolve_positions(self, path: str) -> list[tuple[str, int, int]]:
        """Find the top-level function declarations in a file.

        Blocking; the resolver runs it off the event loop.

        Args:
            path: Path of the source file.

        Returns:
            ``(function_name, line, column)`` tuples in source order,
            line and column 1-based.

        Raises:
            OSError: If the file cannot be read.
            SourceParseError: If the file cannot be scanned.
        """


class ReportWriterPort(ABC):
    """Port for persisting the two report documents."""

    @abstractmethod
    async def write(
        self, discovery: DiscoveryDocument, execution: ExecutionDocument
    ) -> None:
        """Write both documents.

        Implementations must be all-or-nothing: after a failure neither
        document may be left at its destination.

        Raises:
            OSError: If either document cannot be written.
        """


# ============================================================================
# DRIVING PORTS (External systems call into core)
# ============================================================================


class ReportPort(ABC):
    """Port for running the ingest, resolve, assemble and write pipeline."""

    @abstractmethod
    async def generate(self, events: Iterable[TestEvent]) -> RunSummary:
        """Generate both reports from a stream of test events.

        Args:
            events: Finite sequence of events, consumed once.

        Returns:
            RunSummary describing the run.

        Raises:
            Exception: Any decoding, resolution or write error. Nothing is
                written when an error is raised.
        """
