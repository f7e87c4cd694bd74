"""Resolution of test function declarations to source positions.

Package descriptions come either from a pre-generated listing or from a
query per package. Queries run concurrently, one task per package; the
first failure cancels the rest and no partial result is ever returned.
"""

import asyncio
import logging
import os
from collections.abc import Iterable

from .models import (
    PackageMetadata,
    PackagePositions,
    PositionsByPackage,
    TestPosition,
)
from .ports import PackageListingPort, PackageQueryPort, SourceInspectorPort

logger = logging.getLogger(__name__)


class PositionResolver:
    """Maps every package to the declaration positions of its test functions."""

    def __init__(
        self,
        inspector: SourceInspectorPort,
        query: PackageQueryPort | None = None,
    ):
        """Initialize the resolver.

        Args:
            inspector: Finds function declarations in source files.
            query: Describes packages on demand. Only needed by
                resolve_packages().
        """
        self.inspector = inspector
        self.query = query

    def positions_for(self, metadata: PackageMetadata) -> PackagePositions:
        """Resolve the test function positions of one described package.

        Files are inspected in declared order; when two files declare the
        same function name the later declaration wins.

        Raises:
            OSError: If a test file cannot be read.
            SourceParseError: If a test file cannot be scanned.
        """
        positions: PackagePositions = {}
        for file_name in metadata.all_test_files:
            path = os.path.join(metadata.directory, file_name)
            for function, line, column in self.inspector.resolve_positions(path):
                if function in positions:
                    logger.debug(
                        f"{metadata.import_path}: {function} redeclared in "
                        f"{file_name}, replacing {positions[function].file_name}"
                    )
                positions[function] = TestPosition(
                    file_name=os.path.basename(path),
                    line=line,
                    column=column,
                )
        return positions

    async def resolve_from_listing(
        self, listing: PackageListingPort
    ) -> PositionsByPackage:
        """Resolve every package found in a pre-generated listing.

        Raises:
            OSError: If the listing or a source file cannot be read.
            PackageDescriptionError: If a listing record is malformed.
            SourceParseError: If a source file cannot be scanned.
        """
        packages = await listing.load()
        resolved: PositionsByPackage = {}
        for metadata in packages:
            resolved[metadata.import_path] = await asyncio.to_thread(
                self.positions_for, metadata
            )
        logger.info(f"Resolved {len(resolved)} packages from listing")
        return resolved

    async def resolve_package(self, package: str) -> PackagePositions:
        """Describe one package through the query port and resolve it."""
        if self.query is None:
            raise ValueError("a PackageQueryPort is required to query packages")
        metadata = await self.query.describe(package)
        return await asyncio.to_thread(self.positions_for, metadata)

    async def resolve_packages(self, packages: Iterable[str]) -> PositionsByPackage:
        """Resolve every package concurrently, one task per package.

        The first task to fail cancels all in-flight tasks; once every task
        has finished, that first error is re-raised. Results are only merged
        when all tasks succeeded.

        Args:
            packages: Distinct package import paths.

        Returns:
            Mapping of package import path to its resolved positions.

        Raises:
            Exception: The first error raised by any package's resolution.
        """
        names = sorted(set(packages))
        if not names:
            return {}

        tasks: dict[str, asyncio.Task[PackagePositions]] = {}
        try:
            async with asyncio.TaskGroup() as group:
                for name in names:
                    tasks[name] = group.create_task(
                        self.resolve_package(name), name=f"resolve:{name}"
                    )
        except ExceptionGroup as errors:
            first = errors.exceptions[0]
            logger.error(
                f"Package resolution failed, {len(names)} tasks cancelled: {first}"
            )
            raise first from errors

        resolved: PositionsByPackage = {
            name: task.result() for name, task in tasks.items()
        }
        logger.info(f"Resolved {len(resolved)} packages concurrently")
        return resolved
