"""Report generation pipeline.

This module implements the single run of the tool: ingest the event
stream, resolve declaration positions, assemble both documents and hand
them to the writer.
"""

import logging
import time
from collections.abc import Iterable

from .assembler import ReportAssembler
from .ingest import EventIngestor
from .models import RunSummary, TestEvent, TestStatus
from .ports import PackageListingPort, ReportPort, ReportWriterPort
from .resolver import PositionResolver

logger = logging.getLogger(__name__)


class ReportService(ReportPort):
    """Implements the report generation pipeline.

    This service orchestrates:
    - Aggregating events into test records
    - Resolving positions from the listing when one is configured,
      otherwise by querying every package seen in the events
    - Assembling the discovery and execution documents
    - Writing both documents
    """

    def __init__(
        self,
        resolver: PositionResolver,
        assembler: ReportAssembler,
        writer: ReportWriterPort,
        listing: PackageListingPort | None = None,
    ):
        self.resolver = resolver
        self.assembler = assembler
        self.writer = writer
        self.listing = listing

    async def generate(self, events: Iterable[TestEvent]) -> RunSummary:
        """Run the whole pipeline over one event stream."""
        started = time.monotonic()
        ingestor = EventIngestor().consume(events)
        ingest_seconds = time.monotonic() - started

        records = ingestor.records()
        packages = ingestor.packages()
        logger.info(
            f"Read {len(records)} tests from {len(packages)} packages "
            f"in {ingest_seconds:.3f}s"
        )

        if self.listing is not None:
            positions = await self.resolver.resolve_from_listing(self.listing)
        else:
            positions = await self.resolver.resolve_packages(packages)

        discovery, execution = self.assembler.assemble(records, positions)
        await self.writer.write(discovery, execution)

        statuses = [record.status for record in records]
        return RunSummary(
            tests=len(records),
            packages=len(packages),
            passed=statuses.count(TestStatus.PASSED),
            failed=statuses.count(TestStatus.FAILED),
            skipped=sum(1 for record in records if record.skipped),
            ingest_seconds=ingest_seconds,
        )
