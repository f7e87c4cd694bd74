"""Aggregation of test events into per-test records."""

import logging
from collections.abc import Iterable

from .models import TestAction, TestEvent, TestRecord

logger = logging.getLogger(__name__)

PASS_MARKER = "--- PASS:"


class EventIngestor:
    """Owns the ``(package, test) -> TestRecord`` mapping for one run.

    Events must be applied in arrival order: the last pass, fail or skip
    seen for a test decides its outcome and elapsed time.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], TestRecord] = {}
        self._packages: set[str] = set()
        self.events_seen = 0

    def apply(self, event: TestEvent) -> None:
        """Fold one event into the aggregate state."""
        self.events_seen += 1

        if event.package:
            self._packages.add(event.package)

        if not event.is_test_event:
            return

        key = (event.package, event.test)
        record = self._records.get(key)
        if record is None:
            record = TestRecord(name=event.test, package=event.package)
            self._records[key] = record

        action = event.kind
        if action is TestAction.PASS:
            record.passed = True
            record.skipped = False
        elif action is TestAction.SKIP:
            record.passed = False
            record.skipped = True
        elif action is TestAction.FAIL:
            record.passed = False
            record.skipped = False
        if action.is_terminal:
            record.elapsed = event.elapsed

        if event.output:
            output = event.output
            if PASS_MARKER in output:
                output = output.strip()
            record.output.append(output)

    def consume(self, events: Iterable[TestEvent]) -> "EventIngestor":
        """Apply every event of a (possibly lazy) sequence, in order."""
        for event in events:
            self.apply(event)
        logger.debug(
            f"Ingested {self.events_seen} events: "
            f"{len(self._records)} tests in {len(self._packages)} packages"
        )
        return self

    def records(self) -> list[TestRecord]:
        """All records, ordered by package then test name."""
        return [self._records[key] for key in sorted(self._records)]

    def packages(self) -> tuple[str, ...]:
        """Distinct non-empty package names seen on any event, sorted."""
        return tuple(sorted(self._packages))

    def get(self, package: str, test: str) -> TestRecord | None:
        return self._records.get((package, test))

    def __len__(self) -> int:
        return len(self._records)
