"""Assembly of the discovery and execution documents.

Records are joined with their resolved declaration positions, then
projected into two documents that reference each other through
content-derived identifiers.
"""

import logging
from collections import defaultdict
from dataclasses import replace

from .identifiers import Identifiers
from .models import (
    DiscoveryDocument,
    ExecutionDocument,
    PositionsByPackage,
    TestCaseExec,
    TestCases,
    TestRecord,
    TestStatus,
    TestSuite,
    TestSuiteExec,
)

logger = logging.getLogger(__name__)


class ReportAssembler:
    """Builds both report documents from records and positions.

    Output order depends only on content: records are sorted by
    package then name, file groupings by package then file name.
    """

    def __init__(self, identifiers: Identifiers | None = None):
        self.identifiers = identifiers or Identifiers()

    @staticmethod
    def enrich(
        records: list[TestRecord], positions: PositionsByPackage
    ) -> list[TestRecord]:
        """Return copies of the records with their declaration position filled in.

        Subtests resolve through their top-level function. Records with no
        known declaration are returned unchanged.
        """
        enriched = []
        unresolved = 0
        for record in records:
            position = positions.get(record.package, {}).get(record.function_name)
            if position is None:
                unresolved += 1
                enriched.append(replace(record, output=list(record.output)))
                continue
            enriched.append(
                replace(
                    record,
                    output=list(record.output),
                    file_name=position.file_name,
                    line=position.line,
                    column=position.column,
                )
            )
        if unresolved:
            logger.warning(f"{unresolved} tests have no resolved declaration")
        return enriched

    @staticmethod
    def package_status(records: list[TestRecord]) -> TestStatus:
        """Majority rule over one package's tests; ties pass.

        Skipped tests count as failures.
        """
        passed = sum(1 for r in records if r.status is TestStatus.PASSED)
        failed = sum(1 for r in records if r.status is TestStatus.FAILED)
        return TestStatus.FAILED if failed > passed else TestStatus.PASSED

    @staticmethod
    def failure_message(record: TestRecord) -> str:
        if record.status is not TestStatus.FAILED:
            return ""
        return "".join(record.output)

    def assemble(
        self, records: list[TestRecord], positions: PositionsByPackage
    ) -> tuple[DiscoveryDocument, ExecutionDocument]:
        """Build the discovery and execution documents.

        Args:
            records: Aggregated test records, in any order.
            positions: Declaration positions keyed by package then function.

        Returns:
            (discovery, execution) documents.
        """
        ordered = sorted(self.enrich(records, positions), key=lambda r: r.key)

        by_package: dict[str, list[TestRecord]] = defaultdict(list)
        by_file: dict[tuple[str, str], list[TestRecord]] = defaultdict(list)
        for record in ordered:
            by_package[record.package].append(record)
            if record.is_resolved:
                by_file[(record.package, record.file_name)].append(record)

        test_suites: list[TestSuite] = []
        test_case_execs: list[TestCaseExec] = []
        for record in ordered:
            test_id = self.identifiers.for_test(record.name)
            test_suites.append(
                TestSuite(id=test_id, label=record.name, package=record.package)
            )
            test_case_execs.append(
                TestCaseExec(
                    id=test_id,
                    status=record.status,
                    duration=record.elapsed,
                    failure_msg=self.failure_message(record),
                )
            )

        suite_ids_by_package: dict[str, tuple[str, ...]] = {
            package: tuple(self.identifiers.for_test(r.name) for r in members)
            for package, members in by_package.items()
        }
        status_by_package = {
            package: self.package_status(members)
            for package, members in by_package.items()
        }

        test_cases: list[TestCases] = []
        test_suite_execs: list[TestSuiteExec] = []
        for (package, file_name), members in sorted(by_file.items()):
            # execution testSuite entries share the id of the discovery
            # testCases entry for the same file
            file_id = self.identifiers.for_file(file_name)
            test_cases.append(
                TestCases(
                    id=file_id,
                    label=file_name,
                    package=package,
                    test_suites=suite_ids_by_package[package],
                )
            )
            status = status_by_package[package]
            failed = [r for r in members if r.status is TestStatus.FAILED]
            test_suite_execs.append(
                TestSuiteExec(
                    id=file_id,
                    status=status,
                    duration=sum(r.elapsed for r in members),
                    package=package,
                    num_tests=len(members),
                    failure_msg=(
                        f"{len(failed)} of {len(members)} tests failed"
                        if failed
                        else ""
                    ),
                )
            )

        logger.debug(
            f"Assembled {len(test_suites)} tests in {len(test_cases)} files "
            f"across {len(by_package)} packages"
        )
        return (
            DiscoveryDocument(
                test_cases=tuple(test_cases), test_suites=tuple(test_suites)
            ),
            ExecutionDocument(
                test_case=tuple(test_case_execs), test_suite=tuple(test_suite_execs)
            ),
        )
