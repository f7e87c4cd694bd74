"""Unit tests for report assembly.

Tests verify that ReportAssembler:
- Joins records with their declaration positions
- Derives package status by majority
- Cross-links discovery and execution entries by identifier
- Produces the documented wire layout
"""

import pytest

from testrunner.core.assembler import ReportAssembler
from testrunner.core.identifiers import Identifiers
from testrunner.core.models import (
    PositionsByPackage,
    TestPosition,
    TestRecord,
    TestStatus,
)


def record(
    name: str,
    package: str = "a",
    passed: bool = False,
    skipped: bool = False,
    elapsed: float = 0.1,
    output: list[str] | None = None,
) -> TestRecord:
    return TestRecord(
        name=name,
        package=package,
        passed=passed,
        skipped=skipped,
        elapsed=elapsed,
        output=list(output or []),
    )


@pytest.fixture
def assembler() -> ReportAssembler:
    return ReportAssembler()


@pytest.fixture
def positions() -> PositionsByPackage:
    return {
        "a": {
            "TestPass": TestPosition("a_test.go", 10, 1),
            "TestFail": TestPosition("a_test.go", 20, 1),
            "TestOther": TestPosition("b_test.go", 5, 1),
        },
        "c": {"TestC": TestPosition("c_test.go", 3, 1)},
    }


class TestEnrich:
    """Records pick up their declaration positions."""

    def test_resolved_record_gets_position(self, positions: PositionsByPackage) -> None:
        enriched = ReportAssembler.enrich([record("TestPass")], positions)

        assert enriched[0].file_name == "a_test.go"
        assert (enriched[0].line, enriched[0].column) == (10, 1)

    def test_subtest_resolves_through_parent(self, positions: PositionsByPackage) -> None:
        enriched = ReportAssembler.enrich([record("TestPass/empty_input")], positions)

        assert enriched[0].file_name == "a_test.go"
        assert enriched[0].line == 10

    def test_lookup_is_scoped_to_the_package(self, positions: PositionsByPackage) -> None:
        enriched = ReportAssembler.enrich([record("TestC", package="a")], positions)

        assert enriched[0].is_resolved is False

    def test_inputs_are_not_mutated(self, positions: PositionsByPackage) -> None:
        original = record("TestPass", output=["x"])
        enriched = ReportAssembler.enrich([original], positions)

        enriched[0].output.append("y")
        assert original.file_name == ""
        assert original.output == ["x"]


class TestPackageStatus:
    """Majority rule over a package's tests."""

    def test_more_failures_than_passes_fails(self) -> None:
        records = [record("A", passed=True), record("B"), record("C")]
        assert ReportAssembler.package_status(records) is TestStatus.FAILED

    def test_tie_passes(self) -> None:
        records = [record("A", passed=True), record("B")]
        assert ReportAssembler.package_status(records) is TestStatus.PASSED

    def test_skipped_tests_count_as_failures(self) -> None:
        records = [record("A", passed=True), record("B", skipped=True), record("C", skipped=True)]
        assert ReportAssembler.package_status(records) is TestStatus.FAILED

    def test_one_pass_one_skip_ties_to_passed(self) -> None:
        records = [record("A", passed=True), record("B", skipped=True)]
        assert ReportAssembler.package_status(records) is TestStatus.PASSED

    def test_single_failure_fails(self) -> None:
        assert ReportAssembler.package_status([record("A")]) is TestStatus.FAILED


class TestAssemble:
    """End-to-end document assembly."""

    def test_every_record_yields_a_suite_and_a_case_exec(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [record("TestPass", passed=True), record("TestFail"), record("TestC", package="c", passed=True)]

        discovery, execution = assembler.assemble(records, positions)

        assert [s.label for s in discovery.test_suites] == ["TestFail", "TestPass", "TestC"]
        assert [s.id for s in discovery.test_suites] == [c.id for c in execution.test_case]
        assert discovery.test_suites[0].id == Identifiers.of("TestFail")

    def test_case_exec_status_duration_and_failure_message(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestFail", elapsed=0.5, output=["=== RUN   TestFail\n", "    boom\n"]),
            record("TestPass", passed=True, elapsed=0.25, output=["--- PASS: TestPass (0.25s)"]),
        ]

        _, execution = assembler.assemble(records, positions)
        by_id = {c.id: c for c in execution.test_case}

        failed = by_id[Identifiers.of("TestFail")]
        assert failed.status is TestStatus.FAILED
        assert failed.duration == 0.5
        assert failed.failure_msg == "=== RUN   TestFail\n    boom\n"

        passed = by_id[Identifiers.of("TestPass")]
        assert passed.status is TestStatus.PASSED
        assert passed.failure_msg == ""

    def test_skipped_tests_are_reported_as_failed(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestPass", passed=True),
            record("TestFail", skipped=True),
            record("TestOther", skipped=True),
        ]

        _, execution = assembler.assemble(records, positions)

        assert [c.status.value for c in execution.test_case] == ["failed", "failed", "passed"]
        assert {s.status for s in execution.test_suite} == {TestStatus.FAILED}

    def test_one_test_case_per_file_of_each_package(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestPass", passed=True),
            record("TestFail"),
            record("TestOther", passed=True),
            record("TestC", package="c", passed=True),
        ]

        discovery, execution = assembler.assemble(records, positions)

        assert [(c.package, c.label) for c in discovery.test_cases] == [
            ("a", "a_test.go"),
            ("a", "b_test.go"),
            ("c", "c_test.go"),
        ]
        assert [c.id for c in discovery.test_cases] == [s.id for s in execution.test_suite]
        assert discovery.test_cases[0].id == Identifiers.for_file("a_test.go")

    def test_exec_test_suites_share_ids_with_discovery_test_cases(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [record("TestPass", passed=True), record("TestC", package="c")]

        discovery, execution = assembler.assemble(records, positions)

        file_ids = [Identifiers.for_file("a_test.go"), Identifiers.for_file("c_test.go")]
        assert [s.id for s in execution.test_suite] == file_ids
        assert [c.id for c in discovery.test_cases] == file_ids
        assert not {s.id for s in execution.test_suite} & {s.id for s in discovery.test_suites}

    def test_test_case_lists_every_suite_of_its_package(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestPass", passed=True),
            record("TestOther", passed=True),
            record("TestC", package="c", passed=True),
        ]

        discovery, _ = assembler.assemble(records, positions)
        a_ids = {Identifiers.of("TestPass"), Identifiers.of("TestOther")}

        for case in discovery.test_cases:
            if case.package == "a":
                assert set(case.test_suites) == a_ids
            else:
                assert case.test_suites == (Identifiers.of("TestC"),)

    def test_suite_exec_aggregates_its_file(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestPass", passed=True, elapsed=0.25),
            record("TestFail", elapsed=0.5),
            record("TestOther", passed=True, elapsed=1.0),
        ]

        _, execution = assembler.assemble(records, positions)
        a_file, b_file = execution.test_suite

        assert a_file.num_tests == 2
        assert a_file.duration == pytest.approx(0.75)
        assert a_file.failure_msg == "1 of 2 tests failed"
        assert b_file.num_tests == 1
        assert b_file.failure_msg == ""
        # package a: 2 passed, 1 failed
        assert a_file.status is TestStatus.PASSED
        assert b_file.status is TestStatus.PASSED

    def test_one_pass_one_fail_in_a_package_ties_to_passed(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [record("TestPass", passed=True), record("TestFail")]

        _, execution = assembler.assemble(records, positions)

        assert [s.status for s in execution.test_suite] == [TestStatus.PASSED]

    def test_failing_majority_fails_every_file_of_the_package(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [record("TestPass"), record("TestFail"), record("TestOther", passed=True)]

        _, execution = assembler.assemble(records, positions)

        assert {s.status for s in execution.test_suite} == {TestStatus.FAILED}

    def test_unresolved_tests_have_no_file_grouping(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [record("TestPass", passed=True), record("ExampleHello", passed=True)]

        discovery, execution = assembler.assemble(records, positions)

        assert len(discovery.test_suites) == 2
        assert len(execution.test_case) == 2
        assert len(discovery.test_cases) == 1
        assert Identifiers.of("ExampleHello") in discovery.test_cases[0].test_suites
        assert execution.test_suite[0].num_tests == 1

    def test_no_positions_still_lists_tests(self, assembler: ReportAssembler) -> None:
        discovery, execution = assembler.assemble([record("TestA", passed=True)], {})

        assert len(discovery.test_suites) == 1
        assert discovery.test_cases == ()
        assert execution.test_suite == ()

    def test_same_test_name_in_two_packages_shares_an_identifier(
        self, assembler: ReportAssembler
    ) -> None:
        records = [record("TestA", package="x"), record("TestA", package="y")]

        discovery, _ = assembler.assemble(records, {})

        assert discovery.test_suites[0].id == discovery.test_suites[1].id
        assert [s.package for s in discovery.test_suites] == ["x", "y"]

    def test_output_is_independent_of_input_order(
        self, assembler: ReportAssembler, positions: PositionsByPackage
    ) -> None:
        records = [
            record("TestPass", passed=True),
            record("TestFail"),
            record("TestOther", passed=True),
            record("TestC", package="c"),
        ]

        forward = assembler.assemble(records, positions)
        backward = assembler.assemble(list(reversed(records)), positions)

        assert forward[0].to_dict() == backward[0].to_dict()
        assert forward[1].to_dict() == backward[1].to_dict()


class TestWireLayout:
    """Documents serialize to the layout the report viewer reads."""

    def test_discovery_layout(self, assembler: ReportAssembler, positions: PositionsByPackage) -> None:
        discovery, _ = assembler.assemble([record("TestPass", passed=True)], positions)

        assert discovery.to_dict() == {
            "testCases": [
                {
                    "id": Identifiers.of("a_test.go"),
                    "label": "a_test.go",
                    "pkg": "a",
                    "test-suites": [Identifiers.of("TestPass")],
                }
            ],
            "testSuites": [
                {"id": Identifiers.of("TestPass"), "label": "TestPass", "pkg": "a"}
            ],
        }

    def test_execution_layout(self, assembler: ReportAssembler, positions: PositionsByPackage) -> None:
        _, execution = assembler.assemble([record("TestPass", passed=True, elapsed=0.01)], positions)

        assert execution.to_dict() == {
            "testCase": [
                {
                    "id": Identifiers.of("TestPass"),
                    "status": "passed",
                    "duration": 0.01,
                    "failureMsg": "",
                }
            ],
            "testSuite": [
                {
                    "id": Identifiers.of("a_test.go"),
                    "status": "passed",
                    "duration": 0.01,
                    "failureMsg": "",
                    "pkg": "a",
                    "numTests": 1,
                }
            ],
        }
