"""Unit tests for domain model invariants."""

import pytest

from testrunner.core.models import (
    PackageMetadata,
    RunSummary,
    TestAction,
    TestPosition,
    TestRecord,
    TestStatus,
)


class TestTestAction:
    def test_known_actions_parse(self) -> None:
        assert TestAction.parse("pass") is TestAction.PASS
        assert TestAction.parse("output") is TestAction.OUTPUT

    def test_unknown_action_is_other(self) -> None:
        assert TestAction.parse("build-output") is TestAction.OTHER
        assert TestAction.parse("") is TestAction.OTHER

    def test_terminal_actions(self) -> None:
        terminal = {a for a in TestAction if a.is_terminal}
        assert terminal == {TestAction.PASS, TestAction.FAIL, TestAction.SKIP}


class TestTestRecord:
    def test_function_name_of_subtest(self) -> None:
        assert TestRecord(name="TestParse/empty/nested", package="p").function_name == "TestParse"

    def test_function_name_of_top_level_test(self) -> None:
        assert TestRecord(name="TestParse", package="p").function_name == "TestParse"

    def test_skipped_test_is_failed(self) -> None:
        record = TestRecord(name="T", package="p", skipped=True)
        assert record.status is TestStatus.FAILED

    def test_status_follows_passed_flag_alone(self) -> None:
        record = TestRecord(name="T", package="p", passed=True, skipped=True)
        assert record.status is TestStatus.PASSED

    def test_output_lists_are_not_shared(self) -> None:
        first = TestRecord(name="A", package="p")
        second = TestRecord(name="B", package="p")
        first.output.append("x")
        assert second.output == []


class TestTestPosition:
    def test_valid_position(self) -> None:
        position = TestPosition("a_test.go", 1, 1)
        assert position.file_name == "a_test.go"

    @pytest.mark.parametrize("line, column", [(0, 1), (1, 0), (-3, 2)])
    def test_positions_are_one_based(self, line: int, column: int) -> None:
        with pytest.raises(ValueError):
            TestPosition("a_test.go", line, column)

    def test_file_name_required(self) -> None:
        with pytest.raises(ValueError):
            TestPosition("", 1, 1)


class TestPackageMetadata:
    def test_all_test_files_lists_internal_then_external(self) -> None:
        metadata = PackageMetadata(
            directory="/src/p",
            import_path="example.com/p",
            name="p",
            test_files=("p_test.go",),
            external_test_files=("example_test.go",),
        )
        assert metadata.all_test_files == ("p_test.go", "example_test.go")


class TestRunSummary:
    def test_counts_must_add_up(self) -> None:
        with pytest.raises(ValueError):
            RunSummary(tests=3, packages=1, passed=1, failed=1, skipped=0, ingest_seconds=0.0)

    def test_consistent_summary(self) -> None:
        summary = RunSummary(tests=2, packages=1, passed=1, failed=1, skipped=1, ingest_seconds=0.1)
        assert summary.tests == 2

    def test_skipped_tests_are_counted_among_failures(self) -> None:
        with pytest.raises(ValueError):
            RunSummary(tests=2, packages=1, passed=1, failed=0, skipped=1, ingest_seconds=0.0)
