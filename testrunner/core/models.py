"""Domain models for the test-runner report generator.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class TestAction(Enum):
    """Actions emitted by ``go test -json``.

    Only PASS, FAIL and SKIP change the outcome of a test; every other
    action contributes output at most.
    """

    __test__ = False

    RUN = "run"
    PAUSE = "pause"
    CONT = "cont"
    PASS = "pass"
    BENCH = "bench"
    FAIL = "fail"
    OUTPUT = "output"
    SKIP = "skip"
    START = "start"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "TestAction":
        """Map a raw action string to a TestAction, falling back to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def is_terminal(self) -> bool:
        """True for the actions that settle a test's outcome."""
        return self in (TestAction.PASS, TestAction.FAIL, TestAction.SKIP)


@dataclass(frozen=True)
class TestEvent:
    """A single line of ``go test -json`` output."""

    __test__ = False

    time: str
    test: str
    action: str
    package: str
    elapsed: float
    output: str

    @property
    def kind(self) -> TestAction:
        return TestAction.parse(self.action)

    @property
    def is_test_event(self) -> bool:
        """Package-level events carry no test name."""
        return bool(self.test)


class TestStatus(Enum):
    """Outcome reported for a test in the execution document."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"


@dataclass
class TestRecord:
    """Aggregated state for one ``(package, name)`` test.

    Mutable while events are being ingested; the resolved position fields
    are filled in by the assembler on a copy.
    """

    __test__ = False

    name: str
    package: str
    elapsed: float = 0.0
    output: list[str] = field(default_factory=list)
    passed: bool = False
    skipped: bool = False
    file_name: str = ""
    line: int = 0
    column: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return (self.package, self.name)

    @property
    def status(self) -> TestStatus:
        """Only a pass counts as passing; a skipped test is reported as failed."""
        return TestStatus.PASSED if self.passed else TestStatus.FAILED

    @property
    def function_name(self) -> str:
        """Top-level test function that declares this test.

        Subtests are reported as ``TestParent/case``; only the parent has a
        declaration in source.
        """
        return self.name.split("/", 1)[0]

    @property
    def is_resolved(self) -> bool:
        return bool(self.file_name)


@dataclass(frozen=True)
class ModuleDescriptor:
    """The module a package belongs to, as reported by ``go list``."""

    path: str
    directory: str
    main: bool


@dataclass(frozen=True)
class PackageMetadata:
    """Description of one package, as reported by ``go list -json``."""

    directory: str
    import_path: str
    name: str
    source_files: tuple[str, ...] = ()
    test_files: tuple[str, ...] = ()
    external_test_files: tuple[str, ...] = ()
    module: ModuleDescriptor | None = None

    @property
    def all_test_files(self) -> tuple[str, ...]:
        """In-package test files followed by external (``_test`` package) ones."""
        return self.test_files + self.external_test_files


@dataclass(frozen=True)
class TestPosition:
    """Where a test function is declared. Line and column are 1-based."""

    __test__ = False

    file_name: str
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate position invariants on creation."""
        if not self.file_name:
            raise ValueError("file_name must be a non-empty string")
        if self.line < 1 or self.column < 1:
            raise ValueError(
                f"line and column must be >= 1, got {self.line}:{self.column}"
            )


# function name -> declaration position, for one package
PackagePositions: TypeAlias = dict[str, TestPosition]

# package import path -> positions of its test functions
PositionsByPackage: TypeAlias = dict[str, PackagePositions]


# ============================================================================
# Report documents
# ============================================================================


@dataclass(frozen=True)
class TestSuite:
    """Discovery entry for a single test."""

    __test__ = False

    id: str
    label: str
    package: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "pkg": self.package}


@dataclass(frozen=True)
class TestCases:
    """Discovery entry for a test file of a package."""

    __test__ = False

    id: str
    label: str
    package: str
    test_suites: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "pkg": self.package,
            "test-suites": list(self.test_suites),
        }


@dataclass(frozen=True)
class TestCaseExec:
    """Execution entry for a single test."""

    __test__ = False

    id: str
    status: TestStatus
    duration: float
    failure_msg: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "duration": self.duration,
            "failureMsg": self.failure_msg,
        }


@dataclass(frozen=True)
class TestSuiteExec:
    """Execution entry for a file/package grouping."""

    __test__ = False

    id: str
    status: TestStatus
    duration: float
    package: str
    num_tests: int
    failure_msg: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "duration": self.duration,
            "failureMsg": self.failure_msg,
            "pkg": self.package,
            "numTests": self.num_tests,
        }


@dataclass(frozen=True)
class DiscoveryDocument:
    """Catalog of known tests and test files, independent of outcome."""

    test_cases: tuple[TestCases, ...]
    test_suites: tuple[TestSuite, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "testCases": [case.to_dict() for case in self.test_cases],
            "testSuites": [suite.to_dict() for suite in self.test_suites],
        }


@dataclass(frozen=True)
class ExecutionDocument:
    """Outcomes for tests and for file/package groupings."""

    test_case: tuple[TestCaseExec, ...]
    test_suite: tuple[TestSuiteExec, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "testCase": [case.to_dict() for case in self.test_case],
            "testSuite": [suite.to_dict() for suite in self.test_suite],
        }


@dataclass(frozen=True)
class RunSummary:
    """Result of one report generation run.

    Skipped tests are reported as failed, so ``skipped`` counts a subset of
    ``failed``.
    """

    tests: int
    packages: int
    passed: int
    failed: int
    skipped: int
    ingest_seconds: float

    def __post_init__(self) -> None:
        """Validate summary invariants on creation."""
        if self.passed + self.failed != self.tests:
            raise ValueError(
                f"outcome counts ({self.passed}+{self.failed}) "
                f"do not add up to {self.tests} tests"
            )
        if not 0 <= self.skipped <= self.failed:
            raise ValueError(
                f"skipped count {self.skipped} must be between 0 and {self.failed} failed"
            )
