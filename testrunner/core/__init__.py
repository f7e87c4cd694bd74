"""Core domain logic for the test-runner report generator.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .models import (
    DiscoveryDocument,
    ExecutionDocument,
    ModuleDescriptor,
    PackageMetadata,
    PackagePositions,
    PositionsByPackage,
    RunSummary,
    TestAction,
    TestCaseExec,
    TestCases,
    TestEvent,
    TestPosition,
    TestRecord,
    TestStatus,
    TestSuite,
    TestSuiteExec,
)

__all__ = [
    "DiscoveryDocument",
    "ExecutionDocument",
    "ModuleDescriptor",
    "PackageMetadata",
    "PackagePositions",
    "PositionsByPackage",
    "RunSummary",
    "TestAction",
    "TestCaseExec",
    "TestCases",
    "TestEvent",
    "TestPosition",
    "TestRecord",
    "TestStatus",
    "TestSuite",
    "TestSuiteExec",
]
