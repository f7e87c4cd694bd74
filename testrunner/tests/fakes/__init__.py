"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakePackageQueryPort: Canned package descriptions, optional failures and delays
- FakePackageListingPort: Canned listing contents
- FakeSourceInspector: Canned declarations per source path
- FakeReportWriterPort: Captured documents for assertion
"""

from .inspector import FakeSourceInspector
from .packages import FakePackageListingPort, FakePackageQueryPort
from .writer import FakeReportWriterPort

__all__ = [
    "FakePackageListingPort",
    "FakePackageQueryPort",
    "FakeReportWriterPort",
    "FakeSourceInspector",
]
