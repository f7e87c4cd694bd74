"""Exceptions raised across the report pipeline.

Each one subclasses the builtin that best describes it, so callers can
catch ``ValueError`` or ``RuntimeError`` without importing this module.
"""


class EventDecodeError(ValueError):
    """A line of test output could not be decoded as an event."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")


class PackageDescriptionError(ValueError):
    """A package description record is missing fields or has the wrong shape."""


class PackageQueryError(RuntimeError):
    """The package query tool could not describe a package."""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"failed to describe package {package!r}: {reason}")


class SourceParseError(ValueError):
    """A test source file could not be scanned for declarations."""

    def __init__(self, path: str, line: int, reason: str):
        self.path = path
        self.line = line
        self.reason = reason
        super().__init__(f"{path}:{line}: {reason}")


class PreconditionError(RuntimeError):
    """The environment is not fit for a run (e.g. stdin is not a pipe)."""
