"""Test suite for the test-runner report generator.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - Tests against real files and subprocesses in temporary directories
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory implementations of PackageQueryPort, ReportWriterPort, etc.
   - Used by core unit tests
"""
