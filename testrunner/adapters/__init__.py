"""External adapters for the test-runner report generator.

This package contains all external I/O (stdin decoding, subprocesses,
source files, report files) and provides implementations of the core
port interfaces.

Adapter Organization:

- events/: Decoding of the ``go test -json`` event stream
- golist/: Package descriptions from ``go list -json`` (subprocess or listing file)
- source/: Scanning test source files for function declarations
- report/: Writing the discovery and execution documents
- cli/: Command-line parsing and run preconditions
"""
