"""Go test report generator.

Reads ``go test -json`` output, resolves where every test function is
declared, and writes a discovery report and an execution report.
"""

__version__ = "1.0.0"
