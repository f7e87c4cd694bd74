"""Command-line interface for the report generator."""
