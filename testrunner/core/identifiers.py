"""Content-derived identifiers for report entries.

The discovery and execution documents reference each other by these
identifiers, so the same name must always produce the same id across runs.
"""

import hashlib


class Identifiers:
    """Produces stable identifiers from names.

    Pure functions over strings, no external dependencies.
    All methods are static as the class carries no state.
    """

    @staticmethod
    def of(text: str) -> str:
        """MD5 hex digest of the UTF-8 encoded text.

        Not used for anything security related; collisions between distinct
        names are negligible at report scale.
        """
        return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()

    @staticmethod
    def for_test(test_name: str) -> str:
        """Identifier shared by a test's TestSuite and TestCaseExec entries.

        Only the test name is hashed, so same-named tests in different
        packages share an identifier.
        """
        return Identifiers.of(test_name)

    @staticmethod
    def for_file(file_name: str) -> str:
        """Identifier shared by a file's TestCases and TestSuiteExec entries."""
        return Identifiers.of(file_name)
