"""Go source inspector.

Implements SourceInspectorPort with a small lexical scanner that finds
top-level ``func`` declarations (functions and methods) without needing a
Go toolchain. Comments, string, rune and raw string literals are skipped,
and bracket nesting is tracked so that function literals inside bodies are
never reported.

Positions follow ``go/token`` conventions: 1-based line, 1-based byte
column of the ``func`` keyword.
"""

import logging
from pathlib import Path

from testrunner.core.errors import SourceParseError
from testrunner.core.ports import SourceInspectorPort

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_SPACE = " \t\r\f\ufeff"


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_char(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def _skip_space(source: str, index: int) -> int:
    while index < len(source) and source[index] in _SPACE:
        index += 1
    return index


def _declared_name(source: str, index: int) -> str | None:
    """Name declared by a ``func`` keyword ending just before ``index``.

    Returns None for a function literal (``func(...) {...}`` at the start of
    a statement), which has no name after its optional parameter list.
    """
    index = _skip_space(source, index)
    if index < len(source) and source[index] == "(":
        # method receiver
        depth = 0
        while index < len(source):
            ch = source[index]
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth -= 1
                if depth == 0:
                    index += 1
                    break
            elif ch == "\n":
                return None
            index += 1
        index = _skip_space(source, index)

    start = index
    while index < len(source) and _is_ident_char(source[index]):
        index += 1
    if start == index or not _is_ident_start(source[start]):
        return None
    name = source[start:index]

    index = _skip_space(source, index)
    if index < len(source) and source[index] in "([":
        return name
    return None


def scan_declarations(source: str, path: str = "<source>") -> list[tuple[str, int, int]]:
    """Find the top-level function declarations in Go source text.

    Args:
        source: File contents.
        path: Used in error messages only.

    Returns:
        ``(name, line, column)`` per declaration, in source order.

    Raises:
        SourceParseError: On unterminated comments or literals, or
            unbalanced brackets.
    """
    declarations: list[tuple[str, int, int]] = []
    stack: list[tuple[str, int]] = []
    length = len(source)
    index = 0
    line = 1
    line_start = 0
    at_statement_start = True

    def advance_lines(start: int, end: int) -> None:
        nonlocal line, line_start
        newlines = source.count("\n", start, end)
        if newlines:
            line += newlines
            line_start = source.rfind("\n", start, end) + 1

    while index < length:
        ch = source[index]

        if ch == "\n":
            line += 1
            index += 1
            line_start = index
            at_statement_start = True
            continue
        if ch in _SPACE:
            index += 1
            continue

        if source.startswith("//", index):
            end = source.find("\n", index)
            index = length if end == -1 else end
            continue

        if source.startswith("/*", index):
            end = source.find("*/", index + 2)
            if end == -1:
                raise SourceParseError(path, line, "comment not terminated")
            advance_lines(index, end)
            index = end + 2
            continue

        if ch == "`":
            end = source.find("`", index + 1)
            if end == -1:
                raise SourceParseError(path, line, "raw string literal not terminated")
            advance_lines(index, end)
            index = end + 1
            at_statement_start = False
            continue

        if ch in "\"'":
            scan = index + 1
            while scan < length and source[scan] != ch:
                if source[scan] == "\n":
                    break
                scan += 2 if source[scan] == "\\" else 1
            if scan >= length or source[scan] != ch:
                kind = "string" if ch == '"' else "rune"
                raise SourceParseError(path, line, f"{kind} literal not terminated")
            index = scan + 1
            at_statement_start = False
            continue

        if ch == ";":
            index += 1
            at_statement_start = not stack
            continue

        if ch in _OPENERS:
            stack.append((ch, line))
            index += 1
            at_statement_start = False
            continue

        if ch in _CLOSERS:
            if not stack or _OPENERS[stack[-1][0]] != ch:
                raise SourceParseError(path, line, f"unexpected {ch!r}")
            stack.pop()
            index += 1
            at_statement_start = False
            continue

        if _is_ident_start(ch):
            end = index + 1
            while end < length and _is_ident_char(source[end]):
                end += 1
            if source[index:end] == "func" and at_statement_start and not stack:
                name = _declared_name(source, end)
                if name is not None:
                    column = len(source[line_start:index].encode("utf-8")) + 1
                    declarations.append((name, line, column))
            index = end
            at_statement_start = False
            continue

        index += 1
        at_statement_start = False

    if stack:
        opener, opened_at = stack[-1]
        raise SourceParseError(path, opened_at, f"{opener!r} is never closed")
    return declarations


class GoSourceInspector(SourceInspectorPort):
    """Reads Go files from disk and scans them for declarations."""

    def resolve_positions(self, path: str) -> list[tuple[str, int, int]]:
        """Find the top-level function declarations in a Go source file."""
        try:
            source = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Test source {path} is not valid UTF-8")
            raise SourceParseError(path, 1, f"invalid UTF-8: {e.reason}") from e
        except OSError as e:
            logger.error(f"Failed to read test source {path}: {e}")
            raise

        try:
            declarations = scan_declarations(source, path)
        except SourceParseError as e:
            logger.error(f"Failed to scan test source: {e}")
            raise
        logger.debug(f"{path}: {len(declarations)} function declarations")
        return declarations
