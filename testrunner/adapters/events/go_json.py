"""Decoder for ``go test -json`` output.

Turns a line-oriented text stream into a lazy sequence of TestEvents.
Decoding stops at the first malformed line.
"""

import json
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from testrunner.core.errors import EventDecodeError
from testrunner.core.models import TestEvent

logger = logging.getLogger(__name__)

_STRING_FIELDS = {
    "Time": "time",
    "Test": "test",
    "Action": "action",
    "Package": "package",
    "Output": "output",
}


def parse_event(payload: Any, line_number: int = 0) -> TestEvent:
    """Build a TestEvent from one decoded JSON value.

    Missing keys and JSON nulls take the zero value of the field.

    Raises:
        EventDecodeError: If the value is not an object or a field has
            the wrong type.
    """
    if not isinstance(payload, dict):
        raise EventDecodeError(
            line_number, f"expected a JSON object, got {type(payload).__name__}"
        )

    values: dict[str, Any] = {}
    for wire_name, attr in _STRING_FIELDS.items():
        value = payload.get(wire_name)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise EventDecodeError(
                line_number,
                f"field {wire_name!r} must be a string, got {type(value).__name__}",
            )
        values[attr] = value

    elapsed = payload.get("Elapsed")
    if elapsed is None:
        elapsed = 0.0
    elif isinstance(elapsed, bool) or not isinstance(elapsed, (int, float)):
        raise EventDecodeError(
            line_number,
            f"field 'Elapsed' must be a number, got {type(elapsed).__name__}",
        )

    return TestEvent(elapsed=float(elapsed), **values)


def decode_line(
    raw: str | bytes,
    line_number: int,
    echo: Callable[[str], None] | None = None,
) -> TestEvent:
    """Decode a single input line.

    Bytes are decoded as UTF-8 and the line ending is stripped before the
    line is echoed and parsed.

    Raises:
        EventDecodeError: If the line is not valid UTF-8, not JSON, or not
            a valid event.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EventDecodeError(line_number, f"invalid UTF-8: {e}") from e
    line = raw.rstrip("\r\n")

    if echo is not None:
        echo(line)

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        logger.error(f"Malformed test event on line {line_number}: {line[:200]}")
        raise EventDecodeError(line_number, f"invalid JSON: {e.msg}") from e

    return parse_event(payload, line_number)


def iter_events(
    lines: Iterable[str | bytes],
    echo: Callable[[str], None] | None = None,
) -> Iterator[TestEvent]:
    """Lazily decode one TestEvent per input line.

    Args:
        lines: Raw lines, with or without their trailing newline.
        echo: Called with every raw line (newline stripped) before it is
            decoded, for verbose mode.

    Yields:
        One TestEvent per line, in input order.

    Raises:
        EventDecodeError: On the first line that is not a valid event.
    """
    for line_number, raw in enumerate(lines, start=1):
        yield decode_line(raw, line_number, echo)
