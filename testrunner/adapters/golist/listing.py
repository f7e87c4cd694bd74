"""Pre-generated ``go list -json`` listing adapter.

Implements PackageListingPort over a file produced by e.g.
``go list -json ./... > packages.json``: a sequence of JSON objects
separated only by whitespace.
"""

import asyncio
import json
import logging
from pathlib import Path

from testrunner.core.errors import PackageDescriptionError
from testrunner.core.models import PackageMetadata
from testrunner.core.ports import PackageListingPort

from .description import parse_package_description

logger = logging.getLogger(__name__)


def decode_listing(text: str) -> list[PackageMetadata]:
    """Decode every package description in a concatenated JSON listing.

    Raises:
        PackageDescriptionError: If the text is not a sequence of valid
            package description objects.
    """
    decoder = json.JSONDecoder()
    packages: list[PackageMetadata] = []
    index = 0
    length = len(text)
    while True:
        while index < length and text[index].isspace():
            index += 1
        if index >= length:
            break
        try:
            payload, index = decoder.raw_decode(text, index)
        except json.JSONDecodeError as e:
            raise PackageDescriptionError(
                f"invalid JSON in listing at line {e.lineno} column {e.colno}: {e.msg}"
            ) from e
        packages.append(parse_package_description(payload))
    return packages


class GoListingFileAdapter(PackageListingPort):
    """Reads package descriptions from a listing file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> list[PackageMetadata]:
        """Read and decode the whole listing file."""
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read listing file {self.path}: {e}")
            raise

        try:
            packages = decode_listing(text)
        except PackageDescriptionError as e:
            logger.error(f"Malformed listing file {self.path}: {e}")
            raise
        logger.debug(f"Loaded {len(packages)} package descriptions from {self.path}")
        return packages
