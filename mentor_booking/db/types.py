"""Custom column types."""

import json
from collections.abc import Iterable
from typing import Any

from sqlalchemy import Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from mentor_booking.booking.errors import DataIntegrityError


def normalize_tags(tags: Iterable[str]) -> frozenset[str]:
    """Validate and normalise a collection of tags.

    Tags are stripped of surrounding whitespace; duplicates collapse.

    Raises:
        ValueError: If the collection is a bare string or holds a non-string
            or empty tag
    """
    if isinstance(tags, (str, bytes)):
        raise ValueError("Tags must be a collection of strings, not a single string")

    normalized = set()
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError(f"Tag must be a string, got {type(tag).__name__}")
        stripped = tag.strip()
        if not stripped:
            raise ValueError("Tags must not be empty")
        normalized.add(stripped)
    return frozenset(normalized)


class TagSet(TypeDecorator):
    """A set of string tags stored as a sorted JSON array in a text column.

    Validation happens at the store boundary: writes are normalised with
    ``normalize_tags`` and reads that cannot be decoded into a set of strings
    raise ``DataIntegrityError`` instead of being treated as empty.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return json.dumps(sorted(normalize_tags(value)))

    def process_result_value(self, value: Any, dialect: Dialect) -> frozenset[str] | None:
        if value is None:
            return None

        try:
            decoded = json.loads(value)
        except (TypeError, ValueError) as e:
            raise DataIntegrityError(f"Stored tag set is not valid JSON: {value!r}") from e

        if not isinstance(decoded, list):
            raise DataIntegrityError(f"Stored tag set is not a JSON array: {value!r}")

        try:
            return normalize_tags(decoded)
        except ValueError as e:
            raise DataIntegrityError(f"Stored tag set is malformed: {e}") from e
