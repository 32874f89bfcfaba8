"""Mentor/student matching rules."""

import logging
from collections.abc import Set

from mentor_booking.booking.errors import DataIntegrityError

logger = logging.getLogger(__name__)


def is_eligible(mentor_expertise: Set[str], student_interest: str) -> bool:
    """Check whether a mentor can take a student.

    A mentor is eligible iff the student's single interest tag is one of the
    mentor's expertise tags. Matching is exact.

    Args:
        mentor_expertise: Mentor's expertise tags
        student_interest: Student's area of interest

    Returns:
        True if the interest is covered by the expertise set

    Raises:
        DataIntegrityError: If the expertise is not a set of string tags.
            Corrupt data is reported, never treated as "no expertise".

    Examples:
        >>> is_eligible(frozenset({"math", "physics"}), "math")
        True
        >>> is_eligible(frozenset({"math", "physics"}), "art")
        False
    """
    # Lists or raw strings would silently change the meaning of `in`
    if not isinstance(mentor_expertise, Set):
        logger.error(
            f"Mentor expertise has unexpected type {type(mentor_expertise).__name__}"
        )
        raise DataIntegrityError("Mentor expertise is not a set of tags")

    if not all(isinstance(tag, str) for tag in mentor_expertise):
        logger.error("Mentor expertise contains non-string tags")
        raise DataIntegrityError("Mentor expertise contains non-string tags")

    return student_interest in mentor_expertise
