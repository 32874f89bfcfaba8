"""Lifecycle states of a single booking attempt."""

from enum import Enum


class BookingState(str, Enum):
    """State of one booking attempt.

    An attempt moves forward through the non-terminal states in order and
    ends in exactly one terminal state. Nothing between them is visible to
    other callers: either both ledger rows are committed or neither is.
    """

    VALIDATING = "validating"
    CHECKING_ELIGIBILITY = "checking_eligibility"
    CHECKING_AVAILABILITY = "checking_availability"
    PERSISTING = "persisting"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


# Allowed forward transitions
TRANSITIONS: dict[BookingState, frozenset[BookingState]] = {
    BookingState.VALIDATING: frozenset(
        {BookingState.CHECKING_ELIGIBILITY, BookingState.ROLLED_BACK}
    ),
    BookingState.CHECKING_ELIGIBILITY: frozenset(
        {BookingState.CHECKING_AVAILABILITY, BookingState.ROLLED_BACK}
    ),
    BookingState.CHECKING_AVAILABILITY: frozenset(
        {BookingState.PERSISTING, BookingState.ROLLED_BACK}
    ),
    BookingState.PERSISTING: frozenset(
        {BookingState.COMMITTED, BookingState.ROLLED_BACK}
    ),
    BookingState.COMMITTED: frozenset(),
    BookingState.ROLLED_BACK: frozenset(),
}


def can_transition(current: BookingState, target: BookingState) -> bool:
    """Check whether an attempt may move from `current` to `target`."""
    return target in TRANSITIONS[current]
