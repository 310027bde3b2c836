"""
Booking state machine.

    pending ──► confirmed ──► completed
       │            │ └─────► no_show
       │            └───────► cancelled
       ├──────────────────► cancelled
       └──────────────────► expired

Transitions are applied as conditional updates (only if the current status is
still one of `sources_for(target)`), so whichever transition lands first wins
and a later one becomes a no-op.
"""
from django.db import models


class BookingStatus(models.TextChoices):
    PENDING   = 'pending',   'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    EXPIRED   = 'expired',   'Expired'
    NO_SHOW   = 'no_show',   'No Show'


# Statuses that occupy an interval on the calendar.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

TERMINAL_STATUSES = frozenset({
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
    BookingStatus.EXPIRED,
    BookingStatus.NO_SHOW,
})

TRANSITIONS = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.EXPIRED,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    }),
}


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def sources_for(target: str) -> frozenset:
    """All statuses from which `target` may be entered."""
    return frozenset(src for src, targets in TRANSITIONS.items() if target in targets)


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES
