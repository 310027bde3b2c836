import pytest

from apps.bookings.lifecycle import (
    ACTIVE_STATUSES,
    BookingStatus,
    TERMINAL_STATUSES,
    can_transition,
    is_terminal,
    sources_for,
)


@pytest.mark.parametrize('current,target', [
    (BookingStatus.PENDING, BookingStatus.CONFIRMED),
    (BookingStatus.PENDING, BookingStatus.CANCELLED),
    (BookingStatus.PENDING, BookingStatus.EXPIRED),
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    (BookingStatus.CONFIRMED, BookingStatus.NO_SHOW),
])
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize('current,target', [
    (BookingStatus.PENDING, BookingStatus.COMPLETED),
    (BookingStatus.PENDING, BookingStatus.NO_SHOW),
    (BookingStatus.CONFIRMED, BookingStatus.EXPIRED),
    (BookingStatus.CONFIRMED, BookingStatus.PENDING),
    (BookingStatus.EXPIRED, BookingStatus.CONFIRMED),
    (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
    (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
])
def test_forbidden_transitions(current, target):
    assert not can_transition(current, target)


def test_terminal_states_have_no_exits():
    for status in TERMINAL_STATUSES:
        assert is_terminal(status)
        assert not any(can_transition(status, target) for target in BookingStatus.values)


def test_only_pending_and_confirmed_hold_the_calendar():
    assert ACTIVE_STATUSES == {BookingStatus.PENDING, BookingStatus.CONFIRMED}


def test_sources_for():
    assert sources_for(BookingStatus.CANCELLED) == {BookingStatus.PENDING, BookingStatus.CONFIRMED}
    assert sources_for(BookingStatus.CONFIRMED) == {BookingStatus.PENDING}
    assert sources_for(BookingStatus.EXPIRED) == {BookingStatus.PENDING}
    assert sources_for(BookingStatus.PENDING) == frozenset()
