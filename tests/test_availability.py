from dataclasses import replace
from datetime import date, time, timedelta

import pytest

from apps.bookings.domain import DateRange, ServiceInfo
from apps.bookings.exceptions import InvalidService, ValidationError

from .conftest import BUSINESS_ID, MONDAY, SERVICE_ID, TUESDAY, at

WEEK = DateRange(MONDAY, MONDAY + timedelta(days=6))


def test_weekdays_are_available(calculator):
    dates = calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)
    assert dates == {MONDAY + timedelta(days=i) for i in range(5)}


def test_closure_exception_removes_date(calculator, hours):
    hours.close_on(BUSINESS_ID, TUESDAY)
    assert TUESDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_special_hours_can_open_a_weekend_day(calculator, hours):
    saturday = MONDAY + timedelta(days=5)
    hours.special_hours(BUSINESS_ID, saturday, time(10, 0), time(12, 0))
    assert saturday in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_fully_booked_date_is_excluded(calculator, scheduler, hours):
    hours.special_hours(BUSINESS_ID, TUESDAY, time(9, 0), time(11, 0))
    scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(TUESDAY, 9))
    # 10:00 would sit inside the 15-minute buffer after the 09:00 booking.
    assert TUESDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_partially_booked_date_stays_available(calculator, confirmed_booking):
    assert TUESDAY in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_free_gap_must_fit_a_grid_aligned_start(calculator, scheduler, hours, catalog, service, business):
    hours.special_hours(BUSINESS_ID, TUESDAY, time(9, 0), time(12, 0))
    catalog.add(ServiceInfo(id='short', business_id=BUSINESS_ID, duration_minutes=15, buffer_minutes=0))
    catalog.add(replace(service, buffer_minutes=0))
    for start in (at(TUESDAY, 9, 15), at(TUESDAY, 10, 45), at(TUESDAY, 11, 45)):
        scheduler.reserve(BUSINESS_ID, 'short', 'cust-1', start)

    # 09:30–10:45 is 75 minutes long, but the hourly grid only offers 10:00.
    assert TUESDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)

    hours.add_business(replace(business, slot_step_minutes=15))
    assert TUESDAY in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_expired_hold_does_not_block(calculator, scheduler, hours, clock):
    hours.special_hours(BUSINESS_ID, TUESDAY, time(9, 0), time(10, 0))
    scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(TUESDAY, 9))
    assert TUESDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)

    clock.advance(minutes=16)
    assert TUESDAY in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_past_dates_are_excluded(calculator):
    dates = calculator.get_available_dates(
        BUSINESS_ID, SERVICE_ID, DateRange(date(2025, 3, 3), date(2025, 3, 11)),
    )
    assert dates == {MONDAY, TUESDAY}


def test_today_is_excluded_once_nothing_fits(calculator, clock):
    clock.advance(hours=8, minutes=30)  # 16:30 on Monday
    assert MONDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)


def test_dates_beyond_horizon_are_excluded(calculator):
    dates = calculator.get_available_dates(
        BUSINESS_ID, SERVICE_ID, DateRange(date(2025, 5, 1), date(2025, 5, 31)),
    )
    # Horizon ends Friday 9 May.
    assert max(dates) == date(2025, 5, 9)
    assert len(dates) == 7


def test_range_entirely_in_the_past_is_empty(calculator):
    assert calculator.get_available_dates(
        BUSINESS_ID, SERVICE_ID, DateRange(date(2025, 1, 1), date(2025, 1, 31)),
    ) == set()


def test_invalid_service(calculator):
    with pytest.raises(InvalidService):
        calculator.get_available_dates(BUSINESS_ID, 'missing', WEEK)


def test_unknown_business(calculator):
    with pytest.raises(ValidationError) as exc:
        calculator.get_available_dates('nope', SERVICE_ID, WEEK)
    assert exc.value.field == 'business_id'


class TestDateRange:
    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            DateRange(TUESDAY, MONDAY)

    def test_span_longer_than_a_year(self):
        with pytest.raises(ValidationError):
            DateRange(MONDAY, MONDAY + timedelta(days=366))

    def test_span_of_366_days_is_allowed(self):
        assert len(list(DateRange(MONDAY, MONDAY + timedelta(days=365)).days())) == 366

    def test_single_day(self):
        assert list(DateRange(MONDAY, MONDAY).days()) == [MONDAY]
