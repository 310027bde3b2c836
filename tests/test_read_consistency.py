"""
Date listing and slot listing must tell the same story: a date is offered
exactly when it has a bookable slot, and repeated reads agree.
"""
from dataclasses import replace
from datetime import datetime, time, timedelta, timezone as dt_timezone

import pytest

from apps.bookings.domain import DateRange, ServiceInfo

from .conftest import BUSINESS_ID, MONDAY, SATURDAY, SERVICE_ID, TUESDAY, at

WEEK = DateRange(MONDAY, MONDAY + timedelta(days=6))
THURSDAY = MONDAY + timedelta(days=3)
FRIDAY = MONDAY + timedelta(days=4)


def empty_calendar(scheduler, hours, catalog, business, clock):
    pass


def one_confirmed_booking(scheduler, hours, catalog, business, clock):
    booking = scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(TUESDAY, 10))
    scheduler.confirm(booking.id)


def tuesday_fully_booked(scheduler, hours, catalog, business, clock):
    for hour in (9, 11, 13, 15):
        scheduler.reserve(BUSINESS_ID, SERVICE_ID, f'cust-{hour}', at(TUESDAY, hour))


def late_in_the_day(scheduler, hours, catalog, business, clock):
    clock.now = datetime(2025, 3, 10, 16, 30, tzinfo=dt_timezone.utc)


def closures_and_special_hours(scheduler, hours, catalog, business, clock):
    hours.close_on(BUSINESS_ID, MONDAY + timedelta(days=2))
    hours.special_hours(BUSINESS_ID, THURSDAY, time(9, 0), time(10, 0))
    hours.special_hours(BUSINESS_ID, SATURDAY, time(10, 0), time(12, 0))
    scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(THURSDAY, 9))


def fine_grid_with_scattered_bookings(scheduler, hours, catalog, business, clock):
    hours.add_business(replace(business, slot_step_minutes=15, min_lead_minutes=90))
    catalog.add(ServiceInfo(id='short', business_id=BUSINESS_ID, duration_minutes=15, buffer_minutes=0))
    for hh, mm in ((9, 15), (10, 45), (11, 45), (13, 0), (15, 30)):
        scheduler.reserve(BUSINESS_ID, 'short', f'cust-{hh}{mm}', at(TUESDAY, hh, mm))
    hours.special_hours(BUSINESS_ID, FRIDAY, time(9, 0), time(12, 0))
    for hh, mm in ((9, 15), (10, 45), (11, 45)):
        scheduler.reserve(BUSINESS_ID, 'short', f'fri-{hh}{mm}', at(FRIDAY, hh, mm))


def expired_and_live_holds(scheduler, hours, catalog, business, clock):
    scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(TUESDAY, 9))
    clock.advance(minutes=10)
    scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-2', at(TUESDAY, 13))
    clock.advance(minutes=6)


LAYOUTS = [
    empty_calendar,
    one_confirmed_booking,
    tuesday_fully_booked,
    late_in_the_day,
    closures_and_special_hours,
    fine_grid_with_scattered_bookings,
    expired_and_live_holds,
]


@pytest.mark.parametrize('layout', LAYOUTS, ids=lambda f: f.__name__)
def test_offered_dates_match_bookable_slots(layout, scheduler, calculator, slot_generator,
                                            hours, catalog, business, clock):
    layout(scheduler, hours, catalog, business, clock)
    dates = calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)

    for day in WEEK.days():
        slots = slot_generator.get_time_slots(BUSINESS_ID, SERVICE_ID, day)
        assert (day in dates) == any(s.available for s in slots), day


@pytest.mark.parametrize('layout', LAYOUTS, ids=lambda f: f.__name__)
def test_repeated_reads_agree(layout, scheduler, calculator, slot_generator,
                              hours, catalog, business, clock):
    layout(scheduler, hours, catalog, business, clock)

    assert calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK) == \
        calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)
    for day in WEEK.days():
        assert slot_generator.get_time_slots(BUSINESS_ID, SERVICE_ID, day) == \
            slot_generator.get_time_slots(BUSINESS_ID, SERVICE_ID, day)


def test_fully_booked_tuesday_is_not_offered(scheduler, calculator, hours, catalog, business, clock):
    tuesday_fully_booked(scheduler, hours, catalog, business, clock)
    assert TUESDAY not in calculator.get_available_dates(BUSINESS_ID, SERVICE_ID, WEEK)
