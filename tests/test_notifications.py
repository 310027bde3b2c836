from datetime import datetime, time

import pytest
from django.core import mail

from apps.bookings import engine
from apps.notifications.emails import EmailNotifier

pytestmark = pytest.mark.django_db


@pytest.fixture
def studio(make_business, make_service):
    business = make_business(name='Calm Studio', email='desk@calm.example')
    return business, make_service(business, name='Deep Tissue')


def reserve(studio, day, **contact):
    business, service = studio
    return engine.reserve(business.id, service.id, 'cust-1', datetime.combine(day, time(14, 0)), **contact)


def test_reservation_emails_customer_and_business(studio, next_week):
    booking = reserve(studio, next_week, customer_name='Ada', customer_email='ada@example.com')

    assert [m.to for m in mail.outbox] == [['ada@example.com'], ['desk@calm.example']]
    customer_mail, business_mail = mail.outbox
    assert customer_mail.subject == f"Booking Received — Deep Tissue on {next_week.strftime('%d %b %Y')}"
    assert 'Hi Ada' in customer_mail.body
    assert '2:00 PM' in customer_mail.body
    assert customer_mail.alternatives[0][1] == 'text/html'
    assert business_mail.subject == (
        f'[Calm Studio] New booking (awaiting payment) — #{str(booking.id)[:8].upper()}'
    )


def test_customer_without_email_only_notifies_business(studio, next_week):
    reserve(studio, next_week)
    assert [m.to for m in mail.outbox] == [['desk@calm.example']]
    assert 'cust-1' in mail.outbox[0].body


def test_cancellation_email_carries_reason(studio, next_week):
    booking = reserve(studio, next_week, customer_email='ada@example.com')
    mail.outbox.clear()

    engine.cancel(booking.id, actor='business', reason='Therapist unwell')

    assert mail.outbox[0].subject.startswith('Booking Cancelled — Deep Tissue')
    assert 'Therapist unwell' in mail.outbox[0].body


def test_reminder_goes_to_customer_only(studio, next_week):
    booking = reserve(studio, next_week, customer_email='ada@example.com')
    mail.outbox.clear()

    assert EmailNotifier().booking_reminder(booking) is True
    assert [m.to for m in mail.outbox] == [['ada@example.com']]
    assert mail.outbox[0].subject.endswith('at 2:00 PM')


def test_reminder_without_address_is_skipped(studio, next_week):
    booking = reserve(studio, next_week)
    mail.outbox.clear()

    assert EmailNotifier().booking_reminder(booking) is False
    assert mail.outbox == []


def test_mail_failure_does_not_break_reservation(studio, next_week, settings):
    settings.EMAIL_BACKEND = 'tests.test_notifications.BrokenBackend'
    booking = reserve(studio, next_week, customer_email='ada@example.com')
    assert engine.get_booking(booking.id).status == 'pending'


class BrokenBackend:
    def __init__(self, *args, **kwargs):
        pass

    def send_messages(self, messages):
        raise ConnectionRefusedError('smtp down')
