"""
Django-backed business-hours provider.

Resolves the open interval for a (business, date): a date-specific exception
wins over the weekly row; a closed exception, a missing weekly row, or an
empty window all mean "closed" (None).
"""
import logging
from datetime import date as date_type, time as time_type
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from apps.bookings.domain import BusinessInfo, OpeningHours
from apps.bookings.exceptions import StorageFailure, ValidationError

from .models import Business, BusinessHours, BusinessHoursException, validate_timezone

logger = logging.getLogger(__name__)


def _window(opens_at: time_type, closes_at: time_type) -> Optional[OpeningHours]:
    if opens_at is None or closes_at is None or opens_at >= closes_at:
        return None
    return OpeningHours(opens_at, closes_at)


class DjangoBusinessHoursProvider:

    def get_business(self, business_id) -> Optional[BusinessInfo]:
        try:
            business = Business.objects.filter(pk=business_id, is_active=True).first()
        except (ValueError, DjangoValidationError):
            return None
        except DatabaseError as exc:
            raise StorageFailure() from exc
        if business is None:
            return None
        try:
            validate_timezone(business.timezone)
        except DjangoValidationError as exc:
            logger.error('Business %s has an invalid timezone %r', business.id, business.timezone)
            raise ValidationError(
                'This business is misconfigured and cannot take bookings.', field='business_id',
            ) from exc
        return BusinessInfo(
            id=business.id,
            timezone=business.timezone,
            booking_horizon_days=business.booking_horizon_days,
            hold_timeout_minutes=business.hold_timeout_minutes,
            slot_step_minutes=business.slot_step_minutes,
            min_lead_minutes=business.min_lead_minutes,
            require_check_in=business.require_check_in,
            no_show_grace_minutes=business.no_show_grace_minutes,
        )

    def get_operating_hours(self, business_id, day: date_type) -> Optional[OpeningHours]:
        try:
            exception = BusinessHoursException.objects.filter(business_id=business_id, date=day).first()
            if exception is not None:
                if exception.is_closed:
                    return None
                return _window(exception.opens_at, exception.closes_at)

            row = BusinessHours.objects.filter(
                business_id=business_id, weekday=day.weekday(), is_open=True,
            ).first()
        except DatabaseError as exc:
            raise StorageFailure() from exc

        if row is None:
            return None
        window = _window(row.opens_at, row.closes_at)
        if window is None:
            logger.warning('Business %s has an empty window on weekday %s', business_id, day.weekday())
        return window
