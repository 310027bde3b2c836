"""
Custom exceptions for the booking engine.
Raised by the engine components and rendered by views.py as
{"error": {"code", "message", "field"}} with the matching HTTP status.
"""


class BookingEngineError(Exception):
    """Base exception for all booking engine errors."""
    code = 'booking_error'
    status = 400
    default_message = 'The booking request could not be processed.'

    def __init__(self, message: str = '', field: str = ''):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {'code': self.code, 'message': self.message, 'field': self.field or None}


class ValidationError(BookingEngineError):
    """Malformed input: missing ids, bad dates, outside the booking horizon."""
    code = 'validation_error'
    default_message = 'Invalid booking request.'


class InvalidService(BookingEngineError):
    """Service is inactive, deleted, or does not belong to the business."""
    code = 'invalid_service'
    default_message = 'This service is not available for booking.'


class OutOfBusinessHours(BookingEngineError):
    """Requested interval falls outside the business's open hours."""
    code = 'out_of_business_hours'
    status = 422
    default_message = 'The requested time is outside business hours.'


class PastDate(BookingEngineError):
    """Requested date or time is already in the past."""
    code = 'past_date'
    status = 422
    default_message = 'The requested time is in the past.'


class SlotUnavailable(BookingEngineError):
    """Another pending or confirmed booking already occupies the interval."""
    code = 'slot_unavailable'
    status = 409
    default_message = 'This slot was just taken. Please choose a different time.'


class BookingNotFound(BookingEngineError):
    code = 'booking_not_found'
    status = 404
    default_message = 'Booking not found.'


class StorageFailure(BookingEngineError):
    """Persistence unreachable or the transaction was aborted by the database."""
    code = 'storage_failure'
    status = 503
    default_message = 'Booking storage is temporarily unavailable.'


class ServiceUnavailable(BookingEngineError):
    """Raised once storage retries are exhausted."""
    code = 'service_unavailable'
    status = 503
    default_message = 'Booking is temporarily unavailable. Please try again shortly.'
