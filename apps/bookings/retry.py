"""
Storage retry policy for the engine's public entry points.

Only `StorageFailure` is retried. Domain errors (conflicts, validation) are
answers, not faults, and go straight back to the caller.
"""
import logging
import time
from functools import wraps

from django.conf import settings

from .exceptions import ServiceUnavailable, StorageFailure

logger = logging.getLogger(__name__)


def retry_on_storage_failure(max_attempts=None, backoff_seconds=None, sleep=time.sleep):
    """
    Decorator for retrying storage failures with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (defaults to BOOKING_STORAGE_RETRY_ATTEMPTS)
        backoff_seconds: Initial backoff in seconds (defaults to BOOKING_STORAGE_RETRY_BACKOFF_SECONDS)

    Raises ServiceUnavailable once every attempt has failed.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            attempts = max_attempts or settings.BOOKING_STORAGE_RETRY_ATTEMPTS
            backoff = settings.BOOKING_STORAGE_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds

            for attempt in range(attempts):
                try:
                    return func(*args, **kwargs)
                except StorageFailure as exc:
                    if attempt < attempts - 1:
                        wait_time = backoff * (2 ** attempt)
                        logger.warning(
                            'Attempt %d/%d failed for %s: %s. Retrying in %ss...',
                            attempt + 1, attempts, func.__name__, exc, wait_time,
                        )
                        if wait_time:
                            sleep(wait_time)
                    else:
                        logger.error('All %d attempts failed for %s: %s', attempts, func.__name__, exc)
                        raise ServiceUnavailable() from exc

        return wrapper

    return decorator
