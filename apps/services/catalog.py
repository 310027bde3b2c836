"""
Django-backed service catalog used by the booking engine.
"""
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from apps.bookings.domain import ServiceInfo
from apps.bookings.exceptions import StorageFailure

from .models import Service


class DjangoServiceCatalog:

    def get_service(self, service_id) -> Optional[ServiceInfo]:
        """Soft-deleted services resolve to None; inactive ones come back with active=False."""
        try:
            service = Service.objects.filter(pk=service_id).first()
        except (ValueError, DjangoValidationError):
            return None
        except DatabaseError as exc:
            raise StorageFailure() from exc
        if service is None:
            return None
        return ServiceInfo(
            id=service.id,
            business_id=service.business_id,
            duration_minutes=service.duration_minutes,
            buffer_minutes=service.buffer_minutes,
            active=service.is_active,
            name=service.name,
            price=service.price,
        )
