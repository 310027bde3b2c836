"""
Booking API URLs.

  /bookings/api/<business_id>/dates/        Dates with at least one free slot
  /bookings/api/<business_id>/slots/        Slot grid for one date
  /bookings/api/<business_id>/reserve/      Place a pending hold
  /bookings/api/booking/<booking_id>/       Booking detail
  /bookings/api/booking/<booking_id>/cancel/
  /bookings/api/booking/<booking_id>/check-in/
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    # ── Availability ───────────────────────────────────────────────────────────
    path('api/<uuid:business_id>/dates/',   views.api_dates,   name='api_dates'),
    path('api/<uuid:business_id>/slots/',   views.api_slots,   name='api_slots'),

    # ── Reservation & lifecycle ────────────────────────────────────────────────
    path('api/<uuid:business_id>/reserve/', views.api_reserve, name='api_reserve'),
    path('api/booking/<uuid:booking_id>/',           views.api_booking_detail,   name='api_booking'),
    path('api/booking/<uuid:booking_id>/cancel/',    views.api_booking_cancel,   name='api_cancel'),
    path('api/booking/<uuid:booking_id>/check-in/',  views.api_booking_check_in, name='api_check_in'),
]
