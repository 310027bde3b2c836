from django.contrib import admin, messages

from . import engine
from .exceptions import BookingEngineError
from .models import Booking, BookingStatusLog


class BookingStatusLogInline(admin.TabularInline):
    model = BookingStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'business', 'service', 'customer_name', 'customer_id',
        'booking_date', 'start_time', 'status', 'amount', 'checked_in_at',
    ]
    list_filter = ['status', 'business', 'booking_date']
    search_fields = ['customer_id', 'customer_name', 'customer_email', 'customer_phone', 'service__name']
    # Status only moves through the engine so the audit log and conflict rules hold.
    readonly_fields = [
        'id', 'status', 'status_changed_at', 'hold_expires_at', 'checked_in_at', 'reminder_sent_at',
        'idempotency_key', 'cancellation_reason', 'cancelled_by', 'created_at', 'updated_at',
    ]
    date_hierarchy = 'booking_date'
    inlines = [BookingStatusLogInline]
    actions = ['cancel_bookings', 'complete_bookings']
    fieldsets = (
        ('Booking', {'fields': ('id', 'business', 'service', 'idempotency_key')}),
        ('Customer', {'fields': ('customer_id', 'customer_name', 'customer_email', 'customer_phone', 'notes')}),
        ('Schedule', {'fields': ('booking_date', 'start_time', 'end_time', 'duration_minutes', 'buffer_minutes')}),
        ('Status', {'fields': (
            'status', 'status_changed_at', 'hold_expires_at', 'checked_in_at', 'reminder_sent_at',
            'amount', 'cancellation_reason', 'cancelled_by',
        )}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return str(obj.id)[:8]
    short_id.short_description = 'ID'

    def has_add_permission(self, request):
        # New bookings must go through the reservation engine.
        return False

    @admin.action(description='Cancel selected bookings')
    def cancel_bookings(self, request, queryset):
        self._run(request, queryset, lambda b: engine.cancel(b.id, actor='admin', reason='Cancelled by admin'),
                  'cancelled')

    @admin.action(description='Mark selected bookings completed')
    def complete_bookings(self, request, queryset):
        self._run(request, queryset, lambda b: engine.complete(b.id), 'completed')

    def _run(self, request, queryset, apply, verb):
        done = skipped = 0
        for booking in queryset:
            try:
                applied = apply(booking)
            except BookingEngineError as exc:
                self.message_user(request, f'#{booking.id_short}: {exc.message}', messages.ERROR)
                continue
            if applied:
                done += 1
            else:
                skipped += 1
        self.message_user(request, f'{done} booking(s) {verb}, {skipped} skipped.', messages.SUCCESS)


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'booking', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['booking__customer_name', 'booking__customer_id']
