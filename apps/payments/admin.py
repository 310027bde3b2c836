from django.contrib import admin
from .models import PaymentEvent


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = ['event_id', 'event_type', 'booking', 'outcome', 'created_at']
    list_filter = ['event_type', 'outcome']
    search_fields = ['event_id', 'payment_reference', 'booking__id']
    readonly_fields = [
        'id', 'event_id', 'event_type', 'booking', 'payment_reference',
        'payload', 'outcome', 'created_at', 'updated_at',
    ]
    fieldsets = (
        ('Event', {'fields': ('id', 'event_id', 'event_type', 'outcome')}),
        ('Booking', {'fields': ('booking', 'payment_reference')}),
        ('Payload', {'fields': ('payload',), 'classes': ('collapse',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return False
