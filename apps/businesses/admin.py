from django.contrib import admin
from .models import Business, BusinessHours, BusinessHoursException


class BusinessHoursInline(admin.TabularInline):
    model = BusinessHours
    extra = 0
    max_num = 7


class BusinessHoursExceptionInline(admin.TabularInline):
    model = BusinessHoursException
    extra = 0
    fields = ['date', 'is_closed', 'opens_at', 'closes_at', 'reason']


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ['name', 'timezone', 'email', 'phone', 'hold_timeout_minutes', 'is_active', 'deleted_at']
    list_filter = ['is_active', 'timezone', 'require_check_in']
    search_fields = ['name', 'email', 'phone']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
    inlines = [BusinessHoursInline, BusinessHoursExceptionInline]
    fieldsets = (
        ('Business Info', {'fields': ('id', 'name', 'timezone', 'email', 'phone')}),
        ('Booking Policy', {'fields': (
            'booking_horizon_days', 'hold_timeout_minutes', 'slot_step_minutes', 'min_lead_minutes',
            'require_check_in', 'no_show_grace_minutes',
        )}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )
