from django.contrib import admin
from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'duration_minutes', 'buffer_minutes', 'block_minutes', 'price', 'is_active']
    list_filter = ['business', 'is_active']
    list_select_related = ['business']
    search_fields = ['name', 'business__name']
    list_editable = ['is_active', 'price']
    readonly_fields = ['id', 'block_minutes', 'created_at', 'updated_at', 'deleted_at']
    fieldsets = (
        ('Service', {'fields': ('id', 'business', 'name', 'description')}),
        ('Scheduling', {
            'fields': ('duration_minutes', 'buffer_minutes', 'block_minutes'),
            'description': 'Changes apply to new bookings only; existing bookings keep their snapshot.',
        }),
        ('Pricing', {'fields': ('price',)}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )

    @admin.display(description='Blocks (min)')
    def block_minutes(self, obj):
        return obj.total_block_minutes
