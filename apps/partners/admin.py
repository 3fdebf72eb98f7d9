# ==========================================
# apps/partners/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import PartnerShop, ScanEvent, ScanResult


@admin.register(PartnerShop)
class PartnerShopAdmin(admin.ModelAdmin):
    list_display = ['name', 'postcode', 'is_active', 'staff_count', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'address_line', 'postcode']
    filter_horizontal = ['staff']
    readonly_fields = ['created_at']

    def staff_count(self, obj):
        return obj.staff.count()
    staff_count.short_description = 'Staff'


@admin.register(ScanEvent)
class ScanEventAdmin(admin.ModelAdmin):
    """Shop scan log; append-only."""

    list_display = [
        'scanned_at',
        'shop',
        'listing',
        'mode',
        'result_badge',
        'staff_name',
        'co2_impact',
    ]
    list_filter = ['mode', 'result', 'shop', 'scanned_at']
    search_fields = ['listing__title', 'staff_name', 'reason', 'notes']
    date_hierarchy = 'scanned_at'
    ordering = ['-scanned_at']
    readonly_fields = [f.name for f in ScanEvent._meta.fields]

    def result_badge(self, obj):
        """Display scan result as colored badge."""
        colors = {
            ScanResult.ACCEPTED: ('#6B8E5E', 'white'),
            ScanResult.RELEASED: ('#A47449', 'white'),
            ScanResult.REJECTED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.result, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_result_display()
        )
    result_badge.short_description = 'Result'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
