# ==========================================
# apps/qrcodes/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import QRCode, QRCodeStatus


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    """
    Admin interface for hand-off QR codes.

    Codes are an audit trail: they can be inspected but not edited,
    added or deleted here.
    """

    list_display = [
        'transaction_id',
        'code_type',
        'listing',
        'holder_name',
        'status_badge',
        'expires_at',
        'created_at',
    ]
    list_filter = ['code_type', 'status', 'action_type', 'created_at']
    search_fields = ['transaction_id', 'holder_name', 'holder__email', 'listing__title']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    readonly_fields = [f.name for f in QRCode._meta.fields]

    def status_badge(self, obj):
        """Display effective status (expiry applied) as colored badge."""
        colors = {
            QRCodeStatus.ACTIVE: ('#6B8E5E', 'white'),
            QRCodeStatus.SCANNED: ('#5E7E8E', 'white'),
            QRCodeStatus.COMPLETED: ('#A47449', 'white'),
            QRCodeStatus.EXPIRED: ('#B85C5C', 'white'),
        }
        effective = obj.effective_status()
        bg, fg = colors.get(effective, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, QRCodeStatus(effective).label
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
