# ==========================================
# apps/exchanges/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.qrcodes.models import QRCode
from .models import ClaimRequest, ClaimStatus, CollectedItemRecord


class QRCodeInline(admin.TabularInline):
    """Codes minted for a claim; read-only audit trail."""
    model = QRCode
    extra = 0
    fields = ['transaction_id', 'code_type', 'status', 'expires_at', 'scanned_at', 'completed_at', 'superseded_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Codes are minted by the approval service only."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ClaimRequest)
class ClaimRequestAdmin(admin.ModelAdmin):
    """
    Admin interface for claim requests.

    Status changes go through the exchange services so the QR codes,
    ledger and listing stay consistent; every field is read-only here.
    """

    list_display = [
        'item_title',
        'donor_name',
        'collector_name',
        'status_badge',
        'created_at',
        'decision_at',
    ]
    list_filter = ['status', 'created_at', 'decision_at']
    search_fields = [
        'item_title',
        'donor_name',
        'collector_name',
        'donor__email',
        'collector__email',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    inlines = [QRCodeInline]

    readonly_fields = [
        'id',
        'listing',
        'item_title',
        'donor',
        'donor_name',
        'collector',
        'collector_name',
        'note',
        'status',
        'created_at',
        'decision_at',
        'updated_at',
    ]

    def status_badge(self, obj):
        """Display claim status as colored badge."""
        colors = {
            ClaimStatus.PENDING: ('#E5C49A', '#2C1810'),
            ClaimStatus.APPROVED: ('#5E7E8E', 'white'),
            ClaimStatus.DECLINED: ('#B85C5C', 'white'),
            ClaimStatus.COMPLETED: ('#6B8E5E', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CollectedItemRecord)
class CollectedItemRecordAdmin(admin.ModelAdmin):
    list_display = ['listing', 'collected', 'confirmed_at', 'claim_request']
    list_filter = ['collected']
    readonly_fields = ['listing', 'collected', 'confirmed_at', 'claim_request']
