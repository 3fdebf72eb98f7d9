# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from apps.partners.models import PartnerShop
from apps.rewards.services import balance
from .models import User


class PartnerShopMembershipInline(admin.TabularInline):
    """Shops this member scans items for."""

    model = PartnerShop.staff.through
    extra = 0
    verbose_name = 'Partner shop'
    verbose_name_plural = 'Partner shops (scanning rights)'
    autocomplete_fields = ['partnershop']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Community members.

    The email address is the login; there is no username field. Shop
    scanning rights are granted through the partner shop inline.
    """

    inlines = [PartnerShopMembershipInline]

    list_display = [
        'email',
        'display_name',
        'postcode',
        'is_active_badge',
        'shop_count',
        'green_points',
        'created_at',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'partner_shops',
        'created_at',
    ]

    search_fields = ['email', 'display_name', 'postcode']

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Member', {
            'fields': ('email', 'display_name', 'avatar_url', 'postcode', 'password')
        }),
        ('Access', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'user_permissions'),
        }),
        ('Activity', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'postcode', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('partner_shops')

    def is_active_badge(self, obj):
        """Display active state as a colored badge."""
        bg, label = ('#6B8E5E', 'Active') if obj.is_active else ('#B85C5C', 'Inactive')
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, label
        )
    is_active_badge.short_description = 'Status'

    def shop_count(self, obj):
        return len(obj.partner_shops.all())
    shop_count.short_description = 'Shops'

    def green_points(self, obj):
        return balance(obj.id)
    green_points.short_description = 'GreenPoints'
