from django.contrib import admin
from .models import RewardAccount, RewardCredit


@admin.register(RewardAccount)
class RewardAccountAdmin(admin.ModelAdmin):
    list_display = ['donor', 'balance', 'updated_at']
    search_fields = ['donor__email', 'donor__display_name']
    ordering = ['-balance']
    readonly_fields = ['donor', 'balance', 'updated_at']

    def has_add_permission(self, request):
        """Balances only change through ledger credits."""
        return False


@admin.register(RewardCredit)
class RewardCreditAdmin(admin.ModelAdmin):
    list_display = ['donor', 'points', 'reason', 'claim_request', 'created_at']
    list_filter = ['created_at']
    search_fields = ['donor__email', 'reason']
    date_hierarchy = 'created_at'
    readonly_fields = ['id', 'donor', 'points', 'claim_request', 'reason', 'created_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
