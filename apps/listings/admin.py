from django.contrib import admin
from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = [
        'title',
        'donor',
        'pickup_option',
        'status',
        'category',
        'co2_impact',
        'created_at',
    ]
    list_filter = ['status', 'pickup_option', 'category']
    search_fields = ['title', 'description', 'donor__email', 'donor__display_name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
