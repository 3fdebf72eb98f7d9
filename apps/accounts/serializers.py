from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Profile of the authenticated user, including the shops they scan for."""

    partner_shops = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'avatar_url',
            'postcode',
            'partner_shops',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields

    def get_partner_shops(self, obj):
        return [
            {'id': str(shop.id), 'name': shop.name}
            for shop in obj.partner_shops.filter(is_active=True).order_by('name')
        ]


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()
