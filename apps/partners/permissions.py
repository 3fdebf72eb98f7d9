from rest_framework import permissions

from .services import is_shop_staff


class IsPartnerStaff(permissions.BasePermission):
    """
    Permission: User must scan for at least one active partner shop.
    """

    message = 'Only partner shop staff can access item scans.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or user.partner_shops.filter(is_active=True).exists()


class IsShopStaff(permissions.BasePermission):
    """
    Permission: User must be on the staff of this shop.
    """

    message = 'Only staff of this partner shop can view its scans.'

    def has_object_permission(self, request, view, obj):
        # obj is a PartnerShop instance
        return is_shop_staff(shop=obj, user=request.user)
