"""Partner shop lookups and staff checks."""

from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.partners.models import PartnerShop

from .exceptions import ShopNotFoundError, ShopStaffRequiredError


def get_shop(shop_id: UUID, *, active_only: bool = True) -> PartnerShop:
    """
    Raises:
        ShopNotFoundError: If the shop doesn't exist (or is inactive when
            ``active_only``)
    """
    shops = PartnerShop.objects.all()
    if active_only:
        shops = shops.filter(is_active=True)
    try:
        return shops.get(id=shop_id)
    except (PartnerShop.DoesNotExist, ValidationError, ValueError):
        raise ShopNotFoundError(f"Partner shop {shop_id} not found")


def is_shop_staff(*, shop: PartnerShop, user: Optional[User]) -> bool:
    """Site staff may scan for any shop; everyone else must be on the list."""
    if user is None or not user.is_authenticated:
        return False
    return user.is_staff or shop.has_staff_member(user)


def require_shop_staff(*, shop: PartnerShop, user: Optional[User]) -> None:
    """
    Raises:
        ShopStaffRequiredError: If ``user`` may not scan for ``shop``
    """
    if not is_shop_staff(shop=shop, user=user):
        raise ShopStaffRequiredError(
            f"Only staff of {shop.name} can scan items for this shop."
        )


def list_active_shops() -> QuerySet:
    return PartnerShop.objects.filter(is_active=True).order_by('name')


def shops_for_user(user: User) -> QuerySet:
    return user.partner_shops.filter(is_active=True).order_by('name')
