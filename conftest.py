"""Fixtures shared by every app's tests."""

import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.exchanges.services import submit_claim_request, approve_claim_request
from apps.listings.models import Listing, ListingStatus, PickupOption
from apps.partners.models import PartnerShop


def authenticated_client(user):
    """Return a fresh API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def donor(db):
    """Create and return a user who lists items."""
    return User.objects.create_user(
        email='donor@example.com',
        password='TestPass123!',
        display_name='Dana Donor',
    )


@pytest.fixture
def collector(db):
    """Create and return a user who requests items."""
    return User.objects.create_user(
        email='collector@example.com',
        password='TestPass123!',
        display_name='Colin Collector',
    )


@pytest.fixture
def other_collector(db):
    """Create and return a second collector competing for the same item."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Olive Other',
    )


@pytest.fixture
def shop_staff(db):
    """Create and return a partner shop attendant."""
    return User.objects.create_user(
        email='staff@example.com',
        password='TestPass123!',
        display_name='Sam Staff',
    )


@pytest.fixture
def outsider(db):
    """Create and return a user unrelated to any exchange."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider User',
    )


@pytest.fixture
def listing(donor):
    """Donated item waiting for a collector."""
    return Listing.objects.create(
        donor=donor,
        title='Oak Bookshelf',
        description='Three shelves, light scratches.',
        category='Furniture',
        condition='Good',
        co2_impact=Decimal('12.50'),
        pickup_option=PickupOption.DONATE,
        status=ListingStatus.ACTIVE,
        drop_off_location='Hope Charity Shop, High Street',
    )


@pytest.fixture
def exchange_listing(donor):
    """Item offered for a direct swap rather than a shop drop-off."""
    return Listing.objects.create(
        donor=donor,
        title='Road Bike',
        category='Sports',
        condition='Fair',
        co2_impact=Decimal('40.00'),
        pickup_option=PickupOption.EXCHANGE,
    )


@pytest.fixture
def partner_shop(shop_staff):
    """Active partner shop with one staff member."""
    shop = PartnerShop.objects.create(
        name='Hope Charity Shop',
        address_line='12 High Street',
        postcode='AB1 2CD',
    )
    shop.staff.add(shop_staff)
    return shop


@pytest.fixture
def pending_claim(listing, collector):
    """Pending claim by ``collector`` on ``listing``."""
    claim, _ = submit_claim_request(item_id=listing.id, collector=collector, note='Can collect Saturday')
    return claim


@pytest.fixture
def approved_claim(pending_claim):
    """Approved claim with its QR pair minted."""
    return approve_claim_request(request_id=pending_claim.id)


@pytest.fixture
def donor_client(donor):
    return authenticated_client(donor)


@pytest.fixture
def collector_client(collector):
    return authenticated_client(collector)


@pytest.fixture
def other_collector_client(other_collector):
    return authenticated_client(other_collector)


@pytest.fixture
def staff_client(shop_staff):
    return authenticated_client(shop_staff)


@pytest.fixture
def outsider_client(outsider):
    return authenticated_client(outsider)
