"""
Listing store access used by the exchange core.

The exchange services never write listing rows directly; they go through
these helpers so status changes are logged in one place.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError

from apps.listings.models import Listing, ListingStatus
from .exceptions import ListingNotFoundError

logger = logging.getLogger(__name__)


def get_listing(item_id: UUID) -> Listing:
    """
    Fetch a listing by id.

    Raises:
        ListingNotFoundError: If the listing doesn't exist
    """
    try:
        return Listing.objects.select_related('donor').get(id=item_id)
    except (Listing.DoesNotExist, ValidationError, ValueError):
        raise ListingNotFoundError(f"Item {item_id} not found")


def lock_listing(item_id: UUID) -> Listing:
    """
    Fetch a listing with a row lock.

    Must be called inside ``transaction.atomic``. Every operation that
    changes claims or codes for an item takes this lock first, so those
    operations are serialized per item.
    """
    try:
        return Listing.objects.select_for_update().get(id=item_id)
    except (Listing.DoesNotExist, ValidationError, ValueError):
        raise ListingNotFoundError(f"Item {item_id} not found")


def set_listing_status(*, listing: Listing, status: str) -> Listing:
    """Move a listing to ``status`` (no-op when already there)."""
    if listing.status == status:
        return listing

    previous = listing.status
    listing.status = status
    listing.save(update_fields=['status', 'updated_at'])

    logger.info(
        'listing_status_changed',
        extra={'extra': {
            'event': 'listing_status_changed',
            'item_id': str(listing.id),
            'from': previous,
            'to': status,
        }},
    )
    return listing


def status_after_approval(listing: Listing) -> str:
    """
    Listing status once a collector has been approved.

    Donations still on the donor's side wait for a shop drop-off; items
    already sitting in a shop stay awaiting collection; everything else
    is simply claimed.
    """
    if listing.status == ListingStatus.AWAITING_COLLECTION:
        return ListingStatus.AWAITING_COLLECTION
    if listing.is_donation:
        return ListingStatus.PENDING_DROPOFF
    return ListingStatus.CLAIMED
