"""Listing store services."""

from .exceptions import (
    ListingNotFoundError,
    ListingUnavailableError,
)

from .listing_status import (
    get_listing,
    lock_listing,
    set_listing_status,
    status_after_approval,
)


__all__ = [
    'ListingNotFoundError',
    'ListingUnavailableError',
    'get_listing',
    'lock_listing',
    'set_listing_status',
    'status_after_approval',
]
