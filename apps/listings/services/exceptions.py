"""
Domain exceptions for the listing store.

Raised by services and rendered by DRF with their status code and code.
"""
from rest_framework.exceptions import APIException


class ListingNotFoundError(APIException):
    """Listing does not exist."""
    status_code = 404
    default_detail = 'Item not found.'
    default_code = 'listing_not_found'


class ListingUnavailableError(APIException):
    """Listing can no longer be claimed."""
    status_code = 409
    default_detail = 'This item has already been collected.'
    default_code = 'listing_unavailable'
