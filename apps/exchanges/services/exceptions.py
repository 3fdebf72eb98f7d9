"""
Domain exceptions for claim requests.

A duplicate submission is not an error: the existing request is returned.
"""
from rest_framework.exceptions import APIException


class ClaimRequestNotFoundError(APIException):
    """Claim request does not exist."""
    status_code = 404
    default_detail = 'Claim request not found.'
    default_code = 'claim_request_not_found'


class SelfClaimError(APIException):
    """Donors cannot claim their own items."""
    status_code = 400
    default_detail = 'You cannot request your own item.'
    default_code = 'self_claim'


class IllegalClaimTransitionError(APIException):
    """Requested status change is not allowed from the current status."""
    status_code = 409
    default_detail = 'This claim request cannot change to that status.'
    default_code = 'illegal_claim_transition'
