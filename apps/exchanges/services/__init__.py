"""Claim request services."""

from .exceptions import (
    ClaimRequestNotFoundError,
    SelfClaimError,
    IllegalClaimTransitionError,
)
from .claim_management import (
    CompletionResult,
    submit_claim_request,
    approve_claim_request,
    decline_claim_request,
    complete_claim_request,
)
from .claim_queries import (
    get_claim_request,
    get_requests_for_item,
    get_requests_for_donor,
    get_requests_for_collector,
    get_active_claim_for_item,
    pending_request_count_by_item,
    get_item_collection_status,
)

__all__ = [
    # Exceptions
    'ClaimRequestNotFoundError',
    'SelfClaimError',
    'IllegalClaimTransitionError',
    # Claim Management
    'CompletionResult',
    'submit_claim_request',
    'approve_claim_request',
    'decline_claim_request',
    'complete_claim_request',
    # Claim Queries
    'get_claim_request',
    'get_requests_for_item',
    'get_requests_for_donor',
    'get_requests_for_collector',
    'get_active_claim_for_item',
    'pending_request_count_by_item',
    'get_item_collection_status',
]
