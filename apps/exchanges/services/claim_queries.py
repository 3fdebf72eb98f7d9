"""Read-only claim request queries."""

from typing import Dict, Iterable, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Count, QuerySet

from apps.exchanges.models import ClaimRequest, ClaimStatus, CollectedItemRecord

from .exceptions import ClaimRequestNotFoundError


def get_claim_request(request_id: UUID) -> ClaimRequest:
    """
    Raises:
        ClaimRequestNotFoundError: If the request doesn't exist
    """
    try:
        return (
            ClaimRequest.objects
            .select_related('listing', 'donor', 'collector')
            .get(id=request_id)
        )
    except (ClaimRequest.DoesNotExist, ValidationError, ValueError):
        raise ClaimRequestNotFoundError(f"Claim request {request_id} not found")


def _base() -> QuerySet:
    return ClaimRequest.objects.select_related('listing').order_by('-created_at')


def get_requests_for_item(item_id: UUID) -> QuerySet:
    return _base().filter(listing_id=item_id)


def get_requests_for_donor(donor_id: UUID, status: Optional[str] = None) -> QuerySet:
    requests = _base().filter(donor_id=donor_id)
    if status:
        requests = requests.filter(status=status)
    return requests


def get_requests_for_collector(collector_id: UUID, status: Optional[str] = None) -> QuerySet:
    requests = _base().filter(collector_id=collector_id)
    if status:
        requests = requests.filter(status=status)
    return requests


def get_active_claim_for_item(item_id: UUID) -> Optional[ClaimRequest]:
    """The request that won the item (approved or completed), if any."""
    return (
        _base()
        .filter(listing_id=item_id, status__in=[ClaimStatus.APPROVED, ClaimStatus.COMPLETED])
        .first()
    )


def pending_request_count_by_item(item_ids: Optional[Iterable[UUID]] = None) -> Dict[str, int]:
    """Number of pending requests per item id; items with none are omitted."""
    pending = ClaimRequest.objects.filter(status=ClaimStatus.PENDING)
    if item_ids is not None:
        pending = pending.filter(listing_id__in=list(item_ids))

    rows = pending.values('listing_id').annotate(count=Count('id')).order_by()
    return {str(row['listing_id']): row['count'] for row in rows}


def get_item_collection_status(item_id: UUID) -> Optional[CollectedItemRecord]:
    try:
        return CollectedItemRecord.objects.filter(listing_id=item_id).first()
    except (ValidationError, ValueError):
        return None
