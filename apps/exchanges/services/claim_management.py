"""
Claim request management service.

Owns the claim state machine. Every write for an item first takes the
listing row lock, so approvals, completions and submissions for the same
item are serialized; the status changes themselves are conditional
UPDATEs so a stale caller can never move a request twice.
"""

from dataclasses import dataclass
import logging
from typing import Optional, Tuple
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.exchanges import conf, events
from apps.exchanges.models import ClaimRequest, ClaimStatus, CollectedItemRecord
from apps.listings.models import ListingStatus
from apps.listings.services import (
    ListingUnavailableError,
    lock_listing,
    set_listing_status,
    status_after_approval,
)
from apps.qrcodes.services import close_claim_codes, issue_pair
from apps.rewards.services import credit, InvalidRewardAmountError

from .exceptions import SelfClaimError, IllegalClaimTransitionError

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """
    Outcome of completing a claim request.

    Attributes:
        claim_request: The request, now completed
        reward_points: Points credited by this call (0 on a repeat call)
        already_completed: True when an earlier call did the work
    """
    claim_request: ClaimRequest
    reward_points: int
    already_completed: bool = False


def _find_request(request_id) -> Optional[ClaimRequest]:
    try:
        return ClaimRequest.objects.select_related('listing').get(id=request_id)
    except (ClaimRequest.DoesNotExist, ValidationError, ValueError):
        return None


def _open_request(listing_id, collector_id) -> Optional[ClaimRequest]:
    return (
        ClaimRequest.objects
        .filter(listing_id=listing_id, collector_id=collector_id)
        .exclude(status=ClaimStatus.COMPLETED)
        .first()
    )


def _log(event: str, claim: ClaimRequest, **fields) -> None:
    logger.info(
        event,
        extra={'extra': {
            'event': event,
            'request_id': str(claim.id),
            'item_id': str(claim.listing_id),
            'status': claim.status,
            **fields,
        }},
    )


def submit_claim_request(
    *,
    item_id: UUID,
    collector: User,
    note: str = '',
    item_title: Optional[str] = None,
    donor_name: Optional[str] = None,
    collector_name: Optional[str] = None
) -> Tuple[ClaimRequest, bool]:
    """
    Record a collector's request for an item.

    Submitting twice is harmless: while the collector has a request for
    the item that isn't completed, that request is returned unchanged.

    Args:
        item_id: Listing being requested
        collector: Requesting user
        note: Message to the donor
        item_title: Title snapshot (defaults to the listing title)
        donor_name: Donor display name (defaults from the donor)
        collector_name: Collector display name (defaults from the collector)

    Returns:
        Tuple of (ClaimRequest, created)

    Raises:
        ListingNotFoundError: If the item doesn't exist
        SelfClaimError: If the collector listed the item
        ListingUnavailableError: If the item was already collected
    """
    with transaction.atomic():
        listing = lock_listing(item_id)

        if listing.donor_id == collector.id:
            raise SelfClaimError()
        if listing.status == ListingStatus.COLLECTED:
            raise ListingUnavailableError()

        existing = _open_request(listing.id, collector.id)
        if existing is not None:
            _log('claim_duplicate', existing)
            return existing, False

        try:
            with transaction.atomic():
                claim = ClaimRequest.objects.create(
                    listing=listing,
                    item_title=item_title or listing.title,
                    donor_id=listing.donor_id,
                    donor_name=donor_name or listing.donor.get_display_name(),
                    collector=collector,
                    collector_name=collector_name or collector.get_display_name(),
                    note=note,
                )
        except IntegrityError:
            # A concurrent submit won the unique constraint
            existing = _open_request(listing.id, collector.id)
            if existing is None:
                raise
            return existing, False

        events.publish(events.Topic.CLAIM_REQUESTED, claim_request=claim)

    _log('claim_submitted', claim, collector_id=str(collector.id))
    return claim, True


def approve_claim_request(*, request_id: UUID, chat_id=None) -> Optional[ClaimRequest]:
    """
    Approve one request and decline the item's other pending requests.

    The approval, the sibling declines, the listing status change and the
    QR pair all commit together. ``claim.approved`` and ``partner.ready``
    are published after commit.

    Args:
        request_id: Request to approve
        chat_id: Conversation to announce the approval in, if any

    Returns:
        The approved ClaimRequest, or None if it doesn't exist

    Raises:
        IllegalClaimTransitionError: If the request isn't pending, or
            another request for the item already won
    """
    claim = _find_request(request_id)
    if claim is None:
        return None

    with transaction.atomic():
        listing = lock_listing(claim.listing_id)
        claim.refresh_from_db()

        if claim.status != ClaimStatus.PENDING:
            raise IllegalClaimTransitionError(
                f"Only pending requests can be approved; this one is {claim.status}."
            )

        already_won = (
            ClaimRequest.objects
            .filter(listing=listing, status__in=[ClaimStatus.APPROVED, ClaimStatus.COMPLETED])
            .exclude(pk=claim.pk)
            .exists()
        )
        if already_won:
            raise IllegalClaimTransitionError(
                'Another request for this item has already been approved.'
            )

        now = timezone.now()
        updated = (
            ClaimRequest.objects
            .filter(pk=claim.pk, status=ClaimStatus.PENDING)
            .update(status=ClaimStatus.APPROVED, decision_at=now, updated_at=now)
        )
        if not updated:
            raise IllegalClaimTransitionError('This request was decided concurrently.')

        declined = (
            ClaimRequest.objects
            .filter(listing=listing, status=ClaimStatus.PENDING)
            .exclude(pk=claim.pk)
            .update(status=ClaimStatus.DECLINED, decision_at=now, updated_at=now)
        )

        claim.refresh_from_db()
        set_listing_status(listing=listing, status=status_after_approval(listing))
        qr_codes = issue_pair(listing=listing, claim_request=claim, now=now)

        events.publish(events.Topic.CLAIM_APPROVED, claim_request=claim, chat_id=chat_id)
        events.publish(events.Topic.PARTNER_READY, claim_request=claim, qr_codes=qr_codes)

    _log(
        'claim_approved',
        claim,
        declined=declined,
        transaction_id=qr_codes[0].transaction_id,
    )
    return claim


def decline_claim_request(*, request_id: UUID) -> Optional[ClaimRequest]:
    """
    Decline a pending request.

    Declining an already declined request returns it unchanged.

    Raises:
        IllegalClaimTransitionError: If the request was approved or completed
    """
    claim = _find_request(request_id)
    if claim is None:
        return None

    with transaction.atomic():
        lock_listing(claim.listing_id)
        claim.refresh_from_db()

        if claim.status == ClaimStatus.DECLINED:
            return claim
        if claim.status != ClaimStatus.PENDING:
            raise IllegalClaimTransitionError(
                f"Only pending requests can be declined; this one is {claim.status}."
            )

        now = timezone.now()
        ClaimRequest.objects.filter(pk=claim.pk, status=ClaimStatus.PENDING).update(
            status=ClaimStatus.DECLINED, decision_at=now, updated_at=now
        )
        claim.refresh_from_db()

    _log('claim_declined', claim)
    return claim


def complete_claim_request(
    *,
    request_id: UUID,
    reward_points: Optional[int] = None
) -> Optional[CompletionResult]:
    """
    Confirm the hand-off and reward the donor.

    Safe to call more than once: only the call that moves the request from
    approved to completed credits the ledger, marks the item collected,
    retires the claim's QR codes and publishes ``collection.confirmed``;
    later calls report ``already_completed`` with 0 points.

    Args:
        request_id: Request to complete
        reward_points: Points for the donor (defaults to the configured amount)

    Returns:
        CompletionResult, or None if the request doesn't exist

    Raises:
        IllegalClaimTransitionError: If the request is pending or declined
        InvalidRewardAmountError: If reward_points is negative
    """
    if reward_points is None:
        reward_points = conf.default_reward_points()
    if isinstance(reward_points, bool) or not isinstance(reward_points, int) or reward_points < 0:
        raise InvalidRewardAmountError(f"Invalid reward amount: {reward_points!r}")

    claim = _find_request(request_id)
    if claim is None:
        return None

    with transaction.atomic():
        listing = lock_listing(claim.listing_id)

        now = timezone.now()
        updated = (
            ClaimRequest.objects
            .filter(pk=claim.pk, status=ClaimStatus.APPROVED)
            .update(status=ClaimStatus.COMPLETED, updated_at=now)
        )
        claim.refresh_from_db()

        if not updated:
            if claim.status == ClaimStatus.COMPLETED:
                return CompletionResult(claim_request=claim, reward_points=0, already_completed=True)
            raise IllegalClaimTransitionError(
                f"Only approved requests can be completed; this one is {claim.status}."
            )

        credit(
            donor=claim.donor,
            points=reward_points,
            claim_request=claim,
            reason=f"Exchange completed: {claim.item_title}",
        )
        CollectedItemRecord.objects.update_or_create(
            listing=listing,
            defaults={'collected': True, 'confirmed_at': now, 'claim_request': claim},
        )
        set_listing_status(listing=listing, status=ListingStatus.COLLECTED)
        close_claim_codes(claim_request_id=claim.id, now=now)

        events.publish(
            events.Topic.COLLECTION_CONFIRMED,
            claim_request=claim,
            reward_points=reward_points,
        )

    _log('claim_completed', claim, reward_points=reward_points)
    return CompletionResult(claim_request=claim, reward_points=reward_points)
