"""
Reward ledger.

Balances only ever grow. Each credit is an audit row plus an F()
increment on the donor's account, written in one transaction.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import F, QuerySet

from apps.accounts.models import User
from apps.rewards.models import RewardAccount, RewardCredit

from .exceptions import InvalidRewardAmountError, DuplicateRewardCreditError

logger = logging.getLogger(__name__)


@transaction.atomic
def credit(
    *,
    donor: User,
    points: int,
    claim_request=None,
    reason: str = ''
) -> RewardCredit:
    """
    Add ``points`` to the donor's balance.

    Args:
        donor: User receiving the points
        points: Non-negative amount
        claim_request: Completed ClaimRequest being rewarded, if any
        reason: Free-text note for the audit trail

    Returns:
        The RewardCredit row

    Raises:
        InvalidRewardAmountError: If points is negative or not an int
        DuplicateRewardCreditError: If claim_request was already credited
    """
    if isinstance(points, bool) or not isinstance(points, int) or points < 0:
        raise InvalidRewardAmountError(f"Invalid reward amount: {points!r}")

    try:
        with transaction.atomic():
            entry = RewardCredit.objects.create(
                donor=donor,
                points=points,
                claim_request=claim_request,
                reason=reason,
            )
    except IntegrityError:
        raise DuplicateRewardCreditError(
            f"Claim request {claim_request.id} has already been credited"
        )

    RewardAccount.objects.get_or_create(donor=donor)
    RewardAccount.objects.filter(donor=donor).update(balance=F('balance') + points)

    logger.info(
        'reward_credited',
        extra={'extra': {
            'event': 'reward_credited',
            'donor_id': str(donor.id),
            'points': points,
            'request_id': str(claim_request.id) if claim_request else None,
        }},
    )
    return entry


def balance(donor_id: UUID) -> int:
    """Current balance; 0 for donors who were never credited."""
    account = RewardAccount.objects.filter(donor_id=donor_id).first()
    return account.balance if account else 0


def credit_history(donor_id: UUID, limit: Optional[int] = None) -> QuerySet:
    credits = (
        RewardCredit.objects
        .select_related('claim_request')
        .filter(donor_id=donor_id)
        .order_by('-created_at')
    )
    if limit:
        credits = credits[:limit]
    return credits
