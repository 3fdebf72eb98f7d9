"""
Partner scan resolver.

Decides whether a scanned item is ready for drop-off or pickup. Pure
functions; call them fresh on every scan so a stale screen cannot confirm
the wrong action.
"""

from dataclasses import dataclass
from typing import Optional

from apps.listings.models import Listing, ListingStatus, PickupOption
from apps.partners.models import ScanMode

PRE_DROPOFF_STATUSES = (ListingStatus.PENDING_DROPOFF, ListingStatus.ACTIVE)


@dataclass(frozen=True)
class PartnerScanState:
    """
    Resolved scan state of an item.

    ``action_mode`` falls back to drop-off when neither action is allowed;
    check ``is_indeterminate`` or ``allows()`` before confirming anything.
    """
    normalized_status: Optional[str]
    dropoff_allowed: bool
    pickup_allowed: bool
    action_mode: str

    @property
    def is_indeterminate(self) -> bool:
        return not (self.dropoff_allowed or self.pickup_allowed)

    def allows(self, mode: str) -> bool:
        if mode == ScanMode.DROPOFF:
            return self.dropoff_allowed
        if mode == ScanMode.PICKUP:
            return self.pickup_allowed
        return False

    def as_dict(self) -> dict:
        return {
            'normalized_status': self.normalized_status,
            'dropoff_allowed': self.dropoff_allowed,
            'pickup_allowed': self.pickup_allowed,
            'action_mode': self.action_mode,
            'is_indeterminate': self.is_indeterminate,
        }


def _normalize(value) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip().lower() or None


def compute_partner_scan_state(
    *,
    pickup_status: Optional[str],
    pickup_option: Optional[str],
    has_claim_context: bool
) -> PartnerScanState:
    """
    Resolve which scan action an item allows.

    Args:
        pickup_status: Listing status as displayed (any case, may be blank)
        pickup_option: Listing pickup option (donate/exchange/recycle)
        has_claim_context: Whether an approved claim is attached

    Returns:
        PartnerScanState
    """
    normalized_status = _normalize(pickup_status)
    is_donate = _normalize(pickup_option) == PickupOption.DONATE
    is_pre_dropoff = normalized_status is None or normalized_status in PRE_DROPOFF_STATUSES

    dropoff_allowed = is_donate and (is_pre_dropoff or not has_claim_context)
    pickup_allowed = normalized_status == ListingStatus.AWAITING_COLLECTION

    if dropoff_allowed:
        action_mode = ScanMode.DROPOFF
    elif pickup_allowed:
        action_mode = ScanMode.PICKUP
    else:
        action_mode = ScanMode.DROPOFF

    return PartnerScanState(
        normalized_status=normalized_status,
        dropoff_allowed=dropoff_allowed,
        pickup_allowed=pickup_allowed,
        action_mode=str(action_mode),
    )


def scan_state_for_listing(listing: Listing, claim=None) -> PartnerScanState:
    return compute_partner_scan_state(
        pickup_status=listing.status,
        pickup_option=listing.pickup_option,
        has_claim_context=claim is not None,
    )
