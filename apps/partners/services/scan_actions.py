"""
Partner scan actions.

Drop-off check-in and pickup release as confirmed at a shop counter. Each
action resolves the item's scan state fresh, refuses modes the state does
not allow, and runs its code transition, listing update and scan record
in one transaction, so a failed validation leaves nothing behind.

``scanned_by`` is the authenticated scanner; when given it must be on the
shop's staff. Internal callers that already vetted the scanner pass None.
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.exchanges import conf
from apps.exchanges.models import ClaimRequest, ClaimStatus
from apps.exchanges.services import (
    complete_claim_request,
    get_active_claim_for_item,
    get_claim_request,
)
from apps.listings.models import Listing, ListingStatus
from apps.listings.services import get_listing, lock_listing, set_listing_status
from apps.partners.models import PartnerShop, ScanEvent, ScanMode, ScanResult
from apps.qrcodes.models import QRCode, QRCodeStatus, QRCodeType
from apps.qrcodes.services import (
    InvalidPayloadError,
    decode_payload,
    extract_item_id,
    get_codes_for_claim,
    looks_like_payload,
    transition,
    validate,
)

from .exceptions import IllegalScanActionError
from .scan_state import PartnerScanState, scan_state_for_listing
from .shop_directory import get_shop, require_shop_staff

logger = logging.getLogger(__name__)

DROPOFF_ACTIONS = ('accept', 'reject')

MODE_FOR_CODE_TYPE = {
    QRCodeType.DONOR: ScanMode.DROPOFF,
    QRCodeType.COLLECTOR: ScanMode.PICKUP,
}


@dataclass
class ItemScanView:
    """What a shop sees after scanning an item."""
    listing: Listing
    status: str
    claim: Optional[ClaimRequest]
    scan_state: PartnerScanState
    scan_events: List[ScanEvent] = field(default_factory=list)


def _resolve_shop(shop_id: UUID, scanned_by: Optional[User]) -> PartnerShop:
    shop = get_shop(shop_id)
    if scanned_by is not None:
        require_shop_staff(shop=shop, user=scanned_by)
    return shop


def _require_mode(state: PartnerScanState, mode: str, listing: Listing) -> None:
    if not state.allows(mode):
        raise IllegalScanActionError(
            f"Item '{listing.title}' is {listing.status}; {mode} is not allowed."
        )


def _advance_claim_code(claim: Optional[ClaimRequest], code_type: str, next_status: str) -> Optional[QRCode]:
    """
    Move the claim's live code along when the shop confirmed by item id.

    Codes that are expired or already past this step are left as they are.
    """
    if claim is None:
        return None
    qr = (
        get_codes_for_claim(claim.id)
        .filter(code_type=code_type, status=QRCodeStatus.ACTIVE)
        .first()
    )
    if qr is None or qr.is_expired():
        return None
    return transition(
        transaction_id=qr.transaction_id,
        holder_role=code_type,
        next_status=next_status,
    )


def _record(
    *,
    shop: PartnerShop,
    listing: Listing,
    mode: str,
    result: str,
    claim: Optional[ClaimRequest] = None,
    qr: Optional[QRCode] = None,
    reason: str = '',
    staff_name: str = '',
    notes: str = '',
    scanned_by: Optional[User] = None
) -> ScanEvent:
    event = ScanEvent.objects.create(
        shop=shop,
        listing=listing,
        claim_request=claim,
        qr_code=qr,
        mode=mode,
        result=result,
        reason=reason,
        staff_name=staff_name,
        notes=notes,
        co2_impact=listing.co2_impact,
        scanned_by=scanned_by,
    )
    logger.info(
        'scan_recorded',
        extra={'extra': {
            'event': 'scan_recorded',
            'shop_id': str(shop.id),
            'item_id': str(listing.id),
            'mode': mode,
            'result': result,
            'request_id': str(claim.id) if claim else None,
            'transaction_id': qr.transaction_id if qr else None,
        }},
    )
    return event


def qr_dropoff_in(
    *,
    item_id: UUID,
    shop_id: UUID,
    action: str = 'accept',
    reason: str = '',
    qr_payload=None,
    staff_name: str = '',
    notes: str = '',
    scanned_by: Optional[User] = None
) -> ScanEvent:
    """
    Check a donated item in at a partner shop.

    ``accept`` marks the donor code scanned and moves the item to
    awaiting collection. ``reject`` only records the refusal and its
    reason; the item and its codes are unchanged.

    Args:
        item_id: Listing being dropped off
        shop_id: Shop doing the scan
        action: 'accept' or 'reject'
        reason: Why the item was rejected (required for 'reject')
        qr_payload: Scanned donor code, if one was scanned
        staff_name: Name of the attendant
        notes: Free-text shop notes
        scanned_by: Authenticated scanner

    Returns:
        The recorded ScanEvent

    Raises:
        ShopNotFoundError, ShopStaffRequiredError, ListingNotFoundError,
        IllegalScanActionError, plus QR validation errors when a code is
        scanned
    """
    if action not in DROPOFF_ACTIONS:
        raise IllegalScanActionError(f"Unknown drop-off action '{action}'.")
    if action == 'reject' and not reason.strip():
        raise IllegalScanActionError('A reason is required to reject a drop-off.')

    shop = _resolve_shop(shop_id, scanned_by)

    with transaction.atomic():
        listing = lock_listing(item_id)
        claim = get_active_claim_for_item(listing.id)
        state = scan_state_for_listing(listing, claim)
        _require_mode(state, ScanMode.DROPOFF, listing)

        if action == 'reject':
            return _record(
                shop=shop, listing=listing, mode=ScanMode.DROPOFF,
                result=ScanResult.REJECTED, claim=claim, reason=reason.strip(),
                staff_name=staff_name, notes=notes, scanned_by=scanned_by,
            )

        if qr_payload is not None:
            qr = validate(qr_payload, expected_type=QRCodeType.DONOR, expected_item_id=listing.id)
            qr = transition(
                transaction_id=qr.transaction_id,
                holder_role=QRCodeType.DONOR,
                next_status=QRCodeStatus.SCANNED,
            )
        else:
            qr = _advance_claim_code(claim, QRCodeType.DONOR, QRCodeStatus.SCANNED)

        set_listing_status(listing=listing, status=ListingStatus.AWAITING_COLLECTION)

        return _record(
            shop=shop, listing=listing, mode=ScanMode.DROPOFF,
            result=ScanResult.ACCEPTED, claim=claim, qr=qr,
            staff_name=staff_name, notes=notes, scanned_by=scanned_by,
        )


def qr_claim_out(
    *,
    item_id: UUID,
    shop_id: UUID,
    claim_id: Optional[UUID] = None,
    qr_payload=None,
    staff_name: str = '',
    notes: str = '',
    scanned_by: Optional[User] = None
) -> ScanEvent:
    """
    Release an item to its approved collector.

    Completes the collector code and the claim request, which credits the
    donor and marks the item collected.

    Raises:
        ShopNotFoundError, ShopStaffRequiredError, ListingNotFoundError,
        ClaimRequestNotFoundError, IllegalScanActionError, plus QR
        validation errors when a code is scanned
    """
    shop = _resolve_shop(shop_id, scanned_by)

    with transaction.atomic():
        listing = lock_listing(item_id)
        claim = get_active_claim_for_item(listing.id)

        if claim_id is not None:
            claim = get_claim_request(claim_id)
            if claim.listing_id != listing.id:
                raise IllegalScanActionError('This claim is for a different item.')

        state = scan_state_for_listing(listing, claim)
        _require_mode(state, ScanMode.PICKUP, listing)

        if claim is None or claim.status != ClaimStatus.APPROVED:
            raise IllegalScanActionError('There is no approved claim to release this item to.')

        if qr_payload is not None:
            qr = validate(qr_payload, expected_type=QRCodeType.COLLECTOR, expected_item_id=listing.id)
            if qr.claim_request_id is not None and qr.claim_request_id != claim.id:
                raise IllegalScanActionError('This code was issued for a different claim.')
            qr = transition(
                transaction_id=qr.transaction_id,
                holder_role=QRCodeType.COLLECTOR,
                next_status=QRCodeStatus.COMPLETED,
            )
        else:
            qr = _advance_claim_code(claim, QRCodeType.COLLECTOR, QRCodeStatus.COMPLETED)

        result = complete_claim_request(request_id=claim.id)

        return _record(
            shop=shop, listing=listing, mode=ScanMode.PICKUP,
            result=ScanResult.RELEASED, claim=result.claim_request, qr=qr,
            staff_name=staff_name, notes=notes, scanned_by=scanned_by,
        )


def qr_view_item(item_id: UUID, *, history_limit: Optional[int] = None) -> ItemScanView:
    """Current status, winning claim, recent scans and resolved scan state of an item."""
    listing = get_listing(item_id)
    claim = get_active_claim_for_item(listing.id)
    if history_limit is None:
        history_limit = conf.scan_history_limit()

    events = list(
        ScanEvent.objects
        .select_related('shop')
        .filter(listing=listing)
        .order_by('-scanned_at')[:history_limit]
    )

    return ItemScanView(
        listing=listing,
        status=listing.status,
        claim=claim,
        scan_state=scan_state_for_listing(listing, claim),
        scan_events=events,
    )


def process_scan(
    *,
    raw,
    shop_id: UUID,
    action: str = 'accept',
    reason: str = '',
    staff_name: str = '',
    notes: str = '',
    scanned_by: Optional[User] = None
) -> ScanEvent:
    """
    Handle whatever the shop scanner read.

    ``raw`` may be a full hand-off payload or just an item label. The
    action is resolved from the item's current state; a scanned code must
    match it (donor codes drop off, collector codes pick up).

    Raises:
        InvalidPayloadError: If no item id can be read from ``raw``
        IllegalScanActionError: If the item allows neither action or the
            code doesn't match the resolved one
    """
    item_id = extract_item_id(raw)
    if not item_id:
        raise InvalidPayloadError('Could not read an item id from the scanned code.')

    qr_payload = None
    code_type = None
    if looks_like_payload(raw):
        qr_payload = raw
        code_type = decode_payload(raw).get('type')

    listing = get_listing(item_id)
    state = scan_state_for_listing(listing, get_active_claim_for_item(listing.id))
    if state.is_indeterminate:
        raise IllegalScanActionError(
            f"Item '{listing.title}' is {listing.status}; there is nothing to scan for."
        )

    mode = state.action_mode
    if code_type and MODE_FOR_CODE_TYPE[code_type] != mode:
        raise IllegalScanActionError(
            f"This is a {code_type} code but the item is ready for {mode}."
        )

    if mode == ScanMode.PICKUP:
        return qr_claim_out(
            item_id=listing.id, shop_id=shop_id, qr_payload=qr_payload,
            staff_name=staff_name, notes=notes, scanned_by=scanned_by,
        )
    return qr_dropoff_in(
        item_id=listing.id, shop_id=shop_id, action=action, reason=reason,
        qr_payload=qr_payload, staff_name=staff_name, notes=notes,
        scanned_by=scanned_by,
    )
