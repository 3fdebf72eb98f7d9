"""
QR code registry.

Mints donor/collector code pairs, validates scanned payloads and moves
codes through their lifecycle. Status changes are single conditional
UPDATEs so two shops scanning the same code cannot both succeed.
"""

import io
import logging
import secrets
from typing import Optional, Tuple
from uuid import UUID

import qrcode
from django.db import transaction
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.exchanges import conf
from apps.listings.models import Listing
from apps.qrcodes.models import QRCode, QRCodeStatus, QRCodeType, LIVE_STATUSES

from .exceptions import (
    InvalidPayloadError,
    QRCodeNotFoundError,
    QRCodeExpiredError,
    QRCodeAlreadyUsedError,
    IllegalQRTransitionError,
)
from .payload import decode_payload, encode_payload

logger = logging.getLogger(__name__)

# (holder role, target status) -> statuses the move may start from
TRANSITIONS = {
    (QRCodeType.DONOR, QRCodeStatus.SCANNED): (QRCodeStatus.ACTIVE,),
    (QRCodeType.COLLECTOR, QRCodeStatus.COMPLETED): (QRCodeStatus.ACTIVE, QRCodeStatus.SCANNED),
}

NEXT_STATUS = {
    QRCodeType.DONOR: QRCodeStatus.SCANNED,
    QRCodeType.COLLECTOR: QRCodeStatus.COMPLETED,
}

TIMESTAMP_FIELDS = {
    QRCodeStatus.SCANNED: 'scanned_at',
    QRCodeStatus.COMPLETED: 'completed_at',
}


def generate_transaction_id(now=None) -> str:
    """``TC`` + epoch milliseconds + 6 random hex digits."""
    now = now or timezone.now()
    return f"TC{int(now.timestamp() * 1000)}{secrets.token_hex(3).upper()}"


def _listing_metadata(listing: Listing) -> dict:
    return {
        'category': listing.category,
        'condition': listing.condition,
        'co2_impact': listing.co2_impact,
        'action_type': listing.pickup_option,
        'drop_off_location': listing.drop_off_location,
    }


def _supersede(query: Q, now) -> int:
    """Retire live codes matching ``query``; rows are kept for audit."""
    return (
        QRCode.objects
        .filter(query, status__in=LIVE_STATUSES, superseded_at__isnull=True)
        .update(status=QRCodeStatus.EXPIRED, superseded_at=now, updated_at=now)
    )


@transaction.atomic
def issue_pair(*, listing: Listing, claim_request, now=None) -> Tuple[QRCode, QRCode]:
    """
    Mint the donor and collector codes for an approved claim.

    Both codes share one fresh transaction id and expire together after
    the pair lifetime. Live codes previously minted for the same claim
    are superseded.

    Args:
        listing: Listing being handed off
        claim_request: Approved ClaimRequest
        now: Issue time (defaults to now)

    Returns:
        (donor_qr, collector_qr)
    """
    now = now or timezone.now()
    transaction_id = generate_transaction_id(now)
    expires_at = now + conf.qr_pair_ttl()

    superseded = _supersede(
        Q(claim_request=claim_request) | Q(transaction_id=transaction_id),
        now,
    )

    common = dict(
        transaction_id=transaction_id,
        listing=listing,
        claim_request=claim_request,
        created_at=now,
        expires_at=expires_at,
        **_listing_metadata(listing),
    )
    donor_qr = QRCode.objects.create(
        code_type=QRCodeType.DONOR,
        holder_id=claim_request.donor_id,
        holder_name=claim_request.donor_name,
        **common,
    )
    collector_qr = QRCode.objects.create(
        code_type=QRCodeType.COLLECTOR,
        holder_id=claim_request.collector_id,
        holder_name=claim_request.collector_name,
        **common,
    )

    logger.info(
        'qr_pair_issued',
        extra={'extra': {
            'event': 'qr_pair_issued',
            'transaction_id': transaction_id,
            'request_id': str(claim_request.id),
            'item_id': str(listing.id),
            'expires_at': expires_at.isoformat(),
            'superseded': superseded,
        }},
    )
    return donor_qr, collector_qr


@transaction.atomic
def issue_standalone(
    *,
    listing: Listing,
    holder: User,
    code_type: str = QRCodeType.DONOR,
    now=None
) -> QRCode:
    """
    Mint a single code with no claim behind it.

    Used when a donor prints a drop-off code for a listing before anyone
    has claimed it. The holder's earlier live standalone code of the same
    type for this listing is superseded.
    """
    if code_type not in QRCodeType.values:
        raise InvalidPayloadError(f"Unknown QR code type '{code_type}'.")

    now = now or timezone.now()
    transaction_id = generate_transaction_id(now)
    expires_at = now + conf.qr_standalone_ttl()

    _supersede(
        Q(listing=listing, holder=holder, code_type=code_type, claim_request__isnull=True),
        now,
    )

    qr = QRCode.objects.create(
        transaction_id=transaction_id,
        code_type=code_type,
        listing=listing,
        holder=holder,
        holder_name=holder.get_display_name(),
        created_at=now,
        expires_at=expires_at,
        **_listing_metadata(listing),
    )

    logger.info(
        'qr_standalone_issued',
        extra={'extra': {
            'event': 'qr_standalone_issued',
            'transaction_id': transaction_id,
            'code_type': code_type,
            'item_id': str(listing.id),
            'expires_at': expires_at.isoformat(),
        }},
    )
    return qr


def get_code(*, transaction_id: str, code_type: str) -> QRCode:
    """
    Current code for a transaction and holder role.

    Raises:
        QRCodeNotFoundError: If no such code was ever issued
    """
    codes = (
        QRCode.objects
        .select_related('listing', 'claim_request')
        .filter(transaction_id=transaction_id, code_type=code_type)
        .order_by(F('superseded_at').asc(nulls_first=True), '-created_at')
    )
    qr = codes.first()
    if qr is None:
        raise QRCodeNotFoundError(
            f"No {code_type} QR code found for transaction {transaction_id}."
        )
    return qr


def _mark_expired(qr: QRCode, now) -> None:
    """Persist expiry of a live code found past its deadline."""
    updated = (
        QRCode.objects
        .filter(pk=qr.pk, status__in=LIVE_STATUSES)
        .update(status=QRCodeStatus.EXPIRED, updated_at=now)
    )
    if updated:
        qr.status = QRCodeStatus.EXPIRED
        logger.info(
            'qr_expired',
            extra={'extra': {
                'event': 'qr_expired',
                'transaction_id': qr.transaction_id,
                'code_type': qr.code_type,
            }},
        )


def _check_usable(qr: QRCode, now) -> None:
    """Raise the specific error for a code that cannot take its next step."""
    if qr.superseded_at is not None:
        raise QRCodeExpiredError(
            'This QR code was replaced by a newer one. Use the latest code.'
        )

    if qr.is_expired(now):
        _mark_expired(qr, now)
        raise QRCodeExpiredError(
            f"This QR code expired at {qr.expires_at.isoformat()}. "
            "Ask the owner to generate a new one."
        )

    sources = TRANSITIONS[(qr.code_type, NEXT_STATUS[qr.code_type])]
    if qr.status not in sources:
        if qr.status == QRCodeStatus.EXPIRED:
            raise QRCodeExpiredError()
        raise QRCodeAlreadyUsedError(
            f"This {qr.code_type} QR code has already been {qr.status}."
        )


def validate(
    payload,
    *,
    expected_type: Optional[str] = None,
    expected_item_id=None,
    now=None
) -> QRCode:
    """
    Check that a scanned payload refers to a usable code.

    Errors are raised in a fixed order: malformed payload, unknown code,
    expired (whatever the stored status says), then already used. A live
    code found past its deadline is persisted as expired; nothing else is
    written.

    Args:
        payload: Raw scanned string, bytes or decoded dict
        expected_type: Required holder role, if the caller knows it
        expected_item_id: Item the code must belong to
        now: Validation time (defaults to now)

    Returns:
        The matching QRCode

    Raises:
        InvalidPayloadError, QRCodeNotFoundError, QRCodeExpiredError,
        QRCodeAlreadyUsedError, IllegalQRTransitionError
    """
    now = now or timezone.now()
    data = decode_payload(payload)

    code_type = data.get('type') or expected_type
    if not code_type:
        raise InvalidPayloadError('QR payload does not say whose code it is.')
    if expected_type and code_type != expected_type:
        raise IllegalQRTransitionError(
            f"Expected a {expected_type} QR code but a {code_type} code was scanned."
        )

    qr = get_code(transaction_id=data['transactionId'].strip(), code_type=code_type)

    if expected_item_id is not None and str(qr.listing_id) != str(expected_item_id):
        raise InvalidPayloadError('This QR code belongs to a different item.')

    _check_usable(qr, now)
    return qr


def transition(
    *,
    transaction_id: str,
    holder_role: str,
    next_status: str,
    now=None
) -> QRCode:
    """
    Move a code to its next status.

    Donor codes go active -> scanned; collector codes go active or
    scanned -> completed. The move is a compare-and-swap on status and
    expiry; when it matches no row the current state is re-read to raise
    the precise error.

    Raises:
        IllegalQRTransitionError: For any other (role, status) pair
        QRCodeNotFoundError, QRCodeExpiredError, QRCodeAlreadyUsedError
    """
    sources = TRANSITIONS.get((holder_role, next_status))
    if sources is None:
        raise IllegalQRTransitionError(
            f"A {holder_role} QR code cannot move to '{next_status}'."
        )

    now = now or timezone.now()
    updated = (
        QRCode.objects
        .filter(
            transaction_id=transaction_id,
            code_type=holder_role,
            superseded_at__isnull=True,
            status__in=sources,
            expires_at__gte=now,
        )
        .update(status=next_status, updated_at=now, **{TIMESTAMP_FIELDS[next_status]: now})
    )

    qr = get_code(transaction_id=transaction_id, code_type=holder_role)
    if not updated:
        _check_usable(qr, now)
        # State allowed the move after all; the row changed under us
        raise QRCodeAlreadyUsedError()

    logger.info(
        'qr_transitioned',
        extra={'extra': {
            'event': 'qr_transitioned',
            'transaction_id': transaction_id,
            'code_type': holder_role,
            'status': next_status,
        }},
    )
    return qr


def close_claim_codes(*, claim_request_id: UUID, now=None) -> int:
    """
    Retire the live codes of a completed claim.

    The collector code is marked completed and a donor code that was never
    scanned is expired, so neither validates once the hand-off is done.
    Codes already past their step are left as they are.
    """
    now = now or timezone.now()
    live = QRCode.objects.filter(claim_request_id=claim_request_id, superseded_at__isnull=True)

    completed = (
        live.filter(code_type=QRCodeType.COLLECTOR, status__in=LIVE_STATUSES)
        .update(status=QRCodeStatus.COMPLETED, completed_at=now, updated_at=now)
    )
    expired = (
        live.filter(code_type=QRCodeType.DONOR, status=QRCodeStatus.ACTIVE)
        .update(status=QRCodeStatus.EXPIRED, updated_at=now)
    )

    if completed or expired:
        logger.info(
            'qr_codes_closed',
            extra={'extra': {
                'event': 'qr_codes_closed',
                'request_id': str(claim_request_id),
                'completed': completed,
                'expired': expired,
            }},
        )
    return completed + expired


def render_png(qr: QRCode) -> bytes:
    """Render the code's JSON payload as a PNG image."""
    image = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    image.add_data(encode_payload(qr))
    image.make(fit=True)

    buffer = io.BytesIO()
    image.make_image(fill_color='black', back_color='white').save(buffer, format='PNG')
    return buffer.getvalue()


def get_codes_for_transaction(transaction_id: str) -> QuerySet:
    return (
        QRCode.objects
        .select_related('listing', 'holder')
        .filter(transaction_id=transaction_id)
        .order_by('code_type')
    )


def get_codes_for_holder(holder_id: UUID, status: Optional[str] = None) -> QuerySet:
    """Codes held by a user, newest first, optionally filtered by status."""
    codes = QRCode.objects.select_related('listing').filter(holder_id=holder_id)
    if status:
        codes = codes.filter(status=status)
    return codes.order_by('-created_at')


def get_codes_for_claim(claim_request_id: UUID) -> QuerySet:
    return (
        QRCode.objects
        .filter(claim_request_id=claim_request_id, superseded_at__isnull=True)
        .order_by('code_type')
    )
