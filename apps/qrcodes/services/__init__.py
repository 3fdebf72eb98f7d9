"""QR code registry services."""

from .exceptions import (
    InvalidPayloadError,
    QRCodeNotFoundError,
    QRCodeExpiredError,
    QRCodeAlreadyUsedError,
    IllegalQRTransitionError,
)
from .payload import (
    build_payload,
    encode_payload,
    decode_payload,
    extract_item_id,
    looks_like_payload,
)
from .registry import (
    generate_transaction_id,
    issue_pair,
    issue_standalone,
    get_code,
    validate,
    transition,
    render_png,
    close_claim_codes,
    get_codes_for_transaction,
    get_codes_for_holder,
    get_codes_for_claim,
)

__all__ = [
    # Exceptions
    'InvalidPayloadError',
    'QRCodeNotFoundError',
    'QRCodeExpiredError',
    'QRCodeAlreadyUsedError',
    'IllegalQRTransitionError',
    # Payload
    'build_payload',
    'encode_payload',
    'decode_payload',
    'extract_item_id',
    'looks_like_payload',
    # Registry
    'generate_transaction_id',
    'issue_pair',
    'issue_standalone',
    'get_code',
    'validate',
    'transition',
    'render_png',
    'close_claim_codes',
    'get_codes_for_transaction',
    'get_codes_for_holder',
    'get_codes_for_claim',
]
