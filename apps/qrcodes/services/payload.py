"""
QR payload codec.

The payload is the UTF-8 JSON document printed inside every hand-off QR
code. Keys are camelCase because the same string is read by the mobile
scanner and the shop dashboard.
"""

import json
import re
from typing import Optional

from django.utils import timezone

from apps.qrcodes.models import QRCode, QRCodeType
from .exceptions import InvalidPayloadError

UUID_PATTERN = re.compile(
    r'[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}',
    re.IGNORECASE,
)
ITEM_PREFIX = 'QR:ITEM:'


def build_payload(qr: QRCode, now=None) -> dict:
    """Build the payload dict for ``qr``; ``timestamp`` is the render time."""
    now = now or timezone.now()
    listing = qr.listing

    payload = {
        'transactionId': qr.transaction_id,
        'type': qr.code_type,
        'itemId': str(qr.listing_id),
        'itemTitle': listing.title,
        'userId': str(qr.holder_id),
        'userName': qr.holder_name,
        'metadata': {
            'category': qr.category,
            'condition': qr.condition,
            'co2Impact': float(qr.co2_impact),
            'createdAt': qr.created_at.isoformat(),
            'expiresAt': qr.expires_at.isoformat(),
            'actionType': qr.action_type,
        },
        'timestamp': now.isoformat(),
    }
    if listing.description:
        payload['itemDescription'] = listing.description
    if listing.image_url:
        payload['itemImage'] = listing.image_url
    if qr.drop_off_location:
        payload['dropOffLocation'] = qr.drop_off_location
    return payload


def encode_payload(qr: QRCode, now=None) -> str:
    return json.dumps(build_payload(qr, now=now), separators=(',', ':'))


def decode_payload(raw) -> dict:
    """
    Parse a scanned payload.

    Accepts the raw string (or bytes) read from the code, or an already
    decoded dict. Only ``transactionId`` is mandatory; ``type`` must be
    ``donor`` or ``collector`` when present.

    Raises:
        InvalidPayloadError: If the input is not a hand-off payload
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError:
            raise InvalidPayloadError('QR payload is not valid UTF-8.')

    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise InvalidPayloadError('QR payload is empty.')
        try:
            data = json.loads(raw)
        except ValueError:
            raise InvalidPayloadError('QR payload is not valid JSON.')
    else:
        data = raw

    if not isinstance(data, dict):
        raise InvalidPayloadError('QR payload must be a JSON object.')

    transaction_id = data.get('transactionId')
    if not isinstance(transaction_id, str) or not transaction_id.strip():
        raise InvalidPayloadError('QR payload has no transactionId.')

    code_type = data.get('type')
    if code_type is not None and code_type not in QRCodeType.values:
        raise InvalidPayloadError(f"Unknown QR code type '{code_type}'.")

    return data


def extract_item_id(raw) -> Optional[str]:
    """
    Pull an item id out of loosely formatted scan input.

    Understands a full JSON payload (``itemId``), the ``QR:ITEM:<uuid>``
    label format, and any text containing a UUID. Returns None when
    nothing usable is found.
    """
    if isinstance(raw, dict):
        item_id = raw.get('itemId')
        return str(item_id) if item_id else None

    if isinstance(raw, bytes):
        raw = raw.decode('utf-8', errors='ignore')
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None

    if text.startswith('{'):
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            # A JSON object names its item explicitly or not at all
            return str(data['itemId']) if data.get('itemId') else None

    if text.upper().startswith(ITEM_PREFIX):
        text = text[len(ITEM_PREFIX):]

    match = UUID_PATTERN.search(text)
    return match.group(0).lower() if match else None


def looks_like_payload(raw) -> bool:
    """True when ``raw`` is a JSON object carrying a transactionId."""
    if isinstance(raw, dict):
        return 'transactionId' in raw
    if isinstance(raw, bytes):
        raw = raw.decode('utf-8', errors='ignore')
    if not isinstance(raw, str) or not raw.strip().startswith('{'):
        return False
    try:
        data = json.loads(raw)
    except ValueError:
        return False
    return isinstance(data, dict) and 'transactionId' in data
