"""
Domain exceptions for the QR code registry.

Every scan failure maps to one specific, actionable message so shop staff
know whether to retry, ask for a new code, or turn the customer away.
"""
from rest_framework.exceptions import APIException


class InvalidPayloadError(APIException):
    """Scanned input could not be parsed as a hand-off code."""
    status_code = 400
    default_detail = 'This does not look like a valid hand-off QR code.'
    default_code = 'invalid_qr_payload'


class QRCodeNotFoundError(APIException):
    """No code is registered for the scanned transaction."""
    status_code = 404
    default_detail = 'QR code not found.'
    default_code = 'qr_code_not_found'


class QRCodeExpiredError(APIException):
    """Code is past its expiry time."""
    status_code = 410
    default_detail = 'This QR code has expired. Ask the owner to generate a new one.'
    default_code = 'qr_code_expired'


class QRCodeAlreadyUsedError(APIException):
    """Code is not in a status its next transition can start from."""
    status_code = 409
    default_detail = 'This QR code has already been used.'
    default_code = 'qr_code_already_used'


class IllegalQRTransitionError(APIException):
    """Requested status change is not allowed for this kind of code."""
    status_code = 409
    default_detail = 'This QR code cannot be used for that action.'
    default_code = 'illegal_qr_transition'
