"""Domain exceptions for partner shop scanning."""
from rest_framework.exceptions import APIException


class ShopNotFoundError(APIException):
    """Shop does not exist or is no longer a partner."""
    status_code = 404
    default_detail = 'Partner shop not found.'
    default_code = 'shop_not_found'


class ShopStaffRequiredError(APIException):
    """User is not on the shop's staff list."""
    status_code = 403
    default_detail = 'Only staff of this partner shop can scan items.'
    default_code = 'shop_staff_required'


class IllegalScanActionError(APIException):
    """Scan action does not match what the item is ready for."""
    status_code = 409
    default_detail = 'This action is not allowed for the item right now.'
    default_code = 'illegal_scan_action'
