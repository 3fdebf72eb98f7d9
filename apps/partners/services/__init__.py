"""Partner shop services."""

from .exceptions import (
    ShopNotFoundError,
    ShopStaffRequiredError,
    IllegalScanActionError,
)
from .scan_state import (
    PartnerScanState,
    compute_partner_scan_state,
    scan_state_for_listing,
)
from .shop_directory import (
    get_shop,
    is_shop_staff,
    require_shop_staff,
    list_active_shops,
    shops_for_user,
)
from .scan_actions import (
    ItemScanView,
    qr_dropoff_in,
    qr_claim_out,
    qr_view_item,
    process_scan,
)
from .statistics import (
    get_shop_scan_history,
    get_shop_summary,
)

__all__ = [
    # Exceptions
    'ShopNotFoundError',
    'ShopStaffRequiredError',
    'IllegalScanActionError',
    # Scan State
    'PartnerScanState',
    'compute_partner_scan_state',
    'scan_state_for_listing',
    # Shop Directory
    'get_shop',
    'is_shop_staff',
    'require_shop_staff',
    'list_active_shops',
    'shops_for_user',
    # Scan Actions
    'ItemScanView',
    'qr_dropoff_in',
    'qr_claim_out',
    'qr_view_item',
    'process_scan',
    # Statistics
    'get_shop_scan_history',
    'get_shop_summary',
]
