import pytest
from apps.qrcodes.models import QRCode, QRCodeType


@pytest.fixture
def donor_qr(approved_claim):
    """Donor half of the pair minted on approval."""
    return QRCode.objects.get(claim_request=approved_claim, code_type=QRCodeType.DONOR)


@pytest.fixture
def collector_qr(approved_claim):
    """Collector half of the pair minted on approval."""
    return QRCode.objects.get(claim_request=approved_claim, code_type=QRCodeType.COLLECTOR)
