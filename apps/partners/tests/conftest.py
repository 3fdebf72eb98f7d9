import pytest

from apps.qrcodes.models import QRCode, QRCodeType


@pytest.fixture
def donor_code(approved_claim):
    return QRCode.objects.get(claim_request=approved_claim, code_type=QRCodeType.DONOR)


@pytest.fixture
def collector_code(approved_claim):
    return QRCode.objects.get(claim_request=approved_claim, code_type=QRCodeType.COLLECTOR)
