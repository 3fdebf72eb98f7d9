import pytest
from datetime import timedelta
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.qrcodes.models import QRCode, QRCodeStatus
from apps.qrcodes.services import encode_payload


@pytest.mark.django_db
class TestQRCodeList:
    """Tests for GET /api/qrcodes/"""

    def test_lists_only_own_codes(self, collector_client, collector_qr, donor_qr):
        url = reverse('qrcodes:qrcode-list')
        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        ids = [qr['id'] for qr in response.data['results']]
        assert ids == [str(collector_qr.id)]

    def test_filter_by_status(self, donor_client, donor_qr):
        url = reverse('qrcodes:qrcode-list')
        response = donor_client.get(url, {'status': 'completed'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('qrcodes:qrcode-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_cannot_retrieve_someone_elses_code(self, outsider_client, donor_qr):
        url = reverse('qrcodes:qrcode-detail', kwargs={'pk': donor_qr.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestQRCodePayloadAndImage:

    def test_payload(self, donor_client, donor_qr):
        url = reverse('qrcodes:qrcode-payload', kwargs={'pk': donor_qr.id})
        response = donor_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['transactionId'] == donor_qr.transaction_id
        assert response.data['type'] == 'donor'

    def test_image(self, donor_client, donor_qr):
        url = reverse('qrcodes:qrcode-image', kwargs={'pk': donor_qr.id})
        response = donor_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(b'\x89PNG')


@pytest.mark.django_db
class TestQRCodeGenerate:
    """Tests for POST /api/qrcodes/generate/"""

    def test_donor_generates_standalone_code(self, donor_client, listing):
        url = reverse('qrcodes:qrcode-generate')
        response = donor_client.post(url, {'item_id': str(listing.id)}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['code_type'] == 'donor'
        assert response.data['claim_request_id'] is None
        assert response.data['status'] == QRCodeStatus.ACTIVE

    def test_only_donor_can_generate(self, collector_client, listing):
        url = reverse('qrcodes:qrcode-generate')
        response = collector_client.post(url, {'item_id': str(listing.id)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not QRCode.objects.exists()

    def test_unknown_item(self, donor_client):
        url = reverse('qrcodes:qrcode-generate')
        response = donor_client.post(
            url, {'item_id': '3f1c2d4e-5a6b-4c7d-8e9f-0a1b2c3d4e5f'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestQRCodeValidate:
    """Tests for POST /api/qrcodes/validate/"""

    def test_valid_payload_string(self, staff_client, partner_shop, donor_qr):
        url = reverse('qrcodes:qrcode-validate')
        response = staff_client.post(url, {'payload': encode_payload(donor_qr)}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is True
        assert response.data['qr_code']['id'] == str(donor_qr.id)

    def test_used_code_conflict(self, staff_client, partner_shop, donor_qr):
        QRCode.objects.filter(pk=donor_qr.pk).update(status=QRCodeStatus.SCANNED)
        url = reverse('qrcodes:qrcode-validate')
        response = staff_client.post(url, {'payload': encode_payload(donor_qr)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['detail'].code == 'qr_code_already_used'

    def test_garbage_payload(self, staff_client, partner_shop):
        url = reverse('qrcodes:qrcode-validate')
        response = staff_client.post(url, {'payload': 'hello'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_outsider_forbidden(self, outsider_client, partner_shop, donor_qr):
        url = reverse('qrcodes:qrcode-validate')
        response = outsider_client.post(url, {'payload': encode_payload(donor_qr)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'qr_code' not in response.data

    def test_holder_cannot_validate_own_code(self, donor_client, partner_shop, donor_qr):
        url = reverse('qrcodes:qrcode-validate')
        response = donor_client.post(url, {'payload': encode_payload(donor_qr)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_expired_code_left_untouched_for_outsider(self, outsider_client, partner_shop, donor_qr):
        QRCode.objects.filter(pk=donor_qr.pk).update(expires_at=timezone.now() - timedelta(hours=1))
        url = reverse('qrcodes:qrcode-validate')
        outsider_client.post(url, {'payload': encode_payload(donor_qr)}, format='json')

        donor_qr.refresh_from_db()
        assert donor_qr.status == QRCodeStatus.ACTIVE

    def test_collector_code_used_after_api_completion(self, staff_client, collector_client, partner_shop, approved_claim, collector_qr):
        collector_client.post(reverse('exchanges:claim-complete', kwargs={'pk': approved_claim.id}), format='json')

        url = reverse('qrcodes:qrcode-validate')
        response = staff_client.post(url, {'payload': encode_payload(collector_qr)}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['detail'].code == 'qr_code_already_used'
