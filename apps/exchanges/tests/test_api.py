import pytest
from django.urls import reverse
from rest_framework import status

from apps.exchanges.models import ClaimStatus
from apps.exchanges.services import submit_claim_request


# =============================================================================
# ClaimRequest Tests
# =============================================================================

@pytest.mark.django_db
class TestClaimRequestCreate:
    """Tests for POST /api/exchanges/claims/"""

    def test_submit_claim(self, collector_client, listing):
        url = reverse('exchanges:claim-list')
        response = collector_client.post(url, {'item_id': str(listing.id), 'note': 'Saturday?'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == ClaimStatus.PENDING
        assert response.data['item_id'] == str(listing.id)
        assert response.data['collector_name'] == 'Colin Collector'
        assert response.data['transaction_id'] is None

    def test_repeat_submit_returns_existing(self, collector_client, listing, pending_claim):
        url = reverse('exchanges:claim-list')
        response = collector_client.post(url, {'item_id': str(listing.id)}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(pending_claim.id)

    def test_self_claim_rejected(self, donor_client, listing):
        url = reverse('exchanges:claim-list')
        response = donor_client.post(url, {'item_id': str(listing.id)}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'].code == 'self_claim'

    def test_unknown_item(self, collector_client):
        url = reverse('exchanges:claim-list')
        response = collector_client.post(
            url, {'item_id': '3f1c2d4e-5a6b-4c7d-8e9f-0a1b2c3d4e5f'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unauthenticated(self, api_client, listing):
        url = reverse('exchanges:claim-list')
        response = api_client.post(url, {'item_id': str(listing.id)}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestClaimRequestList:
    """Tests for GET /api/exchanges/claims/"""

    def test_parties_see_request(self, donor_client, collector_client, pending_claim):
        url = reverse('exchanges:claim-list')

        for client in (donor_client, collector_client):
            response = client.get(url)
            assert response.status_code == status.HTTP_200_OK
            assert [c['id'] for c in response.data['results']] == [str(pending_claim.id)]

    def test_outsider_sees_nothing(self, outsider_client, pending_claim):
        response = outsider_client.get(reverse('exchanges:claim-list'))

        assert response.data['results'] == []

    def test_filter_by_role(self, donor_client, pending_claim):
        url = reverse('exchanges:claim-list')

        assert len(donor_client.get(url, {'role': 'donor'}).data['results']) == 1
        assert donor_client.get(url, {'role': 'collector'}).data['results'] == []

    def test_invalid_filter(self, donor_client):
        response = donor_client.get(reverse('exchanges:claim-list'), {'status': 'lost'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_by_outsider_not_found(self, outsider_client, pending_claim):
        url = reverse('exchanges:claim-detail', kwargs={'pk': pending_claim.id})

        assert outsider_client.get(url).status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestClaimRequestDecisions:
    """Tests for approve/decline/complete actions."""

    def test_donor_approves(self, donor_client, pending_claim):
        url = reverse('exchanges:claim-approve', kwargs={'pk': pending_claim.id})
        response = donor_client.post(url, {'chat_id': 'chat-1'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == ClaimStatus.APPROVED
        assert response.data['transaction_id'].startswith('TC')
        assert response.data['item_status'] == 'pending_dropoff'

    def test_collector_cannot_approve(self, collector_client, pending_claim):
        url = reverse('exchanges:claim-approve', kwargs={'pk': pending_claim.id})
        response = collector_client.post(url, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        pending_claim.refresh_from_db()
        assert pending_claim.status == ClaimStatus.PENDING

    def test_second_approval_conflicts(self, donor_client, listing, other_collector, approved_claim):
        other, _ = submit_claim_request(item_id=listing.id, collector=other_collector)

        url = reverse('exchanges:claim-approve', kwargs={'pk': other.id})
        response = donor_client.post(url, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['detail'].code == 'illegal_claim_transition'

    def test_donor_declines(self, donor_client, pending_claim):
        url = reverse('exchanges:claim-decline', kwargs={'pk': pending_claim.id})
        response = donor_client.post(url, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == ClaimStatus.DECLINED

    def test_collector_completes(self, collector_client, approved_claim):
        url = reverse('exchanges:claim-complete', kwargs={'pk': approved_claim.id})
        response = collector_client.post(url, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['reward_points'] == 25
        assert response.data['already_completed'] is False
        assert response.data['claim_request']['status'] == ClaimStatus.COMPLETED

    def test_both_parties_complete(self, donor_client, collector_client, approved_claim):
        url = reverse('exchanges:claim-complete', kwargs={'pk': approved_claim.id})
        collector_client.post(url, format='json')
        response = donor_client.post(url, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['already_completed'] is True
        assert response.data['reward_points'] == 0

    def test_complete_pending_conflicts(self, donor_client, pending_claim):
        url = reverse('exchanges:claim-complete', kwargs={'pk': pending_claim.id})
        response = donor_client.post(url, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_negative_points_rejected(self, donor_client, approved_claim):
        url = reverse('exchanges:claim-complete', kwargs={'pk': approved_claim.id})
        response = donor_client.post(url, {'reward_points': -1}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestPendingCountsAndCollection:

    def test_pending_counts_for_own_listings(self, donor_client, listing, pending_claim):
        response = donor_client.get(reverse('exchanges:claim-pending-counts'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['counts'] == {str(listing.id): 1}

    def test_pending_counts_ignore_other_donors_items(self, collector_client, pending_claim):
        response = collector_client.get(reverse('exchanges:claim-pending-counts'))

        assert response.data['counts'] == {}

    def test_collection_status(self, collector_client, listing, approved_claim):
        url = reverse('exchanges:item-collection-status', kwargs={'item_id': listing.id})

        before = collector_client.get(url)
        collector_client.post(reverse('exchanges:claim-complete', kwargs={'pk': approved_claim.id}), format='json')
        after = collector_client.get(url)

        assert before.data['collected'] is False
        assert before.data['confirmed_at'] is None
        assert after.data['collected'] is True
        assert after.data['confirmed_at'] is not None
