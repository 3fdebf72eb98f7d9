import pytest
from django.urls import reverse
from rest_framework import status

from apps.rewards.services import credit


@pytest.mark.django_db
class TestRewardsApi:

    def test_balance(self, donor_client, donor):
        credit(donor=donor, points=25)

        response = donor_client.get(reverse('rewards:balance'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['balance'] == 25
        assert response.data['donor_id'] == str(donor.id)

    def test_balance_for_new_user_is_zero(self, collector_client):
        response = collector_client.get(reverse('rewards:balance'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['balance'] == 0

    def test_credits_are_private(self, donor, collector_client):
        credit(donor=donor, points=25)

        response = collector_client.get(reverse('rewards:credit-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_credits_list(self, donor, donor_client):
        credit(donor=donor, points=25, reason='Exchange completed')

        response = donor_client.get(reverse('rewards:credit-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'][0]['points'] == 25
        assert response.data['results'][0]['item_title'] is None

    def test_unauthenticated(self, api_client):
        assert api_client.get(reverse('rewards:balance')).status_code == status.HTTP_401_UNAUTHORIZED
