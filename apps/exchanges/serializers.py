from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import ClaimRequest, ClaimStatus


# =============================================================================
# Input Serializers
# =============================================================================

class ClaimRequestFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for claim request listing.

    Query Parameters:
        role (str): 'donor', 'collector' or 'all' (default)
        status (str): Filter by claim status
        item (UUID): Filter by item ID
    """

    role = serializers.ChoiceField(
        choices=['donor', 'collector', 'all'],
        required=False,
        default='all'
    )
    status = serializers.ChoiceField(choices=ClaimStatus.choices, required=False)
    item = serializers.UUIDField(required=False)


class ClaimRequestCreateSerializer(serializers.Serializer):
    """Input for submitting a claim request."""

    item_id = serializers.UUIDField()
    note = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    collector_name = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ApproveClaimInputSerializer(serializers.Serializer):
    chat_id = serializers.CharField(max_length=100, required=False, allow_null=True)


class CompleteClaimInputSerializer(serializers.Serializer):
    reward_points = serializers.IntegerField(min_value=0, required=False)


class PendingCountsFilterSerializer(serializers.Serializer):
    item = serializers.ListField(child=serializers.UUIDField(), required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class ClaimRequestSerializer(serializers.ModelSerializer):
    """Claim request as seen by its donor or collector."""

    item_id = serializers.UUIDField(source='listing_id', read_only=True)
    item_status = serializers.CharField(source='listing.status', read_only=True)
    donor = UserMinimalSerializer(read_only=True)
    collector = UserMinimalSerializer(read_only=True)
    transaction_id = serializers.SerializerMethodField()

    class Meta:
        model = ClaimRequest
        fields = [
            'id',
            'item_id',
            'item_title',
            'item_status',
            'donor',
            'donor_name',
            'collector',
            'collector_name',
            'note',
            'status',
            'transaction_id',
            'created_at',
            'decision_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_transaction_id(self, obj):
        """Transaction id of the QR pair minted on approval."""
        qr = obj.qr_codes.filter(superseded_at__isnull=True).first()
        return qr.transaction_id if qr else None


class CompletionResultSerializer(serializers.Serializer):
    claim_request = ClaimRequestSerializer()
    reward_points = serializers.IntegerField()
    already_completed = serializers.BooleanField()


class CollectionStatusSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    collected = serializers.BooleanField()
    confirmed_at = serializers.DateTimeField(allow_null=True)
