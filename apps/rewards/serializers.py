from rest_framework import serializers
from .models import RewardCredit


class BalanceSerializer(serializers.Serializer):
    donor_id = serializers.UUIDField()
    balance = serializers.IntegerField()


class RewardCreditSerializer(serializers.ModelSerializer):
    claim_request_id = serializers.UUIDField(read_only=True, allow_null=True)
    item_title = serializers.CharField(source='claim_request.item_title', read_only=True, default=None)

    class Meta:
        model = RewardCredit
        fields = ['id', 'points', 'reason', 'claim_request_id', 'item_title', 'created_at']
        read_only_fields = fields
