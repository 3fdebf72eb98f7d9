from rest_framework import serializers
from .models import QRCode, QRCodeStatus, QRCodeType


# =============================================================================
# Input Serializers
# =============================================================================

class QRCodeFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for QR code listing.

    Query Parameters:
        status (str): Filter by stored status
        code_type (str): 'donor' or 'collector'
        transaction (str): Filter by transaction ID
    """

    status = serializers.ChoiceField(choices=QRCodeStatus.choices, required=False)
    code_type = serializers.ChoiceField(choices=QRCodeType.choices, required=False)
    transaction = serializers.CharField(max_length=40, required=False)


class GenerateQRCodeInputSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()


class ValidateQRCodeInputSerializer(serializers.Serializer):
    """Scanned payload, either as the raw string or as a JSON object."""

    payload = serializers.JSONField()
    expected_type = serializers.ChoiceField(choices=QRCodeType.choices, required=False)
    item_id = serializers.UUIDField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class QRCodeSerializer(serializers.ModelSerializer):
    """QR code with its listing metadata; status reports lazy expiry."""

    item_id = serializers.UUIDField(source='listing_id', read_only=True)
    item_title = serializers.CharField(source='listing.title', read_only=True)
    holder_id = serializers.UUIDField(read_only=True)
    claim_request_id = serializers.UUIDField(read_only=True, allow_null=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = QRCode
        fields = [
            'id',
            'transaction_id',
            'code_type',
            'item_id',
            'item_title',
            'holder_id',
            'holder_name',
            'claim_request_id',
            'category',
            'condition',
            'co2_impact',
            'action_type',
            'drop_off_location',
            'status',
            'created_at',
            'expires_at',
            'scanned_at',
            'completed_at',
            'superseded_at',
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return obj.effective_status()
