from rest_framework import serializers

from apps.exchanges.serializers import ClaimRequestSerializer
from apps.listings.models import Listing
from .models import PartnerShop, ScanEvent


# =============================================================================
# Input Serializers
# =============================================================================

class PartnerShopFilterSerializer(serializers.Serializer):
    """
    Query Parameters:
        mine (bool): Only shops the current user scans for
    """

    mine = serializers.BooleanField(required=False, default=False)


class DropoffInputSerializer(serializers.Serializer):
    """Input for checking an item in at a shop."""

    shop_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=['accept', 'reject'], default='accept')
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    qr_payload = serializers.JSONField(required=False, allow_null=True)
    staff_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        """Rejections must say why."""
        if attrs.get('action') == 'reject' and not attrs.get('reason', '').strip():
            raise serializers.ValidationError({
                'reason': 'A reason is required to reject a drop-off.'
            })
        return attrs


class ClaimOutInputSerializer(serializers.Serializer):
    """Input for releasing an item to its collector."""

    shop_id = serializers.UUIDField()
    claim_id = serializers.UUIDField(required=False, allow_null=True)
    qr_payload = serializers.JSONField(required=False, allow_null=True)
    staff_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')


class ProcessScanInputSerializer(serializers.Serializer):
    """Whatever the shop scanner read, plus the shop context."""

    raw = serializers.JSONField()
    shop_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=['accept', 'reject'], default='accept')
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    staff_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')


# =============================================================================
# Output Serializers
# =============================================================================

class PartnerShopSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerShop
        fields = ['id', 'name', 'address_line', 'postcode', 'is_active']
        read_only_fields = fields


class ScanEventSerializer(serializers.ModelSerializer):
    """One recorded shop scan."""

    shop_id = serializers.UUIDField(read_only=True)
    shop_name = serializers.CharField(source='shop.name', read_only=True)
    item_id = serializers.UUIDField(source='listing_id', read_only=True)
    item_title = serializers.CharField(source='listing.title', read_only=True)
    claim_request_id = serializers.UUIDField(read_only=True, allow_null=True)
    transaction_id = serializers.CharField(source='qr_code.transaction_id', read_only=True, default=None)

    class Meta:
        model = ScanEvent
        fields = [
            'id',
            'shop_id',
            'shop_name',
            'item_id',
            'item_title',
            'claim_request_id',
            'transaction_id',
            'mode',
            'result',
            'reason',
            'staff_name',
            'notes',
            'co2_impact',
            'scanned_at',
        ]
        read_only_fields = fields


class ScanResultSerializer(serializers.Serializer):
    scan_result = serializers.CharField(source='result')
    scan_event = ScanEventSerializer(source='*')


class PartnerScanStateSerializer(serializers.Serializer):
    normalized_status = serializers.CharField(allow_null=True)
    dropoff_allowed = serializers.BooleanField()
    pickup_allowed = serializers.BooleanField()
    action_mode = serializers.CharField()
    is_indeterminate = serializers.BooleanField()


class ScannedItemSerializer(serializers.ModelSerializer):
    item_id = serializers.UUIDField(source='id', read_only=True)

    class Meta:
        model = Listing
        fields = [
            'item_id',
            'title',
            'description',
            'category',
            'condition',
            'image_url',
            'co2_impact',
            'pickup_option',
            'status',
            'drop_off_location',
        ]
        read_only_fields = fields


class ItemScanViewSerializer(serializers.Serializer):
    item = ScannedItemSerializer(source='listing')
    status = serializers.CharField()
    claim = ClaimRequestSerializer(allow_null=True)
    scan_state = PartnerScanStateSerializer()
    scan_events = ScanEventSerializer(many=True)


class ShopSummarySerializer(serializers.Serializer):
    total_scans = serializers.IntegerField()
    dropoffs = serializers.IntegerField()
    pickups = serializers.IntegerField()
    rejected = serializers.IntegerField()
    total_co2_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    last_scanned_at = serializers.DateTimeField(allow_null=True)
    recent_scans = ScanEventSerializer(many=True)
