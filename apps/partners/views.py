from rest_framework import viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .permissions import IsPartnerStaff, IsShopStaff
from .serializers import (
    PartnerShopSerializer,
    PartnerShopFilterSerializer,
    DropoffInputSerializer,
    ClaimOutInputSerializer,
    ProcessScanInputSerializer,
    ScanResultSerializer,
    PartnerScanStateSerializer,
    ItemScanViewSerializer,
    ShopSummarySerializer,
)
from .services import (
    list_active_shops,
    shops_for_user,
    get_shop_summary,
    get_shop_scan_history,
    qr_view_item,
    qr_dropoff_in,
    qr_claim_out,
    process_scan,
)


class PartnerShopViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Partner shops.

    list: Active shops (``?mine=true`` for shops the user scans for)
    retrieve: Get a shop
    summary: Scan totals and recent scans (shop staff only)
    """

    serializer_class = PartnerShopSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        if self.action == 'list':
            filter_serializer = PartnerShopFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            if filter_serializer.validated_data.get('mine'):
                return shops_for_user(self.request.user)
        return list_active_shops()

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action == 'summary':
            return [IsAuthenticated(), IsShopStaff()]
        return [IsAuthenticated()]

    @extend_schema(responses={200: ShopSummarySerializer}, tags=['partners'])
    @action(detail=True, methods=['get'])
    def summary(self, request, pk=None):
        """Scan totals and recent history for a shop."""
        shop = self.get_object()
        data = get_shop_summary(shop.id)
        data['recent_scans'] = get_shop_scan_history(shop.id)
        return Response(ShopSummarySerializer(data).data)


class PartnerItemViewSet(viewsets.ViewSet):
    """
    Items as seen from a shop counter.

    retrieve: Status, winning claim, recent scans and scan state
    scan_state: Which action the item allows right now
    dropoff: Check the item in (accept or reject)
    claim_out: Release the item to its collector
    """

    permission_classes = [IsAuthenticated, IsPartnerStaff]

    @extend_schema(responses={200: ItemScanViewSerializer}, tags=['partners'])
    def retrieve(self, request, pk=None):
        """View a scanned item."""
        view = qr_view_item(pk)
        return Response(ItemScanViewSerializer(view, context={'request': request}).data)

    @extend_schema(responses={200: PartnerScanStateSerializer}, tags=['partners'])
    @action(detail=True, methods=['get'])
    def scan_state(self, request, pk=None):
        """Resolve the scan action for an item."""
        view = qr_view_item(pk)
        return Response(PartnerScanStateSerializer(view.scan_state).data)

    @extend_schema(
        request=DropoffInputSerializer,
        responses={200: ScanResultSerializer},
        description="Accept or reject a donated item at the shop.",
        tags=['partners'],
    )
    @action(detail=True, methods=['post'])
    def dropoff(self, request, pk=None):
        """Check an item in at a shop."""
        serializer = DropoffInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        event = qr_dropoff_in(
            item_id=pk,
            shop_id=data['shop_id'],
            action=data['action'],
            reason=data.get('reason', ''),
            qr_payload=data.get('qr_payload'),
            staff_name=data.get('staff_name', ''),
            notes=data.get('notes', ''),
            scanned_by=request.user,
        )
        return Response(ScanResultSerializer(event).data)

    @extend_schema(
        request=ClaimOutInputSerializer,
        responses={200: ScanResultSerializer},
        description="Release an item to its approved collector and credit the donor.",
        tags=['partners'],
    )
    @action(detail=True, methods=['post'])
    def claim_out(self, request, pk=None):
        """Release an item to its collector."""
        serializer = ClaimOutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        event = qr_claim_out(
            item_id=pk,
            shop_id=data['shop_id'],
            claim_id=data.get('claim_id'),
            qr_payload=data.get('qr_payload'),
            staff_name=data.get('staff_name', ''),
            notes=data.get('notes', ''),
            scanned_by=request.user,
        )
        return Response(ScanResultSerializer(event).data)


@extend_schema(
    request=ProcessScanInputSerializer,
    responses={200: ScanResultSerializer},
    description="Process raw scanner input; the action is resolved from the item's state.",
    tags=['partners'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPartnerStaff])
def scan(request):
    """Process a shop scan."""
    serializer = ProcessScanInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    event = process_scan(
        raw=data['raw'],
        shop_id=data['shop_id'],
        action=data['action'],
        reason=data.get('reason', ''),
        staff_name=data.get('staff_name', ''),
        notes=data.get('notes', ''),
        scanned_by=request.user,
    )
    return Response(ScanResultSerializer(event).data)
