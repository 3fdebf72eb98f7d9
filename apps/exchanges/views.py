from rest_framework import mixins, viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.listings.models import Listing
from apps.listings.services import get_listing

from .models import ClaimRequest
from .permissions import IsClaimDonor, IsClaimParty
from .serializers import (
    ClaimRequestSerializer,
    ClaimRequestCreateSerializer,
    ClaimRequestFilterSerializer,
    ApproveClaimInputSerializer,
    CompleteClaimInputSerializer,
    CompletionResultSerializer,
    CollectionStatusSerializer,
    PendingCountsFilterSerializer,
)
from .services import (
    submit_claim_request,
    approve_claim_request,
    decline_claim_request,
    complete_claim_request,
    pending_request_count_by_item,
    get_item_collection_status,
    ClaimRequestNotFoundError,
)


# Response serializers for API documentation
class PendingCountsResponseSerializer(drf_serializers.Serializer):
    counts = drf_serializers.DictField(child=drf_serializers.IntegerField())


class ClaimRequestPagination(PageNumberPagination):
    """Custom pagination for claim requests."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ClaimRequestViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Claim requests the current user is a party to.

    list: Requests the user sent or received (filter by role/status/item)
    create: Request an item (returns the existing request on repeat)
    retrieve: Get a specific request
    approve / decline: Donor decides on a pending request
    complete: Either party confirms the hand-off
    """

    queryset = ClaimRequest.objects.select_related('listing', 'donor', 'collector')
    serializer_class = ClaimRequestSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ClaimRequestPagination

    def get_queryset(self):
        """Filter requests using input serializer validation."""
        queryset = super().get_queryset()
        user = self.request.user

        if self.action != 'list':
            return queryset.filter(Q(donor=user) | Q(collector=user))

        filter_serializer = ClaimRequestFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        role = params.get('role', 'all')
        if role == 'donor':
            queryset = queryset.filter(donor=user)
        elif role == 'collector':
            queryset = queryset.filter(collector=user)
        else:
            queryset = queryset.filter(Q(donor=user) | Q(collector=user))

        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('item'):
            queryset = queryset.filter(listing_id=params['item'])

        return queryset.order_by('-created_at')

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'create':
            return ClaimRequestCreateSerializer
        return ClaimRequestSerializer

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['approve', 'decline']:
            return [IsAuthenticated(), IsClaimDonor()]
        if self.action in ['retrieve', 'complete']:
            return [IsAuthenticated(), IsClaimParty()]
        return [IsAuthenticated()]

    @extend_schema(
        request=ClaimRequestCreateSerializer,
        responses={201: ClaimRequestSerializer, 200: ClaimRequestSerializer},
        description="Request an item. Repeating the request returns the existing one with 200.",
        tags=['exchanges'],
    )
    def create(self, request, *args, **kwargs):
        """Submit a claim request."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claim, created = submit_claim_request(
            item_id=serializer.validated_data['item_id'],
            collector=request.user,
            note=serializer.validated_data.get('note', ''),
            collector_name=serializer.validated_data.get('collector_name') or None,
        )

        output_serializer = ClaimRequestSerializer(claim, context={'request': request})
        return Response(
            output_serializer.data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    @extend_schema(
        request=ApproveClaimInputSerializer,
        responses={200: ClaimRequestSerializer},
        description="Approve a pending request; other pending requests for the item are declined.",
        tags=['exchanges'],
    )
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve a claim request (donor only)."""
        claim = self.get_object()
        serializer = ApproveClaimInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claim = approve_claim_request(
            request_id=claim.id,
            chat_id=serializer.validated_data.get('chat_id'),
        )
        if claim is None:
            raise ClaimRequestNotFoundError()

        return Response(ClaimRequestSerializer(claim, context={'request': request}).data)

    @extend_schema(
        request=None,
        responses={200: ClaimRequestSerializer},
        tags=['exchanges'],
    )
    @action(detail=True, methods=['post'])
    def decline(self, request, pk=None):
        """Decline a pending claim request (donor only)."""
        claim = decline_claim_request(request_id=self.get_object().id)
        if claim is None:
            raise ClaimRequestNotFoundError()

        return Response(ClaimRequestSerializer(claim, context={'request': request}).data)

    @extend_schema(
        request=CompleteClaimInputSerializer,
        responses={200: CompletionResultSerializer},
        description="Confirm the hand-off and credit the donor. Safe to call twice.",
        tags=['exchanges'],
    )
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Complete an approved claim request (donor or collector)."""
        claim = self.get_object()
        serializer = CompleteClaimInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = complete_claim_request(
            request_id=claim.id,
            reward_points=serializer.validated_data.get('reward_points'),
        )
        if result is None:
            raise ClaimRequestNotFoundError()

        return Response(CompletionResultSerializer(result, context={'request': request}).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('item', str, many=True, description='Item IDs (repeatable)'),
        ],
        responses={200: PendingCountsResponseSerializer},
        description="Pending request counts for the current user's listings.",
        tags=['exchanges'],
    )
    @action(detail=False, methods=['get'])
    def pending_counts(self, request):
        """Pending request count per item the user listed."""
        filter_serializer = PendingCountsFilterSerializer(
            data={'item': request.query_params.getlist('item')}
        )
        filter_serializer.is_valid(raise_exception=True)

        listings = Listing.objects.filter(donor=request.user)
        requested = filter_serializer.validated_data.get('item')
        if requested:
            listings = listings.filter(id__in=requested)

        counts = pending_request_count_by_item(
            item_ids=listings.values_list('id', flat=True)
        )
        return Response({'counts': counts})


@extend_schema(
    responses={200: CollectionStatusSerializer},
    description="Whether an item's hand-off has been confirmed.",
    tags=['exchanges'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_collection_status(request, item_id):
    """Get collection status of an item."""
    listing = get_listing(item_id)
    record = get_item_collection_status(listing.id)

    data = {
        'item_id': listing.id,
        'collected': bool(record and record.collected),
        'confirmed_at': record.confirmed_at if record else None,
    }
    return Response(CollectionStatusSerializer(data).data)
