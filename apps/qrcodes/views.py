from django.http import HttpResponse
from rest_framework import mixins, viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.listings.models import ListingStatus
from apps.listings.services import get_listing, ListingUnavailableError
from apps.partners.permissions import IsPartnerStaff

from .models import QRCode, QRCodeType
from .serializers import (
    QRCodeSerializer,
    QRCodeFilterSerializer,
    GenerateQRCodeInputSerializer,
    ValidateQRCodeInputSerializer,
)
from .services import build_payload, issue_standalone, render_png, validate as validate_scanned_code


# Response serializers for API documentation
class ValidateResponseSerializer(drf_serializers.Serializer):
    valid = drf_serializers.BooleanField()
    qr_code = QRCodeSerializer()


class QRCodePagination(PageNumberPagination):
    """Custom pagination for QR codes."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class QRCodeViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    QR codes held by the current user.

    list: Own codes (filter by status/code_type/transaction)
    retrieve: Get a specific code
    payload: JSON document printed in the code
    image: PNG rendering of the code
    generate: Donor drop-off code for an unclaimed listing
    validate: Check a scanned payload without using it
    """

    queryset = QRCode.objects.select_related('listing')
    serializer_class = QRCodeSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = QRCodePagination

    def get_queryset(self):
        """Filter codes using input serializer validation."""
        queryset = super().get_queryset().filter(holder=self.request.user)

        if self.action != 'list':
            return queryset

        filter_serializer = QRCodeFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('code_type'):
            queryset = queryset.filter(code_type=params['code_type'])
        if params.get('transaction'):
            queryset = queryset.filter(transaction_id=params['transaction'])

        return queryset.order_by('-created_at')

    def get_permissions(self):
        """Scanning a code is for partner shop staff."""
        if self.action == 'validate':
            return [IsAuthenticated(), IsPartnerStaff()]
        return [IsAuthenticated()]

    @extend_schema(
        responses={200: drf_serializers.DictField()},
        description="JSON payload encoded in the QR code.",
        tags=['qrcodes'],
    )
    @action(detail=True, methods=['get'])
    def payload(self, request, pk=None):
        """Get the code's payload."""
        return Response(build_payload(self.get_object()))

    @extend_schema(
        responses={(200, 'image/png'): OpenApiResponse(description='PNG image')},
        tags=['qrcodes'],
    )
    @action(detail=True, methods=['get'])
    def image(self, request, pk=None):
        """Render the code as a PNG image."""
        qr = self.get_object()
        response = HttpResponse(render_png(qr), content_type='image/png')
        response['Content-Disposition'] = f'inline; filename="{qr.transaction_id}-{qr.code_type}.png"'
        return response

    @extend_schema(
        request=GenerateQRCodeInputSerializer,
        responses={201: QRCodeSerializer},
        description="Generate a drop-off code for one of your listings (valid 24 hours).",
        tags=['qrcodes'],
    )
    @action(detail=False, methods=['post'])
    def generate(self, request):
        """Generate a standalone donor code."""
        serializer = GenerateQRCodeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        listing = get_listing(serializer.validated_data['item_id'])
        if listing.donor_id != request.user.id:
            raise PermissionDenied('Only the donor can generate a code for this item.')
        if listing.status == ListingStatus.COLLECTED:
            raise ListingUnavailableError()

        qr = issue_standalone(listing=listing, holder=request.user, code_type=QRCodeType.DONOR)
        return Response(
            QRCodeSerializer(qr, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(
        request=ValidateQRCodeInputSerializer,
        responses={200: ValidateResponseSerializer},
        description="Check that a scanned code is usable. Does not use it up.",
        tags=['qrcodes'],
    )
    @action(detail=False, methods=['post'])
    def validate(self, request):
        """Validate a scanned payload."""
        serializer = ValidateQRCodeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        qr = validate_scanned_code(
            serializer.validated_data['payload'],
            expected_type=serializer.validated_data.get('expected_type'),
            expected_item_id=serializer.validated_data.get('item_id'),
        )
        return Response({
            'valid': True,
            'qr_code': QRCodeSerializer(qr, context={'request': request}).data,
        })
