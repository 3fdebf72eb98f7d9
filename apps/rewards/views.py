from rest_framework import generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import BalanceSerializer, RewardCreditSerializer
from .services import balance, credit_history


class RewardCreditPagination(PageNumberPagination):
    """Custom pagination for reward credits."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


@extend_schema(
    responses={200: BalanceSerializer},
    description="GreenPoints balance of the current user.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_balance(request):
    """Get current user's reward balance."""
    data = {'donor_id': request.user.id, 'balance': balance(request.user.id)}
    return Response(BalanceSerializer(data).data)


class RewardCreditListView(generics.ListAPIView):
    """Credits received by the current user, newest first."""

    serializer_class = RewardCreditSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = RewardCreditPagination

    def get_queryset(self):
        return credit_history(self.request.user.id)
