from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'exchanges'

router = DefaultRouter()
router.register(r'claims', views.ClaimRequestViewSet, basename='claim')

urlpatterns = [
    # ClaimRequest ViewSet routes
    # GET    /api/exchanges/claims/                  - List user's requests
    # POST   /api/exchanges/claims/                  - Request an item
    # GET    /api/exchanges/claims/{id}/             - Get request
    # POST   /api/exchanges/claims/{id}/approve/     - Approve (donor)
    # POST   /api/exchanges/claims/{id}/decline/     - Decline (donor)
    # POST   /api/exchanges/claims/{id}/complete/    - Confirm hand-off (donor or collector)
    # GET    /api/exchanges/claims/pending_counts/   - Pending counts for own listings

    path(
        'items/<uuid:item_id>/collection/',
        views.item_collection_status,
        name='item-collection-status'
    ),

    path('', include(router.urls)),
]
