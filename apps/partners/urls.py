from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'partners'

router = DefaultRouter()
router.register(r'shops', views.PartnerShopViewSet, basename='shop')
router.register(r'items', views.PartnerItemViewSet, basename='item')

urlpatterns = [
    # GET    /api/partners/shops/                     - Active shops (?mine=true)
    # GET    /api/partners/shops/{id}/                - Get shop
    # GET    /api/partners/shops/{id}/summary/        - Scan totals (shop staff)
    # GET    /api/partners/items/{item_id}/           - Item as seen at the counter
    # GET    /api/partners/items/{item_id}/scan_state/
    # POST   /api/partners/items/{item_id}/dropoff/   - Accept/reject drop-off
    # POST   /api/partners/items/{item_id}/claim_out/ - Release to collector

    path('scan/', views.scan, name='scan'),

    path('', include(router.urls)),
]
