from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'qrcodes'

router = DefaultRouter()
router.register(r'', views.QRCodeViewSet, basename='qrcode')

urlpatterns = [
    # QRCode ViewSet routes
    # GET    /api/qrcodes/                - List own codes
    # GET    /api/qrcodes/{id}/           - Get code
    # GET    /api/qrcodes/{id}/payload/   - JSON payload
    # GET    /api/qrcodes/{id}/image/     - PNG image
    # POST   /api/qrcodes/generate/       - Donor drop-off code
    # POST   /api/qrcodes/validate/       - Check a scanned payload

    path('', include(router.urls)),
]
