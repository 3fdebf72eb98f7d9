"""
URL configuration for the Hand-off Exchange project.

All endpoints live under /api/. Each domain app exposes its own urls module
with an app namespace (exchanges:, qrcodes:, rewards:, partners:).
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check (for Render)
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/', include('apps.accounts.urls')),

    # API endpoints
    path('api/exchanges/', include('apps.exchanges.urls')),
    path('api/qrcodes/', include('apps.qrcodes.urls')),
    path('api/rewards/', include('apps.rewards.urls')),
    path('api/partners/', include('apps.partners.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
