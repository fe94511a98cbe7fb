"""
URL configuration for the booking backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/token/            - Obtain JWT pair
    /api/v1/auth/token/refresh/    - Refresh JWT access token
    /api/v1/payments/              - Payment endpoints
        orders/                    - Create processor order with owner split
        refund-requests/           - Create refund request (cancels booking)
        refund-requests/process/   - Approve or reject a refund request (admin)
    /api/v1/movies/                - Booking endpoints
        bookings/confirmation-email/ - Send booking confirmation email
    /api/v1/support/               - Support endpoints
        acknowledgements/          - Email a support ticket acknowledgement

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import health_check

# All routes here are prefixed with /api/v1/
api_v1_patterns = [
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("payments/", include("payments.urls")),
    path("movies/", include("movies.urls")),
    path("support/", include("support.urls")),
]

urlpatterns = [
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

admin.site.site_header = "BookMyBiz Admin"
admin.site.site_title = "BookMyBiz Admin Portal"
admin.site.index_title = "Bookings, payouts and refunds"
