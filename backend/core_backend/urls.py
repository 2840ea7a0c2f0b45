"""
URL configuration for the catering ERP backend.

Each app mounts its router under its own ``/api/<app>/`` prefix.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/insumos/", include("insumos.urls")),
    path("api/recipes/", include("recipes.urls")),
    path("api/menus/", include("menus.urls")),
    path("api/purchasing/", include("purchasing.urls")),
    path("api/warehouse/", include("warehouse.urls")),
    path("api/urgent-requests/", include("urgent_requests.urls")),
]
