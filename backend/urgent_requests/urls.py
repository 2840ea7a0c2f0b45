from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import UrgentPurchaseRequestViewSet

# Registered at the app root, so no API root view
router = SimpleRouter()
router.register(r'', UrgentPurchaseRequestViewSet, basename='urgent-request')

app_name = "urgent_requests"

urlpatterns = [
    path('', include(router.urls)),
]
