from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import InsumoViewSet, StockMovementViewSet, SupplierViewSet

# Create router and register viewsets
router = DefaultRouter()
router.register(r'suppliers', SupplierViewSet)
router.register(r'insumos', InsumoViewSet)
router.register(r'stock-movements', StockMovementViewSet)

app_name = "insumos"

urlpatterns = [
    path('', include(router.urls)),
]
