from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
import logging

from core_backend.base import BaseViewSet, ReadOnlyBaseViewSet, FieldsetQueryParamsMixin
from .exceptions import ConcurrentModificationError, InventoryError
from .filters import InsumoFilter, StockMovementFilter
from .models import Insumo, StockMovement, Supplier
from .serializers import (
    InsumoPriceHistorySerializer,
    InsumoSerializer,
    ManualMovementSerializer,
    PhysicalCountSerializer,
    StockMovementSerializer,
    SupplierSerializer,
)
from .services import InsumoService

logger = logging.getLogger(__name__)


class SupplierViewSet(BaseViewSet):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ['name', 'contact_person', 'email']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']


class InsumoViewSet(FieldsetQueryParamsMixin, BaseViewSet):
    """
    ViewSet for the ingredient catalog.

    Endpoints:
    - GET/POST /api/insumos/insumos/
    - GET/PUT/PATCH/DELETE /api/insumos/insumos/<id>/ (DELETE archives)
    - POST /api/insumos/insumos/<id>/physical-count/
    - GET /api/insumos/insumos/<id>/price-history/
    - GET /api/insumos/insumos/<id>/movements/
    - GET /api/insumos/insumos/low-stock/

    Query params:
    - ?view=simple|list|detail (fieldset selection)
    - ?below_min_stock=true
    - ?include_archived=true|only
    """

    queryset = Insumo.objects.all()
    serializer_class = InsumoSerializer
    filterset_class = InsumoFilter
    permission_classes = [IsAuthenticated]
    search_fields = ['name', 'category', 'supplier_name']
    ordering_fields = ['name', 'stock_quantity', 'min_stock_level', 'unit_cost', 'created_at']
    ordering = ['name']

    def perform_update(self, serializer):
        """Unit-cost changes go through the service so price history is kept."""
        new_cost = serializer.validated_data.pop('unit_cost', None)
        with transaction.atomic():
            insumo = serializer.save()
            if new_cost is not None:
                InsumoService.update_unit_cost(insumo, new_cost, user=self.request.user)
                insumo.refresh_from_db()

    @action(detail=True, methods=['post'], url_path='physical-count')
    def physical_count(self, request, pk=None):
        """
        Register a physical count for an ingredient.

        Request body:
        {
            "counted_quantity": "12.50",
            "count_date": "2025-06-01T08:00:00Z"   (optional)
        }
        """
        insumo = self.get_object()
        input_serializer = PhysicalCountSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            insumo = InsumoService.register_physical_count(
                insumo,
                input_serializer.validated_data['counted_quantity'],
                user=request.user,
                count_date=input_serializer.validated_data.get('count_date'),
            )
        except InventoryError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(InsumoSerializer(insumo, context=self.get_serializer_context()).data)

    @action(detail=True, methods=['get'], url_path='price-history')
    def price_history(self, request, pk=None):
        insumo = self.get_object()
        history = insumo.price_history.select_related('changed_by')
        return Response(InsumoPriceHistorySerializer(history, many=True).data)

    @action(detail=True, methods=['get'])
    def movements(self, request, pk=None):
        """Ledger rows of one ingredient, newest first."""
        insumo = self.get_object()
        queryset = StockMovement.objects.filter(insumo=insumo).select_related('insumo', 'user')
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(StockMovementSerializer(page, many=True).data)
        return Response(StockMovementSerializer(queryset, many=True).data)

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        queryset = InsumoService.get_low_stock_insumos().select_related('preferred_supplier')
        serializer = InsumoSerializer(queryset, many=True, context={**self.get_serializer_context(), 'view_mode': 'list'})
        return Response({'count': queryset.count(), 'results': serializer.data})


class StockMovementViewSet(mixins.CreateModelMixin, ReadOnlyBaseViewSet):
    """
    The stock ledger.

    Rows can be listed and created (manual adjustments only); they can never
    be updated or deleted.
    """

    queryset = StockMovement.objects.all()
    serializer_class = StockMovementSerializer
    filterset_class = StockMovementFilter
    permission_classes = [IsAuthenticated]
    search_fields = ['insumo__name', 'notes']
    ordering_fields = ['created_at', 'quantity_change']
    ordering = ['-created_at', '-id']

    def create(self, request, *args, **kwargs):
        """
        Register a manual adjustment.

        Request body:
        {
            "insumo_id": 1,
            "movement_type": "adjustment_in" | "adjustment_out",
            "quantity": "2.50",
            "notes": "Merma por vencimiento",
            "expected_version": 7   (optional)
        }
        """
        input_serializer = ManualMovementSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            movement = InsumoService.record_manual_movement(
                data['insumo'],
                data['movement_type'],
                data['quantity'],
                user=request.user,
                notes=data.get('notes', ''),
                expected_version=data.get('expected_version'),
            )
        except ConcurrentModificationError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except InventoryError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error(f"Error registering stock movement: {e}", exc_info=True)
            return Response(
                {'error': 'An error occurred while registering the stock movement.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)
