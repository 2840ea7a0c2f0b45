import logging

from django.http import HttpResponse
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core_backend.base import FieldsetQueryParamsMixin, ReadOnlyBaseViewSet
from insumos.exceptions import ConcurrentModificationError, InventoryError
from .exceptions import PurchaseRecordNotDeletableError, PurchasingError
from .filters import PurchaseRecordFilter
from .models import PurchaseRecord
from .serializers import (
    AnalysisQuerySerializer,
    BatchPurchaseSerializer,
    CancelSerializer,
    PlanningResultSerializer,
    PurchaseRecordCreateSerializer,
    PurchaseRecordSerializer,
    ReceiveSerializer,
)
from .services import PurchasePlanningService, PurchaseRecordService, SuggestionExportService

logger = logging.getLogger(__name__)


def _error_response(exc, action_label):
    """Map service exceptions to HTTP responses."""
    if isinstance(exc, ConcurrentModificationError):
        return Response({'error': str(exc)}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, (PurchasingError, InventoryError)):
        return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    logger.error(f"Error while trying to {action_label}: {exc}", exc_info=True)
    return Response(
        {'error': f'An error occurred while trying to {action_label}.'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class PurchaseRecordViewSet(
    FieldsetQueryParamsMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    ReadOnlyBaseViewSet,
):
    """
    ViewSet for purchase records.

    Endpoints:
    - GET/POST /api/purchasing/purchase-records/
    - GET/DELETE /api/purchasing/purchase-records/<id>/ (DELETE only when cancelled)
    - POST /api/purchasing/purchase-records/<id>/receive/
    - POST /api/purchasing/purchase-records/<id>/cancel/

    Records are never edited directly: every change goes through an action so
    the ingredient counters and the stock ledger follow.
    """

    queryset = PurchaseRecord.objects.all()
    serializer_class = PurchaseRecordSerializer
    filterset_class = PurchaseRecordFilter
    permission_classes = [IsAuthenticated]
    search_fields = ['insumo__name', 'supplier_name', 'notes']
    ordering_fields = ['purchase_date', 'quantity_purchased', 'total_amount', 'created_at']
    ordering = ['-purchase_date', '-id']

    def create(self, request, *args, **kwargs):
        """
        Register a purchase.

        Request body:
        {
            "insumo_id": 1,
            "quantity_purchased": "50.00",
            "status": "ordered" | "received_by_company" | "received_by_warehouse",
            "unit_cost": "4.50",          (optional, defaults to the ingredient's cost)
            "supplier_id": 3,              (optional)
            "supplier_name": "Mercado",    (optional, when no registered supplier)
            "notes": ""
        }
        """
        input_serializer = PurchaseRecordCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            record = PurchaseRecordService.create_purchase_record(
                data['insumo'],
                data['quantity_purchased'],
                status=data['status'],
                user=request.user,
                unit_cost=data.get('unit_cost'),
                supplier=data.get('supplier'),
                supplier_name=data.get('supplier_name'),
                supplier_phone=data.get('supplier_phone'),
                supplier_address=data.get('supplier_address'),
                purchase_date=data.get('purchase_date'),
                notes=data.get('notes', ''),
            )
        except Exception as e:
            return _error_response(e, 'register the purchase')

        serializer = PurchaseRecordSerializer(record, context=self.get_serializer_context())
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        record = self.get_object()
        try:
            PurchaseRecordService.delete(record)
        except PurchaseRecordNotDeletableError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def receive(self, request, pk=None):
        """
        Receive part or all of the outstanding quantity into the next stage.

        Request body:
        {
            "quantity": "20.00",
            "target_status": "received_by_company",   (optional)
            "notes": "",
            "expected_version": 3                     (optional)
        }
        """
        record = self.get_object()
        input_serializer = ReceiveSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            record = PurchaseRecordService.receive(
                record,
                data['quantity'],
                target_status=data.get('target_status'),
                user=request.user,
                expected_version=data.get('expected_version'),
                notes=data.get('notes', ''),
            )
        except Exception as e:
            return _error_response(e, 'receive the purchase')

        return Response(PurchaseRecordSerializer(record, context=self.get_serializer_context()).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        record = self.get_object()
        input_serializer = CancelSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            record = PurchaseRecordService.cancel(
                record,
                user=request.user,
                reason=data.get('reason', ''),
                expected_version=data.get('expected_version'),
            )
        except Exception as e:
            return _error_response(e, 'cancel the purchase')

        return Response(PurchaseRecordSerializer(record, context=self.get_serializer_context()).data)


class PurchaseAnalysisView(APIView):
    """
    Purchase suggestions for the menus planned in a date range.

    Query params:
    - start_date, end_date: YYYY-MM-DD (inclusive, required)
    - reason: menu_demand | min_stock_level | both | zero_stock_alert (optional)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AnalysisQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        try:
            result = PurchasePlanningService.analyze(data['start_date'], data['end_date'], data.get('reason'))
        except PurchasingError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PlanningResultSerializer(result).data)


class PurchaseAnalysisExportView(APIView):
    """
    Download purchase suggestions.

    Query params: same as the analysis endpoint, plus ``export_format=csv|xlsx``.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AnalysisQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        try:
            result = PurchasePlanningService.analyze(data['start_date'], data['end_date'], data.get('reason'))
            content, content_type, filename = SuggestionExportService.export(result, data['export_format'])
        except PurchasingError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error(f"Purchase suggestion export failed: {e}", exc_info=True)
            return Response(
                {'error': 'An error occurred while exporting purchase suggestions.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


class BatchPurchaseView(APIView):
    """
    Register several suggested purchases at once as received into the warehouse.

    Request body:
    {
        "items": [
            {"insumo_id": 1, "quantity": "11.00", "unit_cost": "4.50"},
            {"insumo_id": 2, "quantity": "3.00"}
        ]
    }

    Items are independent: the response reports per-item success and the
    overall counts. Returns 201 when every item succeeded, 207 otherwise.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        input_serializer = BatchPurchaseSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        items = []
        for item in input_serializer.validated_data['items']:
            item = dict(item)
            item['insumo'] = item.pop('insumo_id')
            items.append(item)
        summary = PurchasePlanningService.create_batch(items, user=request.user)

        response_status = status.HTTP_201_CREATED if summary['failure_count'] == 0 else status.HTTP_207_MULTI_STATUS
        return Response(summary, status=response_status)
