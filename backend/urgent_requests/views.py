import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core_backend.base import BaseViewSet, FieldsetQueryParamsMixin
from insumos.exceptions import InventoryError
from purchasing.exceptions import PurchasingError
from .exceptions import UrgentRequestError
from .filters import UrgentPurchaseRequestFilter
from .models import UrgentPurchaseRequest, UrgentRequestPriority, UrgentRequestStatus
from .serializers import FulfillSerializer, RejectSerializer, UrgentPurchaseRequestSerializer
from .services import UrgentRequestService

logger = logging.getLogger(__name__)


class UrgentPurchaseRequestViewSet(FieldsetQueryParamsMixin, BaseViewSet):
    """
    ViewSet for urgent purchase requests.

    Endpoints:
    - GET/POST /api/urgent-requests/
    - GET/PUT/PATCH/DELETE /api/urgent-requests/<id>/ (edits only while pending)
    - POST /api/urgent-requests/<id>/approve/
    - POST /api/urgent-requests/<id>/reject/
    - POST /api/urgent-requests/<id>/fulfill/

    POST on the collection returns 201 for a new request and 200 when an open
    request for the same ingredient was insisted on instead.
    """

    queryset = UrgentPurchaseRequest.objects.all()
    serializer_class = UrgentPurchaseRequestSerializer
    filterset_class = UrgentPurchaseRequestFilter
    permission_classes = [IsAuthenticated]
    search_fields = ['insumo__name', 'notes']
    ordering_fields = ['request_date', 'priority', 'insistence_count', 'created_at']
    ordering = ['-request_date', '-id']

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            urgent_request, created = UrgentRequestService.create_request(
                data['insumo'],
                data['quantity_requested'],
                user=request.user,
                priority=data.get('priority', UrgentRequestPriority.URGENT),
                notes=data.get('notes', ''),
                source_module=data.get('source_module', 'warehouse'),
                request_date=data.get('request_date'),
            )
        except UrgentRequestError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output = self.get_serializer(urgent_request)
        return Response(output.data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    def _ensure_pending(self, urgent_request, action_label):
        if urgent_request.status != UrgentRequestStatus.PENDING:
            return Response(
                {'error': f'Only pending requests can be {action_label}.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return None

    def update(self, request, *args, **kwargs):
        refusal = self._ensure_pending(self.get_object(), 'edited')
        return refusal or super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        refusal = self._ensure_pending(self.get_object(), 'deleted')
        return refusal or super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        urgent_request = self.get_object()
        try:
            urgent_request = UrgentRequestService.approve(urgent_request, user=request.user)
        except UrgentRequestError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(urgent_request).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        """
        Request body:
        {
            "reason": "Proveedor sin stock hasta la próxima semana"
        }
        """
        urgent_request = self.get_object()
        input_serializer = RejectSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            urgent_request = UrgentRequestService.reject(
                urgent_request, user=request.user, reason=input_serializer.validated_data['reason']
            )
        except UrgentRequestError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(urgent_request).data)

    @action(detail=True, methods=['post'])
    def fulfill(self, request, pk=None):
        """
        Fulfil a request with an existing purchase record or a new one.

        Request body (one of):
        {"purchase_record_id": 12}
        {"purchase_data": {"quantity": "5.00", "status": "ordered", "unit_cost": "3.20"}}
        {}  (registers an ordered purchase for the requested quantity)
        """
        urgent_request = self.get_object()
        input_serializer = FulfillSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            urgent_request = UrgentRequestService.fulfill(
                urgent_request,
                user=request.user,
                purchase_record=data.get('purchase_record'),
                purchase_data=data.get('purchase_data'),
            )
        except (UrgentRequestError, PurchasingError, InventoryError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error(f"Error fulfilling urgent request {pk}: {e}", exc_info=True)
            return Response(
                {'error': 'An error occurred while fulfilling the urgent request.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response(self.get_serializer(urgent_request).data)
