import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from insumos.exceptions import ConcurrentModificationError, InventoryError
from urgent_requests.exceptions import UrgentRequestError
from urgent_requests.serializers import UrgentPurchaseRequestSerializer
from .exceptions import DailyPrepError, DeductionRefusedError
from .serializers import (
    DailyPrepOverviewSerializer,
    DeductSerializer,
    PrepDateSerializer,
    PrepUrgentRequestSerializer,
)
from .services import DailyPrepService, PrepSelection

logger = logging.getLogger(__name__)


class DailyPrepOverviewView(APIView):
    """
    Ingredient needs for one day's menus, grouped by meal service.

    Query params:
    - date: YYYY-MM-DD (required)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = PrepDateSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        overview = DailyPrepService.overview(query.validated_data['date'])
        return Response(DailyPrepOverviewSerializer(overview).data)


class DailyPrepDeductView(APIView):
    """
    Send items to the kitchen, deducting them from stock.

    All-or-nothing: responds 409 with the offending items when stock does not
    cover the whole selection.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        input_serializer = DeductSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        selections = [
            PrepSelection(item['insumo_id'], item['meal_service_id'], item.get('quantity'))
            for item in data.get('selections', [])
        ]

        try:
            result = DailyPrepService.deduct(
                data['date'],
                selections=selections,
                deductor_name=data['deductor_name'],
                user=request.user,
                select_all=data['all'],
            )
        except DeductionRefusedError as e:
            return Response({'error': str(e), 'items': e.items}, status=status.HTTP_409_CONFLICT)
        except ConcurrentModificationError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except (DailyPrepError, InventoryError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            logger.error(f"Error deducting daily prep: {e}", exc_info=True)
            return Response(
                {'error': 'An error occurred while deducting the daily prep.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(result, status=status.HTTP_200_OK)


class DailyPrepUrgentRequestView(APIView):
    """
    Open an urgent purchase request for an insufficient prep item,
    pre-filled with its missing quantity.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        input_serializer = PrepUrgentRequestSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            urgent_request, created = DailyPrepService.request_urgent_purchase(
                data['date'],
                data['insumo_id'],
                data['meal_service_id'],
                user=request.user,
                priority=data['priority'],
                notes=data.get('notes', ''),
            )
        except (DailyPrepError, UrgentRequestError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            UrgentPurchaseRequestSerializer(urgent_request).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )
