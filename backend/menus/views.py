from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core_backend.base import BaseViewSet, FieldsetQueryParamsMixin
from .filters import MenuFilter
from .models import EventType, MealService, Menu
from .needs import (
    GROUP_BY_CHOICES,
    GROUP_BY_INSUMO,
    aggregate_needs,
    catalog_for_demand,
    collect_demand,
)
from .serializers import (
    EventTypeSerializer,
    InsumoNeedSerializer,
    MealServiceSerializer,
    MenuSerializer,
)


class MealServiceViewSet(BaseViewSet):
    queryset = MealService.objects.all()
    serializer_class = MealServiceSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ['name']
    ordering_fields = ['sort_order', 'name']
    ordering = ['sort_order', 'name']
    pagination_class = None

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {'error': 'This meal service is used by one or more menus and cannot be deleted.'},
                status=status.HTTP_400_BAD_REQUEST
            )


class EventTypeViewSet(BaseViewSet):
    queryset = EventType.objects.all()
    serializer_class = EventTypeSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ['name']
    ordering = ['name']
    pagination_class = None


class MenuViewSet(FieldsetQueryParamsMixin, BaseViewSet):
    """
    ViewSet for planned menus.

    Endpoints:
    - GET/POST /api/menus/menus/
    - GET/PUT/PATCH/DELETE /api/menus/menus/<id>/
    - GET /api/menus/menus/<id>/needs/?group_by=insumo|meal_service

    Query params:
    - ?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD
    - ?menu_type=daily|event
    - ?view=list|detail
    """

    queryset = Menu.objects.all()
    serializer_class = MenuSerializer
    filterset_class = MenuFilter
    permission_classes = [IsAuthenticated]
    search_fields = ['title', 'description']
    ordering_fields = ['menu_date', 'title', 'created_at']
    ordering = ['-menu_date', 'title']

    @action(detail=True, methods=['get'])
    def needs(self, request, pk=None):
        """Ingredient needs of a single menu compared against current stock."""
        menu = self.get_object()
        group_by = request.query_params.get('group_by', GROUP_BY_INSUMO)
        if group_by not in GROUP_BY_CHOICES:
            return Response(
                {'error': f"group_by must be one of: {', '.join(GROUP_BY_CHOICES)}"},
                status=status.HTTP_400_BAD_REQUEST
            )

        demand = collect_demand(Menu.objects.filter(pk=menu.pk))
        needs = aggregate_needs(demand, catalog_for_demand(demand), group_by=group_by)
        return Response({
            'menu_id': menu.pk,
            'menu_date': menu.menu_date,
            'group_by': group_by,
            'results': InsumoNeedSerializer(needs, many=True).data,
        })
