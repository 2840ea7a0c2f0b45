from django_filters import rest_framework as filters

from core_backend.base import BaseFilterSet
from .models import Menu, MenuType


class MenuFilter(BaseFilterSet):
    """
    Filter for menus.

    Supports filtering by:
    - menu date range (?start_date=2025-06-01&end_date=2025-06-07, inclusive)
    - exact date (?menu_date=2025-06-01)
    - menu_type, event_type
    - meal_service (menus having at least one dish in that service)
    """

    start_date = filters.DateFilter(field_name='menu_date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='menu_date', lookup_expr='lte')
    menu_type = filters.ChoiceFilter(choices=MenuType.choices)
    meal_service = filters.NumberFilter(field_name='menu_platos__meal_service', distinct=True)

    class Meta:
        model = Menu
        fields = ['menu_date', 'menu_type', 'event_type']
