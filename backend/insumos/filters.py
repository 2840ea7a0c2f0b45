from django_filters import rest_framework as filters
from django.db.models import F

from core_backend.base import ArchivingFilterSet, BaseFilterSet, FlexibleDateTimeFilter
from .models import Insumo, MovementType, StockMovement


class InsumoFilter(ArchivingFilterSet):
    """
    Filter for the ingredient catalog.

    Supports filtering by:
    - category (exact, case-insensitive)
    - preferred_supplier (exact)
    - below_min_stock (stock under the minimum level)
    """

    category = filters.CharFilter(field_name='category', lookup_expr='iexact')
    below_min_stock = filters.BooleanFilter(
        method='filter_below_min_stock',
        help_text="If true, only show ingredients whose stock is below their minimum level"
    )

    class Meta:
        model = Insumo
        fields = ['category', 'preferred_supplier', 'is_active']

    def filter_below_min_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock_quantity__lt=F('min_stock_level'))
        return queryset.filter(stock_quantity__gte=F('min_stock_level'))


class StockMovementFilter(BaseFilterSet):
    """
    Filter for ledger rows.

    Supports filtering by:
    - movement_type (exact or multiple)
    - insumo, menu, purchase_record (exact)
    - date range (?start_date=2025-01-01&end_date=2025-01-31, date-only inputs cover the full day)
    """

    movement_type = filters.MultipleChoiceFilter(
        choices=MovementType.choices,
        help_text="Filter by movement type. Can specify multiple."
    )
    start_date = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    end_date = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    class Meta:
        model = StockMovement
        fields = ['movement_type', 'insumo', 'menu', 'purchase_record', 'user']
