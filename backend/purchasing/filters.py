from django_filters import rest_framework as filters

from core_backend.base import BaseFilterSet
from .models import PurchaseRecord, PurchaseStatus


class PurchaseRecordFilter(BaseFilterSet):
    """
    Filter for purchase records.

    Supports filtering by:
    - status (exact or multiple)
    - insumo, supplier (exact)
    - purchase date range (?start_date=2025-06-01&end_date=2025-06-30)
    - supplier_name (contains)
    """

    status = filters.MultipleChoiceFilter(choices=PurchaseStatus.choices)
    start_date = filters.DateFilter(field_name='purchase_date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='purchase_date', lookup_expr='lte')
    supplier_name = filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = PurchaseRecord
        fields = ['status', 'insumo', 'supplier', 'from_registered_supplier']
