from django_filters import rest_framework as filters

from core_backend.base import BaseFilterSet
from .models import UrgentPurchaseRequest, UrgentRequestPriority, UrgentRequestStatus


class UrgentPurchaseRequestFilter(BaseFilterSet):
    """
    Filter for urgent requests.

    Supports filtering by:
    - status, priority (exact or multiple)
    - insumo (exact)
    - request date range (?start_date=...&end_date=...)
    """

    status = filters.MultipleChoiceFilter(choices=UrgentRequestStatus.choices)
    priority = filters.MultipleChoiceFilter(choices=UrgentRequestPriority.choices)
    start_date = filters.DateFilter(field_name='request_date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='request_date', lookup_expr='lte')

    class Meta:
        model = UrgentPurchaseRequest
        fields = ['status', 'priority', 'insumo', 'source_module']
