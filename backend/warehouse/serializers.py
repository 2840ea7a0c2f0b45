from decimal import Decimal

from rest_framework import serializers

from core_backend.config import get_erp_setting
from menus.serializers import InsumoNeedSerializer
from urgent_requests.models import UrgentRequestPriority


class MealServiceGroupSerializer(serializers.Serializer):
    meal_service_id = serializers.IntegerField()
    meal_service_name = serializers.CharField()
    sort_order = serializers.IntegerField()
    all_sufficient = serializers.BooleanField()
    items = InsumoNeedSerializer(many=True)


class DailyPrepOverviewSerializer(serializers.Serializer):
    prep_date = serializers.DateField()
    menu_ids = serializers.ListField(child=serializers.IntegerField())
    summary = serializers.DictField()
    services = MealServiceGroupSerializer(many=True)


class PrepDateSerializer(serializers.Serializer):
    date = serializers.DateField()


class PrepSelectionSerializer(serializers.Serializer):
    insumo_id = serializers.IntegerField(min_value=1)
    meal_service_id = serializers.IntegerField(min_value=1)
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False
    )


class DeductSerializer(serializers.Serializer):
    """
    Request body:
    {
        "date": "2025-06-02",
        "deductor_name": "María Pérez",
        "all": false,
        "selections": [{"insumo_id": 1, "meal_service_id": 2, "quantity": "3.00"}]
    }
    """

    date = serializers.DateField()
    deductor_name = serializers.CharField(max_length=get_erp_setting("DEDUCTOR_NAME_MAX_LENGTH"))
    all = serializers.BooleanField(default=False)
    selections = PrepSelectionSerializer(many=True, required=False)

    def validate(self, data):
        if not data['all'] and not data.get('selections'):
            raise serializers.ValidationError({'selections': 'Select at least one item or set "all" to true.'})
        return data


class PrepUrgentRequestSerializer(serializers.Serializer):
    date = serializers.DateField()
    insumo_id = serializers.IntegerField(min_value=1)
    meal_service_id = serializers.IntegerField(min_value=1)
    priority = serializers.ChoiceField(choices=UrgentRequestPriority.choices, default=UrgentRequestPriority.URGENT)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
