from decimal import Decimal

from rest_framework import serializers

from core_backend.base import BaseModelSerializer, FieldsetMixin
from insumos.models import Insumo, Supplier
from insumos.serializers import InsumoSummarySerializer, MovementUserSerializer
from .models import PurchaseRecord, PurchaseStatus
from .services import EXPORT_FORMATS, SUGGESTION_REASONS


# ============================================================================
# MODEL SERIALIZERS
# ============================================================================

class PurchaseRecordSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Read serializer for purchase records.

    Fieldsets:
    - list: summary columns for tables
    - detail: all fields (default)
    """

    insumo = InsumoSummarySerializer(read_only=True)
    purchased_by = MovementUserSerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    quantity_received = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    outstanding_quantity = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    next_status = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = PurchaseRecord
        fields = [
            'id', 'insumo', 'purchase_date', 'quantity_purchased', 'quantity_received',
            'quantity_received_by_company', 'quantity_received_by_warehouse', 'outstanding_quantity',
            'unit_cost', 'total_amount',
            'supplier', 'supplier_name', 'supplier_phone', 'supplier_address', 'from_registered_supplier',
            'notes', 'status', 'status_display', 'next_status', 'received_date',
            'cancelled_from_status', 'cancelled_at', 'cancellation_reason',
            'purchased_by', 'version', 'created_at', 'updated_at',
        ]
        read_only_fields = fields
        select_related_fields = ['insumo', 'supplier', 'purchased_by']

        fieldsets = {
            'list': [
                'id', 'insumo', 'purchase_date', 'quantity_purchased', 'quantity_received',
                'outstanding_quantity', 'total_amount', 'supplier_name', 'status', 'status_display',
                'next_status', 'version',
            ],
            'detail': '__all__',
        }
        required_fields = {'id'}


# ============================================================================
# INPUT SERIALIZERS
# ============================================================================

class PurchaseRecordCreateSerializer(serializers.Serializer):
    insumo_id = serializers.PrimaryKeyRelatedField(queryset=Insumo.objects.all(), source='insumo')
    quantity_purchased = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    status = serializers.ChoiceField(
        choices=[
            PurchaseStatus.ORDERED,
            PurchaseStatus.RECEIVED_BY_COMPANY,
            PurchaseStatus.RECEIVED_BY_WAREHOUSE,
        ],
        default=PurchaseStatus.ORDERED,
    )
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    supplier_id = serializers.PrimaryKeyRelatedField(
        queryset=Supplier.objects.all(), source='supplier', required=False, allow_null=True
    )
    supplier_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    supplier_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    supplier_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    purchase_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ReceiveSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    target_status = serializers.ChoiceField(
        choices=[PurchaseStatus.RECEIVED_BY_COMPANY, PurchaseStatus.RECEIVED_BY_WAREHOUSE],
        required=False,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    expected_version = serializers.IntegerField(required=False, min_value=0)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    expected_version = serializers.IntegerField(required=False, min_value=0)


class AnalysisQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.ChoiceField(choices=SUGGESTION_REASONS, required=False)
    export_format = serializers.ChoiceField(choices=EXPORT_FORMATS, required=False, default='csv')

    def validate(self, data):
        if data['start_date'] > data['end_date']:
            raise serializers.ValidationError({'end_date': 'end_date must be on or after start_date.'})
        return data


class BatchItemSerializer(serializers.Serializer):
    # Resolved by the service so a missing ingredient fails only its own item
    insumo_id = serializers.IntegerField(min_value=1)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    supplier_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class BatchPurchaseSerializer(serializers.Serializer):
    items = BatchItemSerializer(many=True, allow_empty=False)


# ============================================================================
# ANALYSIS OUTPUT
# ============================================================================

class PurchaseSuggestionSerializer(serializers.Serializer):
    insumo_id = serializers.IntegerField()
    insumo_name = serializers.CharField()
    base_unit = serializers.CharField()
    purchase_unit = serializers.CharField()
    conversion_factor = serializers.DecimalField(max_digits=12, decimal_places=4)
    current_stock = serializers.DecimalField(max_digits=12, decimal_places=2)
    min_stock_level = serializers.DecimalField(max_digits=12, decimal_places=2)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_needed_base_unit = serializers.DecimalField(max_digits=16, decimal_places=4)
    total_needed_purchase_unit_raw = serializers.DecimalField(max_digits=16, decimal_places=4)
    total_needed_purchase_unit = serializers.DecimalField(max_digits=16, decimal_places=2)
    needed_rounded_up = serializers.BooleanField()
    purchase_suggestion_raw = serializers.DecimalField(max_digits=16, decimal_places=2)
    purchase_suggestion_rounded = serializers.DecimalField(max_digits=16, decimal_places=2)
    suggestion_rounded_up = serializers.BooleanField()
    reason_for_purchase_suggestion = serializers.CharField(allow_null=True)
    estimated_purchase_cost = serializers.DecimalField(max_digits=16, decimal_places=2)
    platos = serializers.ListField(child=serializers.CharField())
    menu_ids = serializers.ListField(child=serializers.IntegerField())


class PlanningResultSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    menu_count = serializers.IntegerField()
    total_estimated_cost = serializers.DecimalField(max_digits=16, decimal_places=2)
    suggestions = PurchaseSuggestionSerializer(many=True)
