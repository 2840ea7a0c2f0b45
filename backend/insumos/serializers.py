from decimal import Decimal

from rest_framework import serializers

from core_backend.base import BaseModelSerializer, FieldsetMixin
from .models import Insumo, InsumoPriceHistory, MovementType, StockMovement, Supplier


# ============================================================================
# SPECIALIZED SERIALIZERS (Lightweight helpers used across multiple serializers)
# ============================================================================

class MovementUserSerializer(serializers.Serializer):
    """Lightweight user serializer for ledger rows"""
    id = serializers.IntegerField()
    username = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()


class InsumoSummarySerializer(serializers.ModelSerializer):
    """Minimal ingredient info embedded in other resources."""

    class Meta:
        model = Insumo
        fields = ['id', 'name', 'base_unit', 'purchase_unit', 'conversion_factor']
        read_only_fields = fields


# ============================================================================
# MODEL SERIALIZERS
# ============================================================================

class SupplierSerializer(BaseModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_person', 'phone', 'email', 'address', 'notes',
            'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['is_active', 'created_at', 'updated_at']


class InsumoSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Ingredient serializer with fieldset support.

    Fieldsets:
    - simple: id, name and units
    - list: simple + counters and minimum level
    - detail: all fields (default)

    The three quantity counters, the physical count fields and ``version``
    are read-only: they change only through purchase records, stock
    movements and physical counts.
    """

    is_below_min_stock = serializers.ReadOnlyField()
    preferred_supplier_name = serializers.CharField(source='preferred_supplier.name', read_only=True, default=None)

    class Meta:
        model = Insumo
        fields = [
            'id', 'name', 'description', 'category',
            'base_unit', 'purchase_unit', 'conversion_factor', 'unit_cost',
            'stock_quantity', 'pending_delivery_quantity', 'pending_reception_quantity',
            'min_stock_level', 'is_below_min_stock',
            'preferred_supplier', 'preferred_supplier_name',
            'supplier_name', 'supplier_phone', 'supplier_address',
            'last_physical_count_quantity', 'last_physical_count_date', 'discrepancy_quantity',
            'version', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'stock_quantity', 'pending_delivery_quantity', 'pending_reception_quantity',
            'last_physical_count_quantity', 'last_physical_count_date', 'discrepancy_quantity',
            'version', 'is_active', 'created_at', 'updated_at',
        ]
        select_related_fields = ['preferred_supplier']

        fieldsets = {
            'simple': ['id', 'name', 'base_unit', 'purchase_unit'],
            'list': [
                'id', 'name', 'category', 'base_unit', 'purchase_unit', 'unit_cost',
                'stock_quantity', 'pending_delivery_quantity', 'pending_reception_quantity',
                'min_stock_level', 'is_below_min_stock', 'preferred_supplier_name', 'version',
            ],
            'detail': '__all__',
        }
        required_fields = {'id'}

    def validate_conversion_factor(self, value):
        if value <= 0:
            raise serializers.ValidationError("Conversion factor must be greater than zero.")
        return value


class InsumoPriceHistorySerializer(BaseModelSerializer):
    changed_by = MovementUserSerializer(read_only=True)

    class Meta:
        model = InsumoPriceHistory
        fields = ['id', 'insumo', 'old_unit_cost', 'new_unit_cost', 'changed_at', 'changed_by']
        read_only_fields = fields
        select_related_fields = ['changed_by']


class StockMovementSerializer(BaseModelSerializer):
    """Read serializer for ledger rows."""

    insumo = InsumoSummarySerializer(read_only=True)
    user = MovementUserSerializer(read_only=True)
    movement_type_display = serializers.CharField(source='get_movement_type_display', read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            'id', 'insumo', 'movement_type', 'movement_type_display', 'quantity_change',
            'pending_delivery_change', 'pending_reception_change', 'stock_change',
            'new_stock_quantity', 'new_pending_delivery_quantity', 'new_pending_reception_quantity',
            'notes', 'menu', 'purchase_record', 'user', 'created_at',
        ]
        read_only_fields = fields
        select_related_fields = ['insumo', 'user']


# ============================================================================
# INPUT SERIALIZERS
# ============================================================================

class ManualMovementSerializer(serializers.Serializer):
    """Input for a manual stock adjustment."""

    insumo_id = serializers.PrimaryKeyRelatedField(queryset=Insumo.objects.all(), source='insumo')
    movement_type = serializers.ChoiceField(
        choices=[MovementType.ADJUSTMENT_IN, MovementType.ADJUSTMENT_OUT]
    )
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    expected_version = serializers.IntegerField(required=False, min_value=0)


class PhysicalCountSerializer(serializers.Serializer):
    counted_quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    count_date = serializers.DateTimeField(required=False)
