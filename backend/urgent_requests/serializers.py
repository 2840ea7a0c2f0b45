from decimal import Decimal

from rest_framework import serializers

from core_backend.base import BaseModelSerializer, FieldsetMixin
from core_backend.config import get_erp_setting
from insumos.models import Insumo, Supplier
from insumos.serializers import InsumoSummarySerializer, MovementUserSerializer
from purchasing.models import PurchaseRecord, PurchaseStatus
from .models import UrgentPurchaseRequest


class UrgentPurchaseRequestSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Urgent request serializer.

    Writable fields are the ones an operator fills in; status, resolution
    and insistence fields only change through the workflow actions.
    """

    insumo = InsumoSummarySerializer(read_only=True)
    insumo_id = serializers.PrimaryKeyRelatedField(
        queryset=Insumo.objects.all(), source='insumo', write_only=True
    )
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    priority_display = serializers.CharField(source='get_priority_display', read_only=True)
    requested_by = MovementUserSerializer(read_only=True)
    resolved_by = MovementUserSerializer(read_only=True)

    class Meta:
        model = UrgentPurchaseRequest
        fields = [
            'id', 'insumo', 'insumo_id', 'quantity_requested', 'request_date', 'notes', 'source_module',
            'priority', 'priority_display', 'status', 'status_display', 'rejection_reason',
            'fulfilled_purchase_record', 'insistence_count',
            'requested_by', 'resolved_by', 'resolved_at', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'status', 'rejection_reason', 'fulfilled_purchase_record', 'insistence_count',
            'resolved_at', 'created_at', 'updated_at',
        ]
        select_related_fields = ['insumo', 'requested_by', 'resolved_by']

        fieldsets = {
            'list': [
                'id', 'insumo', 'quantity_requested', 'request_date', 'priority', 'priority_display',
                'status', 'status_display', 'insistence_count', 'fulfilled_purchase_record',
            ],
            'detail': '__all__',
        }
        required_fields = {'id'}

    def validate_insumo_id(self, value):
        # Moving a request to another ingredient could leave two open requests for it
        if self.instance is not None and value != self.instance.insumo:
            raise serializers.ValidationError("The ingredient of an existing request cannot be changed.")
        return value


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField()

    def validate_reason(self, value):
        value = value.strip()
        min_length = get_erp_setting("REJECTION_REASON_MIN_LENGTH")
        max_length = get_erp_setting("REJECTION_REASON_MAX_LENGTH")
        if not min_length <= len(value) <= max_length:
            raise serializers.ValidationError(
                f"Rejection reason must be between {min_length} and {max_length} characters."
            )
        return value


class FulfillPurchaseDataSerializer(serializers.Serializer):
    """Fields of the purchase record registered to fulfil a request."""

    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False
    )
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
    notes = serializers.CharField(required=False, allow_blank=True)


class FulfillSerializer(serializers.Serializer):
    """Either link an existing purchase record or describe a new one."""

    purchase_record_id = serializers.PrimaryKeyRelatedField(
        queryset=PurchaseRecord.objects.all(), source='purchase_record', required=False
    )
    purchase_data = FulfillPurchaseDataSerializer(required=False)

    def validate(self, data):
        if 'purchase_record' in data and 'purchase_data' in data:
            raise serializers.ValidationError("Send either purchase_record_id or purchase_data, not both.")
        return data
