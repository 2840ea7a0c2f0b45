from django.db import transaction
from rest_framework import serializers

from core_backend.base import BaseModelSerializer, FieldsetMixin
from insumos.models import Insumo
from insumos.serializers import InsumoSummarySerializer
from .models import Plato, PlatoInsumo


class PlatoInsumoSerializer(BaseModelSerializer):
    """Recipe ingredient line; written nested inside a dish."""

    insumo = InsumoSummarySerializer(read_only=True)
    insumo_id = serializers.PrimaryKeyRelatedField(
        queryset=Insumo.objects.all(), source="insumo", write_only=True
    )

    class Meta:
        model = PlatoInsumo
        fields = ['id', 'insumo', 'insumo_id', 'quantity_needed']
        select_related_fields = ['insumo']


class PlatoSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Dish serializer with nested ingredient lines.

    Fieldsets:
    - list: id, name, category
    - detail: all fields including ingredient lines

    On update, ``plato_insumos`` (when sent) replaces the existing lines.
    """

    plato_insumos = PlatoInsumoSerializer(many=True)

    class Meta:
        model = Plato
        fields = ['id', 'name', 'description', 'category', 'plato_insumos', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        prefetch_related_fields = ['plato_insumos__insumo']

        fieldsets = {
            'list': ['id', 'name', 'category'],
            'detail': '__all__',
        }
        required_fields = {'id'}

    def validate_plato_insumos(self, value):
        insumo_ids = [line['insumo'].pk for line in value]
        if len(insumo_ids) != len(set(insumo_ids)):
            raise serializers.ValidationError("Each ingredient can appear only once per dish.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        lines = validated_data.pop('plato_insumos')
        plato = Plato.objects.create(**validated_data)
        PlatoInsumo.objects.bulk_create(PlatoInsumo(plato=plato, **line) for line in lines)
        return plato

    @transaction.atomic
    def update(self, instance, validated_data):
        lines = validated_data.pop('plato_insumos', None)
        instance = super().update(instance, validated_data)
        if lines is not None:
            instance.plato_insumos.all().delete()
            PlatoInsumo.objects.bulk_create(PlatoInsumo(plato=instance, **line) for line in lines)
        return instance
