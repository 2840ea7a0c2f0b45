from django.db import transaction
from rest_framework import serializers

from core_backend.base import BaseModelSerializer, FieldsetMixin
from recipes.models import Plato
from .models import EventType, MealService, Menu, MenuPlato


class MealServiceSerializer(BaseModelSerializer):
    class Meta:
        model = MealService
        fields = ['id', 'name', 'description', 'sort_order']


class EventTypeSerializer(BaseModelSerializer):
    class Meta:
        model = EventType
        fields = ['id', 'name', 'description']


class MenuPlatoSerializer(BaseModelSerializer):
    """A dish line of a menu; written nested inside the menu."""

    plato_name = serializers.CharField(source='plato.name', read_only=True)
    meal_service_name = serializers.CharField(source='meal_service.name', read_only=True)
    plato = serializers.PrimaryKeyRelatedField(queryset=Plato.objects.all())
    meal_service = serializers.PrimaryKeyRelatedField(queryset=MealService.objects.all())

    class Meta:
        model = MenuPlato
        fields = [
            'id', 'plato', 'plato_name', 'meal_service', 'meal_service_name',
            'dish_category', 'quantity_needed',
        ]
        select_related_fields = ['plato', 'meal_service']


class MenuSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Menu serializer with nested dish lines.

    Fieldsets:
    - list: header fields and the number of dish lines
    - detail: all fields including dish lines (default)

    On update, ``menu_platos`` (when sent) replaces the existing lines.
    """

    menu_platos = MenuPlatoSerializer(many=True)
    menu_type_display = serializers.CharField(source='get_menu_type_display', read_only=True)
    event_type_name = serializers.CharField(source='event_type.name', read_only=True, default=None)
    dish_count = serializers.SerializerMethodField()

    class Meta:
        model = Menu
        fields = [
            'id', 'title', 'description', 'menu_date', 'menu_type', 'menu_type_display',
            'event_type', 'event_type_name', 'menu_platos', 'dish_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']
        select_related_fields = ['event_type']
        prefetch_related_fields = ['menu_platos__plato', 'menu_platos__meal_service']

        fieldsets = {
            'list': ['id', 'title', 'menu_date', 'menu_type', 'menu_type_display', 'event_type_name', 'dish_count'],
            'detail': '__all__',
        }
        required_fields = {'id'}

    def get_dish_count(self, obj):
        return len(obj.menu_platos.all())

    @transaction.atomic
    def create(self, validated_data):
        lines = validated_data.pop('menu_platos')
        menu = Menu.objects.create(**validated_data)
        MenuPlato.objects.bulk_create(MenuPlato(menu=menu, **line) for line in lines)
        return menu

    @transaction.atomic
    def update(self, instance, validated_data):
        lines = validated_data.pop('menu_platos', None)
        instance = super().update(instance, validated_data)
        if lines is not None:
            instance.menu_platos.all().delete()
            MenuPlato.objects.bulk_create(MenuPlato(menu=instance, **line) for line in lines)
        return instance


class InsumoNeedSerializer(serializers.Serializer):
    """Read-only rendering of a ``menus.needs.InsumoNeed``."""

    insumo_id = serializers.IntegerField()
    insumo_name = serializers.CharField()
    base_unit = serializers.CharField()
    purchase_unit = serializers.CharField()
    conversion_factor = serializers.DecimalField(max_digits=12, decimal_places=4)
    current_stock = serializers.DecimalField(max_digits=12, decimal_places=2)
    meal_service_id = serializers.IntegerField(allow_null=True)
    meal_service_name = serializers.CharField(allow_null=True)
    total_needed_base_unit = serializers.DecimalField(max_digits=16, decimal_places=4)
    total_needed_purchase_unit_raw = serializers.DecimalField(max_digits=16, decimal_places=4)
    total_needed_purchase_unit = serializers.DecimalField(max_digits=16, decimal_places=2)
    rounded_up = serializers.BooleanField()
    missing_quantity = serializers.DecimalField(max_digits=16, decimal_places=2)
    is_sufficient = serializers.BooleanField()
    platos = serializers.ListField(child=serializers.CharField())
    menu_ids = serializers.ListField(child=serializers.IntegerField())
    version = serializers.IntegerField()
