from django.contrib import admin

from core_backend.admin_mixins import ArchivingAdminMixin
from .models import Insumo, InsumoPriceHistory, StockMovement, Supplier


@admin.register(Supplier)
class SupplierAdmin(ArchivingAdminMixin, admin.ModelAdmin):
    list_display = ("name", "contact_person", "phone", "email")
    search_fields = ("name", "contact_person", "email")


class InsumoPriceHistoryInline(admin.TabularInline):
    model = InsumoPriceHistory
    extra = 0
    can_delete = False
    readonly_fields = ("old_unit_cost", "new_unit_cost", "changed_at", "changed_by")


@admin.register(Insumo)
class InsumoAdmin(ArchivingAdminMixin, admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "purchase_unit",
        "stock_quantity",
        "pending_delivery_quantity",
        "pending_reception_quantity",
        "min_stock_level",
    )
    list_filter = ("category",)
    search_fields = ("name", "category")
    autocomplete_fields = ("preferred_supplier",)
    inlines = [InsumoPriceHistoryInline]
    fieldsets = (
        (None, {
            'fields': ('name', 'description', 'category')
        }),
        ('Units & Cost', {
            'fields': ('base_unit', 'purchase_unit', 'conversion_factor', 'unit_cost')
        }),
        ('Counters', {
            'fields': (
                'stock_quantity',
                'pending_delivery_quantity',
                'pending_reception_quantity',
                'min_stock_level',
                'version',
            ),
            'description': 'Counters change only through purchase records and stock movements.'
        }),
        ('Supplier', {
            'fields': ('preferred_supplier', 'supplier_name', 'supplier_phone', 'supplier_address')
        }),
        ('Physical Count', {
            'fields': ('last_physical_count_quantity', 'last_physical_count_date', 'discrepancy_quantity')
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        return list(super().get_readonly_fields(request, obj)) + [
            'stock_quantity',
            'pending_delivery_quantity',
            'pending_reception_quantity',
            'version',
            'last_physical_count_quantity',
            'last_physical_count_date',
            'discrepancy_quantity',
        ]


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("created_at", "insumo", "movement_type", "quantity_change", "new_stock_quantity", "user")
    list_filter = ("movement_type",)
    search_fields = ("insumo__name", "notes")
    date_hierarchy = "created_at"

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def has_add_permission(self, request):
        return False
