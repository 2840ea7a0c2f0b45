from django.contrib import admin

from .models import PurchaseRecord


@admin.register(PurchaseRecord)
class PurchaseRecordAdmin(admin.ModelAdmin):
    """
    Read-only view of purchase records. Receptions and cancellations must go
    through the API so the ingredient counters and the ledger follow.
    """

    list_display = (
        "id",
        "insumo",
        "purchase_date",
        "quantity_purchased",
        "quantity_received_by_company",
        "quantity_received_by_warehouse",
        "total_amount",
        "status",
    )
    list_filter = ("status", "from_registered_supplier")
    search_fields = ("insumo__name", "supplier_name")
    date_hierarchy = "purchase_date"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
