from django.contrib import admin

from .models import UrgentPurchaseRequest


@admin.register(UrgentPurchaseRequest)
class UrgentPurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "insumo", "quantity_requested", "priority", "status", "insistence_count", "request_date")
    list_filter = ("status", "priority", "source_module")
    search_fields = ("insumo__name", "notes")
    readonly_fields = (
        "status",
        "rejection_reason",
        "fulfilled_purchase_record",
        "insistence_count",
        "resolved_by",
        "resolved_at",
    )
