from django.contrib import admin

from .models import Plato, PlatoInsumo


class PlatoInsumoInline(admin.TabularInline):
    """Recipe ingredient lines edited inside the dish page."""

    model = PlatoInsumo
    autocomplete_fields = ("insumo",)
    extra = 1


@admin.register(Plato)
class PlatoAdmin(admin.ModelAdmin):
    list_display = ("name", "category")
    list_filter = ("category",)
    search_fields = ("name",)
    inlines = [PlatoInsumoInline]
