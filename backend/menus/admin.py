from django.contrib import admin

from .models import EventType, MealService, Menu, MenuPlato


@admin.register(MealService)
class MealServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "sort_order")
    ordering = ("sort_order", "name")


@admin.register(EventType)
class EventTypeAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


class MenuPlatoInline(admin.TabularInline):
    model = MenuPlato
    autocomplete_fields = ("plato",)
    extra = 1


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ("title", "menu_date", "menu_type", "event_type")
    list_filter = ("menu_type", "event_type", "menu_date")
    search_fields = ("title",)
    date_hierarchy = "menu_date"
    inlines = [MenuPlatoInline]
