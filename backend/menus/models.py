from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class MealService(models.Model):
    """A service of the day (breakfast, lunch, dinner...)."""

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    sort_order = models.PositiveIntegerField(default=0, help_text=_("Display order within the day"))

    class Meta:
        verbose_name = _("Meal service")
        verbose_name_plural = _("Meal services")
        ordering = ["sort_order", "name"]

    def __str__(self):
        return self.name


class EventType(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = _("Event type")
        verbose_name_plural = _("Event types")
        ordering = ["name"]

    def __str__(self):
        return self.name


class MenuType(models.TextChoices):
    DAILY = "daily", _("Daily")
    EVENT = "event", _("Event")


class Menu(models.Model):
    """
    A menu planned for one date. Daily menus feed the kitchen; event menus
    belong to a catering event and may carry an event type.
    """

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    menu_date = models.DateField(db_index=True)
    menu_type = models.CharField(max_length=10, choices=MenuType.choices, default=MenuType.DAILY)
    event_type = models.ForeignKey(
        EventType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="menus",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Menu")
        verbose_name_plural = _("Menus")
        ordering = ["-menu_date", "title"]

    def __str__(self):
        return f"{self.title} ({self.menu_date})"


class MenuPlato(models.Model):
    """A dish served in a menu during one meal service, with its servings."""

    menu = models.ForeignKey(Menu, on_delete=models.CASCADE, related_name="menu_platos")
    plato = models.ForeignKey("recipes.Plato", on_delete=models.PROTECT, related_name="menu_platos")
    meal_service = models.ForeignKey(MealService, on_delete=models.PROTECT, related_name="menu_platos")
    dish_category = models.CharField(max_length=100, blank=True)
    quantity_needed = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Number of servings"),
    )

    class Meta:
        verbose_name = _("Menu dish")
        verbose_name_plural = _("Menu dishes")
        ordering = ["meal_service__sort_order", "id"]

    def __str__(self):
        return f"{self.menu.title}: {self.plato.name} x{self.quantity_needed} ({self.meal_service.name})"
