from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Plato(models.Model):
    """A dish (recipe) served in menus."""

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)

    insumos = models.ManyToManyField(
        "insumos.Insumo",
        through="PlatoInsumo",
        related_name="platos",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Plato")
        verbose_name_plural = _("Platos")
        ordering = ["name"]

    def __str__(self):
        return self.name


class PlatoInsumo(models.Model):
    """
    One ingredient line of a recipe: how much of the ingredient, in its base
    unit, a single serving of the dish needs.
    """

    plato = models.ForeignKey(Plato, on_delete=models.CASCADE, related_name="plato_insumos")
    insumo = models.ForeignKey("insumos.Insumo", on_delete=models.PROTECT, related_name="plato_insumos")
    quantity_needed = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        validators=[MinValueValidator(Decimal("0.0001"))],
        help_text=_("Quantity per serving, in the ingredient's base unit"),
    )

    class Meta:
        verbose_name = _("Recipe ingredient")
        verbose_name_plural = _("Recipe ingredients")
        constraints = [
            models.UniqueConstraint(fields=["plato", "insumo"], name="unique_plato_insumo"),
        ]

    def __str__(self):
        return f"{self.plato.name}: {self.quantity_needed} {self.insumo.base_unit} {self.insumo.name}"
