from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core_backend.utils.archiving import SoftDeleteMixin

from .exceptions import ImmutableMovementError


class Supplier(SoftDeleteMixin):
    """
    A registered supplier. Purchase records snapshot the supplier's contact
    data at purchase time, so editing a supplier never rewrites history.
    """

    name = models.CharField(max_length=200, help_text=_("Supplier business name"))
    contact_person = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Supplier")
        verbose_name_plural = _("Suppliers")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Insumo(SoftDeleteMixin):
    """
    An ingredient or raw material held in the warehouse.

    Stock is tracked in purchase units (e.g. kg) while recipes express their
    needs in base units (e.g. g); ``conversion_factor`` is the number of base
    units in one purchase unit.

    Three counters follow a purchase through its stages:
    - pending_delivery_quantity: ordered, not yet received by the company
    - pending_reception_quantity: received by the company, not yet in the warehouse
    - stock_quantity: available in the warehouse

    The counters are only changed through ``InsumoService.apply_counter_delta``,
    which writes the matching ledger row and bumps ``version``.
    """

    name = models.CharField(max_length=200, help_text=_("Ingredient name"))
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)

    base_unit = models.CharField(max_length=20, help_text=_("Unit used by recipes, e.g. 'g'"))
    purchase_unit = models.CharField(max_length=20, help_text=_("Unit used for buying and stock, e.g. 'kg'"))
    conversion_factor = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        default=Decimal("1"),
        validators=[MinValueValidator(Decimal("0.0001"))],
        help_text=_("Base units per purchase unit"),
    )
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Cost of one purchase unit"),
    )

    stock_quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    pending_delivery_quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    pending_reception_quantity = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    min_stock_level = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Purchase suggestions top stock up to this level"),
    )

    preferred_supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="preferred_for",
    )
    supplier_name = models.CharField(max_length=200, blank=True)
    supplier_phone = models.CharField(max_length=50, blank=True)
    supplier_address = models.CharField(max_length=255, blank=True)

    last_physical_count_quantity = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    last_physical_count_date = models.DateTimeField(null=True, blank=True)
    discrepancy_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Last physical count minus recorded stock"),
    )

    version = models.PositiveIntegerField(
        default=0,
        help_text=_("Incremented on every counter change; used to detect concurrent updates"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Insumo")
        verbose_name_plural = _("Insumos")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=Q(stock_quantity__gte=0), name="insumo_stock_non_negative"),
            models.CheckConstraint(
                condition=Q(pending_delivery_quantity__gte=0), name="insumo_pending_delivery_non_negative"
            ),
            models.CheckConstraint(
                condition=Q(pending_reception_quantity__gte=0), name="insumo_pending_reception_non_negative"
            ),
            models.CheckConstraint(condition=Q(conversion_factor__gt=0), name="insumo_conversion_factor_positive"),
        ]

    def __str__(self):
        return f"{self.name} ({self.purchase_unit})"

    @property
    def is_below_min_stock(self):
        return self.stock_quantity < self.min_stock_level


class InsumoPriceHistory(models.Model):
    """One row per change of an ingredient's unit cost."""

    insumo = models.ForeignKey(Insumo, on_delete=models.CASCADE, related_name="price_history")
    old_unit_cost = models.DecimalField(max_digits=12, decimal_places=2)
    new_unit_cost = models.DecimalField(max_digits=12, decimal_places=2)
    changed_at = models.DateTimeField(auto_now_add=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="insumo_price_changes",
    )

    class Meta:
        verbose_name = _("Insumo price change")
        verbose_name_plural = _("Insumo price history")
        ordering = ["-changed_at", "-id"]

    def __str__(self):
        return f"{self.insumo.name}: {self.old_unit_cost} -> {self.new_unit_cost}"


class MovementType(models.TextChoices):
    ORDER_PLACED = "order_placed", _("Order placed")
    RECEPTION_IN = "reception_in", _("Received by company")
    PURCHASE_IN = "purchase_in", _("Received into warehouse")
    ADJUSTMENT_IN = "adjustment_in", _("Adjustment in")
    ADJUSTMENT_OUT = "adjustment_out", _("Adjustment out")
    DAILY_PREP_OUT = "daily_prep_out", _("Daily prep out")
    CANCELLATION_REVERSAL = "cancellation_reversal", _("Cancellation reversal")


class StockMovement(models.Model):
    """
    Append-only ledger of every change to an ingredient's counters.

    A row stores the signed delta applied to each counter and the counter
    values right after the change. Rows are written by
    ``InsumoService.apply_counter_delta`` in the same transaction as the
    counter update and are never edited afterwards.
    """

    insumo = models.ForeignKey(Insumo, on_delete=models.PROTECT, related_name="movements")
    movement_type = models.CharField(max_length=30, choices=MovementType.choices, db_index=True)
    quantity_change = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text=_("Quantity moved, in purchase units (always positive)"),
    )

    pending_delivery_change = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    pending_reception_change = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    stock_change = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    new_stock_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    new_pending_delivery_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    new_pending_reception_quantity = models.DecimalField(max_digits=12, decimal_places=2)

    notes = models.TextField(blank=True)
    menu = models.ForeignKey(
        "menus.Menu",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    purchase_record = models.ForeignKey(
        "purchasing.PurchaseRecord",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
        help_text=_("Purchase record that caused this movement, if any"),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("Stock movement")
        verbose_name_plural = _("Stock movements")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["insumo", "-created_at"], name="stockmove_insumo_created_idx"),
        ]

    def __str__(self):
        return f"{self.get_movement_type_display()} {self.quantity_change} {self.insumo.name}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableMovementError("Stock movements are write-once and cannot be edited.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableMovementError("Stock movements are write-once and cannot be deleted.")
