from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from . import lifecycle


class PurchaseStatus(models.TextChoices):
    ORDERED = lifecycle.ORDERED, _("Ordered")
    RECEIVED_BY_COMPANY = lifecycle.RECEIVED_BY_COMPANY, _("Received by company")
    RECEIVED_BY_WAREHOUSE = lifecycle.RECEIVED_BY_WAREHOUSE, _("Received by warehouse")
    CANCELLED = lifecycle.CANCELLED, _("Cancelled")


class PurchaseRecord(models.Model):
    """
    One purchase of one ingredient, followed from the order to the warehouse.

    Two cumulative counters track the partial receptions of each stage:
    ``quantity_received_by_company`` and ``quantity_received_by_warehouse``,
    with 0 <= warehouse <= company <= purchased at all times.

    Supplier and cost data are snapshotted at purchase time. Status changes go
    through ``PurchaseRecordService``, which keeps the ingredient counters and
    the stock ledger in step and bumps ``version``.
    """

    insumo = models.ForeignKey("insumos.Insumo", on_delete=models.PROTECT, related_name="purchase_records")
    purchase_date = models.DateField(default=timezone.localdate, db_index=True)

    quantity_purchased = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Quantity ordered, in purchase units"),
    )
    quantity_received_by_company = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    quantity_received_by_warehouse = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    supplier = models.ForeignKey(
        "insumos.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_records",
    )
    supplier_name = models.CharField(max_length=200, blank=True)
    supplier_phone = models.CharField(max_length=50, blank=True)
    supplier_address = models.CharField(max_length=255, blank=True)
    from_registered_supplier = models.BooleanField(default=False)

    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=30,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.ORDERED,
        db_index=True,
    )
    received_date = models.DateTimeField(null=True, blank=True, help_text=_("First reception at any stage"))

    cancelled_from_status = models.CharField(max_length=30, choices=PurchaseStatus.choices, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)

    purchased_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_records",
    )
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Purchase record")
        verbose_name_plural = _("Purchase records")
        ordering = ["-purchase_date", "-id"]
        indexes = [
            models.Index(fields=["insumo", "status"], name="purchase_insumo_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(quantity_purchased__gt=0), name="purchase_quantity_positive"),
            models.CheckConstraint(
                condition=Q(quantity_received_by_warehouse__gte=0), name="purchase_warehouse_received_non_negative"
            ),
            models.CheckConstraint(
                condition=Q(quantity_received_by_warehouse__lte=F("quantity_received_by_company")),
                name="purchase_warehouse_within_company",
            ),
            models.CheckConstraint(
                condition=Q(quantity_received_by_company__lte=F("quantity_purchased")),
                name="purchase_company_within_purchased",
            ),
        ]

    def __str__(self):
        return f"#{self.pk} {self.insumo.name} x{self.quantity_purchased} ({self.get_status_display()})"

    # ------------------------------------------------------------------
    # Lifecycle mapping
    # ------------------------------------------------------------------

    def _active_state(self, status):
        if status == PurchaseStatus.ORDERED:
            return lifecycle.Ordered(self.quantity_purchased, self.quantity_received_by_company)
        if status == PurchaseStatus.RECEIVED_BY_COMPANY:
            return lifecycle.ReceivedByCompany(self.quantity_purchased, self.quantity_received_by_warehouse)
        return lifecycle.ReceivedByWarehouse(self.quantity_purchased)

    @property
    def lifecycle_state(self):
        if self.status == PurchaseStatus.CANCELLED:
            # Cancelling leaves the stage counters untouched, so the reverted
            # delta can be recomputed from the state the record was cancelled in
            previous = self._active_state(self.cancelled_from_status)
            return lifecycle.cancel(previous).state
        return self._active_state(self.status)

    def apply_state(self, state):
        """Copy a lifecycle state onto the row's status and stage counters (not saved)."""
        self.status = state.status
        if isinstance(state, lifecycle.Ordered):
            self.quantity_received_by_company = state.received
            self.quantity_received_by_warehouse = Decimal("0.00")
        elif isinstance(state, lifecycle.ReceivedByCompany):
            self.quantity_received_by_company = state.purchased
            self.quantity_received_by_warehouse = state.received
        elif isinstance(state, lifecycle.ReceivedByWarehouse):
            self.quantity_received_by_company = state.purchased
            self.quantity_received_by_warehouse = state.purchased
        elif isinstance(state, lifecycle.Cancelled):
            self.cancelled_from_status = state.from_status

    @property
    def quantity_received(self):
        """Received quantity toward the stage the record is currently heading to."""
        if self.status == PurchaseStatus.CANCELLED:
            return lifecycle.received_quantity(self._active_state(self.cancelled_from_status))
        return lifecycle.received_quantity(self.lifecycle_state)

    @property
    def outstanding_quantity(self):
        state = self.lifecycle_state
        return getattr(state, "outstanding", Decimal("0.00"))

    @property
    def next_status(self):
        return self.lifecycle_state.next_status
