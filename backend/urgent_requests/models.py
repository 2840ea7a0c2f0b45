from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UrgentRequestStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")
    FULFILLED = "fulfilled", _("Fulfilled")


class UrgentRequestPriority(models.TextChoices):
    URGENT = "urgent", _("Urgent")
    HIGH = "high", _("High")
    MEDIUM = "medium", _("Medium")
    LOW = "low", _("Low")


OPEN_STATUSES = (UrgentRequestStatus.PENDING, UrgentRequestStatus.APPROVED)


class UrgentPurchaseRequest(models.Model):
    """
    An ad-hoc request to buy an ingredient outside the planning cycle,
    typically raised by the warehouse when daily prep finds a shortage.

    Lifecycle:
    - pending -> approved | rejected | fulfilled
    - approved -> fulfilled

    A rejected request carries its reason and a fulfilled one the purchase
    record that covered it. Re-requesting an ingredient that already has an
    open (pending or approved) request bumps ``insistence_count`` on that
    request instead of opening a new one.
    """

    insumo = models.ForeignKey("insumos.Insumo", on_delete=models.PROTECT, related_name="urgent_requests")
    quantity_requested = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Quantity requested, in purchase units"),
    )
    request_date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True)
    source_module = models.CharField(max_length=50, default="warehouse")
    priority = models.CharField(
        max_length=10,
        choices=UrgentRequestPriority.choices,
        default=UrgentRequestPriority.URGENT,
        db_index=True,
    )
    status = models.CharField(
        max_length=10,
        choices=UrgentRequestStatus.choices,
        default=UrgentRequestStatus.PENDING,
        db_index=True,
    )
    rejection_reason = models.TextField(blank=True)
    fulfilled_purchase_record = models.ForeignKey(
        "purchasing.PurchaseRecord",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="urgent_requests",
    )
    insistence_count = models.PositiveIntegerField(
        default=0,
        help_text=_("Times this shortage was requested again while the request was open"),
    )

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="urgent_purchase_requests",
    )
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="resolved_urgent_purchase_requests",
    )
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Urgent purchase request")
        verbose_name_plural = _("Urgent purchase requests")
        ordering = ["-request_date", "-id"]
        indexes = [
            models.Index(fields=["insumo", "status"], name="urgent_insumo_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(quantity_requested__gt=0), name="urgent_request_quantity_positive"),
            models.CheckConstraint(
                condition=~Q(status=UrgentRequestStatus.REJECTED) | ~Q(rejection_reason=""),
                name="urgent_request_rejection_has_reason",
            ),
            models.CheckConstraint(
                condition=~Q(status=UrgentRequestStatus.FULFILLED) | Q(fulfilled_purchase_record__isnull=False),
                name="urgent_request_fulfilled_has_record",
            ),
        ]

    def __str__(self):
        return f"Urgent request #{self.pk}: {self.insumo.name} x{self.quantity_requested} ({self.get_status_display()})"

    @property
    def is_open(self):
        return self.status in OPEN_STATUSES
