import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core_backend.utils.quantities import quantize_quantity, ZERO
from .counters import CounterDelta
from .exceptions import (
    ConcurrentModificationError,
    InsufficientStockError,
    InventoryError,
    NegativeCounterError,
)
from .models import Insumo, InsumoPriceHistory, MovementType, StockMovement

logger = logging.getLogger(__name__)

COUNTER_FIELDS = (
    ("pending_delivery", "pending_delivery_quantity"),
    ("pending_reception", "pending_reception_quantity"),
    ("stock", "stock_quantity"),
)

MANUAL_MOVEMENT_DELTAS = {
    MovementType.ADJUSTMENT_IN: lambda q: CounterDelta(stock=q),
    MovementType.ADJUSTMENT_OUT: lambda q: CounterDelta(stock=-q),
}


class InsumoService:
    """
    Service for ingredient counters, the stock ledger, physical counts and
    unit-cost changes.
    """

    @staticmethod
    @transaction.atomic
    def apply_counter_delta(
        insumo,
        delta: CounterDelta,
        movement_type: str,
        quantity,
        *,
        notes: str = "",
        user=None,
        menu=None,
        purchase_record=None,
        expected_version: int = None,
    ) -> StockMovement:
        """
        Apply signed deltas to an ingredient's counters and write the ledger row.

        The ingredient row is locked for the duration of the transaction; the
        counters, the version bump and the ledger insert commit or roll back
        together.

        Args:
            insumo: Insumo instance or primary key
            delta: CounterDelta to apply
            movement_type: One of MovementType
            quantity: Magnitude recorded on the ledger row
            expected_version: When given, the update is refused if the
                ingredient's version differs

        Returns:
            The created StockMovement

        Raises:
            ConcurrentModificationError: If ``expected_version`` is stale
            NegativeCounterError: If any counter would drop below zero
        """
        insumo_id = insumo.pk if isinstance(insumo, Insumo) else insumo
        locked = Insumo.objects.with_archived().select_for_update().get(pk=insumo_id)

        if expected_version is not None and locked.version != expected_version:
            logger.warning(
                f"Version conflict on insumo {locked.pk}: expected {expected_version}, found {locked.version}"
            )
            raise ConcurrentModificationError(locked, expected_version, locked.version)

        delta = CounterDelta(
            pending_delivery=quantize_quantity(delta.pending_delivery),
            pending_reception=quantize_quantity(delta.pending_reception),
            stock=quantize_quantity(delta.stock),
        )

        for delta_name, field_name in COUNTER_FIELDS:
            change = getattr(delta, delta_name)
            current = getattr(locked, field_name)
            if current + change < ZERO:
                if delta_name == "stock":
                    raise InsufficientStockError(locked, required=-change, available=current)
                raise NegativeCounterError(locked, field_name, current, change)

        Insumo.objects.with_archived().filter(pk=locked.pk).update(
            pending_delivery_quantity=F("pending_delivery_quantity") + delta.pending_delivery,
            pending_reception_quantity=F("pending_reception_quantity") + delta.pending_reception,
            stock_quantity=F("stock_quantity") + delta.stock,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        locked.refresh_from_db(
            fields=["pending_delivery_quantity", "pending_reception_quantity", "stock_quantity", "version"]
        )

        movement = StockMovement.objects.create(
            insumo=locked,
            movement_type=movement_type,
            quantity_change=quantize_quantity(quantity),
            pending_delivery_change=delta.pending_delivery,
            pending_reception_change=delta.pending_reception,
            stock_change=delta.stock,
            new_stock_quantity=locked.stock_quantity,
            new_pending_delivery_quantity=locked.pending_delivery_quantity,
            new_pending_reception_quantity=locked.pending_reception_quantity,
            notes=notes,
            menu=menu,
            purchase_record=purchase_record,
            user=user,
        )

        if isinstance(insumo, Insumo):
            # Keep the caller's instance in sync with the database
            insumo.pending_delivery_quantity = locked.pending_delivery_quantity
            insumo.pending_reception_quantity = locked.pending_reception_quantity
            insumo.stock_quantity = locked.stock_quantity
            insumo.version = locked.version

        logger.info(
            f"Insumo {locked.pk} ({locked.name}) {movement_type}: delta={delta.as_dict()} "
            f"-> stock={locked.stock_quantity}, pending_delivery={locked.pending_delivery_quantity}, "
            f"pending_reception={locked.pending_reception_quantity}"
        )
        return movement

    @staticmethod
    def record_manual_movement(insumo, movement_type: str, quantity, user=None, notes: str = "",
                               expected_version: int = None) -> StockMovement:
        """
        Register a manual stock adjustment (``adjustment_in`` / ``adjustment_out``).

        Raises:
            InventoryError: For a non-manual movement type or a non-positive quantity
            InsufficientStockError: If an ``adjustment_out`` exceeds stock
        """
        if movement_type not in MANUAL_MOVEMENT_DELTAS:
            raise InventoryError(f"'{movement_type}' cannot be registered manually.")
        quantity = quantize_quantity(quantity)
        if quantity <= ZERO:
            raise InventoryError("Adjustment quantity must be greater than zero.")

        delta = MANUAL_MOVEMENT_DELTAS[movement_type](quantity)
        return InsumoService.apply_counter_delta(
            insumo,
            delta,
            movement_type,
            quantity,
            notes=notes,
            user=user,
            expected_version=expected_version,
        )

    @staticmethod
    @transaction.atomic
    def register_physical_count(insumo, counted_quantity, user=None, count_date=None) -> Insumo:
        """
        Store a physical count and the discrepancy against recorded stock.

        Recorded stock is not modified; a manual adjustment can reconcile it
        afterwards.
        """
        counted_quantity = quantize_quantity(counted_quantity)
        if counted_quantity < ZERO:
            raise InventoryError("Physical count cannot be negative.")

        locked = Insumo.objects.select_for_update().get(pk=insumo.pk)
        locked.last_physical_count_quantity = counted_quantity
        locked.last_physical_count_date = count_date or timezone.now()
        locked.discrepancy_quantity = counted_quantity - locked.stock_quantity
        locked.save(update_fields=[
            "last_physical_count_quantity",
            "last_physical_count_date",
            "discrepancy_quantity",
            "updated_at",
        ])

        logger.info(
            f"Physical count for insumo {locked.pk} ({locked.name}): counted={counted_quantity}, "
            f"recorded={locked.stock_quantity}, discrepancy={locked.discrepancy_quantity}"
        )
        return locked

    @staticmethod
    @transaction.atomic
    def update_unit_cost(insumo, new_cost, user=None) -> Insumo:
        """Change an ingredient's unit cost and keep its price history."""
        new_cost = Decimal(new_cost).quantize(Decimal("0.01"))
        if new_cost < ZERO:
            raise InventoryError("Unit cost cannot be negative.")

        locked = Insumo.objects.select_for_update().get(pk=insumo.pk)
        old_cost = locked.unit_cost
        if old_cost == new_cost:
            return locked

        locked.unit_cost = new_cost
        locked.save(update_fields=["unit_cost", "updated_at"])
        InsumoPriceHistory.objects.create(
            insumo=locked,
            old_unit_cost=old_cost,
            new_unit_cost=new_cost,
            changed_by=user,
        )
        logger.info(f"Unit cost of insumo {locked.pk} changed from {old_cost} to {new_cost}")
        return locked

    @staticmethod
    def get_low_stock_insumos():
        """Active ingredients whose stock is below their minimum level."""
        return Insumo.objects.filter(stock_quantity__lt=F("min_stock_level")).order_by("name")
