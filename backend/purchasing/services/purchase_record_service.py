"""
Purchase record service.

Every write to a purchase record also moves the ingredient's counters through
``InsumoService.apply_counter_delta``, inside the same transaction, so a
record, the counters and the stock ledger never disagree.

| Action                        | Counter effect                                   | Ledger row            |
|-------------------------------|--------------------------------------------------|-----------------------|
| create as ordered             | pending_delivery += Q                            | order_placed          |
| create as received_by_company | pending_reception += Q                           | reception_in          |
| create as received_by_warehouse | stock += Q                                     | purchase_in           |
| receive q from ordered        | pending_delivery -= q, pending_reception += q    | reception_in          |
| receive q from received_by_company | pending_reception -= q, stock += q          | purchase_in           |
| cancel                        | reverts whatever the record still holds          | cancellation_reversal |
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core_backend.utils.quantities import quantize_quantity
from insumos.exceptions import ConcurrentModificationError
from insumos.models import Insumo
from insumos.services import InsumoService

from .. import lifecycle
from ..exceptions import InvalidTransitionError, PurchaseRecordNotDeletableError
from ..models import PurchaseRecord, PurchaseStatus

logger = logging.getLogger(__name__)


class PurchaseRecordService:
    """Creates, receives, cancels and deletes purchase records."""

    @staticmethod
    @transaction.atomic
    def create_purchase_record(
        insumo,
        quantity,
        status: str = PurchaseStatus.ORDERED,
        user=None,
        unit_cost=None,
        supplier=None,
        supplier_name: str = None,
        supplier_phone: str = None,
        supplier_address: str = None,
        purchase_date=None,
        notes: str = "",
    ) -> PurchaseRecord:
        """
        Register a purchase and apply its initial counter effect.

        Args:
            insumo: Insumo instance or primary key
            quantity: Quantity purchased, in purchase units
            status: Initial status (any status except cancelled)
            unit_cost: Defaults to the ingredient's current unit cost
            supplier: Registered Supplier; defaults to the ingredient's
                preferred supplier when no free-text supplier is given
            supplier_name/phone/address: Free-text supplier, used when no
                registered supplier applies

        Returns:
            The saved PurchaseRecord

        Raises:
            InvalidQuantityError: If ``quantity`` is not positive
            InvalidTransitionError: If ``status`` is not a valid initial status
        """
        if not isinstance(insumo, Insumo):
            insumo = Insumo.objects.with_archived().get(pk=insumo)

        quantity = quantize_quantity(quantity)
        transition = lifecycle.creation_delta(status, quantity)

        unit_cost = insumo.unit_cost if unit_cost is None else Decimal(unit_cost).quantize(Decimal("0.01"))

        if supplier is None and not supplier_name:
            supplier = insumo.preferred_supplier
        if supplier is not None:
            snapshot = {
                "supplier_name": supplier.name,
                "supplier_phone": supplier.phone,
                "supplier_address": supplier.address,
                "from_registered_supplier": True,
            }
        else:
            snapshot = {
                "supplier_name": supplier_name or insumo.supplier_name,
                "supplier_phone": supplier_phone or insumo.supplier_phone,
                "supplier_address": supplier_address or insumo.supplier_address,
                "from_registered_supplier": False,
            }

        record = PurchaseRecord(
            insumo=insumo,
            purchase_date=purchase_date or timezone.localdate(),
            quantity_purchased=quantity,
            unit_cost=unit_cost,
            total_amount=(quantity * unit_cost).quantize(Decimal("0.01")),
            supplier=supplier,
            notes=notes,
            purchased_by=user,
            **snapshot,
        )
        record.apply_state(transition.state)
        if record.status != PurchaseStatus.ORDERED:
            record.received_date = timezone.now()
        record.save()

        InsumoService.apply_counter_delta(
            insumo,
            transition.delta,
            transition.movement_type,
            quantity,
            notes=f"Purchase record #{record.pk} registered as {record.get_status_display().lower()}",
            user=user,
            purchase_record=record,
        )

        logger.info(
            f"Purchase record {record.pk} created: insumo={insumo.pk} ({insumo.name}), "
            f"quantity={quantity}, status={record.status}, total={record.total_amount}"
        )
        return record

    @staticmethod
    def _lock(record, expected_version=None) -> PurchaseRecord:
        record_id = record.pk if isinstance(record, PurchaseRecord) else record
        locked = PurchaseRecord.objects.select_for_update().get(pk=record_id)
        if expected_version is not None and locked.version != expected_version:
            logger.warning(
                f"Version conflict on purchase record {locked.pk}: "
                f"expected {expected_version}, found {locked.version}"
            )
            raise ConcurrentModificationError(locked, expected_version, locked.version)
        return locked

    @staticmethod
    def _sync(record, locked):
        """Mirror the saved row onto the caller's instance."""
        if isinstance(record, PurchaseRecord) and record is not locked:
            record.refresh_from_db()

    @staticmethod
    @transaction.atomic
    def receive(
        record,
        quantity,
        target_status: str = None,
        user=None,
        expected_version: int = None,
        notes: str = "",
    ) -> PurchaseRecord:
        """
        Receive part or all of the outstanding quantity into the next stage.

        Args:
            record: PurchaseRecord instance or primary key
            quantity: Quantity to receive now
            target_status: Stage being received into; when given it must be
                the record's next stage
            expected_version: Optimistic concurrency check on the record

        Raises:
            ConcurrentModificationError: If ``expected_version`` is stale
            InvalidTransitionError: From a terminal status or with a wrong target
            ReceptionQuantityError: If ``quantity`` exceeds the outstanding quantity
        """
        locked = PurchaseRecordService._lock(record, expected_version)
        state = locked.lifecycle_state

        if target_status is not None and target_status != state.next_status:
            raise InvalidTransitionError(
                locked.status,
                "receive",
                f"A record in status '{locked.status}' can only be received into "
                f"'{state.next_status}', not '{target_status}'.",
            )

        quantity = quantize_quantity(quantity)
        transition = lifecycle.receive(state, quantity)

        locked.apply_state(transition.state)
        if locked.received_date is None:
            locked.received_date = timezone.now()
        locked.version += 1
        locked.save()

        stage = "company" if transition.movement_type == lifecycle.RECEPTION_IN else "warehouse"
        ledger_notes = f"Purchase record #{locked.pk}: received {quantity} by {stage}"
        if notes:
            ledger_notes = f"{ledger_notes}. {notes}"

        InsumoService.apply_counter_delta(
            locked.insumo_id,
            transition.delta,
            transition.movement_type,
            quantity,
            notes=ledger_notes,
            user=user,
            purchase_record=locked,
        )

        logger.info(
            f"Purchase record {locked.pk} received {quantity} ({transition.movement_type}); "
            f"status={locked.status}, received={locked.quantity_received}/{locked.quantity_purchased}"
        )
        PurchaseRecordService._sync(record, locked)
        return locked

    @staticmethod
    @transaction.atomic
    def cancel(record, user=None, reason: str = "", expected_version: int = None) -> PurchaseRecord:
        """
        Cancel a record and revert the counter effects it still holds.

        The reversal is written as a single ``cancellation_reversal`` ledger
        row. If reverting would drive a counter below zero (e.g. the received
        stock was already consumed) the whole cancellation rolls back.

        Raises:
            InvalidTransitionError: If the record is already terminal
            NegativeCounterError / InsufficientStockError: If a counter cannot absorb the reversal
        """
        locked = PurchaseRecordService._lock(record, expected_version)
        transition = lifecycle.cancel(locked.lifecycle_state)

        locked.apply_state(transition.state)
        locked.cancelled_at = timezone.now()
        locked.cancellation_reason = reason
        locked.version += 1
        locked.save()

        ledger_notes = f"Cancellation of purchase record #{locked.pk} (was {transition.state.from_status})"
        if reason:
            ledger_notes = f"{ledger_notes}. Reason: {reason}"

        InsumoService.apply_counter_delta(
            locked.insumo_id,
            transition.delta,
            transition.movement_type,
            transition.quantity,
            notes=ledger_notes,
            user=user,
            purchase_record=locked,
        )

        logger.info(
            f"Purchase record {locked.pk} cancelled from {transition.state.from_status}; "
            f"reverted {transition.delta.as_dict()}"
        )
        PurchaseRecordService._sync(record, locked)
        return locked

    @staticmethod
    @transaction.atomic
    def delete(record) -> None:
        """
        Delete a cancelled record.

        Deleting never touches the ingredient counters; cancellation is the
        only reversal point.

        Raises:
            PurchaseRecordNotDeletableError: If the record is not cancelled or
                fulfils an urgent request
        """
        locked = PurchaseRecordService._lock(record)
        if locked.status != PurchaseStatus.CANCELLED:
            raise PurchaseRecordNotDeletableError(locked)
        if locked.urgent_requests.exists():
            raise PurchaseRecordNotDeletableError(
                locked,
                f"Purchase record {locked.pk} fulfils an urgent purchase request and cannot be deleted.",
            )

        logger.warning(
            f"Deleting cancelled purchase record {locked.pk} (insumo {locked.insumo_id}); "
            f"no inventory reversal is performed"
        )
        locked.delete()
