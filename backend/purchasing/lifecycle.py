"""
Purchase record lifecycle.

A record moves ``ordered -> received_by_company -> received_by_warehouse``
and can be cancelled from either of the first two states. Each state is a
small immutable value carrying exactly what its transitions need, so an
illegal transition cannot be expressed and a cancellation always knows what
it has to revert.

Every transition returns a :class:`Transition`: the next state, the signed
counter delta to apply to the ingredient and the ledger movement type. This
module is pure; ``PurchaseRecordService`` persists the result.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from core_backend.utils.quantities import ZERO
from insumos.counters import CounterDelta

from .exceptions import InvalidQuantityError, InvalidTransitionError, ReceptionQuantityError

ORDERED = "ordered"
RECEIVED_BY_COMPANY = "received_by_company"
RECEIVED_BY_WAREHOUSE = "received_by_warehouse"
CANCELLED = "cancelled"

# Ledger movement types, mirrored by insumos.models.MovementType
ORDER_PLACED = "order_placed"
RECEPTION_IN = "reception_in"
PURCHASE_IN = "purchase_in"
CANCELLATION_REVERSAL = "cancellation_reversal"


@dataclass(frozen=True)
class Ordered:
    """Ordered from the supplier; ``received`` already arrived at the company."""
    purchased: Decimal
    received: Decimal = ZERO
    status: ClassVar[str] = ORDERED
    next_status: ClassVar[str] = RECEIVED_BY_COMPANY

    @property
    def outstanding(self) -> Decimal:
        return self.purchased - self.received


@dataclass(frozen=True)
class ReceivedByCompany:
    """Fully at the company; ``received`` already moved into the warehouse."""
    purchased: Decimal
    received: Decimal = ZERO
    status: ClassVar[str] = RECEIVED_BY_COMPANY
    next_status: ClassVar[str] = RECEIVED_BY_WAREHOUSE

    @property
    def outstanding(self) -> Decimal:
        return self.purchased - self.received


@dataclass(frozen=True)
class ReceivedByWarehouse:
    purchased: Decimal
    status: ClassVar[str] = RECEIVED_BY_WAREHOUSE
    next_status: ClassVar[str] = None


@dataclass(frozen=True)
class Cancelled:
    """Cancelled from ``from_status``; ``reverted`` is the delta that undid its effects."""
    purchased: Decimal
    from_status: str
    reverted: CounterDelta
    status: ClassVar[str] = CANCELLED
    next_status: ClassVar[str] = None


State = Union[Ordered, ReceivedByCompany, ReceivedByWarehouse, Cancelled]


@dataclass(frozen=True)
class Transition:
    state: State
    delta: CounterDelta
    movement_type: str
    quantity: Decimal
    advanced: bool = False


def creation_delta(status: str, quantity: Decimal) -> Transition:
    """
    Initial state and counter effect of a new record.

    A record created past the ``ordered`` stage skips the counters of the
    stages it never went through.
    """
    if quantity <= ZERO:
        raise InvalidQuantityError(quantity)

    if status == ORDERED:
        return Transition(Ordered(quantity), CounterDelta(pending_delivery=quantity), ORDER_PLACED, quantity)
    if status == RECEIVED_BY_COMPANY:
        return Transition(
            ReceivedByCompany(quantity), CounterDelta(pending_reception=quantity), RECEPTION_IN, quantity
        )
    if status == RECEIVED_BY_WAREHOUSE:
        return Transition(ReceivedByWarehouse(quantity), CounterDelta(stock=quantity), PURCHASE_IN, quantity)
    raise InvalidTransitionError(status, "create", f"'{status}' is not a valid initial status.")


def receive(state: State, quantity: Decimal) -> Transition:
    """
    Receive ``quantity`` into the next stage.

    The state only advances once the stage's cumulative received quantity
    reaches the purchased quantity.

    Raises:
        InvalidTransitionError: From a terminal state
        InvalidQuantityError: If ``quantity`` is not positive
        ReceptionQuantityError: If ``quantity`` exceeds the outstanding quantity
    """
    if not isinstance(state, (Ordered, ReceivedByCompany)):
        raise InvalidTransitionError(state.status, "receive")
    if quantity <= ZERO:
        raise InvalidQuantityError(quantity)
    if quantity > state.outstanding:
        raise ReceptionQuantityError(quantity, state.outstanding)

    received = state.received + quantity
    complete = received == state.purchased

    if isinstance(state, Ordered):
        next_state = ReceivedByCompany(state.purchased) if complete else Ordered(state.purchased, received)
        delta = CounterDelta(pending_delivery=-quantity, pending_reception=quantity)
        return Transition(next_state, delta, RECEPTION_IN, quantity, advanced=complete)

    next_state = ReceivedByWarehouse(state.purchased) if complete else ReceivedByCompany(state.purchased, received)
    delta = CounterDelta(pending_reception=-quantity, stock=quantity)
    return Transition(next_state, delta, PURCHASE_IN, quantity, advanced=complete)


def cancel(state: State) -> Transition:
    """
    Cancel an active record, reverting every counter effect it still holds.

    From ``Ordered(p, r)`` the un-received ``p - r`` leaves pending delivery
    and ``r`` leaves pending reception. From ``ReceivedByCompany(p, r)`` the
    ``p - r`` still at the company leaves pending reception and the ``r``
    already in the warehouse leaves stock.
    """
    if isinstance(state, Ordered):
        reverted = CounterDelta(pending_delivery=-(state.purchased - state.received), pending_reception=-state.received)
    elif isinstance(state, ReceivedByCompany):
        reverted = CounterDelta(pending_reception=-(state.purchased - state.received), stock=-state.received)
    else:
        raise InvalidTransitionError(state.status, "cancel")

    return Transition(
        Cancelled(state.purchased, state.status, reverted),
        reverted,
        CANCELLATION_REVERSAL,
        state.purchased,
        advanced=True,
    )


def received_quantity(state: State) -> Decimal:
    """Progress toward the stage the record is heading to."""
    if isinstance(state, (Ordered, ReceivedByCompany)):
        return state.received
    if isinstance(state, ReceivedByWarehouse):
        return state.purchased
    return ZERO
