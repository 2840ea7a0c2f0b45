"""
Signed deltas applied to an ingredient's three quantity counters.
"""

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class CounterDelta:
    """
    Changes to (pending_delivery, pending_reception, stock), in purchase units.

    Positive values add to a counter, negative values take from it.
    """

    pending_delivery: Decimal = ZERO
    pending_reception: Decimal = ZERO
    stock: Decimal = ZERO

    def __add__(self, other: "CounterDelta") -> "CounterDelta":
        return CounterDelta(
            pending_delivery=self.pending_delivery + other.pending_delivery,
            pending_reception=self.pending_reception + other.pending_reception,
            stock=self.stock + other.stock,
        )

    def __neg__(self) -> "CounterDelta":
        return CounterDelta(
            pending_delivery=-self.pending_delivery,
            pending_reception=-self.pending_reception,
            stock=-self.stock,
        )

    @property
    def is_zero(self) -> bool:
        return not (self.pending_delivery or self.pending_reception or self.stock)

    def as_dict(self) -> dict:
        return {
            "pending_delivery": self.pending_delivery,
            "pending_reception": self.pending_reception,
            "stock": self.stock,
        }
