"""
Daily prep: what the kitchen needs from the warehouse for one day's menus.

The overview groups the day's ingredient needs by meal service and flags
each (ingredient, meal service) item as sufficient or not. Deducting sends
the selected items to the kitchen by posting ``daily_prep_out`` movements;
a deduction is all-or-nothing.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import transaction

from core_backend.config import get_erp_setting
from core_backend.utils.quantities import ZERO, quantize_quantity
from insumos.counters import CounterDelta
from insumos.models import Insumo, MovementType
from insumos.services import InsumoService
from menus.models import Menu
from menus.needs import (
    GROUP_BY_MEAL_SERVICE,
    InsumoNeed,
    aggregate_needs,
    build_catalog,
    catalog_for_demand,
    collect_demand,
)
from urgent_requests.models import UrgentRequestPriority
from urgent_requests.services import UrgentRequestService
from .exceptions import DailyPrepError, DeductionRefusedError, UnknownPrepItemError

logger = logging.getLogger(__name__)


@dataclass
class MealServiceGroup:
    meal_service_id: int
    meal_service_name: str
    sort_order: int
    items: List[InsumoNeed] = field(default_factory=list)

    @property
    def all_sufficient(self) -> bool:
        return all(item.is_sufficient for item in self.items)


@dataclass
class DailyPrepOverview:
    prep_date: date
    menu_ids: List[int]
    services: List[MealServiceGroup]

    @property
    def items(self) -> List[InsumoNeed]:
        return [item for group in self.services for item in group.items]

    @property
    def summary(self) -> dict:
        items = self.items
        sufficient = sum(1 for item in items if item.is_sufficient)
        return {
            "menu_count": len(self.menu_ids),
            "total_items": len(items),
            "sufficient_items": sufficient,
            "insufficient_items": len(items) - sufficient,
        }


@dataclass(frozen=True)
class PrepSelection:
    """One (ingredient, meal service) item picked for deduction."""
    insumo_id: int
    meal_service_id: int
    quantity: Optional[Decimal] = None  # adjusted quantity, in purchase units


def _group_by_service(needs) -> List[MealServiceGroup]:
    groups: Dict[int, MealServiceGroup] = {}
    for need in needs:
        group = groups.get(need.meal_service_id)
        if group is None:
            group = groups[need.meal_service_id] = MealServiceGroup(
                meal_service_id=need.meal_service_id,
                meal_service_name=need.meal_service_name,
                sort_order=need.meal_service_order,
            )
        group.items.append(need)
    return sorted(groups.values(), key=lambda g: (g.sort_order, g.meal_service_name))


def validate_deductor_name(name) -> str:
    name = (name or "").strip()
    max_length = get_erp_setting("DEDUCTOR_NAME_MAX_LENGTH")
    if not name:
        raise DailyPrepError("The name of the person performing the deduction is required.")
    if len(name) > max_length:
        raise DailyPrepError(f"The deductor name cannot exceed {max_length} characters.")
    return name


class DailyPrepService:
    """Daily prep overview, stock deduction and shortage requests."""

    @staticmethod
    def overview(prep_date: date) -> DailyPrepOverview:
        """
        Ingredient needs of the menus dated ``prep_date``, grouped by meal
        service (services in their display order, items by ingredient name).
        """
        menus = Menu.objects.filter(menu_date=prep_date)
        demand = collect_demand(menus)
        needs = aggregate_needs(demand, catalog_for_demand(demand), GROUP_BY_MEAL_SERVICE)
        return DailyPrepOverview(
            prep_date=prep_date,
            menu_ids=list(menus.values_list("pk", flat=True)),
            services=_group_by_service(needs),
        )

    @staticmethod
    @transaction.atomic
    def deduct(
        prep_date: date,
        selections: Optional[List[PrepSelection]] = None,
        deductor_name: str = "",
        user=None,
        select_all: bool = False,
    ) -> dict:
        """
        Take the selected items out of stock for the kitchen.

        Needs are recomputed against locked ingredient rows, so the check and
        the deduction see the same stock. The deduction is refused as a whole
        when any selected item is insufficient or when the selected quantities
        of one ingredient add up to more than its stock.

        Args:
            prep_date: Menu date being prepared
            selections: Items to deduct, optionally with an adjusted quantity
            deductor_name: Person performing the deduction (audit trail)
            user: Authenticated user, recorded on the ledger rows
            select_all: Deduct every item of the day instead of ``selections``

        Returns:
            {'prep_date', 'deductor_name', 'count', 'deducted': [...]}

        Raises:
            DailyPrepError: Missing deductor name, empty or duplicate selection
            UnknownPrepItemError: A selection matches no item of the day
            DeductionRefusedError: Stock does not cover the selection
        """
        deductor_name = validate_deductor_name(deductor_name)

        menus = {menu.pk: menu for menu in Menu.objects.filter(menu_date=prep_date)}
        demand = collect_demand(list(menus.values()))
        insumo_ids = sorted({line.insumo_id for line in demand})
        locked = Insumo.objects.with_archived().select_for_update().filter(pk__in=insumo_ids).order_by("pk")
        needs = {
            need.key: need
            for need in aggregate_needs(demand, build_catalog(locked), GROUP_BY_MEAL_SERVICE)
        }

        if select_all:
            selections = [PrepSelection(insumo_id, service_id) for insumo_id, service_id in needs]
        if not selections:
            raise DailyPrepError("Select at least one item to deduct.")

        items = []
        seen = set()
        for selection in selections:
            key = (selection.insumo_id, selection.meal_service_id)
            if key in seen:
                raise DailyPrepError(
                    f"Duplicate selection for insumo {selection.insumo_id} "
                    f"in meal service {selection.meal_service_id}."
                )
            seen.add(key)
            need = needs.get(key)
            if need is None:
                raise UnknownPrepItemError(selection.insumo_id, selection.meal_service_id)
            quantity = need.total_needed_purchase_unit
            adjusted = selection.quantity is not None and quantize_quantity(selection.quantity) != quantity
            if selection.quantity is not None:
                quantity = quantize_quantity(selection.quantity)
            if quantity <= ZERO:
                raise DailyPrepError(f"Deduction quantity for '{need.insumo_name}' must be greater than zero.")
            items.append((need, quantity, adjusted))

        refused = []
        for need, quantity, _ in items:
            if not need.is_sufficient:
                refused.append({
                    "insumo_id": need.insumo_id,
                    "insumo_name": need.insumo_name,
                    "meal_service_id": need.meal_service_id,
                    "required": need.total_needed_purchase_unit,
                    "available": need.current_stock,
                })

        per_insumo = defaultdict(lambda: ZERO)
        for need, quantity, _ in items:
            per_insumo[need.insumo_id] += quantity
        for need, _, _ in items:
            total = per_insumo[need.insumo_id]
            if total > need.current_stock and not any(r["insumo_id"] == need.insumo_id for r in refused):
                refused.append({
                    "insumo_id": need.insumo_id,
                    "insumo_name": need.insumo_name,
                    "meal_service_id": None,
                    "required": total,
                    "available": need.current_stock,
                })

        if refused:
            names = ", ".join(r["insumo_name"] for r in refused)
            logger.warning(f"Daily prep deduction for {prep_date} refused; insufficient stock for: {names}")
            raise DeductionRefusedError(
                f"Deduction refused: insufficient stock for {names}. "
                f"Adjust the selection or request an urgent purchase and try again.",
                items=refused,
            )

        deducted = []
        for need, quantity, adjusted in items:
            notes = (
                f"Daily prep deduction for menu of {prep_date} ({need.meal_service_name}). "
                f"Performed by: {deductor_name}"
            )
            if adjusted:
                notes = f"{notes}. Quantity adjusted from {need.total_needed_purchase_unit}"
            menu = menus.get(need.menu_ids[0]) if len(need.menu_ids) == 1 else None

            movement = InsumoService.apply_counter_delta(
                need.insumo_id,
                CounterDelta(stock=-quantity),
                MovementType.DAILY_PREP_OUT,
                quantity,
                notes=notes,
                user=user,
                menu=menu,
            )
            deducted.append({
                "insumo_id": need.insumo_id,
                "insumo_name": need.insumo_name,
                "meal_service_id": need.meal_service_id,
                "quantity": quantity,
                "movement_id": movement.pk,
                "new_stock_quantity": movement.new_stock_quantity,
            })

        logger.info(f"Daily prep deduction for {prep_date} by {deductor_name}: {len(deducted)} items")
        return {
            "prep_date": prep_date,
            "deductor_name": deductor_name,
            "count": len(deducted),
            "deducted": deducted,
        }

    @staticmethod
    def request_urgent_purchase(
        prep_date: date,
        insumo_id: int,
        meal_service_id: int,
        user=None,
        priority: str = UrgentRequestPriority.URGENT,
        notes: str = "",
    ):
        """
        Open an urgent purchase request for an insufficient prep item,
        pre-filled with its missing quantity.

        Returns:
            (UrgentPurchaseRequest, created) tuple, see
            ``UrgentRequestService.create_request``
        """
        overview = DailyPrepService.overview(prep_date)
        need = next(
            (item for item in overview.items
             if item.insumo_id == insumo_id and item.meal_service_id == meal_service_id),
            None,
        )
        if need is None:
            raise UnknownPrepItemError(insumo_id, meal_service_id)
        if need.missing_quantity <= ZERO:
            raise DailyPrepError(f"Stock already covers '{need.insumo_name}' for {need.meal_service_name}.")

        request_notes = f"Shortage detected in daily prep for {prep_date} ({need.meal_service_name})"
        if notes:
            request_notes = f"{request_notes}. {notes}"

        return UrgentRequestService.create_request(
            Insumo.objects.with_archived().get(pk=insumo_id),
            need.missing_quantity,
            user=user,
            priority=priority,
            notes=request_notes,
            source_module="warehouse",
        )
