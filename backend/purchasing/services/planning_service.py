"""
Purchase planning.

Compares the ingredient demand of the menus planned in a date range, plus each
ingredient's minimum stock level, against current stock and suggests what to
buy. Suggestions can then be registered in one batch as purchases already
received into the warehouse.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from django.db import transaction

from core_backend.utils.quantities import ZERO, ceil_if_fractional
from insumos.exceptions import InventoryError
from insumos.models import Insumo
from menus.models import Menu
from menus.needs import GROUP_BY_INSUMO, aggregate_needs, build_catalog, collect_demand

from ..exceptions import PurchasingError
from ..models import PurchaseStatus
from .purchase_record_service import PurchaseRecordService

logger = logging.getLogger(__name__)

REASON_MENU_DEMAND = "menu_demand"
REASON_MIN_STOCK_LEVEL = "min_stock_level"
REASON_BOTH = "both"
REASON_ZERO_STOCK_ALERT = "zero_stock_alert"
SUGGESTION_REASONS = (REASON_MENU_DEMAND, REASON_MIN_STOCK_LEVEL, REASON_BOTH, REASON_ZERO_STOCK_ALERT)


@dataclass
class PurchaseSuggestion:
    """Suggested purchase for one ingredient."""
    insumo_id: int
    insumo_name: str
    base_unit: str
    purchase_unit: str
    conversion_factor: Decimal
    current_stock: Decimal
    min_stock_level: Decimal
    unit_cost: Decimal
    total_needed_base_unit: Decimal
    total_needed_purchase_unit_raw: Decimal
    total_needed_purchase_unit: Decimal
    needed_rounded_up: bool
    purchase_suggestion_raw: Decimal
    purchase_suggestion_rounded: Decimal
    suggestion_rounded_up: bool
    reason_for_purchase_suggestion: Optional[str]
    estimated_purchase_cost: Decimal
    platos: List[str] = field(default_factory=list)
    menu_ids: List[int] = field(default_factory=list)


@dataclass
class PlanningResult:
    start_date: date
    end_date: date
    menu_count: int
    suggestions: List[PurchaseSuggestion]
    total_estimated_cost: Decimal


def classify_suggestion(current_stock: Decimal, needed: Decimal, min_stock_level: Decimal) -> Optional[str]:
    """Why an ingredient needs buying, or None when it does not."""
    short_for_menus = needed > current_stock
    below_minimum = current_stock < min_stock_level
    if short_for_menus and below_minimum:
        return REASON_BOTH
    if short_for_menus:
        return REASON_MENU_DEMAND
    if below_minimum:
        return REASON_MIN_STOCK_LEVEL
    if current_stock == ZERO:
        return REASON_ZERO_STOCK_ALERT
    return None


class PurchasePlanningService:
    """Purchase suggestions, batch registration and export."""

    @staticmethod
    def analyze(start_date: date, end_date: date, reason: str = None) -> PlanningResult:
        """
        Build purchase suggestions for the menus dated in ``[start_date, end_date]``.

        Every active ingredient is evaluated, so ingredients below their
        minimum level show up even when no menu uses them.

        Args:
            start_date: First menu date (inclusive)
            end_date: Last menu date (inclusive)
            reason: Optional filter on ``reason_for_purchase_suggestion``

        Returns:
            PlanningResult with suggestions sorted by suggested quantity
            (largest first), then ingredient name
        """
        if start_date > end_date:
            raise PurchasingError("start_date must be on or before end_date.")
        if reason is not None and reason not in SUGGESTION_REASONS:
            raise PurchasingError(f"Unknown suggestion reason '{reason}'.")

        menus = Menu.objects.filter(menu_date__gte=start_date, menu_date__lte=end_date)
        demand = collect_demand(menus)
        catalog = build_catalog(Insumo.objects.all())
        needs = {need.insumo_id: need for need in aggregate_needs(demand, catalog, GROUP_BY_INSUMO)}

        suggestions = []
        for entry in catalog.values():
            need = needs.get(entry.insumo_id)
            needed = need.total_needed_purchase_unit if need else ZERO
            stock = entry.stock_quantity

            suggestion_reason = classify_suggestion(stock, needed, entry.min_stock_level)
            raw = max(ZERO, needed - stock, entry.min_stock_level - stock)
            rounded, rounded_up = ceil_if_fractional(raw)

            if rounded <= ZERO and suggestion_reason != REASON_ZERO_STOCK_ALERT:
                continue
            if reason is not None and suggestion_reason != reason:
                continue

            suggestions.append(PurchaseSuggestion(
                insumo_id=entry.insumo_id,
                insumo_name=entry.name,
                base_unit=entry.base_unit,
                purchase_unit=entry.purchase_unit,
                conversion_factor=entry.conversion_factor,
                current_stock=stock,
                min_stock_level=entry.min_stock_level,
                unit_cost=entry.unit_cost,
                total_needed_base_unit=need.total_needed_base_unit if need else ZERO,
                total_needed_purchase_unit_raw=need.total_needed_purchase_unit_raw if need else ZERO,
                total_needed_purchase_unit=needed,
                needed_rounded_up=need.rounded_up if need else False,
                purchase_suggestion_raw=raw,
                purchase_suggestion_rounded=rounded,
                suggestion_rounded_up=rounded_up,
                reason_for_purchase_suggestion=suggestion_reason,
                estimated_purchase_cost=(rounded * entry.unit_cost).quantize(Decimal("0.01")),
                platos=list(need.platos) if need else [],
                menu_ids=list(need.menu_ids) if need else [],
            ))

        suggestions.sort(key=lambda s: (-s.purchase_suggestion_rounded, s.insumo_name.lower()))
        total = sum((s.estimated_purchase_cost for s in suggestions), Decimal("0.00"))

        logger.info(
            f"Purchase analysis {start_date}..{end_date}: {len(demand)} demand lines, "
            f"{len(suggestions)} suggestions, estimated cost {total}"
        )
        return PlanningResult(
            start_date=start_date,
            end_date=end_date,
            menu_count=menus.count(),
            suggestions=suggestions,
            total_estimated_cost=total,
        )

    @staticmethod
    def create_batch(items, user=None) -> dict:
        """
        Register several purchases at once, already received into the warehouse.

        Each item runs in its own savepoint: a failing item is reported and
        skipped while the others commit.

        Args:
            items: Iterable of dicts with ``insumo`` and ``quantity`` and
                optionally ``unit_cost``, ``supplier``, ``supplier_name`` and ``notes``
            user: User registering the purchases

        Returns:
            {'success_count', 'failure_count', 'results': [...]}
        """
        results = []
        for item in items:
            insumo = item["insumo"]
            insumo_id = getattr(insumo, "pk", insumo)
            try:
                with transaction.atomic():
                    record = PurchaseRecordService.create_purchase_record(
                        insumo,
                        item["quantity"],
                        status=PurchaseStatus.RECEIVED_BY_WAREHOUSE,
                        user=user,
                        unit_cost=item.get("unit_cost"),
                        supplier=item.get("supplier"),
                        supplier_name=item.get("supplier_name"),
                        notes=item.get("notes", ""),
                    )
                results.append({"insumo_id": insumo_id, "success": True, "purchase_record_id": record.pk})
            except (PurchasingError, InventoryError, Insumo.DoesNotExist) as e:
                logger.warning(f"Batch purchase for insumo {insumo_id} failed: {e}")
                results.append({"insumo_id": insumo_id, "success": False, "error": str(e)})
            except Exception as e:
                logger.error(f"Unexpected error in batch purchase for insumo {insumo_id}: {e}", exc_info=True)
                results.append({"insumo_id": insumo_id, "success": False, "error": "Unexpected error"})

        success_count = sum(1 for r in results if r["success"])
        failure_count = len(results) - success_count
        logger.info(f"Batch purchase finished: {success_count} created, {failure_count} failed")
        return {"success_count": success_count, "failure_count": failure_count, "results": results}
