"""
Ingredient needs derived from planned menus.

Purchase planning and daily prep both answer the same question: how much of
each ingredient do the planned menus require, and does current stock cover
it? Both go through :func:`aggregate_needs`, which differs between the two
callers only in how demand is grouped:

- ``GROUP_BY_INSUMO``: one row per ingredient (purchase planning)
- ``GROUP_BY_MEAL_SERVICE``: one row per (ingredient, meal service) pair (daily prep)

Quantity rules:
- needed (base unit) = sum of recipe quantity per serving x servings
- needed (purchase unit, raw) = needed base / conversion factor
- needed (purchase unit) = raw rounded up to the next whole unit when fractional,
  so a deduction of the rounded amount never falls short
- missing = max(0, needed - current stock)
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from core_backend.utils.quantities import ZERO, ceil_if_fractional

logger = logging.getLogger(__name__)

GROUP_BY_INSUMO = "insumo"
GROUP_BY_MEAL_SERVICE = "meal_service"
GROUP_BY_CHOICES = (GROUP_BY_INSUMO, GROUP_BY_MEAL_SERVICE)


@dataclass(frozen=True)
class DemandLine:
    """One recipe ingredient of one dish served in one menu."""
    menu_id: int
    menu_date: date
    meal_service_id: int
    meal_service_name: str
    meal_service_order: int
    plato_id: int
    plato_name: str
    insumo_id: int
    quantity_per_serving: Decimal  # base unit
    servings: Decimal


@dataclass(frozen=True)
class CatalogEntry:
    """Snapshot of the ingredient fields the aggregation needs."""
    insumo_id: int
    name: str
    base_unit: str
    purchase_unit: str
    conversion_factor: Decimal
    stock_quantity: Decimal
    min_stock_level: Decimal = ZERO
    unit_cost: Decimal = ZERO
    version: int = 0

    @classmethod
    def from_insumo(cls, insumo) -> "CatalogEntry":
        return cls(
            insumo_id=insumo.pk,
            name=insumo.name,
            base_unit=insumo.base_unit,
            purchase_unit=insumo.purchase_unit,
            conversion_factor=insumo.conversion_factor,
            stock_quantity=insumo.stock_quantity,
            min_stock_level=insumo.min_stock_level,
            unit_cost=insumo.unit_cost,
            version=insumo.version,
        )


@dataclass
class InsumoNeed:
    """Aggregated need of one ingredient (optionally within one meal service)."""
    insumo_id: int
    insumo_name: str
    base_unit: str
    purchase_unit: str
    conversion_factor: Decimal
    current_stock: Decimal
    min_stock_level: Decimal
    unit_cost: Decimal
    version: int = 0
    meal_service_id: Optional[int] = None
    meal_service_name: Optional[str] = None
    meal_service_order: int = 0
    total_needed_base_unit: Decimal = ZERO
    total_needed_purchase_unit_raw: Decimal = ZERO
    total_needed_purchase_unit: Decimal = ZERO
    rounded_up: bool = False
    missing_quantity: Decimal = ZERO
    is_sufficient: bool = True
    platos: List[str] = field(default_factory=list)
    menu_ids: List[int] = field(default_factory=list)

    @property
    def key(self):
        return (self.insumo_id, self.meal_service_id)


def aggregate_needs(
    demand_lines: Iterable[DemandLine],
    catalog: Dict[int, CatalogEntry],
    group_by: str = GROUP_BY_INSUMO,
) -> List[InsumoNeed]:
    """
    Sum menu demand per ingredient (or per ingredient and meal service).

    Args:
        demand_lines: Flattened menu demand, see :func:`collect_demand`
        catalog: Ingredient snapshots keyed by insumo id
        group_by: ``GROUP_BY_INSUMO`` or ``GROUP_BY_MEAL_SERVICE``

    Returns:
        One InsumoNeed per group, sorted by ingredient name (by meal service
        first when grouping by meal service). Lines for ingredients missing
        from the catalog are skipped.
    """
    if group_by not in GROUP_BY_CHOICES:
        raise ValueError(f"Unknown grouping '{group_by}', expected one of {GROUP_BY_CHOICES}")

    needs: Dict[tuple, InsumoNeed] = {}

    for line in demand_lines:
        entry = catalog.get(line.insumo_id)
        if entry is None:
            logger.warning(f"Insumo {line.insumo_id} used by plato {line.plato_id} is not in the catalog, skipping")
            continue

        if group_by == GROUP_BY_MEAL_SERVICE:
            key = (line.insumo_id, line.meal_service_id)
        else:
            key = (line.insumo_id, None)

        need = needs.get(key)
        if need is None:
            need = InsumoNeed(
                insumo_id=entry.insumo_id,
                insumo_name=entry.name,
                base_unit=entry.base_unit,
                purchase_unit=entry.purchase_unit,
                conversion_factor=entry.conversion_factor,
                current_stock=entry.stock_quantity,
                min_stock_level=entry.min_stock_level,
                unit_cost=entry.unit_cost,
                version=entry.version,
            )
            if group_by == GROUP_BY_MEAL_SERVICE:
                need.meal_service_id = line.meal_service_id
                need.meal_service_name = line.meal_service_name
                need.meal_service_order = line.meal_service_order
            needs[key] = need

        need.total_needed_base_unit += line.quantity_per_serving * line.servings
        if line.plato_name not in need.platos:
            need.platos.append(line.plato_name)
        if line.menu_id not in need.menu_ids:
            need.menu_ids.append(line.menu_id)

    for need in needs.values():
        _finalize(need)

    if group_by == GROUP_BY_MEAL_SERVICE:
        sort_key = lambda n: (n.meal_service_order, n.meal_service_name or "", n.insumo_name.lower())
    else:
        sort_key = lambda n: n.insumo_name.lower()
    return sorted(needs.values(), key=sort_key)


def _finalize(need: InsumoNeed) -> None:
    """Convert the base-unit total and compare it against stock."""
    raw = need.total_needed_base_unit / need.conversion_factor
    rounded, rounded_up = ceil_if_fractional(raw)
    need.total_needed_purchase_unit_raw = raw
    need.total_needed_purchase_unit = rounded
    need.rounded_up = rounded_up
    need.missing_quantity = max(ZERO, rounded - need.current_stock)
    need.is_sufficient = need.current_stock >= rounded


# ============================================================================
# ORM LOADERS
# ============================================================================

def collect_demand(menus) -> List[DemandLine]:
    """
    Flatten menus into demand lines by walking
    menu -> dish in meal service -> recipe ingredient.

    Args:
        menus: Queryset (or iterable) of Menu instances
    """
    from .models import MenuPlato

    menu_platos = (
        MenuPlato.objects.filter(menu__in=menus)
        .select_related("menu", "plato", "meal_service")
        .prefetch_related("plato__plato_insumos")
    )

    lines = []
    for menu_plato in menu_platos:
        for plato_insumo in menu_plato.plato.plato_insumos.all():
            lines.append(DemandLine(
                menu_id=menu_plato.menu_id,
                menu_date=menu_plato.menu.menu_date,
                meal_service_id=menu_plato.meal_service_id,
                meal_service_name=menu_plato.meal_service.name,
                meal_service_order=menu_plato.meal_service.sort_order,
                plato_id=menu_plato.plato_id,
                plato_name=menu_plato.plato.name,
                insumo_id=plato_insumo.insumo_id,
                quantity_per_serving=plato_insumo.quantity_needed,
                servings=menu_plato.quantity_needed,
            ))
    return lines


def build_catalog(insumos) -> Dict[int, CatalogEntry]:
    """Snapshot an iterable of Insumo instances keyed by id."""
    return {insumo.pk: CatalogEntry.from_insumo(insumo) for insumo in insumos}


def catalog_for_demand(demand_lines: Iterable[DemandLine]) -> Dict[int, CatalogEntry]:
    """Catalog restricted to the ingredients the demand references, archived ones included."""
    from insumos.models import Insumo

    insumo_ids = {line.insumo_id for line in demand_lines}
    return build_catalog(Insumo.objects.with_archived().filter(pk__in=insumo_ids))
