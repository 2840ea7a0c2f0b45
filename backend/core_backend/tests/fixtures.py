"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like users, suppliers, ingredients, dishes and menus.
"""
import pytest
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model

from insumos.models import Insumo, Supplier
from menus.models import MealService, Menu, MenuPlato
from recipes.models import Plato, PlatoInsumo


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def user(db):
    """Regular operator (kitchen / warehouse staff)"""
    return get_user_model().objects.create_user(
        username='operador',
        password='testpass123',
        first_name='Rosa',
        last_name='Quispe',
    )


@pytest.fixture
def staff_user(db):
    """Staff member (purchasing lead)"""
    return get_user_model().objects.create_user(
        username='compras',
        password='testpass123',
        first_name='Luis',
        last_name='Rojas',
        is_staff=True,
    )


# ============================================================================
# INSUMO FIXTURES
# ============================================================================

@pytest.fixture
def supplier(db):
    return Supplier.objects.create(
        name='Distribuidora Andina',
        contact_person='Carmen Salas',
        phone='01-555-1234',
        address='Av. Argentina 123',
    )


@pytest.fixture
def make_insumo(db):
    """
    Factory for ingredients.

    Usage:
        def test_something(make_insumo):
            arroz = make_insumo('Arroz', stock='5', min_stock='2')
    """
    def _make(
        name='Harina',
        base_unit='g',
        purchase_unit='kg',
        conversion_factor='1000',
        stock='0',
        min_stock='0',
        unit_cost='4.50',
        **extra
    ):
        return Insumo.objects.create(
            name=name,
            base_unit=base_unit,
            purchase_unit=purchase_unit,
            conversion_factor=Decimal(conversion_factor),
            stock_quantity=Decimal(stock),
            min_stock_level=Decimal(min_stock),
            unit_cost=Decimal(unit_cost),
            **extra
        )
    return _make


@pytest.fixture
def harina(make_insumo):
    """Flour: recipes in grams, bought and stocked in kilograms"""
    return make_insumo('Harina')


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def breakfast(db):
    return MealService.objects.create(name='Desayuno', sort_order=1)


@pytest.fixture
def lunch(db):
    return MealService.objects.create(name='Almuerzo', sort_order=2)


@pytest.fixture
def make_plato(db):
    """
    Factory for dishes.

    Usage:
        pan = make_plato('Pan', [(harina, '250')])   # 250 g of flour per serving
    """
    def _make(name, lines):
        plato = Plato.objects.create(name=name)
        for insumo, quantity in lines:
            PlatoInsumo.objects.create(plato=plato, insumo=insumo, quantity_needed=Decimal(quantity))
        return plato
    return _make


@pytest.fixture
def make_menu(db):
    """
    Factory for menus.

    Usage:
        menu = make_menu(date(2025, 6, 2), [(pan, breakfast, '40')])   # 40 servings
    """
    def _make(menu_date, dishes, title='Menú del día', **extra):
        menu = Menu.objects.create(title=title, menu_date=menu_date, **extra)
        for plato, meal_service, servings in dishes:
            MenuPlato.objects.create(
                menu=menu,
                plato=plato,
                meal_service=meal_service,
                quantity_needed=Decimal(servings),
            )
        return menu
    return _make


@pytest.fixture
def prep_date():
    return date(2025, 6, 2)
