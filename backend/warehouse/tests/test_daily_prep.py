"""
Daily Prep Tests

Tests for the day's needs overview, the all-or-nothing stock deduction and
urgent requests raised from insufficient items.
"""
import pytest
from decimal import Decimal

from insumos.models import MovementType, StockMovement
from urgent_requests.models import UrgentPurchaseRequest
from warehouse.exceptions import DailyPrepError, DeductionRefusedError, UnknownPrepItemError
from warehouse.services import DailyPrepService, PrepSelection


@pytest.fixture
def prep_day(make_insumo, make_plato, make_menu, breakfast, lunch, prep_date):
    """
    Desayuno: Pan (250 g flour) x 40 -> 10 kg flour
    Almuerzo: Empanada (100 g flour) x 20 -> 2 kg flour
              Avena (300 ml milk) x 20 -> 6 l milk, only 1 l in stock
    """
    harina = make_insumo('Harina', stock='12')
    leche = make_insumo('Leche', base_unit='ml', purchase_unit='l', stock='1')
    pan = make_plato('Pan', [(harina, '250')])
    empanada = make_plato('Empanada', [(harina, '100')])
    avena = make_plato('Avena', [(leche, '300')])
    menu = make_menu(prep_date, [(pan, breakfast, '40'), (empanada, lunch, '20'), (avena, lunch, '20')])
    return {'harina': harina, 'leche': leche, 'menu': menu}


@pytest.mark.django_db
class TestOverview:

    def test_grouped_by_meal_service(self, prep_day, prep_date):
        overview = DailyPrepService.overview(prep_date)

        assert [g.meal_service_name for g in overview.services] == ['Desayuno', 'Almuerzo']
        desayuno, almuerzo = overview.services
        assert [i.insumo_name for i in desayuno.items] == ['Harina']
        assert [i.insumo_name for i in almuerzo.items] == ['Harina', 'Leche']
        assert desayuno.all_sufficient is True
        assert almuerzo.all_sufficient is False

    def test_missing_quantity_and_summary(self, prep_day, prep_date):
        overview = DailyPrepService.overview(prep_date)

        leche = next(i for i in overview.items if i.insumo_name == 'Leche')
        assert leche.total_needed_purchase_unit == Decimal('6')
        assert leche.missing_quantity == Decimal('5')
        assert overview.summary == {
            'menu_count': 1,
            'total_items': 3,
            'sufficient_items': 2,
            'insufficient_items': 1,
        }

    def test_day_without_menus(self, db, prep_date):
        overview = DailyPrepService.overview(prep_date)

        assert overview.services == []
        assert overview.summary['total_items'] == 0


@pytest.mark.django_db
class TestDeduct:

    def test_deducts_selected_item(self, prep_day, prep_date, breakfast, user):
        harina = prep_day['harina']

        result = DailyPrepService.deduct(
            prep_date,
            [PrepSelection(harina.id, breakfast.id)],
            deductor_name='  Rosa Quispe ',
            user=user,
        )

        assert result['count'] == 1
        assert result['deductor_name'] == 'Rosa Quispe'
        harina.refresh_from_db()
        assert harina.stock_quantity == Decimal('2')

        movement = StockMovement.objects.get(movement_type=MovementType.DAILY_PREP_OUT)
        assert movement.stock_change == Decimal('-10')
        assert movement.menu == prep_day['menu']
        assert movement.user == user
        assert movement.notes == (
            'Daily prep deduction for menu of 2025-06-02 (Desayuno). Performed by: Rosa Quispe'
        )

    def test_adjusted_quantity_is_noted(self, prep_day, prep_date, breakfast):
        harina = prep_day['harina']

        DailyPrepService.deduct(
            prep_date, [PrepSelection(harina.id, breakfast.id, Decimal('8'))], deductor_name='Rosa'
        )

        movement = StockMovement.objects.get(movement_type=MovementType.DAILY_PREP_OUT)
        assert movement.quantity_change == Decimal('8')
        assert movement.notes.endswith('. Quantity adjusted from 10')

    def test_insufficient_item_refuses_whole_selection(self, prep_day, prep_date, breakfast, lunch):
        harina, leche = prep_day['harina'], prep_day['leche']

        with pytest.raises(DeductionRefusedError) as exc_info:
            DailyPrepService.deduct(
                prep_date,
                [PrepSelection(harina.id, breakfast.id), PrepSelection(leche.id, lunch.id)],
                deductor_name='Rosa',
            )

        assert [item['insumo_name'] for item in exc_info.value.items] == ['Leche']
        harina.refresh_from_db()
        assert harina.stock_quantity == Decimal('12')
        assert not StockMovement.objects.exists()

    def test_select_all_is_refused_when_any_item_is_short(self, prep_day, prep_date):
        with pytest.raises(DeductionRefusedError):
            DailyPrepService.deduct(prep_date, deductor_name='Rosa', select_all=True)

        assert not StockMovement.objects.exists()

    def test_select_all_deducts_every_item(self, prep_day, prep_date):
        leche = prep_day['leche']
        leche.stock_quantity = Decimal('6')
        leche.save()

        result = DailyPrepService.deduct(prep_date, deductor_name='Rosa', select_all=True)

        assert result['count'] == 3
        harina = prep_day['harina']
        harina.refresh_from_db()
        leche.refresh_from_db()
        assert harina.stock_quantity == Decimal('0')
        assert leche.stock_quantity == Decimal('0')

    def test_combined_services_exceeding_stock_are_refused(self, prep_day, prep_date, breakfast, lunch):
        """Each service fits on its own but both together do not"""
        harina = prep_day['harina']
        harina.stock_quantity = Decimal('11')
        harina.save()

        with pytest.raises(DeductionRefusedError) as exc_info:
            DailyPrepService.deduct(
                prep_date,
                [PrepSelection(harina.id, breakfast.id), PrepSelection(harina.id, lunch.id)],
                deductor_name='Rosa',
            )

        assert exc_info.value.items[0]['required'] == Decimal('12')
        assert exc_info.value.items[0]['meal_service_id'] is None
        harina.refresh_from_db()
        assert harina.stock_quantity == Decimal('11')

    def test_movement_without_single_menu(self, prep_day, make_menu, make_plato, prep_date, breakfast):
        harina = prep_day['harina']
        bollo = make_plato('Bollo', [(harina, '50')])
        make_menu(prep_date, [(bollo, breakfast, '20')], title='Evento', menu_type='event')

        DailyPrepService.deduct(prep_date, [PrepSelection(harina.id, breakfast.id)], deductor_name='Rosa')

        movement = StockMovement.objects.get(movement_type=MovementType.DAILY_PREP_OUT)
        assert movement.quantity_change == Decimal('11')
        assert movement.menu is None

    def test_duplicate_selection_is_refused(self, prep_day, prep_date, breakfast):
        harina = prep_day['harina']
        harina.stock_quantity = Decimal('25')
        harina.save()

        with pytest.raises(DailyPrepError, match='Duplicate selection'):
            DailyPrepService.deduct(
                prep_date,
                [PrepSelection(harina.id, breakfast.id), PrepSelection(harina.id, breakfast.id)],
                deductor_name='Rosa',
            )

        harina.refresh_from_db()
        assert harina.stock_quantity == Decimal('25')
        assert not StockMovement.objects.exists()

    def test_unknown_item(self, prep_day, prep_date, breakfast):
        with pytest.raises(UnknownPrepItemError):
            DailyPrepService.deduct(
                prep_date, [PrepSelection(prep_day['leche'].id, breakfast.id)], deductor_name='Rosa'
            )

    @pytest.mark.parametrize('name', ['', '   ', 'x' * 101])
    def test_deductor_name_is_validated(self, prep_day, prep_date, breakfast, name):
        with pytest.raises(DailyPrepError):
            DailyPrepService.deduct(
                prep_date, [PrepSelection(prep_day['harina'].id, breakfast.id)], deductor_name=name
            )

    def test_empty_selection(self, prep_day, prep_date):
        with pytest.raises(DailyPrepError, match='at least one'):
            DailyPrepService.deduct(prep_date, [], deductor_name='Rosa')


@pytest.mark.django_db
class TestUrgentRequestFromPrep:

    def test_prefilled_with_missing_quantity(self, prep_day, prep_date, lunch, user):
        urgent_request, created = DailyPrepService.request_urgent_purchase(
            prep_date, prep_day['leche'].id, lunch.id, user=user
        )

        assert created is True
        assert urgent_request.quantity_requested == Decimal('5')
        assert urgent_request.source_module == 'warehouse'
        assert urgent_request.priority == 'urgent'
        assert urgent_request.notes == 'Shortage detected in daily prep for 2025-06-02 (Almuerzo)'

    def test_repeated_request_insists(self, prep_day, prep_date, lunch):
        DailyPrepService.request_urgent_purchase(prep_date, prep_day['leche'].id, lunch.id)

        urgent_request, created = DailyPrepService.request_urgent_purchase(
            prep_date, prep_day['leche'].id, lunch.id
        )

        assert created is False
        assert urgent_request.insistence_count == 1
        assert UrgentPurchaseRequest.objects.count() == 1

    def test_sufficient_item_is_refused(self, prep_day, prep_date, breakfast):
        with pytest.raises(DailyPrepError, match='already covers'):
            DailyPrepService.request_urgent_purchase(prep_date, prep_day['harina'].id, breakfast.id)
