"""
Purchase Planning Tests

Tests for purchase suggestions (menu demand vs. minimum stock level),
batch registration and suggestion export.
"""
import csv
import io
import pytest
from datetime import date
from decimal import Decimal

from openpyxl import load_workbook

from purchasing.exceptions import PurchasingError
from purchasing.models import PurchaseRecord, PurchaseStatus
from purchasing.services import PurchasePlanningService, SuggestionExportService, classify_suggestion
from purchasing.services.planning_service import (
    REASON_BOTH,
    REASON_MENU_DEMAND,
    REASON_MIN_STOCK_LEVEL,
    REASON_ZERO_STOCK_ALERT,
)

START = date(2025, 6, 1)
END = date(2025, 6, 7)


class TestClassifySuggestion:

    @pytest.mark.parametrize("stock, needed, minimum, expected", [
        ("3", "11", "0", REASON_MENU_DEMAND),
        ("1", "0", "5", REASON_MIN_STOCK_LEVEL),
        ("2", "6", "5", REASON_BOTH),
        ("0", "0", "0", REASON_ZERO_STOCK_ALERT),
        ("10", "4", "2", None),
    ])
    def test_reason(self, stock, needed, minimum, expected):
        assert classify_suggestion(Decimal(stock), Decimal(needed), Decimal(minimum)) == expected


@pytest.fixture
def planning_scenario(make_insumo, make_plato, make_menu, breakfast):
    """
    Harina: short for the week's menus only
    Leche: short for the menus and below its minimum
    Arroz: below its minimum, not on any menu
    Sal: out of stock with no demand and no minimum
    Aceite: fully covered
    """
    harina = make_insumo('Harina', stock='3')
    leche = make_insumo('Leche', base_unit='ml', purchase_unit='l', stock='2', min_stock='5', unit_cost='3.00')
    make_insumo('Arroz', stock='1', min_stock='5', unit_cost='2.00')
    make_insumo('Sal', stock='0')
    make_insumo('Aceite', stock='10', min_stock='2')

    pan = make_plato('Pan', [(harina, '255')])
    avena = make_plato('Avena con leche', [(leche, '300')])
    make_menu(date(2025, 6, 2), [(pan, breakfast, '40'), (avena, breakfast, '20')])
    make_menu(date(2025, 6, 20), [(pan, breakfast, '100')], title='Fuera de rango')


@pytest.mark.django_db
class TestAnalyze:

    def test_suggestions_and_reasons(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        by_name = {s.insumo_name: s for s in result.suggestions}
        assert set(by_name) == {'Harina', 'Leche', 'Arroz', 'Sal'}
        assert result.menu_count == 1

        harina = by_name['Harina']
        assert harina.total_needed_purchase_unit == Decimal('11')
        assert harina.needed_rounded_up is True
        assert harina.purchase_suggestion_rounded == Decimal('8')
        assert harina.reason_for_purchase_suggestion == REASON_MENU_DEMAND
        assert harina.estimated_purchase_cost == Decimal('36.00')
        assert harina.platos == ['Pan']

        leche = by_name['Leche']
        assert leche.total_needed_purchase_unit == Decimal('6')
        assert leche.purchase_suggestion_rounded == Decimal('4')
        assert leche.reason_for_purchase_suggestion == REASON_BOTH

        arroz = by_name['Arroz']
        assert arroz.purchase_suggestion_rounded == Decimal('4')
        assert arroz.reason_for_purchase_suggestion == REASON_MIN_STOCK_LEVEL
        assert arroz.platos == []

        sal = by_name['Sal']
        assert sal.purchase_suggestion_rounded == Decimal('0')
        assert sal.reason_for_purchase_suggestion == REASON_ZERO_STOCK_ALERT

    def test_sorted_by_suggestion_then_name(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        assert [s.insumo_name for s in result.suggestions] == ['Harina', 'Arroz', 'Leche', 'Sal']

    def test_total_estimated_cost(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        # 8 x 4.50 + 4 x 3.00 + 4 x 2.00
        assert result.total_estimated_cost == Decimal('56.00')

    def test_filter_by_reason(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END, reason=REASON_MIN_STOCK_LEVEL)

        assert [s.insumo_name for s in result.suggestions] == ['Arroz']

    def test_fractional_minimum_gap_is_rounded_up(self, make_insumo):
        make_insumo('Queso', stock='0.5', min_stock='3')

        suggestion = PurchasePlanningService.analyze(START, END).suggestions[0]

        assert suggestion.purchase_suggestion_raw == Decimal('2.5')
        assert suggestion.purchase_suggestion_rounded == Decimal('3')
        assert suggestion.suggestion_rounded_up is True

    def test_archived_insumos_are_not_suggested(self, make_insumo):
        make_insumo('Arroz', stock='1', min_stock='5').archive()

        assert PurchasePlanningService.analyze(START, END).suggestions == []

    def test_invalid_range_is_refused(self):
        with pytest.raises(PurchasingError):
            PurchasePlanningService.analyze(END, START)

    def test_unknown_reason_is_refused(self):
        with pytest.raises(PurchasingError):
            PurchasePlanningService.analyze(START, END, reason='whim')


@pytest.mark.django_db
class TestBatchPurchase:

    def test_items_are_registered_as_received_by_warehouse(self, harina, make_insumo, user):
        arroz = make_insumo('Arroz', stock='1')

        summary = PurchasePlanningService.create_batch([
            {'insumo': harina.pk, 'quantity': Decimal('8'), 'unit_cost': Decimal('4.80')},
            {'insumo': arroz, 'quantity': Decimal('4'), 'supplier_name': 'Mercado Central'},
        ], user=user)

        assert summary['success_count'] == 2
        assert summary['failure_count'] == 0
        assert all(r.status == PurchaseStatus.RECEIVED_BY_WAREHOUSE for r in PurchaseRecord.objects.all())
        harina.refresh_from_db()
        arroz.refresh_from_db()
        assert harina.stock_quantity == Decimal('8')
        assert arroz.stock_quantity == Decimal('5')

    def test_failing_item_does_not_block_the_others(self, harina):
        summary = PurchasePlanningService.create_batch([
            {'insumo': 999999, 'quantity': Decimal('1')},
            {'insumo': harina.pk, 'quantity': Decimal('2')},
            {'insumo': harina.pk, 'quantity': Decimal('0')},
        ])

        assert summary['success_count'] == 1
        assert summary['failure_count'] == 2
        assert [r['success'] for r in summary['results']] == [False, True, False]
        harina.refresh_from_db()
        assert harina.stock_quantity == Decimal('2')


@pytest.mark.django_db
class TestSuggestionExport:

    def test_csv(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        content, content_type, filename = SuggestionExportService.export(result, 'csv')

        assert content_type == 'text/csv'
        assert filename == 'purchase_suggestions_2025-06-01_2025-06-07.csv'
        rows = list(csv.reader(io.StringIO(content.decode('utf-8'))))
        assert rows[4][0] == 'Insumo'
        assert rows[5][0] == 'Harina'
        assert rows[-1] == ['Total estimated cost', '56.00']

    def test_xlsx(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        content, content_type, filename = SuggestionExportService.export(result, 'xlsx')

        assert filename.endswith('.xlsx')
        ws = load_workbook(io.BytesIO(content)).active
        assert ws['A1'].value == 'Purchase suggestions'
        assert ws['A4'].value == 'Insumo'
        assert ws['A4'].font.bold
        assert ws['A5'].value == 'Harina'

    def test_unknown_format(self, planning_scenario):
        result = PurchasePlanningService.analyze(START, END)

        with pytest.raises(ValueError):
            SuggestionExportService.export(result, 'pdf')
