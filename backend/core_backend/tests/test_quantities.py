"""
Quantity helpers and domain settings.
"""
import pytest
from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured

from core_backend.config import get_erp_setting
from core_backend.utils.quantities import ceil_if_fractional, quantize_quantity, to_decimal


@pytest.mark.unit
class TestCeilIfFractional:

    @pytest.mark.parametrize('value, expected, rounded_up', [
        ('10', Decimal('10'), False),
        ('10.2', Decimal('11'), True),
        ('0.01', Decimal('1'), True),
        ('0', Decimal('0'), False),
    ])
    def test_rounds_up_only_fractions(self, value, expected, rounded_up):
        assert ceil_if_fractional(value) == (expected, rounded_up)

    def test_accepts_floats_without_artifacts(self):
        assert to_decimal(0.1) == Decimal('0.1')


@pytest.mark.unit
class TestQuantize:

    def test_half_up_to_two_places(self):
        assert quantize_quantity('2.345') == Decimal('2.35')
        assert quantize_quantity(3) == Decimal('3.00')

    def test_configured_places(self, settings):
        settings.CATERING_ERP = {'QUANTITY_DECIMAL_PLACES': 3}

        assert quantize_quantity('2.3456') == Decimal('2.346')


@pytest.mark.unit
class TestErpSettings:

    def test_default(self, settings):
        settings.CATERING_ERP = {}

        assert get_erp_setting('REJECTION_REASON_MIN_LENGTH') == 10

    def test_override(self, settings):
        settings.CATERING_ERP = {'DEDUCTOR_NAME_MAX_LENGTH': 60}

        assert get_erp_setting('DEDUCTOR_NAME_MAX_LENGTH') == 60

    def test_unknown_setting(self):
        with pytest.raises(ImproperlyConfigured):
            get_erp_setting('NOT_A_SETTING')
