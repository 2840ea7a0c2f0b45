"""
Insumos API Integration Tests

Tests for the ingredient catalog, supplier and stock ledger endpoints.
"""
import pytest
from decimal import Decimal

from insumos.models import Insumo, InsumoPriceHistory, StockMovement


@pytest.mark.django_db
class TestInsumoAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/insumos/insumos/')

        assert response.status_code == 401

    def test_create_ignores_counter_fields(self, authenticated_client):
        response = authenticated_client.post('/api/insumos/insumos/', {
            'name': 'Leche',
            'base_unit': 'ml',
            'purchase_unit': 'l',
            'conversion_factor': '1000',
            'unit_cost': '3.80',
            'min_stock_level': '20',
            'stock_quantity': '999',
        }, format='json')

        assert response.status_code == 201
        assert response.data['stock_quantity'] == '0.00'
        assert response.data['version'] == 0
        assert Insumo.objects.get(name='Leche').stock_quantity == Decimal('0.00')

    def test_zero_conversion_factor_is_rejected(self, authenticated_client):
        response = authenticated_client.post('/api/insumos/insumos/', {
            'name': 'Leche',
            'base_unit': 'ml',
            'purchase_unit': 'l',
            'conversion_factor': '0',
        }, format='json')

        assert response.status_code == 400

    def test_list_view_uses_list_fieldset(self, authenticated_client, harina):
        response = authenticated_client.get('/api/insumos/insumos/')

        assert response.status_code == 200
        row = response.data['results'][0]
        assert 'stock_quantity' in row
        assert 'description' not in row

    def test_unit_cost_update_keeps_history(self, authenticated_client, harina):
        response = authenticated_client.patch(
            f'/api/insumos/insumos/{harina.id}/', {'unit_cost': '5.00'}, format='json'
        )

        assert response.status_code == 200
        assert response.data['unit_cost'] == '5.00'
        assert InsumoPriceHistory.objects.filter(insumo=harina).count() == 1

        history = authenticated_client.get(f'/api/insumos/insumos/{harina.id}/price-history/')
        assert history.data[0]['new_unit_cost'] == '5.00'

    def test_delete_archives(self, authenticated_client, harina):
        response = authenticated_client.delete(f'/api/insumos/insumos/{harina.id}/')

        assert response.status_code == 204
        assert not Insumo.objects.filter(pk=harina.pk).exists()
        assert Insumo.objects.with_archived().get(pk=harina.pk).is_archived

    def test_archive_requires_staff(self, authenticated_client, harina):
        response = authenticated_client.post(f'/api/insumos/insumos/{harina.id}/archive/')

        assert response.status_code == 403

    def test_archive_and_restore(self, staff_client, harina, make_insumo):
        make_insumo('Arroz')

        archived = staff_client.post(f'/api/insumos/insumos/{harina.id}/archive/')
        active = staff_client.get('/api/insumos/insumos/')
        everything = staff_client.get('/api/insumos/insumos/?include_archived=true')
        only_archived = staff_client.get('/api/insumos/insumos/?include_archived=only')

        assert archived.status_code == 200
        assert [r['name'] for r in active.data['results']] == ['Arroz']
        assert everything.data['count'] == 2
        assert [r['name'] for r in only_archived.data['results']] == ['Harina']

        restored = staff_client.post(f'/api/insumos/insumos/{harina.id}/unarchive/')

        assert restored.status_code == 200
        harina.refresh_from_db()
        assert harina.is_active

    def test_low_stock(self, authenticated_client, make_insumo):
        make_insumo('Arroz', stock='1', min_stock='5')
        make_insumo('Sal', stock='3', min_stock='1')

        response = authenticated_client.get('/api/insumos/insumos/low-stock/')

        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Arroz'

    def test_physical_count(self, authenticated_client, make_insumo):
        azucar = make_insumo('Azúcar', stock='12')

        response = authenticated_client.post(
            f'/api/insumos/insumos/{azucar.id}/physical-count/', {'counted_quantity': '11'}, format='json'
        )

        assert response.status_code == 200
        assert response.data['discrepancy_quantity'] == '-1.00'
        assert response.data['stock_quantity'] == '12.00'


@pytest.mark.django_db
class TestStockMovementAPI:

    def test_manual_adjustment(self, authenticated_client, make_insumo, user):
        aceite = make_insumo('Aceite', base_unit='ml', purchase_unit='l', stock='10')

        response = authenticated_client.post('/api/insumos/stock-movements/', {
            'insumo_id': aceite.id,
            'movement_type': 'adjustment_out',
            'quantity': '2.50',
            'notes': 'Merma por vencimiento',
        }, format='json')

        assert response.status_code == 201
        assert response.data['new_stock_quantity'] == '7.50'
        assert response.data['user']['username'] == user.username

    def test_adjustment_beyond_stock_is_rejected(self, authenticated_client, make_insumo):
        aceite = make_insumo('Aceite', stock='1')

        response = authenticated_client.post('/api/insumos/stock-movements/', {
            'insumo_id': aceite.id,
            'movement_type': 'adjustment_out',
            'quantity': '2.00',
        }, format='json')

        assert response.status_code == 400
        assert 'Insufficient stock' in response.data['error']
        assert StockMovement.objects.count() == 0

    def test_stale_version_returns_conflict(self, authenticated_client, make_insumo):
        aceite = make_insumo('Aceite', stock='10')
        aceite.version = 4
        aceite.save(update_fields=['version'])

        response = authenticated_client.post('/api/insumos/stock-movements/', {
            'insumo_id': aceite.id,
            'movement_type': 'adjustment_in',
            'quantity': '1.00',
            'expected_version': 3,
        }, format='json')

        assert response.status_code == 409

    def test_system_movement_types_cannot_be_posted(self, authenticated_client, harina):
        response = authenticated_client.post('/api/insumos/stock-movements/', {
            'insumo_id': harina.id,
            'movement_type': 'purchase_in',
            'quantity': '1.00',
        }, format='json')

        assert response.status_code == 400

    def test_ledger_rows_cannot_be_changed_through_the_api(self, authenticated_client, make_insumo):
        aceite = make_insumo('Aceite', stock='10')
        created = authenticated_client.post('/api/insumos/stock-movements/', {
            'insumo_id': aceite.id,
            'movement_type': 'adjustment_out',
            'quantity': '1.00',
        }, format='json')
        url = f"/api/insumos/stock-movements/{created.data['id']}/"

        assert authenticated_client.patch(url, {'notes': 'x'}, format='json').status_code == 405
        assert authenticated_client.delete(url).status_code == 405

    def test_filter_by_insumo_and_type(self, authenticated_client, make_insumo):
        aceite = make_insumo('Aceite', stock='10')
        sal = make_insumo('Sal', stock='10')
        for insumo, movement_type in [(aceite, 'adjustment_in'), (aceite, 'adjustment_out'), (sal, 'adjustment_in')]:
            authenticated_client.post('/api/insumos/stock-movements/', {
                'insumo_id': insumo.id, 'movement_type': movement_type, 'quantity': '1.00',
            }, format='json')

        response = authenticated_client.get(
            f'/api/insumos/stock-movements/?insumo={aceite.id}&movement_type=adjustment_in'
        )

        assert response.data['count'] == 1

        movements = authenticated_client.get(f'/api/insumos/insumos/{aceite.id}/movements/')
        assert movements.data['count'] == 2
