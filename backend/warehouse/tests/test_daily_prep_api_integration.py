"""
Daily Prep API Integration Tests
"""
import pytest
from decimal import Decimal

from insumos.models import StockMovement


@pytest.fixture
def short_lunch(make_insumo, make_plato, make_menu, breakfast, lunch, prep_date):
    harina = make_insumo('Harina', stock='12')
    leche = make_insumo('Leche', base_unit='ml', purchase_unit='l', stock='1')
    pan = make_plato('Pan', [(harina, '250')])
    avena = make_plato('Avena', [(leche, '300')])
    make_menu(prep_date, [(pan, breakfast, '40'), (avena, lunch, '20')])
    return {'harina': harina, 'leche': leche}


@pytest.mark.django_db
class TestDailyPrepAPI:

    def test_overview(self, authenticated_client, short_lunch):
        response = authenticated_client.get('/api/warehouse/daily-prep/?date=2025-06-02')

        assert response.status_code == 200
        assert [s['meal_service_name'] for s in response.data['services']] == ['Desayuno', 'Almuerzo']
        assert response.data['services'][1]['items'][0]['missing_quantity'] == '5.00'
        assert response.data['summary']['insufficient_items'] == 1

    def test_overview_requires_date(self, authenticated_client):
        response = authenticated_client.get('/api/warehouse/daily-prep/')

        assert response.status_code == 400

    def test_deduct(self, authenticated_client, short_lunch, breakfast):
        response = authenticated_client.post('/api/warehouse/daily-prep/deduct/', {
            'date': '2025-06-02',
            'deductor_name': 'Rosa Quispe',
            'selections': [{'insumo_id': short_lunch['harina'].id, 'meal_service_id': breakfast.id}],
        }, format='json')

        assert response.status_code == 200
        assert response.data['count'] == 1
        short_lunch['harina'].refresh_from_db()
        assert short_lunch['harina'].stock_quantity == Decimal('2')

    def test_refused_deduction_returns_conflict(self, authenticated_client, short_lunch):
        response = authenticated_client.post('/api/warehouse/daily-prep/deduct/', {
            'date': '2025-06-02',
            'deductor_name': 'Rosa Quispe',
            'all': True,
        }, format='json')

        assert response.status_code == 409
        assert response.data['items'][0]['insumo_name'] == 'Leche'
        assert not StockMovement.objects.exists()

    def test_deduct_requires_a_selection(self, authenticated_client, short_lunch):
        response = authenticated_client.post('/api/warehouse/daily-prep/deduct/', {
            'date': '2025-06-02',
            'deductor_name': 'Rosa Quispe',
        }, format='json')

        assert response.status_code == 400

    def test_duplicate_selection_returns_bad_request(self, authenticated_client, short_lunch, breakfast):
        item = {'insumo_id': short_lunch['harina'].id, 'meal_service_id': breakfast.id}

        response = authenticated_client.post('/api/warehouse/daily-prep/deduct/', {
            'date': '2025-06-02',
            'deductor_name': 'Rosa Quispe',
            'selections': [item, item],
        }, format='json')

        assert response.status_code == 400
        assert not StockMovement.objects.exists()

    def test_deduct_requires_deductor_name(self, authenticated_client, short_lunch, breakfast):
        response = authenticated_client.post('/api/warehouse/daily-prep/deduct/', {
            'date': '2025-06-02',
            'deductor_name': '',
            'selections': [{'insumo_id': short_lunch['harina'].id, 'meal_service_id': breakfast.id}],
        }, format='json')

        assert response.status_code == 400

    def test_urgent_request(self, authenticated_client, short_lunch, lunch):
        payload = {
            'date': '2025-06-02',
            'insumo_id': short_lunch['leche'].id,
            'meal_service_id': lunch.id,
        }

        first = authenticated_client.post('/api/warehouse/daily-prep/urgent-request/', payload, format='json')
        second = authenticated_client.post('/api/warehouse/daily-prep/urgent-request/', payload, format='json')

        assert first.status_code == 201
        assert first.data['quantity_requested'] == '5.00'
        assert second.status_code == 200
        assert second.data['insistence_count'] == 1
