"""
Recipes API Integration Tests

Dishes are written together with their ingredient lines.
"""
import pytest
from decimal import Decimal

from recipes.models import Plato, PlatoInsumo


@pytest.mark.django_db
class TestPlatoAPI:

    def test_create_with_ingredient_lines(self, authenticated_client, harina, make_insumo):
        huevo = make_insumo('Huevo', base_unit='unidad', purchase_unit='docena', conversion_factor='12')

        response = authenticated_client.post('/api/recipes/platos/', {
            'name': 'Panqueques',
            'category': 'Desayuno',
            'plato_insumos': [
                {'insumo_id': harina.id, 'quantity_needed': '80'},
                {'insumo_id': huevo.id, 'quantity_needed': '1'},
            ],
        }, format='json')

        assert response.status_code == 201
        plato = Plato.objects.get(name='Panqueques')
        assert plato.plato_insumos.count() == 2
        assert plato.plato_insumos.get(insumo=harina).quantity_needed == Decimal('80.0000')
        assert {line['insumo']['name'] for line in response.data['plato_insumos']} == {'Harina', 'Huevo'}

    def test_duplicate_ingredient_is_rejected(self, authenticated_client, harina):
        response = authenticated_client.post('/api/recipes/platos/', {
            'name': 'Pan',
            'plato_insumos': [
                {'insumo_id': harina.id, 'quantity_needed': '80'},
                {'insumo_id': harina.id, 'quantity_needed': '20'},
            ],
        }, format='json')

        assert response.status_code == 400
        assert not Plato.objects.exists()

    def test_zero_quantity_is_rejected(self, authenticated_client, harina):
        response = authenticated_client.post('/api/recipes/platos/', {
            'name': 'Pan',
            'plato_insumos': [{'insumo_id': harina.id, 'quantity_needed': '0'}],
        }, format='json')

        assert response.status_code == 400

    def test_update_replaces_ingredient_lines(self, authenticated_client, harina, make_insumo, make_plato):
        azucar = make_insumo('Azúcar')
        plato = make_plato('Queque', [(harina, '100')])

        response = authenticated_client.put(f'/api/recipes/platos/{plato.id}/', {
            'name': 'Queque de vainilla',
            'plato_insumos': [{'insumo_id': azucar.id, 'quantity_needed': '60'}],
        }, format='json')

        assert response.status_code == 200
        lines = PlatoInsumo.objects.filter(plato=plato)
        assert [line.insumo for line in lines] == [azucar]

    def test_partial_update_keeps_lines(self, authenticated_client, harina, make_plato):
        plato = make_plato('Queque', [(harina, '100')])

        response = authenticated_client.patch(
            f'/api/recipes/platos/{plato.id}/', {'category': 'Postres'}, format='json'
        )

        assert response.status_code == 200
        assert plato.plato_insumos.count() == 1

    def test_dish_used_in_menu_cannot_be_deleted(self, authenticated_client, harina, make_plato, make_menu,
                                                 breakfast, prep_date):
        plato = make_plato('Pan', [(harina, '250')])
        make_menu(prep_date, [(plato, breakfast, '40')])

        response = authenticated_client.delete(f'/api/recipes/platos/{plato.id}/')

        assert response.status_code == 400
        assert Plato.objects.filter(pk=plato.pk).exists()
