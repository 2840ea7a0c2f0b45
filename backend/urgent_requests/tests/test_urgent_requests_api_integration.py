"""
Urgent Requests API Integration Tests
"""
import pytest

from purchasing.models import PurchaseRecord
from purchasing.services import PurchaseRecordService
from urgent_requests.models import UrgentPurchaseRequest, UrgentRequestStatus


@pytest.fixture
def leche(make_insumo):
    return make_insumo('Leche', base_unit='ml', purchase_unit='l', stock='1', unit_cost='3.00')


@pytest.fixture
def open_request(authenticated_client, leche):
    response = authenticated_client.post(
        '/api/urgent-requests/', {'insumo_id': leche.id, 'quantity_requested': '5'}, format='json'
    )
    return UrgentPurchaseRequest.objects.get(pk=response.data['id'])


@pytest.mark.django_db
class TestUrgentRequestsAPI:

    def test_create_then_insist(self, authenticated_client, leche, user):
        payload = {'insumo_id': leche.id, 'quantity_requested': '5', 'priority': 'high'}

        first = authenticated_client.post('/api/urgent-requests/', payload, format='json')
        second = authenticated_client.post('/api/urgent-requests/', payload, format='json')

        assert first.status_code == 201
        assert first.data['status'] == 'pending'
        assert first.data['requested_by']['id'] == user.id
        assert second.status_code == 200
        assert second.data['id'] == first.data['id']
        assert second.data['insistence_count'] == 1

    def test_create_rejects_zero_quantity(self, authenticated_client, leche):
        response = authenticated_client.post(
            '/api/urgent-requests/', {'insumo_id': leche.id, 'quantity_requested': '0'}, format='json'
        )

        assert response.status_code == 400

    def test_list_filters_by_status(self, authenticated_client, open_request, make_insumo):
        arroz = make_insumo('Arroz')
        authenticated_client.post(
            '/api/urgent-requests/', {'insumo_id': arroz.id, 'quantity_requested': '2'}, format='json'
        )
        authenticated_client.post(f'/api/urgent-requests/{open_request.id}/approve/')

        response = authenticated_client.get('/api/urgent-requests/?status=pending')

        assert response.status_code == 200
        assert [r['insumo']['name'] for r in response.data['results']] == ['Arroz']

    def test_edit_while_pending(self, authenticated_client, open_request):
        response = authenticated_client.patch(
            f'/api/urgent-requests/{open_request.id}/', {'quantity_requested': '7'}, format='json'
        )

        assert response.status_code == 200
        assert response.data['quantity_requested'] == '7.00'

    def test_ingredient_cannot_be_changed(self, authenticated_client, open_request, leche, make_insumo):
        arroz = make_insumo('Arroz')
        arroz_request = authenticated_client.post(
            '/api/urgent-requests/', {'insumo_id': arroz.id, 'quantity_requested': '2'}, format='json'
        )

        response = authenticated_client.patch(
            f"/api/urgent-requests/{arroz_request.data['id']}/", {'insumo_id': leche.id}, format='json'
        )

        assert response.status_code == 400
        assert UrgentPurchaseRequest.objects.filter(insumo=leche, status=UrgentRequestStatus.PENDING).count() == 1

    def test_full_update_keeping_the_ingredient(self, authenticated_client, open_request, leche):
        response = authenticated_client.put(
            f'/api/urgent-requests/{open_request.id}/',
            {'insumo_id': leche.id, 'quantity_requested': '8'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['quantity_requested'] == '8.00'

    def test_edit_refused_after_approval(self, authenticated_client, open_request):
        authenticated_client.post(f'/api/urgent-requests/{open_request.id}/approve/')

        patch = authenticated_client.patch(
            f'/api/urgent-requests/{open_request.id}/', {'quantity_requested': '7'}, format='json'
        )
        delete = authenticated_client.delete(f'/api/urgent-requests/{open_request.id}/')

        assert patch.status_code == 400
        assert delete.status_code == 400

    def test_delete_pending(self, authenticated_client, open_request):
        response = authenticated_client.delete(f'/api/urgent-requests/{open_request.id}/')

        assert response.status_code == 204
        assert not UrgentPurchaseRequest.objects.exists()

    def test_reject(self, authenticated_client, open_request):
        response = authenticated_client.post(
            f'/api/urgent-requests/{open_request.id}/reject/',
            {'reason': 'Proveedor sin stock hasta el lunes'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['status'] == 'rejected'
        assert response.data['rejection_reason'] == 'Proveedor sin stock hasta el lunes'

    def test_reject_needs_a_real_reason(self, authenticated_client, open_request):
        response = authenticated_client.post(
            f'/api/urgent-requests/{open_request.id}/reject/', {'reason': 'no'}, format='json'
        )

        assert response.status_code == 400
        open_request.refresh_from_db()
        assert open_request.status == UrgentRequestStatus.PENDING

    def test_approve_twice(self, authenticated_client, open_request):
        authenticated_client.post(f'/api/urgent-requests/{open_request.id}/approve/')

        response = authenticated_client.post(f'/api/urgent-requests/{open_request.id}/approve/')

        assert response.status_code == 400

    def test_fulfill_with_new_record(self, authenticated_client, open_request):
        response = authenticated_client.post(f'/api/urgent-requests/{open_request.id}/fulfill/', {}, format='json')

        assert response.status_code == 200
        assert response.data['status'] == 'fulfilled'
        record = PurchaseRecord.objects.get(pk=response.data['fulfilled_purchase_record'])
        assert record.status == 'ordered'

    def test_fulfill_with_existing_record(self, authenticated_client, open_request, leche):
        record = PurchaseRecordService.create_purchase_record(leche, '5')

        response = authenticated_client.post(
            f'/api/urgent-requests/{open_request.id}/fulfill/', {'purchase_record_id': record.id}, format='json'
        )

        assert response.status_code == 200
        assert response.data['fulfilled_purchase_record'] == record.id

    def test_fulfill_with_record_for_other_ingredient(self, authenticated_client, open_request, harina):
        record = PurchaseRecordService.create_purchase_record(harina, '5')

        response = authenticated_client.post(
            f'/api/urgent-requests/{open_request.id}/fulfill/', {'purchase_record_id': record.id}, format='json'
        )

        assert response.status_code == 400
