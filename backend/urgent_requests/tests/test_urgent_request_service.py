"""
Urgent Request Service Tests

Tests for opening, insisting on, approving, rejecting and fulfilling urgent
purchase requests.
"""
import pytest
from decimal import Decimal

from insumos.models import MovementType, StockMovement
from purchasing.models import PurchaseStatus
from purchasing.services import PurchaseRecordService
from urgent_requests.exceptions import (
    FulfillmentRecordError,
    InvalidRequestTransitionError,
    RejectionReasonError,
    UrgentRequestError,
)
from urgent_requests.models import UrgentPurchaseRequest, UrgentRequestStatus
from urgent_requests.services import UrgentRequestService
from urgent_requests.signals import urgent_request_created, urgent_request_resolved


@pytest.fixture
def leche(make_insumo):
    return make_insumo('Leche', base_unit='ml', purchase_unit='l', stock='1', unit_cost='3.00')


@pytest.fixture
def pending_request(leche, user):
    request, _ = UrgentRequestService.create_request(leche, '5', user=user)
    return request


@pytest.fixture
def signal_log():
    """Collects (signal name, kwargs) for the urgent request signals."""
    received = []

    def on_created(sender, **kwargs):
        received.append(('created', kwargs))

    def on_resolved(sender, **kwargs):
        received.append(('resolved', kwargs))

    urgent_request_created.connect(on_created)
    urgent_request_resolved.connect(on_resolved)
    yield received
    urgent_request_created.disconnect(on_created)
    urgent_request_resolved.disconnect(on_resolved)


@pytest.mark.django_db
class TestCreateRequest:

    def test_opens_pending_request(self, leche, user):
        request, created = UrgentRequestService.create_request(
            leche, Decimal('5'), user=user, priority='high', notes='Para el almuerzo'
        )

        assert created is True
        assert request.status == UrgentRequestStatus.PENDING
        assert request.quantity_requested == Decimal('5.00')
        assert request.priority == 'high'
        assert request.requested_by == user
        assert request.insistence_count == 0

    @pytest.mark.parametrize('quantity', ['0', '-2'])
    def test_quantity_must_be_positive(self, leche, quantity):
        with pytest.raises(UrgentRequestError):
            UrgentRequestService.create_request(leche, quantity)

        assert not UrgentPurchaseRequest.objects.exists()

    def test_open_request_is_insisted_on(self, pending_request, leche):
        request, created = UrgentRequestService.create_request(leche, '8')

        assert created is False
        assert request.pk == pending_request.pk
        assert request.insistence_count == 1
        assert request.quantity_requested == Decimal('8.00')
        assert UrgentPurchaseRequest.objects.count() == 1

    def test_insisting_keeps_the_larger_quantity(self, pending_request, leche):
        request, _ = UrgentRequestService.create_request(leche, '2')

        assert request.quantity_requested == Decimal('5.00')

    def test_approved_request_is_still_open(self, pending_request, leche):
        UrgentRequestService.approve(pending_request)

        request, created = UrgentRequestService.create_request(leche, '5')

        assert created is False
        assert request.insistence_count == 1

    def test_resolved_request_does_not_absorb_new_ones(self, pending_request, leche):
        UrgentRequestService.reject(pending_request, reason='Proveedor sin stock')

        request, created = UrgentRequestService.create_request(leche, '5')

        assert created is True
        assert request.pk != pending_request.pk

    def test_created_signal_only_for_new_requests(self, leche, signal_log):
        request, _ = UrgentRequestService.create_request(leche, '5')
        UrgentRequestService.create_request(leche, '5')

        assert len(signal_log) == 1
        name, kwargs = signal_log[0]
        assert name == 'created'
        assert kwargs['instance'] == request
        assert kwargs['created'] is True


@pytest.mark.django_db
class TestApproveAndReject:

    def test_approve(self, pending_request, staff_user, signal_log):
        request = UrgentRequestService.approve(pending_request, user=staff_user)

        assert request.status == UrgentRequestStatus.APPROVED
        assert request.resolved_by == staff_user
        assert request.resolved_at is not None
        assert signal_log[-1][1]['outcome'] == UrgentRequestStatus.APPROVED

    def test_approve_twice(self, pending_request):
        UrgentRequestService.approve(pending_request)

        with pytest.raises(InvalidRequestTransitionError):
            UrgentRequestService.approve(pending_request)

    def test_reject_trims_reason(self, pending_request):
        request = UrgentRequestService.reject(pending_request, reason='  Proveedor sin stock  ')

        assert request.status == UrgentRequestStatus.REJECTED
        assert request.rejection_reason == 'Proveedor sin stock'

    @pytest.mark.parametrize('reason', ['', 'corto', '   muy poco   ', 'x' * 501])
    def test_reject_reason_bounds(self, pending_request, reason):
        with pytest.raises(RejectionReasonError):
            UrgentRequestService.reject(pending_request, reason=reason)

        pending_request.refresh_from_db()
        assert pending_request.status == UrgentRequestStatus.PENDING

    def test_only_pending_can_be_rejected(self, pending_request):
        UrgentRequestService.approve(pending_request)

        with pytest.raises(InvalidRequestTransitionError):
            UrgentRequestService.reject(pending_request, reason='Proveedor sin stock')


@pytest.mark.django_db
class TestFulfill:

    def test_with_new_purchase_record(self, pending_request, leche, user):
        request = UrgentRequestService.fulfill(pending_request, user=user)

        record = request.fulfilled_purchase_record
        assert request.status == UrgentRequestStatus.FULFILLED
        assert record.status == PurchaseStatus.ORDERED
        assert record.quantity_purchased == Decimal('5.00')
        assert record.notes == f'Fulfils urgent purchase request #{request.pk}'
        leche.refresh_from_db()
        assert leche.pending_delivery_quantity == Decimal('5.00')

    def test_with_purchase_data(self, pending_request, leche):
        request = UrgentRequestService.fulfill(pending_request, purchase_data={
            'quantity': Decimal('6'),
            'status': PurchaseStatus.RECEIVED_BY_WAREHOUSE,
            'unit_cost': Decimal('3.20'),
        })

        record = request.fulfilled_purchase_record
        assert record.quantity_purchased == Decimal('6.00')
        assert record.total_amount == Decimal('19.20')
        leche.refresh_from_db()
        assert leche.stock_quantity == Decimal('7.00')
        assert StockMovement.objects.filter(movement_type=MovementType.PURCHASE_IN).count() == 1

    def test_with_existing_record(self, pending_request, leche):
        record = PurchaseRecordService.create_purchase_record(leche, '5')

        request = UrgentRequestService.fulfill(pending_request, purchase_record=record)

        assert request.fulfilled_purchase_record == record
        assert record.urgent_requests.get() == request

    def test_approved_request_can_be_fulfilled(self, pending_request):
        UrgentRequestService.approve(pending_request)

        request = UrgentRequestService.fulfill(pending_request)

        assert request.status == UrgentRequestStatus.FULFILLED

    def test_record_for_other_ingredient(self, pending_request, harina):
        record = PurchaseRecordService.create_purchase_record(harina, '5')

        with pytest.raises(FulfillmentRecordError):
            UrgentRequestService.fulfill(pending_request, purchase_record=record)

    def test_cancelled_record(self, pending_request, leche):
        record = PurchaseRecordService.create_purchase_record(leche, '5')
        PurchaseRecordService.cancel(record)

        with pytest.raises(FulfillmentRecordError):
            UrgentRequestService.fulfill(pending_request, purchase_record=record)

    def test_record_already_fulfilling_another_request(self, pending_request, leche):
        record = PurchaseRecordService.create_purchase_record(leche, '5')
        UrgentRequestService.fulfill(pending_request, purchase_record=record)
        later_request, created = UrgentRequestService.create_request(leche, '3')

        with pytest.raises(FulfillmentRecordError, match='already fulfils'):
            UrgentRequestService.fulfill(later_request, purchase_record=record)

        assert created is True
        later_request.refresh_from_db()
        assert later_request.status == UrgentRequestStatus.PENDING
        assert record.urgent_requests.get() == pending_request

    def test_rejected_request_cannot_be_fulfilled(self, pending_request):
        UrgentRequestService.reject(pending_request, reason='Proveedor sin stock')

        with pytest.raises(InvalidRequestTransitionError):
            UrgentRequestService.fulfill(pending_request)

    def test_resolved_signal(self, pending_request, signal_log):
        request = UrgentRequestService.fulfill(pending_request)

        name, kwargs = signal_log[-1]
        assert name == 'resolved'
        assert kwargs['instance'] == request
        assert kwargs['outcome'] == UrgentRequestStatus.FULFILLED
