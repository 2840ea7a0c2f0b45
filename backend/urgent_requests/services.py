import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core_backend.config import get_erp_setting
from core_backend.utils.quantities import ZERO, quantize_quantity
from purchasing.models import PurchaseRecord, PurchaseStatus
from purchasing.services import PurchaseRecordService
from .exceptions import (
    FulfillmentRecordError,
    InvalidRequestTransitionError,
    RejectionReasonError,
    UrgentRequestError,
)
from .models import OPEN_STATUSES, UrgentPurchaseRequest, UrgentRequestPriority, UrgentRequestStatus
from .signals import urgent_request_created, urgent_request_resolved

logger = logging.getLogger(__name__)


class UrgentRequestService:
    """
    Service layer for urgent purchase requests.

    Handles creation (with insistence on open requests), approval,
    rejection and fulfilment.
    """

    @staticmethod
    @transaction.atomic
    def create_request(
        insumo,
        quantity,
        user=None,
        priority: str = UrgentRequestPriority.URGENT,
        notes: str = "",
        source_module: str = "warehouse",
        request_date=None,
    ):
        """
        Open an urgent request, or insist on the open one for the same ingredient.

        When a pending or approved request already exists for ``insumo`` its
        ``insistence_count`` is incremented and its quantity raised to the
        larger of both; no duplicate is created.

        Returns:
            (UrgentPurchaseRequest, created) tuple
        """
        quantity = quantize_quantity(quantity)
        if quantity <= ZERO:
            raise UrgentRequestError("Requested quantity must be greater than zero.")

        existing = (
            UrgentPurchaseRequest.objects.select_for_update()
            .filter(insumo=insumo, status__in=OPEN_STATUSES)
            .order_by("created_at", "id")
            .first()
        )
        if existing is not None:
            UrgentPurchaseRequest.objects.filter(pk=existing.pk).update(
                insistence_count=F("insistence_count") + 1,
                quantity_requested=max(existing.quantity_requested, quantity),
                updated_at=timezone.now(),
            )
            existing.refresh_from_db()
            logger.info(
                f"Urgent request {existing.pk} for insumo {existing.insumo_id} insisted on "
                f"(count={existing.insistence_count}, quantity={existing.quantity_requested})"
            )
            return existing, False

        request = UrgentPurchaseRequest.objects.create(
            insumo=insumo,
            quantity_requested=quantity,
            request_date=request_date or timezone.localdate(),
            notes=notes,
            source_module=source_module,
            priority=priority,
            requested_by=user,
        )
        logger.info(f"Created urgent request {request.pk} for insumo {request.insumo_id}: {quantity}")

        urgent_request_created.send(sender=UrgentPurchaseRequest, instance=request, created=True)
        return request, True

    @staticmethod
    def _lock(request) -> UrgentPurchaseRequest:
        request_id = request.pk if isinstance(request, UrgentPurchaseRequest) else request
        return UrgentPurchaseRequest.objects.select_for_update().get(pk=request_id)

    @staticmethod
    def _resolve(request, status: str, user, extra_fields=()):
        request.status = status
        request.resolved_by = user
        request.resolved_at = timezone.now()
        request.save(update_fields=["status", "resolved_by", "resolved_at", "updated_at", *extra_fields])
        urgent_request_resolved.send(sender=UrgentPurchaseRequest, instance=request, outcome=status)
        return request

    @staticmethod
    @transaction.atomic
    def approve(request, user=None) -> UrgentPurchaseRequest:
        """pending -> approved"""
        request = UrgentRequestService._lock(request)
        if request.status != UrgentRequestStatus.PENDING:
            raise InvalidRequestTransitionError(request, "approve")
        return UrgentRequestService._resolve(request, UrgentRequestStatus.APPROVED, user)

    @staticmethod
    @transaction.atomic
    def reject(request, user=None, reason: str = "") -> UrgentPurchaseRequest:
        """
        pending -> rejected

        Raises:
            RejectionReasonError: If the reason is shorter or longer than the
                configured bounds (whitespace is trimmed first)
        """
        reason = (reason or "").strip()
        min_length = get_erp_setting("REJECTION_REASON_MIN_LENGTH")
        max_length = get_erp_setting("REJECTION_REASON_MAX_LENGTH")
        if not min_length <= len(reason) <= max_length:
            raise RejectionReasonError(
                f"Rejection reason must be between {min_length} and {max_length} characters."
            )

        request = UrgentRequestService._lock(request)
        if request.status != UrgentRequestStatus.PENDING:
            raise InvalidRequestTransitionError(request, "reject")

        request.rejection_reason = reason
        return UrgentRequestService._resolve(
            request, UrgentRequestStatus.REJECTED, user, extra_fields=("rejection_reason",)
        )

    @staticmethod
    @transaction.atomic
    def fulfill(request, user=None, purchase_record=None, purchase_data: dict = None) -> UrgentPurchaseRequest:
        """
        pending | approved -> fulfilled

        Args:
            purchase_record: Existing, non-cancelled record for the same
                ingredient that covers the request
            purchase_data: Keyword arguments for
                ``PurchaseRecordService.create_purchase_record`` when a new
                record should be registered; ingredient and quantity default
                to the request's

        Raises:
            InvalidRequestTransitionError: If the request is rejected or fulfilled
            FulfillmentRecordError: If the given record does not fit the request
                or already fulfils another one
        """
        request = UrgentRequestService._lock(request)
        if request.status not in OPEN_STATUSES:
            raise InvalidRequestTransitionError(request, "fulfill")

        if purchase_record is not None:
            record_id = purchase_record.pk if isinstance(purchase_record, PurchaseRecord) else purchase_record
            purchase_record = PurchaseRecord.objects.get(pk=record_id)
            if purchase_record.insumo_id != request.insumo_id:
                raise FulfillmentRecordError(
                    f"Purchase record {purchase_record.pk} is for a different ingredient."
                )
            if purchase_record.status == PurchaseStatus.CANCELLED:
                raise FulfillmentRecordError(f"Purchase record {purchase_record.pk} is cancelled.")
            if purchase_record.urgent_requests.exclude(pk=request.pk).exists():
                raise FulfillmentRecordError(
                    f"Purchase record {purchase_record.pk} already fulfils another urgent request."
                )
        else:
            data = dict(purchase_data or {})
            quantity = data.pop("quantity", request.quantity_requested)
            data.setdefault("notes", f"Fulfils urgent purchase request #{request.pk}")
            purchase_record = PurchaseRecordService.create_purchase_record(
                request.insumo_id, quantity, user=user, **data
            )

        request.fulfilled_purchase_record = purchase_record
        return UrgentRequestService._resolve(
            request, UrgentRequestStatus.FULFILLED, user, extra_fields=("fulfilled_purchase_record",)
        )
