"""
Signal handlers for urgent purchase requests.

Listens to urgent_request_created / urgent_request_resolved and leaves an
audit trail in the application log.
"""
import logging

from django.dispatch import receiver

from .signals import urgent_request_created, urgent_request_resolved

logger = logging.getLogger(__name__)


@receiver(urgent_request_created)
def log_urgent_request_created(sender, instance, created=True, **kwargs):
    log = logger.warning if instance.priority == "urgent" else logger.info
    log(
        f"Urgent purchase request {instance.pk} opened: {instance.quantity_requested} "
        f"{instance.insumo.purchase_unit} of {instance.insumo.name} "
        f"(priority={instance.priority}, source={instance.source_module})"
    )


@receiver(urgent_request_resolved)
def log_urgent_request_resolved(sender, instance, outcome, **kwargs):
    resolver = instance.resolved_by.get_username() if instance.resolved_by else "system"
    logger.info(f"Urgent purchase request {instance.pk} {outcome} by {resolver}")
