from celery import shared_task
import logging

from core_backend.config import get_erp_setting
from .services import InsumoService

logger = logging.getLogger(__name__)


@shared_task
def check_low_stock_insumos():
    """
    Daily scan for ingredients whose stock dropped below their minimum level.

    Runs from the beat schedule every morning, before purchasing plans the
    day's orders.

    Returns:
        dict: Status and the ingredients below their minimum level
    """
    if not get_erp_setting("LOW_STOCK_CHECK_ENABLED"):
        logger.info("Low stock check disabled, skipping")
        return {"status": "skipped", "reason": "disabled"}

    try:
        logger.info("Starting low stock check...")
        low_stock = [
            {
                "id": insumo.id,
                "name": insumo.name,
                "stock_quantity": str(insumo.stock_quantity),
                "min_stock_level": str(insumo.min_stock_level),
                "purchase_unit": insumo.purchase_unit,
            }
            for insumo in InsumoService.get_low_stock_insumos()
        ]

        if low_stock:
            logger.warning(
                f"{len(low_stock)} insumos below minimum stock: "
                f"{', '.join(item['name'] for item in low_stock)}"
            )
        else:
            logger.info("All insumos are at or above their minimum stock level")

        return {"status": "completed", "count": len(low_stock), "insumos": low_stock}

    except Exception as exc:
        logger.error(f"Low stock check failed: {exc}", exc_info=True)
        return {"status": "failed", "error": str(exc)}
