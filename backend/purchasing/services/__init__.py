"""
Purchasing services.

- PurchaseRecordService: purchase record lifecycle with counter and ledger updates
- PurchasePlanningService: purchase suggestions and batch registration
- SuggestionExportService: CSV / Excel export of suggestions
"""
from purchasing.services.purchase_record_service import PurchaseRecordService
from purchasing.services.planning_service import (
    PlanningResult,
    PurchasePlanningService,
    PurchaseSuggestion,
    SUGGESTION_REASONS,
    classify_suggestion,
)
from purchasing.services.export_service import SuggestionExportService, EXPORT_FORMATS

__all__ = [
    'PurchaseRecordService',
    'PurchasePlanningService',
    'PurchaseSuggestion',
    'PlanningResult',
    'SUGGESTION_REASONS',
    'classify_suggestion',
    'SuggestionExportService',
    'EXPORT_FORMATS',
]
