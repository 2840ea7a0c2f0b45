from django.dispatch import Signal


# ===== CUSTOM SIGNALS =====

# Fired when a new urgent request is opened (not when an open one is insisted on)
# Provides: sender=UrgentPurchaseRequest, instance=request_instance, created=True
urgent_request_created = Signal()

# Fired when a request is approved, rejected or fulfilled
# Provides: sender=UrgentPurchaseRequest, instance=request_instance, outcome='approved'|'rejected'|'fulfilled'
urgent_request_resolved = Signal()
