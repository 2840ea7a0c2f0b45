"""
Access to the domain tunables declared in ``settings.CATERING_ERP``.

Business logic reads configuration through :func:`get_erp_setting` instead of
touching ``django.conf.settings`` directly, so every default lives in one place.
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULTS = {
    "QUANTITY_DECIMAL_PLACES": 2,
    "REJECTION_REASON_MIN_LENGTH": 10,
    "REJECTION_REASON_MAX_LENGTH": 500,
    "DEDUCTOR_NAME_MAX_LENGTH": 100,
    "LOW_STOCK_CHECK_ENABLED": True,
}


def get_erp_setting(name):
    """
    Return a domain setting, falling back to the built-in default.

    Raises:
        ImproperlyConfigured: If ``name`` is not a known setting.
    """
    if name not in DEFAULTS:
        raise ImproperlyConfigured(f"Unknown catering ERP setting: {name}")
    overrides = getattr(settings, "CATERING_ERP", {}) or {}
    return overrides.get(name, DEFAULTS[name])
