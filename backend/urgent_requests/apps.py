from django.apps import AppConfig


class UrgentRequestsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "urgent_requests"
    verbose_name = "Urgent purchase requests"

    def ready(self):
        """Import signal handlers when app is ready"""
        import urgent_requests.handlers  # noqa
