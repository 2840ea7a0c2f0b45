from django.apps import AppConfig


class InsumosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "insumos"
    verbose_name = "Insumos"
