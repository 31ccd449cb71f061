from django.apps import AppConfig


class MalkhanaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "malkhana"
    verbose_name = "Malkhana (Evidence Registry)"
