from django.apps import AppConfig  # type: ignore


class HallsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.halls"
    verbose_name = "Halls"
