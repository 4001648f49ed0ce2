from django.apps import AppConfig


class ThemeAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.theme"
    verbose_name = "테마"
