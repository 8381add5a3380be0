from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "festcore.apps.accounts"
    verbose_name = "Cuentas y roles"
