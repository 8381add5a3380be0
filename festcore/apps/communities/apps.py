from django.apps import AppConfig


class CommunitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "festcore.apps.communities"
    verbose_name = "Comunidades"
