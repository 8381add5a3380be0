from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "festcore.apps.notifications"
    verbose_name = "Notificaciones (email)"
