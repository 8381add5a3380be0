from django.contrib import admin

from .models import SentEmail


@admin.register(SentEmail)
class SentEmailAdmin(admin.ModelAdmin):
    list_display = ("subject", "to_email", "from_email", "created_at")
    search_fields = ("subject", "to_email", "from_email")
    date_hierarchy = "created_at"
    readonly_fields = ("to_email", "from_email", "subject", "body", "created_at")
