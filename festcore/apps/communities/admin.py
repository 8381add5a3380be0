from __future__ import annotations

from django.contrib import admin

from .models import Community, CommunityContact


class CommunityContactInline(admin.TabularInline):
    model = CommunityContact
    extra = 0
    fields = ("name", "phone", "email")


@admin.register(Community)
class CommunityAdmin(admin.ModelAdmin):
    list_display = ("name", "active", "contact_person", "phone", "email", "participants_count", "created_at")
    list_filter = ("active",)
    search_fields = ("name", "contact_person", "email")
    inlines = [CommunityContactInline]

    def participants_count(self, obj: Community) -> int:
        return obj.participants.count()
    participants_count.short_description = "Participantes"


@admin.register(CommunityContact)
class CommunityContactAdmin(admin.ModelAdmin):
    list_display = ("name", "community", "phone", "email")
    search_fields = ("name", "email", "community__name")
    raw_id_fields = ("community",)
