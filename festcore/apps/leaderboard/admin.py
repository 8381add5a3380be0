from django.contrib import admin

from .models import LeaderboardEntry


@admin.register(LeaderboardEntry)
class LeaderboardEntryAdmin(admin.ModelAdmin):
    list_display = ("community", "sport", "score", "position", "medal_type", "updated_at")
    list_filter = ("medal_type", "sport")
    search_fields = ("community__name", "sport__name")
    raw_id_fields = ("community", "sport")
