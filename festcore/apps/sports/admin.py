from __future__ import annotations

from django.contrib import admin

from .models import CalendarItem, Convenor, Sport, SportIncompatibility, TournamentFormat


class ChildrenInline(admin.TabularInline):
    model = Sport
    fk_name = "parent"
    extra = 0
    fields = ("name", "type", "active", "gender", "venue")
    show_change_link = True


class IncompatibilityInline(admin.TabularInline):
    model = SportIncompatibility
    fk_name = "sport"
    extra = 0
    raw_id_fields = ("incompatible_sport",)


@admin.register(Sport)
class SportAdmin(admin.ModelAdmin):
    list_display = ("name", "parent", "type", "active", "gender", "venue", "date", "participants_count")
    list_filter = ("active", "type", "gender", "parent")
    search_fields = ("name", "parent__name", "venue")
    raw_id_fields = ("parent",)
    inlines = [ChildrenInline, IncompatibilityInline]

    def participants_count(self, obj: Sport) -> int:
        return obj.participant_links.count()
    participants_count.short_description = "Participantes"


@admin.register(Convenor)
class ConvenorAdmin(admin.ModelAdmin):
    list_display = ("name", "sport", "phone", "email")
    search_fields = ("name", "email", "sport__name")
    raw_id_fields = ("sport",)


@admin.register(TournamentFormat)
class TournamentFormatAdmin(admin.ModelAdmin):
    list_display = ("category", "title", "updated_at")
    search_fields = ("category", "title")


@admin.register(CalendarItem)
class CalendarItemAdmin(admin.ModelAdmin):
    list_display = ("sport", "date", "time", "venue", "type")
    list_filter = ("date", "type")
    search_fields = ("sport__name", "venue")
    raw_id_fields = ("sport",)
