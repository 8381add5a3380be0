from __future__ import annotations

from django.contrib import admin

from .models import FestivalSettings, Participant, ParticipantSport


class ParticipantSportInline(admin.TabularInline):
    model = ParticipantSport
    extra = 0
    raw_id_fields = ("sport",)


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ("full_name", "email", "community", "status", "gender", "dob", "created_at")
    list_filter = ("status", "gender", "community")
    search_fields = ("first_name", "last_name", "email", "phone", "user__username")
    raw_id_fields = ("user",)
    readonly_fields = ("pending_sports", "created_at", "updated_at")
    inlines = [ParticipantSportInline]
    actions = ("mark_pending",)

    @admin.action(description="Volver a 'pending'")
    def mark_pending(self, request, queryset):
        updated = queryset.update(status=Participant.STATUS_PENDING)
        self.message_user(request, f"{updated} participante(s) en pending.")


@admin.register(FestivalSettings)
class FestivalSettingsAdmin(admin.ModelAdmin):
    list_display = ("age_calculator_date", "profile_freeze_date", "updated_at")

    def has_add_permission(self, request):
        return not FestivalSettings.objects.exists()
