from django.contrib import admin
from .models import Profile

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "community", "sport", "updated_at")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email", "community__name", "sport__name")
    raw_id_fields = ("user", "community", "sport")
