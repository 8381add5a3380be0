from django.contrib import admin

from .models import Department, Volunteer


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "volunteers_count", "created_at")
    search_fields = ("name",)

    def volunteers_count(self, obj: Department) -> int:
        return obj.volunteers.count()
    volunteers_count.short_description = "Voluntarios"


@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "email", "phone", "department", "sport", "created_at")
    list_filter = ("department", "gender")
    search_fields = ("first_name", "last_name", "email", "user__username")
    raw_id_fields = ("user", "sport")
