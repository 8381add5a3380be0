from django.urls import path
from . import views, views_convenors, views_schedule

urlpatterns = [
    # Deportes
    path("sports", views.sports_collection, name="sports"),
    path("sports/tree", views.sports_tree, name="sports_tree"),
    path("sports/subsports/<int:parent_id>", views.subsports, name="sports_subsports"),
    path("sports/<int:pk>", views.sport_detail_view, name="sport_detail"),
    path("sports/<int:pk>/incompatibilities", views.sport_incompatibilities, name="sport_incompatibilities"),

    # Convenors
    path("convenors", views_convenors.convenors_collection, name="convenors"),
    path("convenors/sport/<int:sport_id>", views_convenors.convenor_by_sport, name="convenor_by_sport"),
    path("convenors/<int:pk>", views_convenors.convenor_detail, name="convenor_detail"),

    # Formatos de torneo
    path("tournament-formats", views_schedule.formats_collection, name="tournament_formats"),
    path("tournament-formats/category/<str:category>", views_schedule.format_by_category, name="tournament_format_by_category"),
    path("tournament-formats/<int:pk>", views_schedule.format_detail, name="tournament_format_detail"),

    # Calendario
    path("calendar", views_schedule.calendar_collection, name="calendar"),
    path("calendar/timing", views_schedule.calendar_timing, name="calendar_timing"),
    path("calendar/<int:pk>", views_schedule.calendar_item_detail, name="calendar_item_detail"),
]
