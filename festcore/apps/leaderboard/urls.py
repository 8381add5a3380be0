from django.urls import path
from . import views

urlpatterns = [
    path("leaderboard", views.leaderboard, name="leaderboard"),
    path("leaderboard/entries", views.entries, name="leaderboard_entries"),
    path("leaderboard/sport/<int:sport_id>", views.sport_leaderboard, name="leaderboard_sport"),
    path("leaderboard/community/<int:community_id>", views.community_leaderboard, name="leaderboard_community"),
    path("leaderboard/<int:pk>", views.entry_detail, name="leaderboard_entry_detail"),
]
