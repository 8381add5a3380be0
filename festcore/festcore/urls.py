from django.contrib import admin
from django.urls import path, include

from festcore.apps.core.http import health

urlpatterns = [
    path("admin/", admin.site.urls),

    # API healthcheck
    path("api/health", health, name="api_health"),

    # API JSON (sin barra final)
    path("api/", include("festcore.apps.accounts.urls")),
    path("api/", include("festcore.apps.communities.urls")),
    path("api/", include("festcore.apps.sports.urls")),
    path("api/", include("festcore.apps.registration.urls")),
    path("api/", include("festcore.apps.volunteers.urls")),
    path("api/", include("festcore.apps.leaderboard.urls")),
    path("api/", include("festcore.apps.notifications.urls")),
]
