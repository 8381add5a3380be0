from django.urls import path
from . import views

urlpatterns = [
    # Auth
    path("auth/login", views.login, name="auth_login"),
    path("auth/me", views.me, name="auth_me"),
    path("auth/logout", views.logout, name="auth_logout"),
    path("auth/signup", views.signup, name="auth_signup"),

    # Login por rol (admins con alcance y voluntarios)
    path("auth/community-admin/login", views.community_admin_login, name="auth_community_admin_login"),
    path("auth/sports-admin/login", views.sports_admin_login, name="auth_sports_admin_login"),
    path("auth/volunteer-admin/login", views.volunteer_admin_login, name="auth_volunteer_admin_login"),
    path("auth/volunteer/login", views.volunteer_login, name="auth_volunteer_login"),

    # Usuarios (admin)
    path("users", views.users_collection, name="users"),
    path("users/export/<str:fmt>", views.users_export, name="users_export"),
    path("users/<int:pk>", views.user_detail, name="user_detail"),
]
