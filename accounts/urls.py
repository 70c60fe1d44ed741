from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    GroupListCreateView,
    LoginView,
    MemberGroupView,
    MemberListView,
    MeView,
    RegisterView,
)

urlpatterns = [
    # AUTH
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/register/", RegisterView.as_view(), name="auth-register"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),

    # USER
    path("users/me/", MeView.as_view(), name="users-me"),

    # DIRECTORY
    path("members/", MemberListView.as_view(), name="members"),
    path("members/<int:pk>/group/", MemberGroupView.as_view(), name="member-group"),
    path("groups/", GroupListCreateView.as_view(), name="groups"),
]
