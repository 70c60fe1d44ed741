from rest_framework.permissions import BasePermission

from .access_policy import AccessPolicy


class IsTeamAdmin(BasePermission):
    """
    Team administrators only.
    """
    message = "Administrator role required."

    def has_permission(self, request, view):
        return AccessPolicy.is_admin(request.user)
