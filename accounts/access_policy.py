from __future__ import annotations


class AccessPolicy:
    """Centralized access checks for role/object rules."""

    @staticmethod
    def _is_member(user) -> bool:
        return bool(user and user.is_authenticated and getattr(user, "role", None))

    @classmethod
    def is_admin(cls, user) -> bool:
        return cls._is_member(user) and user.role == "admin"

    @classmethod
    def can_view_member_data(cls, actor, target_id) -> bool:
        """Members see their own calendar; admins see everyone's."""
        if not cls._is_member(actor):
            return False
        if cls.is_admin(actor):
            return True
        return str(actor.pk) == str(target_id)

    @classmethod
    def can_access_admin_panel(cls, user) -> bool:
        return bool(user and user.is_authenticated and (user.is_superuser or cls.is_admin(user)))
