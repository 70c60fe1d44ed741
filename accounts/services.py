from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from .models import Group, User
from .tokens import TeamDailyTokenObtainPairSerializer


class AuthError(ValueError):
    """Credential or admission failure shown inline on the auth form."""


INVALID_CREDENTIALS = "Invalid email or password"
WRONG_JOIN_CODE = "Wrong join code"
EMAIL_TAKEN = "This email is already registered"


def _admin_secret() -> str:
    return getattr(settings, "REGISTRATION_ADMIN_SECRET", "ADMIN888")


def _invite_code() -> str:
    return getattr(settings, "REGISTRATION_INVITE_CODE", "TEAM2025")


def resolve_role(admin_secret: str = "", invite_code: str = "") -> Optional[str]:
    """
    Static shared-secret admission. The admin secret grants ``admin``; the
    invite code alone grants ``user``. ``None`` means neither matched.
    """
    if admin_secret and admin_secret == _admin_secret():
        return User.Role.ADMIN
    if invite_code and invite_code == _invite_code():
        return User.Role.USER
    return None


def authenticate_member(email: str, password: str) -> User:
    candidates = User.objects.filter(email__iexact=(email or "").strip()).order_by("created_at")
    for user in candidates:
        if user.is_active and user.check_password(password):
            return user
    raise AuthError(INVALID_CREDENTIALS)


@transaction.atomic
def register_member(
    *,
    name: str,
    email: str,
    password: str,
    admin_secret: str = "",
    invite_code: str = "",
) -> User:
    role = resolve_role(admin_secret, invite_code)
    if role is None:
        raise AuthError(WRONG_JOIN_CODE)

    if User.objects.filter(email__iexact=email.strip()).exists():
        raise AuthError(EMAIL_TAKEN)

    try:
        with transaction.atomic():
            return User.objects.create_user(
                email=email.strip(),
                password=password,
                name=name.strip(),
                role=role,
                is_staff=role == User.Role.ADMIN,
            )
    except IntegrityError:
        # A concurrent registration took the email after the check above.
        raise AuthError(EMAIL_TAKEN)


def landing_for(user: User) -> str:
    return "dashboard" if user.is_admin else "submit"


def session_payload(user: User) -> dict:
    """Everything the client persists locally to restore a session."""
    from .serializers import UserSerializer

    refresh = TeamDailyTokenObtainPairSerializer.get_token(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "landing": landing_for(user),
        "user": UserSerializer(user).data,
    }


def create_group(name: str) -> Group:
    return Group.objects.create(name=name.strip())


def assign_group(member: User, group: Optional[Group]) -> User:
    member.group = group
    member.save(update_fields=["group"])
    return member
