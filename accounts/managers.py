from django.contrib.auth.models import UserManager as DjangoUserManager


class UserManager(DjangoUserManager):
    """Email is the login; username is kept equal to it."""

    def create_user(self, username=None, email=None, password=None, **extra_fields):
        email = self.normalize_email(email or username)
        extra_fields.setdefault("name", email.split("@")[0])
        return super().create_user(email, email, password, **extra_fields)

    def create_superuser(self, username=None, email=None, password=None, **extra_fields):
        email = self.normalize_email(email or username)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("name", email.split("@")[0])
        extra_fields["role"] = self.model.Role.ADMIN

        return super().create_superuser(email, email, password, **extra_fields)
