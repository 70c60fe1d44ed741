from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from .managers import UserManager


# ================= Directory =================
class Group(models.Model):
    name = models.CharField("Name", max_length=150, unique=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Group"
        verbose_name_plural = "Groups"
        ordering = ["name"]

    def __str__(self):
        return self.name


# ================= User =================
class User(AbstractUser):
    """
    Team member. Signs in with email; ``username`` mirrors the email so the
    Django admin keeps working.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Administrator"
        USER = "user", "Team member"

    email = models.EmailField("Email", unique=True)
    name = models.CharField("Display name", max_length=150)
    role = models.CharField(
        "Role",
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
    )
    group = models.ForeignKey(
        Group,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
        verbose_name="Group",
    )
    joined_on = models.DateField("Joined on", default=timezone.localdate)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["-created_at"]

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    @property
    def group_name(self) -> str:
        return self.group.name if self.group_id else ""

    def __str__(self):
        return self.name or self.email


# ================= Audit =================
class AuditLog(models.Model):
    """
    Primary audit storage backend.
    Use apps.audit.log_event as the entrypoint for writes.
    """

    class Level(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        AUTH = "auth", "Authentication"
        USER = "user", "User management"
        CONTENT = "content", "Content"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name="User",
    )

    action = models.CharField("Action", max_length=255)
    object_type = models.CharField("Object type", max_length=100, blank=True)
    object_id = models.CharField("Object ID", max_length=100, blank=True)

    level = models.CharField(
        "Level",
        max_length=20,
        choices=Level.choices,
        default=Level.INFO,
    )

    category = models.CharField(
        "Category",
        max_length=50,
        choices=Category.choices,
        default=Category.SYSTEM,
    )

    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    metadata = models.JSONField("Metadata", default=dict, blank=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Audit log entry"
        verbose_name_plural = "Audit log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level"], name="accounts_au_level_3a1f0e_idx"),
            models.Index(fields=["category"], name="accounts_au_categor_5b2c7d_idx"),
            models.Index(fields=["created_at"], name="accounts_au_created_8e4d21_idx"),
            models.Index(fields=["user"], name="accounts_au_user_id_c7a9b3_idx"),
        ]

    @classmethod
    def log(
        cls,
        action,
        user=None,
        object_type="",
        object_id="",
        level=Level.INFO,
        category=Category.SYSTEM,
        ip_address=None,
        metadata=None,
    ):
        if user is not None and not getattr(user, "pk", None):
            user = None
        return cls.objects.create(
            user=user,
            action=action,
            object_type=object_type,
            object_id=object_id,
            level=level,
            category=category,
            ip_address=ip_address,
            metadata=metadata or {},
        )

    def __str__(self):
        return f"[{self.level.upper()}] {self.action}"
