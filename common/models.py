from django.conf import settings
from django.db import models


def default_work_days():
    return [1, 2, 3, 4, 5]


class Notification(models.Model):

    class Type(models.TextChoices):
        MENTION = "mention", "Mention"
        APPROVAL = "approval", "Approval"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications"
    )

    type = models.CharField(
        max_length=50,
        choices=Type.choices,
        default=Type.SYSTEM
    )
    content = models.TextField()

    report = models.ForeignKey(
        "reports.DailyReport",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user"], name="common_noti_user_id_4c1e2a_idx"),
            models.Index(fields=["is_read"], name="common_noti_is_read_9b0d3f_idx"),
            models.Index(fields=["created_at"], name="common_noti_created_e27a5c_idx"),
        ]

    def mark_read(self) -> bool:
        """One-way transition. Returns True when the flag actually changed."""
        if self.is_read:
            return False
        self.is_read = True
        self.save(update_fields=["is_read"])
        return True

    def __str__(self):
        return f"{self.type}: {self.content[:40]} ({self.user})"


class AppSettings(models.Model):
    """Team-wide settings. A single row with pk=1."""

    SINGLETON_PK = 1

    team_name = models.CharField(max_length=150, default="TeamDaily")
    work_days = models.JSONField(default=default_work_days)
    daily_threshold = models.PositiveIntegerField(default=8)
    weekly_threshold = models.PositiveIntegerField(default=4)
    monthly_threshold = models.PositiveIntegerField(default=20)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "App settings"
        verbose_name_plural = "App settings"

    @classmethod
    def load(cls) -> "AppSettings":
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @property
    def thresholds(self) -> dict:
        return {
            "daily": self.daily_threshold,
            "weekly": self.weekly_threshold,
            "monthly": self.monthly_threshold,
        }

    def __str__(self):
        return self.team_name
