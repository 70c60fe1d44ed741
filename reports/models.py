import time

from django.conf import settings
from django.db import models


def epoch_millis() -> int:
    return int(time.time() * 1000)


class DailyReport(models.Model):
    class Mood(models.TextChoices):
        ENERGETIC = "energetic", "Energetic"
        HAPPY = "happy", "Happy"
        NEUTRAL = "neutral", "Neutral"
        TIRED = "tired", "Tired"
        STRESSED = "stressed", "Stressed"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="daily_reports",
    )
    # Snapshots taken at submission time.
    user_name = models.CharField(max_length=150)
    group = models.ForeignKey(
        "accounts.Group",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="daily_reports",
    )
    group_name = models.CharField(max_length=150, blank=True, default="")

    # YYYY-MM-DD; fixed width, so string comparison orders dates.
    date = models.CharField(max_length=10, db_index=True)

    today_work = models.TextField(blank=True, default="")
    work_items = models.JSONField(null=True, blank=True)
    problems = models.TextField(blank=True, default="")
    tomorrow_plan = models.TextField(blank=True, default="")
    mood = models.CharField(
        max_length=20,
        choices=Mood.choices,
        default=Mood.NEUTRAL,
    )

    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="liked_reports",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    created_at_millis = models.BigIntegerField(default=epoch_millis)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Daily report"
        verbose_name_plural = "Daily reports"
        indexes = [
            models.Index(fields=["user", "date"], name="reports_dai_user_id_5d8e1b_idx"),
            models.Index(fields=["group"], name="reports_dai_group_i_0a7c4f_idx"),
        ]

    def __str__(self):
        return f"{self.user_name} ({self.date})"
