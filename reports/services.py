from django.db import transaction
from django.utils import timezone

from accounts.models import User
from .mentions import notify_mentions
from .models import DailyReport


def today_str() -> str:
    return timezone.localdate().isoformat()


def legacy_work_text(work_items) -> str:
    return "\n".join(f"{item['text']} ({item['progress']}%)" for item in work_items)


def submit_report(
    user,
    *,
    work_items,
    problems="",
    tomorrow_plan="",
    mood=DailyReport.Mood.NEUTRAL,
    created_at_millis=None,
):
    """
    Stores a report for today and notifies everyone it mentions.

    ``work_items`` must already be validated; blank items are dropped here.
    Mention fan-out runs after the report is committed and never undoes it.
    """
    items = [
        {"id": item["id"], "text": item["text"].strip(), "progress": item["progress"]}
        for item in work_items
        if item["text"].strip()
    ]
    if not items:
        raise ValueError("At least one work item with text is required")

    author = User.objects.select_related("group").get(pk=user.pk)

    with transaction.atomic():
        fields = dict(
            user=author,
            user_name=author.name,
            group=author.group,
            group_name=author.group_name,
            date=today_str(),
            today_work=legacy_work_text(items),
            work_items=items,
            problems=problems,
            tomorrow_plan=tomorrow_plan,
            mood=mood,
        )
        if created_at_millis is not None:
            fields["created_at_millis"] = created_at_millis
        report = DailyReport.objects.create(**fields)

    members = User.objects.filter(is_active=True).exclude(pk=author.pk)
    notifications = notify_mentions(report, members)
    return report, notifications


def toggle_like(report, user) -> bool:
    """Adds ``user`` to the likes, or removes them if present. Returns liked state."""
    if report.likes.filter(pk=user.pk).exists():
        report.likes.remove(user)
        return False
    report.likes.add(user)
    return True


def reports_for_date(day: str):
    return DailyReport.objects.filter(date=day).order_by("-created_at", "-id")
