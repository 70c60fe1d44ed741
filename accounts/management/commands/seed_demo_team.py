from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from accounts.models import Group, User
from common.models import AppSettings, Notification
from common.services.notifications import NotificationService
from reports.models import DailyReport
from reports.services import legacy_work_text


DEMO_REPORTS = [
    {
        "items": [("Dashboard charts", 100), ("Review PR for @Sam Lee", 60)],
        "problems": "Staging deploy is slow",
        "plan": "Finish calendar heatmap",
        "mood": DailyReport.Mood.HAPPY,
    },
    {
        "items": [("API pagination", 80)],
        "problems": "",
        "plan": "Write tests",
        "mood": DailyReport.Mood.NEUTRAL,
    },
    {
        "items": [("Customer call", 100), ("Release notes", 50), ("Bug triage", 30)],
        "problems": "Waiting for design review",
        "plan": "Sync with @Demo Admin",
        "mood": DailyReport.Mood.TIRED,
    },
]


class Command(BaseCommand):
    help = "Creates a demo team with groups, members and a week of daily reports."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=7, help="How many past days to fill")

    @transaction.atomic
    def handle(self, *args, **options):
        AppSettings.load()

        frontend, _ = Group.objects.get_or_create(name="Frontend")
        backend, _ = Group.objects.get_or_create(name="Backend")

        admin_user = self._member(
            "admin@teamdaily.local", "Demo Admin", "DemoAdmin123!",
            role=User.Role.ADMIN, group=None, is_staff=True,
        )
        alex = self._member("alex@teamdaily.local", "Alex Kim", "DemoUser123!", group=frontend)
        sam = self._member("sam@teamdaily.local", "Sam Lee", "DemoUser123!", group=backend)

        today = timezone.localdate()
        created = 0
        for delta in range(options["days"]):
            day = today - timedelta(days=delta)
            if day.weekday() >= 5:
                continue
            for offset, author in enumerate((alex, sam)):
                created += self._report(author, day, DEMO_REPORTS[(delta + offset) % len(DEMO_REPORTS)])

        welcome = "Welcome to TeamDaily!"
        if not Notification.objects.filter(user=sam, content=welcome).exists():
            NotificationService.send(sam, welcome)

        self.stdout.write(self.style.SUCCESS(f"Demo data prepared ({created} new reports)."))
        self.stdout.write(f"Admin: {admin_user.email} / DemoAdmin123!")
        self.stdout.write(f"Members: {alex.email}, {sam.email} / DemoUser123!")

    def _member(self, email, name, password, role=User.Role.USER, group=None, is_staff=False):
        user, _ = User.objects.update_or_create(
            email=email,
            defaults={
                "username": email,
                "name": name,
                "role": role,
                "group": group,
                "is_active": True,
                "is_staff": is_staff,
            },
        )
        user.set_password(password)
        user.save(update_fields=["password"])
        return user

    def _report(self, author, day, sample) -> int:
        date_str = day.isoformat()
        if DailyReport.objects.filter(user=author, date=date_str).exists():
            return 0

        items = [
            {"id": index + 1, "text": text, "progress": progress}
            for index, (text, progress) in enumerate(sample["items"])
        ]
        DailyReport.objects.create(
            user=author,
            user_name=author.name,
            group=author.group,
            group_name=author.group_name,
            date=date_str,
            today_work=legacy_work_text(items),
            work_items=items,
            problems=sample["problems"],
            tomorrow_plan=sample["plan"],
            mood=sample["mood"],
        )
        return 1
