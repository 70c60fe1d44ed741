from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import AuditLog, Group, User
from apps.audit import AuditEvents
from common.models import AppSettings, Notification
from reports.models import DailyReport


class ReportApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.group = Group.objects.create(name="Backend")
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="StrongPass123!",
            name="Admin",
            role=User.Role.ADMIN,
        )
        self.alice = User.objects.create_user(
            email="alice@example.com",
            password="StrongPass123!",
            name="Alice",
            group=self.group,
        )
        self.bob = User.objects.create_user(
            email="bob@example.com",
            password="StrongPass123!",
            name="Bob",
        )
        self.today = timezone.localdate().isoformat()

    def submit(self, user, **payload):
        payload.setdefault("work_items", [{"text": "Build API", "progress": 50}])
        self.client.force_authenticate(user)
        return self.client.post("/api/v1/reports/", payload, format="json")

    def make_report(self, user, day, mood=DailyReport.Mood.NEUTRAL, text="Old work (100%)"):
        return DailyReport.objects.create(
            user=user,
            user_name=user.name,
            group=user.group,
            group_name=user.group_name,
            date=day,
            today_work=text,
            mood=mood,
        )


class SubmitReportTests(ReportApiTestCase):
    def test_submit_snapshots_author_and_builds_legacy_text(self):
        response = self.submit(
            self.alice,
            work_items=[
                {"text": "Build API", "progress": 50},
                {"text": "   ", "progress": 10},
                {"text": "Write docs"},
            ],
            problems="CI is flaky",
            tomorrow_plan="Deploy",
            mood="happy",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["user_name"], "Alice")
        self.assertEqual(response.data["group_name"], "Backend")
        self.assertEqual(response.data["date"], self.today)
        self.assertEqual(response.data["today_work"], "Build API (50%)\nWrite docs (100%)")
        self.assertEqual(len(response.data["work_items"]), 2)
        self.assertEqual(response.data["likes"], [])

        report = DailyReport.objects.get()
        self.assertEqual(report.mood, DailyReport.Mood.HAPPY)
        self.assertTrue(report.created_at_millis > 0)

    def test_items_without_ids_get_distinct_ids(self):
        response = self.submit(
            self.alice,
            work_items=[{"text": "One"}, {"text": "Two"}, {"id": 42, "text": "Three"}],
        )
        self.assertEqual(response.status_code, 201)
        ids = [item["id"] for item in response.data["work_items"]]
        self.assertEqual(len(set(ids)), 3)
        self.assertEqual(ids[2], 42)

    def test_member_without_group_gets_empty_group_name(self):
        response = self.submit(self.bob)
        self.assertEqual(response.status_code, 201)
        self.assertIsNone(response.data["group"])
        self.assertEqual(response.data["group_name"], "")

    def test_blank_work_items_are_rejected(self):
        response = self.submit(self.alice, work_items=[{"text": "  ", "progress": 100}])
        self.assertEqual(response.status_code, 400)
        self.assertFalse(DailyReport.objects.exists())

    def test_progress_moves_in_steps_of_ten(self):
        response = self.submit(self.alice, work_items=[{"text": "x", "progress": 55}])
        self.assertEqual(response.status_code, 400)

    def test_unknown_mood_rejected(self):
        response = self.submit(self.alice, mood="furious")
        self.assertEqual(response.status_code, 400)

    def test_client_timestamp_is_kept(self):
        response = self.submit(self.alice, created_at_millis=1714550400000)
        self.assertEqual(response.data["created_at_millis"], 1714550400000)

    def test_mentions_notify_members_except_author(self):
        response = self.submit(
            self.alice,
            work_items=[{"text": "Paired with @Bob", "progress": 100}],
            tomorrow_plan="Ask @Alice and @Admin",
        )
        self.assertEqual(response.status_code, 201)

        recipients = set(Notification.objects.values_list("user_id", flat=True))
        self.assertEqual(recipients, {self.bob.id, self.admin.id})
        notification = Notification.objects.get(user=self.bob)
        self.assertEqual(notification.type, Notification.Type.MENTION)
        self.assertEqual(notification.report_id, response.data["id"])
        self.assertTrue(AuditLog.objects.filter(action=AuditEvents.MENTIONS_NOTIFIED).exists())

    def test_submission_is_audited(self):
        with patch("reports.views.ReportsAuditService.log_report_submitted") as log_submitted:
            self.submit(self.alice)
        log_submitted.assert_called_once()


class FeedTests(ReportApiTestCase):
    def test_feed_is_newest_first_with_filters(self):
        first = self.make_report(self.alice, "2024-05-01", mood="happy", text="deploy script (100%)")
        second = self.make_report(self.bob, "2024-05-02", mood="tired")
        third = self.make_report(self.alice, "2024-05-03", mood="happy")

        self.client.force_authenticate(self.bob)
        response = self.client.get("/api/v1/reports/")
        self.assertEqual([r["id"] for r in response.data["results"]], [third.id, second.id, first.id])
        self.assertEqual(response.data["active_filters"], 0)

        response = self.client.get(
            "/api/v1/reports/",
            {"user": self.alice.id, "mood": "happy", "end": "2024-05-02"},
        )
        self.assertEqual([r["id"] for r in response.data["results"]], [first.id])
        self.assertEqual(response.data["active_filters"], 3)

        response = self.client.get("/api/v1/reports/", {"search": "DEPLOY"})
        self.assertEqual(response.data["count"], 1)

    def test_detail(self):
        report = self.make_report(self.alice, "2024-05-01")
        self.client.force_authenticate(self.bob)
        response = self.client.get(f"/api/v1/reports/{report.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user_name"], "Alice")

    def test_feed_requires_authentication(self):
        response = self.client.get("/api/v1/reports/")
        self.assertEqual(response.status_code, 401)


class LikeTests(ReportApiTestCase):
    def test_like_toggles(self):
        report = self.make_report(self.alice, self.today)
        self.client.force_authenticate(self.bob)
        url = f"/api/v1/reports/{report.id}/like/"

        response = self.client.post(url)
        self.assertEqual(response.data, {"liked": True, "likes": [self.bob.id]})

        response = self.client.post(url)
        self.assertEqual(response.data, {"liked": False, "likes": []})

        response = self.client.post(url)
        self.assertEqual(response.data, {"liked": True, "likes": [self.bob.id]})
        self.assertEqual(report.likes.count(), 1)

    def test_likes_are_per_user(self):
        report = self.make_report(self.alice, self.today)
        for user in (self.bob, self.admin):
            self.client.force_authenticate(user)
            self.client.post(f"/api/v1/reports/{report.id}/like/")

        response = self.client.get(f"/api/v1/reports/{report.id}/")
        self.assertEqual(response.data["likes_count"], 2)
        self.assertTrue(response.data["liked_by_me"])

    def test_like_missing_report(self):
        self.client.force_authenticate(self.bob)
        self.assertEqual(self.client.post("/api/v1/reports/999/like/").status_code, 404)


class DashboardTests(ReportApiTestCase):
    def test_admin_dashboard(self):
        self.make_report(self.alice, self.today)
        self.make_report(self.bob, self.today)

        self.client.force_authenticate(self.admin)
        response = self.client.get("/api/v1/reports/dashboard/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["today_count"], 2)
        self.assertEqual(response.data["team_size"], 3)
        self.assertEqual(response.data["submission_rate"], 67)
        self.assertEqual(len(response.data["trend"]), 7)
        self.assertEqual(response.data["trend"][-1]["date"], self.today)
        self.assertEqual(response.data["trend"][-1]["count"], 2)

    def test_group_restricts_trend_only(self):
        self.make_report(self.alice, self.today)
        self.make_report(self.bob, self.today)

        self.client.force_authenticate(self.admin)
        response = self.client.get("/api/v1/reports/dashboard/", {"group": self.group.id})
        self.assertEqual(response.data["today_count"], 2)
        self.assertEqual(response.data["trend"][-1]["count"], 1)

    def test_member_cannot_open_dashboard(self):
        self.client.force_authenticate(self.alice)
        response = self.client.get("/api/v1/reports/dashboard/")
        self.assertEqual(response.status_code, 403)


class CalendarTests(ReportApiTestCase):
    def test_member_sees_own_calendar(self):
        self.make_report(self.alice, "2024-04-02", text="a\nb\nc\nd")

        self.client.force_authenticate(self.alice)
        response = self.client.get("/api/v1/reports/calendar/", {"year": 2024, "month": 4})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["cells"]), 30)
        self.assertEqual(response.data["leading_blanks"], 1)
        self.assertEqual(response.data["cells"][1]["count"], 4)
        self.assertEqual(response.data["cells"][1]["level"], 2)
        self.assertEqual(response.data["submitted_days"], 1)

    def test_member_cannot_view_another_member(self):
        self.client.force_authenticate(self.bob)
        response = self.client.get(
            "/api/v1/reports/calendar/",
            {"user": self.alice.id, "year": 2024, "month": 4},
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_can_view_any_member(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(
            "/api/v1/reports/calendar/",
            {"user": self.alice.id, "year": 2024, "month": 4},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user_id"], self.alice.id)

    def test_high_output_follows_settings_threshold(self):
        app_settings = AppSettings.load()
        app_settings.daily_threshold = 2
        app_settings.save()
        self.make_report(self.alice, "2024-04-02", text="a\nb")

        self.client.force_authenticate(self.alice)
        response = self.client.get("/api/v1/reports/calendar/", {"year": 2024, "month": 4})
        self.assertTrue(response.data["cells"][1]["is_high_output"])
        self.assertEqual(response.data["achievements"][0]["code"], "high_output_day")


class TeamSummaryTests(ReportApiTestCase):
    @patch("reports.summary.complete", return_value="## 📊 Team Summary\nSteady progress")
    def test_admin_generates_summary(self, complete):
        self.make_report(self.alice, self.today)

        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/v1/reports/summary/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["report_count"], 1)
        self.assertEqual(response.data["summary"], "## 📊 Team Summary\nSteady progress")
        self.assertEqual(response.data["sections"][0], {"kind": "heading", "text": "📊 Team Summary"})
        complete.assert_called_once()

    @patch("reports.summary.complete", side_effect=ConnectionError("offline"))
    def test_service_failure_is_not_an_error_status(self, complete):
        self.make_report(self.alice, self.today)

        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/v1/reports/summary/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("temporarily unavailable", response.data["summary"])

    def test_no_reports_today(self):
        self.make_report(self.alice, "2000-01-01")
        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/v1/reports/summary/")
        self.assertEqual(response.data["summary"], "No reports available to summarize.")
        self.assertEqual(response.data["report_count"], 0)

    def test_member_cannot_generate_summary(self):
        self.client.force_authenticate(self.alice)
        self.assertEqual(self.client.post("/api/v1/reports/summary/").status_code, 403)
