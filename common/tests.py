from unittest.mock import patch

from django.db.utils import OperationalError
from django.test import TestCase
from rest_framework.settings import api_settings
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle

from accounts.models import Group, User
from common.models import AppSettings, Notification
from common.services.notifications import NotificationService
from common.views import SnapshotAPIView
from reports.models import DailyReport


class NotificationsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="u1@example.com",
            password="StrongPass123!",
            name="User One",
        )
        self.other = User.objects.create_user(
            email="u2@example.com",
            password="StrongPass123!",
            name="User Two",
        )
        self.client.force_authenticate(user=self.user)
        self.notification = NotificationService.send(
            self.user,
            "Alice mentioned you in their daily report.",
            type=Notification.Type.MENTION,
        )

    def test_list_returns_own_notifications_with_unread_count(self):
        NotificationService.send(self.other, "Not yours")
        response = self.client.get("/api/v1/common/notifications/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["unread_count"], 1)
        self.assertEqual([n["id"] for n in response.data["items"]], [self.notification.id])
        self.assertEqual(response.data["items"][0]["type"], "mention")

    @patch("common.views.CommonAuditService.log_notification_marked_read")
    def test_mark_single_notification_read(self, log_notification_marked_read):
        response = self.client.patch(
            f"/api/v1/common/notifications/{self.notification.id}/read/",
            {},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.notification.refresh_from_db()
        self.assertTrue(self.notification.is_read)
        log_notification_marked_read.assert_called_once()

    def test_mark_read_is_idempotent(self):
        url = f"/api/v1/common/notifications/{self.notification.id}/read/"
        self.client.patch(url, {}, format="json")
        response = self.client.patch(url, {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["is_read"])

    def test_read_flag_never_reverts(self):
        self.assertTrue(self.notification.mark_read())
        self.assertFalse(self.notification.mark_read())
        self.notification.refresh_from_db()
        self.assertTrue(self.notification.is_read)

    def test_cannot_mark_someone_elses_notification(self):
        foreign = NotificationService.send(self.other, "Not yours")
        response = self.client.patch(
            f"/api/v1/common/notifications/{foreign.id}/read/",
            {},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        foreign.refresh_from_db()
        self.assertFalse(foreign.is_read)

    @patch("common.views.CommonAuditService.log_notifications_marked_read_all")
    def test_mark_all_notifications_read(self, log_notifications_marked_read_all):
        NotificationService.send(self.user, "Second")

        response = self.client.patch("/api/v1/common/notifications/read-all/", {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["updated"], 2)
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())
        log_notifications_marked_read_all.assert_called_once()


class AppSettingsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="StrongPass123!",
            name="Admin",
            role=User.Role.ADMIN,
        )
        self.member = User.objects.create_user(
            email="member@example.com",
            password="StrongPass123!",
            name="Member",
        )

    def test_defaults(self):
        self.client.force_authenticate(self.member)
        response = self.client.get("/api/v1/common/settings/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["team_name"], "TeamDaily")
        self.assertEqual(response.data["work_days"], [1, 2, 3, 4, 5])
        self.assertEqual(response.data["thresholds"], {"daily": 8, "weekly": 4, "monthly": 20})

    def test_admin_updates_settings(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            "/api/v1/common/settings/",
            {"team_name": "Rocket", "work_days": [5, 1, 1], "thresholds": {"daily": 5}},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

        settings_row = AppSettings.load()
        self.assertEqual(settings_row.team_name, "Rocket")
        self.assertEqual(settings_row.work_days, [1, 5])
        self.assertEqual(settings_row.thresholds, {"daily": 5, "weekly": 4, "monthly": 20})
        self.assertEqual(AppSettings.objects.count(), 1)

    def test_invalid_work_day_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch("/api/v1/common/settings/", {"work_days": [7]}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_member_cannot_update_settings(self):
        self.client.force_authenticate(self.member)
        response = self.client.patch("/api/v1/common/settings/", {"team_name": "X"}, format="json")
        self.assertEqual(response.status_code, 403)


class SnapshotApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.group = Group.objects.create(name="Core")
        self.user = User.objects.create_user(
            email="snap@example.com",
            password="StrongPass123!",
            name="Snap",
            group=self.group,
        )
        self.client.force_authenticate(self.user)

    def test_snapshot_contains_all_collections(self):
        response = self.client.get("/api/v1/common/snapshot/")
        self.assertEqual(response.status_code, 200)
        for key in ("version", "settings", "groups", "reports", "members", "notifications"):
            self.assertIn(key, response.data)
        self.assertEqual(response["ETag"], f'"{response.data["version"]}"')

    def test_unchanged_snapshot_answers_not_modified(self):
        first = self.client.get("/api/v1/common/snapshot/")
        response = self.client.get("/api/v1/common/snapshot/", HTTP_IF_NONE_MATCH=first["ETag"])
        self.assertEqual(response.status_code, 304)

    def test_new_report_changes_version(self):
        first = self.client.get("/api/v1/common/snapshot/")
        DailyReport.objects.create(
            user=self.user,
            user_name=self.user.name,
            group=self.group,
            group_name=self.group.name,
            date="2024-05-01",
            today_work="Ship it (100%)",
        )
        response = self.client.get("/api/v1/common/snapshot/", HTTP_IF_NONE_MATCH=first["ETag"])
        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(response.data["version"], first.data["version"])
        self.assertEqual(len(response.data["reports"]), 1)


class SnapshotThrottleTests(TestCase):
    def test_snapshot_has_own_scope_sized_for_polling(self):
        self.assertEqual(SnapshotAPIView.throttle_classes, [ScopedRateThrottle])
        self.assertEqual(SnapshotAPIView.throttle_scope, "snapshot")

        throttle = ScopedRateThrottle()
        num_requests, duration = throttle.parse_rate(api_settings.DEFAULT_THROTTLE_RATES["snapshot"])
        # Polling every 15 seconds for a whole day stays under the limit.
        self.assertGreaterEqual(num_requests * 86400 / duration, 86400 / 15)


class HealthCheckTests(TestCase):
    def test_ok(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_database_down_returns_503(self):
        with patch("common.views.connection") as connection:
            connection.cursor.side_effect = OperationalError("down")
            response = self.client.get("/health/")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "connection failed")
