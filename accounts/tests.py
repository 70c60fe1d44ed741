from io import StringIO
from unittest.mock import patch

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from apps.audit import AuditEvents, log_event
from common.models import Notification
from reports.models import DailyReport
from .services import EMAIL_TAKEN, AuthError, register_member
from .models import AuditLog, Group, User


@override_settings(REGISTRATION_ADMIN_SECRET="ADMIN888", REGISTRATION_INVITE_CODE="TEAM2025")
class RegistrationApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def _register(self, **overrides):
        payload = {
            "name": "Alice",
            "email": "alice@example.com",
            "password": "secret123",
            "invite_code": "TEAM2025",
        }
        payload.update(overrides)
        return self.client.post("/api/v1/accounts/auth/register/", payload, format="json")

    def test_invite_code_creates_member_with_hashed_password(self):
        response = self._register()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["landing"], "submit")
        self.assertEqual(response.data["user"]["role"], User.Role.USER)

        user = User.objects.get(email="alice@example.com")
        self.assertNotEqual(user.password, "secret123")
        self.assertTrue(user.check_password("secret123"))

    def test_admin_secret_grants_admin_role(self):
        response = self._register(invite_code="", admin_secret="ADMIN888")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["landing"], "dashboard")

        user = User.objects.get(email="alice@example.com")
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_staff)

    def test_wrong_join_code_is_rejected(self):
        response = self._register(invite_code="nope")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Wrong join code")
        self.assertFalse(User.objects.exists())

    def test_duplicate_email_keeps_single_record(self):
        self.assertEqual(self._register().status_code, 201)

        response = self._register(name="Other Alice", email="ALICE@example.com")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "This email is already registered")
        self.assertEqual(User.objects.filter(email__iexact="alice@example.com").count(), 1)

    def test_join_code_is_checked_before_duplicate_email(self):
        self._register()
        response = self._register(invite_code="nope")
        self.assertEqual(response.data["error"], "Wrong join code")

    @override_settings(REGISTRATION_INVITE_CODE="SPRING")
    def test_invite_code_comes_from_settings(self):
        self.assertEqual(self._register().status_code, 400)
        self.assertEqual(self._register(invite_code="SPRING").status_code, 201)

    def test_email_longer_than_username_column_is_rejected(self):
        email = "a" * 60 + "@" + "b" * 60 + "." + "c" * 30 + ".com"
        response = self._register(email=email)
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.data)
        self.assertFalse(User.objects.exists())

    def test_concurrent_duplicate_reports_email_taken(self):
        User.objects.create_user(email="alice@example.com", password="secret123", name="Alice")

        # The existence check passes, as it would for a registration racing the first one.
        with patch.object(User.objects, "filter", return_value=User.objects.none()):
            with self.assertRaises(AuthError) as ctx:
                register_member(
                    name="Alice Again",
                    email="alice@example.com",
                    password="secret123",
                    invite_code="TEAM2025",
                )

        self.assertEqual(str(ctx.exception), EMAIL_TAKEN)
        self.assertEqual(User.objects.count(), 1)

    def test_rejection_is_audited(self):
        with patch("accounts.views.AccountsAuditService.log_registration_rejected") as log_rejected:
            self._register(invite_code="nope")
        log_rejected.assert_called_once()


class LoginApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.group = Group.objects.create(name="Backend")
        self.member = User.objects.create_user(
            email="bob@example.com",
            password="StrongPass123!",
            name="Bob",
            group=self.group,
        )
        self.admin = User.objects.create_user(
            email="boss@example.com",
            password="StrongPass123!",
            name="Boss",
            role=User.Role.ADMIN,
        )

    def _login(self, email, password):
        return self.client.post(
            "/api/v1/accounts/auth/login/",
            {"email": email, "password": password},
            format="json",
        )

    def test_member_login_returns_session_payload(self):
        response = self._login("bob@example.com", "StrongPass123!")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["landing"], "submit")
        self.assertEqual(response.data["user"]["id"], self.member.id)
        self.assertEqual(response.data["user"]["group_name"], "Backend")
        self.assertIn("refresh", response.data)

        token = AccessToken(response.data["access"])
        self.assertEqual(token["role"], "user")
        self.assertEqual(token["group_id"], self.group.id)

    def test_admin_login_lands_on_dashboard(self):
        response = self._login("boss@example.com", "StrongPass123!")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["landing"], "dashboard")

    def test_email_is_case_insensitive(self):
        response = self._login("BOB@Example.com", "StrongPass123!")
        self.assertEqual(response.status_code, 200)

    def test_wrong_password_returns_inline_error(self):
        response = self._login("bob@example.com", "wrong")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"error": "Invalid email or password"})
        self.assertTrue(
            AuditLog.objects.filter(action=AuditEvents.LOGIN_FAILED, metadata__email="bob@example.com").exists()
        )

    def test_unknown_email_returns_same_error(self):
        response = self._login("ghost@example.com", "StrongPass123!")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid email or password")

    def test_inactive_user_cannot_login(self):
        self.member.is_active = False
        self.member.save(update_fields=["is_active"])
        response = self._login("bob@example.com", "StrongPass123!")
        self.assertEqual(response.status_code, 400)

    def test_successful_login_is_audited(self):
        self._login("bob@example.com", "StrongPass123!")
        entry = AuditLog.objects.get(action=AuditEvents.LOGIN_SUCCESS)
        self.assertEqual(entry.user, self.member)

    def test_me_returns_current_user(self):
        self.client.force_authenticate(self.member)
        response = self.client.get("/api/v1/accounts/users/me/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["email"], "bob@example.com")
        self.assertEqual(response.data["role"], "user")

    def test_me_requires_authentication(self):
        response = self.client.get("/api/v1/accounts/users/me/")
        self.assertEqual(response.status_code, 401)


class DirectoryApiTests(TestCase):
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

    def test_admin_can_create_group(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/v1/accounts/groups/", {"name": " Design "}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["name"], "Design")
        self.assertEqual(response.data["members_count"], 0)

    def test_group_names_are_unique_ignoring_case(self):
        Group.objects.create(name="Design")
        self.client.force_authenticate(self.admin)
        response = self.client.post("/api/v1/accounts/groups/", {"name": "design"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_member_cannot_create_group(self):
        self.client.force_authenticate(self.member)
        response = self.client.post("/api/v1/accounts/groups/", {"name": "Design"}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_group_list_counts_members(self):
        group = Group.objects.create(name="Ops")
        self.member.group = group
        self.member.save(update_fields=["group"])

        self.client.force_authenticate(self.member)
        response = self.client.get("/api/v1/accounts/groups/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [{"id": group.id, "name": "Ops", "members_count": 1}])

    def test_admin_assigns_member_group(self):
        group = Group.objects.create(name="Ops")
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            f"/api/v1/accounts/members/{self.member.id}/group/",
            {"group": group.id},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.member.refresh_from_db()
        self.assertEqual(self.member.group, group)

        response = self.client.patch(
            f"/api/v1/accounts/members/{self.member.id}/group/",
            {"group": None},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.member.refresh_from_db()
        self.assertIsNone(self.member.group)

    def test_member_list_newest_first(self):
        self.client.force_authenticate(self.member)
        response = self.client.get("/api/v1/accounts/members/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([m["id"] for m in response.data], [self.member.id, self.admin.id])


class SeedDemoTeamCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_demo_team", days=7, stdout=StringIO())
        reports = DailyReport.objects.count()
        users = User.objects.count()

        call_command("seed_demo_team", days=7, stdout=StringIO())
        self.assertEqual(DailyReport.objects.count(), reports)
        self.assertEqual(User.objects.count(), users)

        self.assertTrue(User.objects.get(email="admin@teamdaily.local").is_admin)
        self.assertTrue(reports > 0)
        self.assertEqual(
            Notification.objects.filter(user__email="sam@teamdaily.local", content="Welcome to TeamDaily!").count(),
            1,
        )


class AuditFacadeTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="audit@example.com", password="StrongPass123!")

    def test_default_backend_writes_audit_log(self):
        log_event(
            action=AuditEvents.REPORT_SUBMITTED,
            actor=self.user,
            object_type="daily_report",
            object_id="7",
            category="content",
            metadata={"work_items": 2},
        )
        entry = AuditLog.objects.get()
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.metadata, {"work_items": 2})

    @override_settings(AUDIT_PRIMARY_BACKEND="logging")
    def test_logging_backend(self):
        with self.assertLogs("teamdaily.audit", level="WARNING") as captured:
            log_event(action=AuditEvents.LOGIN_FAILED, level="warning", category="auth")
        self.assertIn(AuditEvents.LOGIN_FAILED, captured.output[0])
        self.assertFalse(AuditLog.objects.exists())

    @override_settings(AUDIT_PRIMARY_BACKEND="noop")
    def test_noop_backend(self):
        log_event(action=AuditEvents.LOGIN_SUCCESS, actor=self.user)
        self.assertFalse(AuditLog.objects.exists())

    def test_backend_failure_does_not_propagate(self):
        with patch.object(AuditLog, "log", side_effect=RuntimeError("db gone")):
            with self.assertLogs("apps.audit.services", level="ERROR"):
                log_event(action=AuditEvents.LOGIN_SUCCESS, actor=self.user)
