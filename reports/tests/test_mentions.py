from types import SimpleNamespace
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from accounts.models import User
from common.models import Notification
from common.services.notifications import NotificationService
from reports.mentions import find_mentioned_members, mention_text, notify_mentions
from reports.models import DailyReport


def member(pk, name):
    return SimpleNamespace(pk=pk, name=name)


ALICE = member(1, "Alice")
ALICE_SMITH = member(2, "Alice Smith")
BOB = member(3, "Bob")


def test_short_name_does_not_match_longer_name():
    found = find_mentioned_members("thanks @Alice for the review", [ALICE, ALICE_SMITH, BOB])
    assert found == [ALICE]


def test_longer_mention_also_matches_prefix_name():
    found = find_mentioned_members("paired with @Alice Smith", [ALICE, ALICE_SMITH, BOB])
    assert found == [ALICE, ALICE_SMITH]


def test_author_is_never_mentioned():
    assert find_mentioned_members("note to self @Bob", [BOB], author=BOB) == []


def test_blank_names_are_ignored():
    assert find_mentioned_members("@ hello", [member(4, "")]) == []


def test_mention_text_joins_report_fields():
    report = SimpleNamespace(today_work="a", problems="b", tomorrow_plan="c")
    assert mention_text(report) == "a b c"


@pytest.fixture
def team(db):
    author = User.objects.create_user(email="carol@example.com", password="x" * 8, name="Carol")
    alice = User.objects.create_user(email="alice@example.com", password="x" * 8, name="Alice")
    bob = User.objects.create_user(email="bob@example.com", password="x" * 8, name="Bob")
    report = DailyReport.objects.create(
        user=author,
        user_name=author.name,
        date="2024-05-01",
        today_work="Reviewed with @Alice",
        problems="Waiting on @Bob",
        tomorrow_plan="",
    )
    return SimpleNamespace(author=author, alice=alice, bob=bob, report=report)


@pytest.mark.django_db
def test_notify_mentions_creates_linked_notifications(team):
    created = notify_mentions(team.report, User.objects.exclude(pk=team.author.pk))

    assert {n.user_id for n in created} == {team.alice.pk, team.bob.pk}
    notification = Notification.objects.get(user=team.alice)
    assert notification.type == Notification.Type.MENTION
    assert notification.report_id == team.report.pk
    assert notification.content == "Carol mentioned you in their daily report."
    assert notification.is_read is False


@pytest.mark.django_db
def test_failed_write_is_skipped(team):
    real_create = Notification.objects.create

    def flaky_create(**kwargs):
        if kwargs["user"].pk == team.alice.pk:
            raise DatabaseError("write failed")
        return real_create(**kwargs)

    with patch.object(Notification.objects, "create", side_effect=flaky_create):
        created = notify_mentions(team.report, User.objects.exclude(pk=team.author.pk))

    assert [n.user_id for n in created] == [team.bob.pk]
    assert DailyReport.objects.filter(pk=team.report.pk).exists()
    assert not Notification.objects.filter(user=team.alice).exists()


@pytest.mark.django_db
def test_mention_notifications_are_sent_through_service(team):
    with patch.object(NotificationService, "send", wraps=NotificationService.send) as send:
        created = notify_mentions(team.report, User.objects.filter(pk=team.alice.pk))

    send.assert_called_once_with(
        team.alice,
        "Carol mentioned you in their daily report.",
        type=Notification.Type.MENTION,
        report=team.report,
    )
    assert created == [Notification.objects.get(user=team.alice)]
