"""
Mention detection for freshly submitted reports.

A member is mentioned when the literal text ``@<display name>`` occurs
anywhere in the report. Matching is plain substring search, not tokenising:
``@Alice Smith`` in a report also mentions a member called ``Alice``, while
``@Alice`` alone does not mention ``Alice Smith``.
"""
import logging

from django.db import DatabaseError, transaction

from common.models import Notification
from common.services.notifications import NotificationService

logger = logging.getLogger(__name__)


def mention_text(report) -> str:
    return f"{report.today_work} {report.problems} {report.tomorrow_plan}"


def find_mentioned_members(text, members, author=None):
    author_id = getattr(author, "pk", None)
    mentioned = []
    for member in members:
        if author_id is not None and member.pk == author_id:
            continue
        if not member.name:
            continue
        if f"@{member.name}" in text:
            mentioned.append(member)
    return mentioned


def notify_mentions(report, members):
    """
    Creates one ``mention`` notification per member mentioned in ``report``.

    Each write stands alone: a failed write is logged and skipped, the report
    and the other notifications stay. Returns the notifications created.
    """
    created = []
    content = f"{report.user_name} mentioned you in their daily report."

    for member in find_mentioned_members(mention_text(report), members, author=report.user):
        try:
            with transaction.atomic():
                created.append(
                    NotificationService.send(
                        member,
                        content,
                        type=Notification.Type.MENTION,
                        report=report,
                    )
                )
        except DatabaseError:
            logger.exception(
                "Mention notification for user %s on report %s failed",
                member.pk,
                report.pk,
            )
    return created
