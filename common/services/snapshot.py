"""
Full-collection snapshots for polling clients.

A client keeps the last ``version`` it saw and polls with
``If-None-Match``; any change in any collection produces a new version and
the client replaces its cached copy wholesale.
"""
import hashlib
import json

from django.core.serializers.json import DjangoJSONEncoder

from accounts.models import Group, User
from accounts.serializers import GroupSerializer, UserSerializer
from common.models import AppSettings, Notification
from common.serializers import AppSettingsSerializer, NotificationSerializer
from reports.models import DailyReport
from reports.serializers import DailyReportSerializer


def build_snapshot(request) -> dict:
    user = request.user
    context = {"request": request}
    return {
        "settings": AppSettingsSerializer(AppSettings.load()).data,
        "groups": GroupSerializer(Group.objects.order_by("name"), many=True).data,
        "reports": DailyReportSerializer(
            DailyReport.objects.prefetch_related("likes").order_by("-created_at", "-id"),
            many=True,
            context=context,
        ).data,
        "members": UserSerializer(
            User.objects.filter(is_active=True).select_related("group").order_by("-created_at"),
            many=True,
        ).data,
        "notifications": NotificationSerializer(
            Notification.objects.filter(user=user).order_by("-created_at", "-id"),
            many=True,
        ).data,
    }


def snapshot_version(snapshot: dict) -> str:
    encoded = json.dumps(snapshot, cls=DjangoJSONEncoder, sort_keys=True)
    return hashlib.sha1(encoded.encode("utf-8")).hexdigest()
