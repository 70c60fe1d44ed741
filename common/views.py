from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema, OpenApiResponse

from accounts.permissions import IsTeamAdmin
from common.audit import CommonAuditService
from common.models import AppSettings, Notification
from common.serializers import AppSettingsSerializer, NotificationSerializer
from common.services.notifications import NotificationService
from common.services.snapshot import build_snapshot, snapshot_version


def health_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError:
        return JsonResponse(
            {"status": "error", "detail": "connection failed"},
            status=503,
        )
    return JsonResponse({"status": "ok"})


class NotificationsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        description="""
Notifications of the current user, newest first.

The response carries the unread count and the full list.
""",
        responses={
            200: OpenApiResponse(
                description="User notifications",
                response={
                    "type": "object",
                    "properties": {
                        "unread_count": {"type": "integer"},
                        "items": {"type": "array", "items": {"type": "object"}},
                    },
                },
            ),
            401: OpenApiResponse(description="Not authenticated"),
        }
    )
    def get(self, request):
        qs = Notification.objects.filter(
            user=request.user
        ).order_by("-created_at", "-id")

        return Response({
            "unread_count": NotificationService.unread_count(request.user),
            "items": NotificationSerializer(qs, many=True).data,
        })


class MarkNotificationReadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: NotificationSerializer})
    def patch(self, request, pk):
        notification = NotificationService.mark_read(request.user, pk)
        if notification is None:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)

        CommonAuditService.log_notification_marked_read(request, notification)
        return Response(NotificationSerializer(notification).data)


class MarkAllNotificationsReadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None)
    def patch(self, request):
        updated = NotificationService.mark_all_read(request.user)
        CommonAuditService.log_notifications_marked_read_all(request, updated)
        return Response({"updated": updated})


class AppSettingsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "PATCH":
            return [IsAuthenticated(), IsTeamAdmin()]
        return super().get_permissions()

    def get(self, request):
        return Response(AppSettingsSerializer(AppSettings.load()).data)

    @extend_schema(request=AppSettingsSerializer, responses={200: AppSettingsSerializer})
    def patch(self, request):
        serializer = AppSettingsSerializer(AppSettings.load(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        CommonAuditService.log_settings_updated(request, serializer.validated_data.keys())
        return Response(serializer.data)


class SnapshotAPIView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "snapshot"

    @extend_schema(
        description="""
Settings, groups, reports, members and the caller's notifications in one
document, plus a `version` token (also sent as `ETag`).

Send the last version in `If-None-Match`; an unchanged snapshot answers 304.
Polling is limited per user by the `snapshot` throttle scope (30/minute by default).
""",
        responses={
            200: OpenApiResponse(description="Full snapshot"),
            304: OpenApiResponse(description="Nothing changed since the given version"),
        },
    )
    def get(self, request):
        snapshot = build_snapshot(request)
        version = snapshot_version(snapshot)
        etag = f'"{version}"'

        if request.headers.get("If-None-Match", "").strip() in {etag, version}:
            response = Response(status=status.HTTP_304_NOT_MODIFIED)
        else:
            response = Response({"version": version, **snapshot})
        response["ETag"] = etag
        return response
