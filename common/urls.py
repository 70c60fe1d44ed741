from django.urls import path
from .views import (
    AppSettingsAPIView,
    MarkAllNotificationsReadAPIView,
    MarkNotificationReadAPIView,
    NotificationsAPIView,
    SnapshotAPIView,
)


urlpatterns = [
    path("notifications/", NotificationsAPIView.as_view(), name="notifications"),
    path("notifications/<int:pk>/read/", MarkNotificationReadAPIView.as_view(), name="notification-read"),
    path("notifications/read-all/", MarkAllNotificationsReadAPIView.as_view(), name="notifications-read-all"),
    path("settings/", AppSettingsAPIView.as_view(), name="app-settings"),
    path("snapshot/", SnapshotAPIView.as_view(), name="snapshot"),
]
