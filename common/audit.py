from apps.audit import AuditEvents, log_request_event


class CommonAuditService:
    @staticmethod
    def log_notification_marked_read(request, notification) -> None:
        log_request_event(
            request,
            action=AuditEvents.NOTIFICATION_MARKED_READ,
            object_type="notification",
            object_id=str(notification.id),
            category="content",
            metadata={"type": notification.type, "report_id": notification.report_id},
        )

    @staticmethod
    def log_notifications_marked_read_all(request, updated_count: int) -> None:
        log_request_event(
            request,
            action=AuditEvents.NOTIFICATIONS_MARKED_READ_ALL,
            object_type="notification",
            category="content",
            metadata={"updated_count": updated_count},
        )

    @staticmethod
    def log_settings_updated(request, changed_fields) -> None:
        log_request_event(
            request,
            action=AuditEvents.SETTINGS_UPDATED,
            object_type="app_settings",
            object_id="1",
            category="system",
            metadata={"changed_fields": sorted(changed_fields)},
        )
