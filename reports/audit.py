from apps.audit import AuditEvents, log_request_event


class ReportsAuditService:
    @staticmethod
    def log_report_submitted(request, report) -> None:
        log_request_event(
            request,
            action=AuditEvents.REPORT_SUBMITTED,
            object_type="daily_report",
            object_id=str(report.id),
            category="content",
            metadata={
                "date": report.date,
                "group_id": report.group_id,
                "work_items": len(report.work_items or []),
                "mood": report.mood,
            },
        )

    @staticmethod
    def log_mentions_notified(request, report, notifications) -> None:
        log_request_event(
            request,
            action=AuditEvents.MENTIONS_NOTIFIED,
            object_type="daily_report",
            object_id=str(report.id),
            category="content",
            metadata={"recipient_ids": [n.user_id for n in notifications]},
        )

    @staticmethod
    def log_like_toggled(request, report, liked: bool) -> None:
        log_request_event(
            request,
            action=AuditEvents.REPORT_LIKED if liked else AuditEvents.REPORT_UNLIKED,
            object_type="daily_report",
            object_id=str(report.id),
            category="content",
        )

    @staticmethod
    def log_summary_generated(request, day: str, report_count: int) -> None:
        log_request_event(
            request,
            action=AuditEvents.TEAM_SUMMARY_GENERATED,
            object_type="team_summary",
            object_id=day,
            category="content",
            metadata={"report_count": report_count},
        )
