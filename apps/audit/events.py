from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEvent:
    action: str
    actor: Any = None
    object_type: str = ""
    object_id: str = ""
    level: str = "info"
    category: str = "system"
    ip_address: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class AuditEvents:
    # Accounts
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    REGISTRATION_SUCCESS = "registration_success"
    REGISTRATION_REJECTED = "registration_rejected"

    # Directory
    GROUP_CREATED = "group_created"
    MEMBER_GROUP_ASSIGNED = "member_group_assigned"

    # Reports
    REPORT_SUBMITTED = "report_submitted"
    REPORT_LIKED = "report_liked"
    REPORT_UNLIKED = "report_unliked"
    MENTIONS_NOTIFIED = "mentions_notified"
    TEAM_SUMMARY_GENERATED = "team_summary_generated"

    # Common
    NOTIFICATION_MARKED_READ = "notification_marked_read"
    NOTIFICATIONS_MARKED_READ_ALL = "notifications_marked_read_all"
    SETTINGS_UPDATED = "settings_updated"
