from apps.audit import AuditEvents, log_request_event


class AccountsAuditService:
    """Auth and directory events. Failed attempts are recorded without an actor."""

    @staticmethod
    def log_login_success(request, user) -> None:
        log_request_event(
            request,
            action=AuditEvents.LOGIN_SUCCESS,
            actor=user,
            object_type="user",
            object_id=str(user.id),
            category="auth",
        )

    @staticmethod
    def log_login_failed(request, email: str) -> None:
        log_request_event(
            request,
            action=AuditEvents.LOGIN_FAILED,
            object_type="user",
            level="warning",
            category="auth",
            metadata={"email": email},
        )

    @staticmethod
    def log_registration(request, user) -> None:
        log_request_event(
            request,
            action=AuditEvents.REGISTRATION_SUCCESS,
            actor=user,
            object_type="user",
            object_id=str(user.id),
            category="auth",
            metadata={"role": user.role},
        )

    @staticmethod
    def log_registration_rejected(request, email: str, reason: str) -> None:
        log_request_event(
            request,
            action=AuditEvents.REGISTRATION_REJECTED,
            object_type="user",
            level="warning",
            category="auth",
            metadata={"email": email, "reason": reason},
        )

    @staticmethod
    def log_group_created(request, group) -> None:
        log_request_event(
            request,
            action=AuditEvents.GROUP_CREATED,
            object_type="group",
            object_id=str(group.id),
            category="user",
            metadata={"name": group.name},
        )

    @staticmethod
    def log_member_group_assigned(request, member) -> None:
        log_request_event(
            request,
            action=AuditEvents.MEMBER_GROUP_ASSIGNED,
            object_type="user",
            object_id=str(member.id),
            category="user",
            metadata={"group_id": member.group_id},
        )
