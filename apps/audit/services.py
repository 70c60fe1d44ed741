from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from .backends import (
    AccountsAuditBackend,
    AuditBackend,
    LoggingAuditBackend,
    NoopAuditBackend,
)
from .events import AuditEvent

logger = logging.getLogger(__name__)


class AuditService:
    """
    Unified entrypoint for audit logging.

    Backends (``AUDIT_PRIMARY_BACKEND``):
    - accounts (default): accounts.AuditLog table
    - logging: the "teamdaily.audit" logger
    - noop: discard

    ``AUDIT_MIRROR_TO_LOG`` additionally copies every event to the logger.
    """

    def __init__(self) -> None:
        self.primary_backend = self._build_backend(
            getattr(settings, "AUDIT_PRIMARY_BACKEND", "accounts")
        )
        self.mirror_backend = (
            LoggingAuditBackend()
            if getattr(settings, "AUDIT_MIRROR_TO_LOG", False)
            else None
        )

    def _build_backend(self, name: str) -> AuditBackend:
        if name == "accounts":
            return AccountsAuditBackend()
        if name == "logging":
            return LoggingAuditBackend()
        return NoopAuditBackend()

    def log(self, event: AuditEvent) -> None:
        try:
            self.primary_backend.write(event)
            if self.mirror_backend is not None:
                self.mirror_backend.write(event)
        except Exception:
            # Audit must not break the request.
            logger.exception("Audit write failed for %s", event.action)


def log_event(
    *,
    action: str,
    actor=None,
    object_type: str = "",
    object_id: str = "",
    level: str = "info",
    category: str = "system",
    ip_address: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> None:
    event = AuditEvent(
        action=action,
        actor=actor,
        object_type=object_type,
        object_id=object_id,
        level=level,
        category=category,
        ip_address=ip_address,
        metadata=metadata,
    )
    AuditService().log(event)


def client_ip(request) -> Optional[str]:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def log_request_event(request, *, action: str, actor=None, **fields) -> None:
    """``log_event`` with the caller's IP, and the request user as actor unless given."""
    if actor is None and getattr(request.user, "is_authenticated", False):
        actor = request.user
    log_event(action=action, actor=actor, ip_address=client_ip(request), **fields)
