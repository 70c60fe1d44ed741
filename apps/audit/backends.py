from __future__ import annotations

import logging
from typing import Protocol

from .events import AuditEvent


class AuditBackend(Protocol):
    def write(self, event: AuditEvent) -> None:
        ...


class AccountsAuditBackend:
    """
    Primary backend.
    Writes to accounts.AuditLog.
    """

    def write(self, event: AuditEvent) -> None:
        from accounts.models import AuditLog

        AuditLog.log(
            action=event.action,
            user=event.actor,
            object_type=event.object_type,
            object_id=event.object_id,
            level=event.level,
            category=event.category,
            ip_address=event.ip_address,
            metadata=event.metadata,
        )


class LoggingAuditBackend:
    """
    Mirrors audit events into the "teamdaily.audit" logger.
    Useful when the database is not the place to keep the trail.
    """

    LEVELS = {
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def __init__(self) -> None:
        self.logger = logging.getLogger("teamdaily.audit")

    def write(self, event: AuditEvent) -> None:
        self.logger.log(
            self.LEVELS.get(event.level, logging.INFO),
            "%s %s:%s actor=%s",
            event.action,
            event.object_type,
            event.object_id,
            getattr(event.actor, "pk", None),
            extra={"audit_metadata": event.metadata or {}},
        )


class NoopAuditBackend:
    def write(self, event: AuditEvent) -> None:  # pragma: no cover
        return None
