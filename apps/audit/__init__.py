"""Unified audit facade package."""

from .events import AuditEvent, AuditEvents
from .services import client_ip, log_event, log_request_event

__all__ = ["log_event", "log_request_event", "client_ip", "AuditEvent", "AuditEvents"]
