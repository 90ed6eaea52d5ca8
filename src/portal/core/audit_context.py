"""Audit context management using contextvars.

Stores request metadata (client IP, request id) for the audit service, so
audit entries can be stamped without threading the HTTP request through
every service call.
"""

from contextvars import ContextVar
from dataclasses import dataclass

_audit_context: ContextVar["AuditContext | None"] = ContextVar("audit_context", default=None)


@dataclass(frozen=True)
class AuditContext:
    """Immutable audit context for the current request."""

    ip_address: str | None = None
    request_id: str | None = None


def set_audit_context(ip_address: str | None = None, request_id: str | None = None) -> None:
    """Set audit context for the current request."""
    _audit_context.set(AuditContext(ip_address=ip_address, request_id=request_id))


def get_audit_context() -> AuditContext | None:
    """Get the current audit context."""
    return _audit_context.get()


def clear_audit_context() -> None:
    """Clear the audit context."""
    _audit_context.set(None)


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """Extract client IP from X-Forwarded-For header or client host.

    X-Forwarded-For may list several hops; the first is the original client.
    """
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return client_host
