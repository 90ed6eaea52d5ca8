"""Request context middleware - captures request metadata for audit logging."""

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.portal.core.audit_context import clear_audit_context, get_client_ip, set_audit_context


async def request_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Capture the client IP and correlation ID for audit entries."""
    clear_audit_context()
    client_host = request.client.host if request.client else None
    set_audit_context(
        ip_address=get_client_ip(request.headers.get("x-forwarded-for"), client_host),
        request_id=correlation_id.get(),
    )
    try:
        return await call_next(request)
    finally:
        clear_audit_context()
