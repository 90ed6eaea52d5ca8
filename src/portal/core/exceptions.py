"""Exception handlers with request_id in responses.

Service results never raise; routes call ``unwrap`` which turns an ``Err``
into ``ServiceError`` so FastAPI can render it with the right status code.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.portal.core.logging import get_logger
from src.portal.core.result import Err, ErrorKind, Ok, Result

logger = get_logger(__name__)

STATUS_FOR_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.SELF_ACTION_FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.CAPACITY_EXCEEDED: 409,
    ErrorKind.ALREADY_REGISTERED: 409,
    ErrorKind.NOT_OPEN: 409,
    ErrorKind.EVENT_ALREADY_STARTED: 409,
    ErrorKind.STATE_CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    """Carries a service ``Err`` up to the exception handler."""

    def __init__(self, error: Err):
        super().__init__(str(error))
        self.error = error


def unwrap[T](result: Result[T]) -> T:
    """Return the payload of ``Ok`` or raise ``ServiceError`` for ``Err``."""
    if isinstance(result, Ok):
        return result.value
    raise ServiceError(result)


def _error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "kind": kind,
            "message": message,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _error_response(
            STATUS_FOR_KIND[exc.error.kind], exc.error.kind.value, exc.error.message
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'Invalid request')}" if location else "Invalid request"
        return _error_response(422, ErrorKind.VALIDATION_ERROR.value, message)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return _error_response(500, ErrorKind.INTERNAL.value, "Internal error")
