"""HTTP middlewares."""

from src.portal.api.middlewares.logging_context import logging_context_middleware
from src.portal.api.middlewares.request_context import request_context_middleware

__all__ = [
    "logging_context_middleware",
    "request_context_middleware",
]
