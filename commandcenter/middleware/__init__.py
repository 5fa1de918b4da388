"""Middleware package."""

from commandcenter.middleware.logging import LoggingMiddleware, configure_logging
from commandcenter.middleware.request_id import RequestIDMiddleware

__all__ = ["LoggingMiddleware", "RequestIDMiddleware", "configure_logging"]
