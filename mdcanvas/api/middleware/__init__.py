"""API middleware for mdcanvas."""

from mdcanvas.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
