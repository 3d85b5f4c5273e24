"""Middleware package."""
from eventsync.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
