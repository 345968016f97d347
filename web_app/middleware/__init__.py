"""Middleware for URL shortener web app."""

from .logging import LoggingMiddleware
from .timeout import TimeoutMiddleware

__all__ = ["LoggingMiddleware", "TimeoutMiddleware"]
