"""Web interface for DocMan.

FastAPI application exposing review assignments, document review state,
maintenance operations and in-app notifications.
"""

from __future__ import annotations

from docman.web.app import create_app
from docman.web.middleware import RequestLoggingMiddleware

__all__ = [
    "create_app",
    "RequestLoggingMiddleware",
]
