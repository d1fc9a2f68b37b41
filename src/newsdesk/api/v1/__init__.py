"""Version 1 API endpoints."""

from .endpoints import admin_router, comments_router, reports_router

__all__ = [
    "admin_router",
    "comments_router",
    "reports_router",
]
