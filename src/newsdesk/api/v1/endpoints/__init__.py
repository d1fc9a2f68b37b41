"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .comments import router as comments_router
from .reports import router as reports_router

__all__ = [
    "admin_router",
    "comments_router",
    "reports_router",
]
