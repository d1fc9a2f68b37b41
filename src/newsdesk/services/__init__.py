"""Business logic services for the Newsdesk application."""

from .admin import AdminModerationService
from .comments import CommentService
from .keyword_cache import KeywordCache, KeywordSnapshot
from .moderation import ModerationResult, ModerationService
from .reports import ReportService
from .validation import InputValidationService

__all__ = [
    "AdminModerationService",
    "CommentService",
    "InputValidationService",
    "KeywordCache",
    "KeywordSnapshot",
    "ModerationResult",
    "ModerationService",
    "ReportService",
]
