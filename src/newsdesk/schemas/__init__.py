"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, ModeratedCommentResponse
from .moderation import KeywordCreate, KeywordResponse, ShadowBanRequest, ShadowBanResponse
from .report import ReportCreate, ReportResolve, ReportResponse

__all__ = [
    "CommentCreate", "CommentResponse", "ModeratedCommentResponse",
    "KeywordCreate", "KeywordResponse", "ShadowBanRequest", "ShadowBanResponse",
    "ReportCreate", "ReportResolve", "ReportResponse",
]
