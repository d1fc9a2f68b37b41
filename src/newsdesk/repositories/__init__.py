"""Repositories wrapping SQLAlchemy access for Newsdesk entities."""

from .comment_repo import CommentRepository
from .keyword_repo import KeywordRepository, KeywordRule
from .report_repo import ReportRepository

__all__ = ["CommentRepository", "KeywordRepository", "KeywordRule", "ReportRepository"]
