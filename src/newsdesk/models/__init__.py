"""SQLAlchemy models for the Newsdesk application."""

from .comment import Comment, CommentState
from .keyword import ModerationKeyword
from .post import Post
from .report import UserReport
from .user import User

__all__ = [
    "Comment",
    "CommentState",
    "ModerationKeyword",
    "Post",
    "UserReport",
    "User",
]
