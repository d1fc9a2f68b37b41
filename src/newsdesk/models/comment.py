"""SQLAlchemy models for reader comments."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from newsdesk.db.session import Base
from newsdesk.db.time import utcnow


class Comment(Base):
    """Comment or reply attached to a post.

    Replies are stored flat and point at their parent by id. The parent column
    carries no foreign key; deleting a comment leaves its replies
    with a dangling reference.
    """

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_post_id", "post_id"),
        Index("ix_comment_parent_comment_id", "parent_comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    parent_comment_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Written once from the moderation decision, later only by an administrator.
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    moderation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )

    report_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def state(self) -> CommentState:
        return CommentState.from_flags(
            is_hidden=self.is_hidden,
            requires_review=self.requires_review,
        )


class CommentState(str, Enum):
    """Lifecycle state derived from a comment's moderation flags."""

    VISIBLE = "visible"
    FLAGGED_FOR_REVIEW = "flagged_for_review"
    HIDDEN = "hidden"
    DELETED = "deleted"

    @classmethod
    def from_flags(cls, *, is_hidden: bool, requires_review: bool) -> CommentState:
        if is_hidden:
            return cls.HIDDEN
        if requires_review:
            return cls.FLAGGED_FOR_REVIEW
        return cls.VISIBLE
