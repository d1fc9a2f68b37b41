"""Data access helpers for working with comments."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import ColumnElement, or_, select, update
from sqlalchemy.orm import Session

from newsdesk.models.comment import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.get(Comment, comment_id)

    def create(
        self,
        *,
        content: str,
        post_id: int,
        author_id: int,
        parent_comment_id: int | None,
        is_hidden: bool,
        requires_review: bool,
        moderation_reason: str | None,
    ) -> Comment:
        """Insert a new comment carrying its moderation flags."""
        comment = Comment(
            content=content,
            post_id=post_id,
            author_id=author_id,
            parent_comment_id=parent_comment_id,
            is_hidden=is_hidden,
            requires_review=requires_review,
            moderation_reason=moderation_reason,
            report_count=0,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def delete(self, comment: Comment) -> None:
        self.session.delete(comment)
        self.session.flush()

    @staticmethod
    def _visible_to(viewer_id: int | None) -> ColumnElement[bool]:
        """Visibility clause: hidden comments are shown only to their author."""
        visibility = Comment.is_hidden.is_(False)
        if viewer_id is not None:
            visibility = or_(visibility, Comment.author_id == viewer_id)
        return visibility

    def list_for_post(self, post_id: int, viewer_id: int | None = None) -> list[Comment]:
        """Return a post's comments oldest first, omitting hidden ones.

        A viewer still sees their own hidden comments.
        """
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id, self._visible_to(viewer_id))
            .order_by(Comment.created_at, Comment.id)
        )
        return list(self.session.execute(stmt).scalars())

    def list_replies(self, comment_id: int, viewer_id: int | None = None) -> list[Comment]:
        """Return direct replies oldest first, with the same visibility as listings."""
        stmt = (
            select(Comment)
            .where(Comment.parent_comment_id == comment_id, self._visible_to(viewer_id))
            .order_by(Comment.created_at, Comment.id)
        )
        return list(self.session.execute(stmt).scalars())

    def list_review_queue(self, limit: int = 50) -> list[Comment]:
        """Return visible comments waiting for an administrator, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.requires_review.is_(True), Comment.is_hidden.is_(False))
            .order_by(Comment.created_at, Comment.id)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def increment_report_count(self, comment_id: int) -> int | None:
        """Atomically add one report and return the new count.

        The increment happens inside the UPDATE so concurrent reports cannot
        overwrite each other. Returns None when the comment does not exist.
        """
        result = self.session.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(report_count=Comment.report_count + 1)
            .returning(Comment.report_count)
            .execution_options(synchronize_session=False)
        )
        count = result.scalar_one_or_none()
        if count is not None:
            comment = self.session.get(Comment, comment_id)
            if comment is not None:
                self.session.refresh(comment, attribute_names=["report_count"])
        return count

    def hide(self, comment: Comment, reason: str | None) -> Comment:
        """Hide a comment; hiding an already hidden comment keeps its first reason."""
        if not comment.is_hidden:
            comment.is_hidden = True
            comment.moderation_reason = reason or comment.moderation_reason
        self.session.flush()
        return comment

    def reset_report_count(self, comment: Comment) -> Comment:
        comment.report_count = 0
        self.session.flush()
        return comment

    def mark_reviewed(
        self,
        comment: Comment,
        *,
        reviewer_id: int,
        reviewed_at: datetime,
        hidden: bool,
        reason: str | None = None,
    ) -> Comment:
        """Record an administrator decision on a comment."""
        comment.is_hidden = hidden
        comment.requires_review = False
        if reason is not None:
            comment.moderation_reason = reason
        comment.reviewed_at = reviewed_at
        comment.reviewed_by_user_id = reviewer_id
        self.session.flush()
        return comment
