"""Comment submission, listing and deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from newsdesk.db.time import utcnow
from newsdesk.models import Comment, CommentState, Post, User
from newsdesk.repositories.comment_repo import CommentRepository
from newsdesk.services.errors import (
    CommentBlockedError,
    CommentNotFoundError,
    CommentNotReviewableError,
    CommentPermissionError,
    CommentValidationError,
    PostNotFoundError,
    translate_store_errors,
)
from newsdesk.services.moderation import (
    ModerationResult,
    ModerationService,
    is_shadow_ban_active,
)
from newsdesk.services.validation import InputValidationService

logger = logging.getLogger(__name__)

SHADOW_BAN_REASON = "Shadow banned"


@dataclass(frozen=True)
class CommentSubmission:
    """Stored comment together with the decision that produced it."""

    comment: Comment
    result: ModerationResult


class CommentService:
    """Service running comment submissions through validation and moderation."""

    def __init__(
        self,
        db: Session,
        moderation: ModerationService,
        validation: InputValidationService | None = None,
    ) -> None:
        self.db = db
        self.comments = CommentRepository(db)
        self.moderation = moderation
        self.validation = validation or InputValidationService()

    def submit_comment(
        self,
        *,
        post_id: int,
        author: User,
        content: str,
        parent_comment_id: int | None = None,
    ) -> CommentSubmission:
        """Validate, moderate and persist a new comment or reply.

        Raises:
            CommentValidationError: The content failed input validation.
            PostNotFoundError: The post does not exist.
            CommentNotFoundError: The parent comment is missing or on another post.
            CommentBlockedError: Moderation rejected the content; nothing is stored.
            StoreUnavailableError: The database did not respond in time.
        """
        validation = self.validation.validate_comment(content)
        if not validation.is_valid:
            raise CommentValidationError(validation.errors)

        with translate_store_errors("comment lookup"):
            if self.db.get(Post, post_id) is None:
                raise PostNotFoundError(f"Post {post_id} not found")
            if parent_comment_id is not None:
                parent = self.comments.get_by_id(parent_comment_id)
                if parent is None or parent.post_id != post_id:
                    raise CommentNotFoundError(f"Comment {parent_comment_id} not found")

        result = self.moderation.moderate(content, author, existing_report_count=0)
        if result.is_blocked:
            raise CommentBlockedError(result.block_reason or "Comment was rejected")

        reason = SHADOW_BAN_REASON if result.is_shadow_banned else result.moderation_reason
        with translate_store_errors("comment creation"):
            comment = self.comments.create(
                content=result.moderated_content,
                post_id=post_id,
                author_id=author.id,
                parent_comment_id=parent_comment_id,
                is_hidden=not result.is_visible,
                requires_review=result.requires_review,
                moderation_reason=reason,
            )
            self.db.commit()

        if result.requires_review:
            logger.info("Comment %s queued for review: %s", comment.id, result.flag_reason)
        if result.is_auto_hidden:
            logger.info("Comment %s hidden on creation: %s", comment.id, result.auto_hide_reason)
        return CommentSubmission(comment=comment, result=result)

    def list_comments(self, post_id: int, viewer: User | None = None) -> list[Comment]:
        """Return the comments a viewer may see on a post."""
        with translate_store_errors("comment listing"):
            if self.db.get(Post, post_id) is None:
                raise PostNotFoundError(f"Post {post_id} not found")
            return self.comments.list_for_post(post_id, viewer.id if viewer else None)

    def list_replies(self, comment_id: int, viewer: User | None = None) -> list[Comment]:
        """Return the direct replies a viewer may see."""
        with translate_store_errors("reply listing"):
            return self.comments.list_replies(comment_id, viewer.id if viewer else None)

    def delete_comment(self, comment_id: int, user: User) -> CommentState:
        """Delete a comment as its author or as an administrator.

        Replies are left in place with a dangling parent reference.

        Raises:
            CommentNotFoundError: No such comment.
            CommentPermissionError: The user is neither the author nor an admin.
        """
        with translate_store_errors("comment deletion"):
            comment = self.comments.get_by_id(comment_id)
            if comment is None:
                raise CommentNotFoundError(f"Comment {comment_id} not found")
            if not user.is_admin and comment.author_id != user.id:
                raise CommentPermissionError("You can only delete your own comments")
            self.comments.delete(comment)
            self.db.commit()

        logger.info(
            "Comment %s deleted by %s %s",
            comment_id,
            "administrator" if user.is_admin else "author",
            user.id,
        )
        return CommentState.DELETED

    def approve_comment(self, comment_id: int, admin: User) -> Comment:
        """Clear the review flag, make the comment visible and reset its reports.

        Only flagged or hidden comments can be approved. Comments from
        shadow-banned authors stay hidden.

        Raises:
            CommentNotFoundError: No such comment.
            CommentNotReviewableError: The comment is not awaiting review or
                belongs to a shadow-banned author.
        """
        with translate_store_errors("comment approval"):
            comment = self.comments.get_by_id(comment_id)
            if comment is None:
                raise CommentNotFoundError(f"Comment {comment_id} not found")
            author = self.db.get(User, comment.author_id)
            if comment.moderation_reason == SHADOW_BAN_REASON or (
                author is not None and is_shadow_ban_active(author)
            ):
                raise CommentNotReviewableError(
                    f"Comment {comment_id} was posted under a shadow ban"
                )
            if not (comment.requires_review or comment.is_hidden):
                raise CommentNotReviewableError(f"Comment {comment_id} is not awaiting review")
            self.comments.mark_reviewed(
                comment,
                reviewer_id=admin.id,
                reviewed_at=utcnow(),
                hidden=False,
                reason=None,
            )
            self.comments.reset_report_count(comment)
            self.db.commit()
        logger.info("Comment %s approved by administrator %s", comment_id, admin.id)
        return comment

    def review_queue(self, limit: int = 50) -> list[Comment]:
        with translate_store_errors("review queue"):
            return self.comments.list_review_queue(limit)
