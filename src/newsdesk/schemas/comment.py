"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for submitting a comment or a reply."""

    # Length rules live in InputValidationService so users get readable messages.
    content: str = Field(..., description="Comment text")
    parent_comment_id: int | None = Field(None, description="Parent comment ID for replies")


class CommentResponse(BaseModel):
    """Public view of a comment.

    Moderation fields are left out so authors cannot tell whether their
    comment was suppressed.
    """

    id: int
    post_id: int
    author_id: int
    parent_comment_id: int | None
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModeratedCommentResponse(CommentResponse):
    """Administrator view including moderation bookkeeping."""

    is_hidden: bool
    requires_review: bool
    state: str
    moderation_reason: str | None
    report_count: int
    reviewed_at: datetime | None
    reviewed_by_user_id: int | None
