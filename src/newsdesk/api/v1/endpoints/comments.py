"""Comment endpoints for the Newsdesk API."""

from __future__ import annotations

from fastapi import APIRouter, status

from newsdesk.api.v1.dependencies import CommentServiceDep, CurrentUserDep, OptionalUserDep
from newsdesk.api.v1.errors import to_http_exception
from newsdesk.models import Comment
from newsdesk.schemas.comment import CommentCreate, CommentResponse
from newsdesk.services.errors import ModerationError

router = APIRouter(tags=["comments"])


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    comments: CommentServiceDep,
) -> Comment:
    """Submit a comment or reply.

    Flagged comments are stored and shown while they wait for review. Blocked
    comments are rejected with the reason.
    """
    try:
        submission = comments.submit_comment(
            post_id=post_id,
            author=current_user,
            content=payload.content,
            parent_comment_id=payload.parent_comment_id,
        )
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
    return submission.comment


@router.get("/posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: int,
    viewer: OptionalUserDep,
    comments: CommentServiceDep,
) -> list[Comment]:
    """List the comments on a post that the viewer is allowed to see."""
    try:
        return comments.list_comments(post_id, viewer)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.get("/comments/{comment_id}/replies", response_model=list[CommentResponse])
async def list_replies(
    comment_id: int,
    viewer: OptionalUserDep,
    comments: CommentServiceDep,
) -> list[Comment]:
    """List direct replies to a comment, omitting hidden ones from other authors."""
    try:
        return comments.list_replies(comment_id, viewer)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    comments: CommentServiceDep,
) -> None:
    """Delete a comment. Authors may delete their own; administrators any."""
    try:
        comments.delete_comment(comment_id, current_user)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
