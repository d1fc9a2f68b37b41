"""Administrator moderation endpoints for the Newsdesk API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from newsdesk.api.v1.dependencies import (
    AdminServiceDep,
    AdminUserDep,
    CommentServiceDep,
    ReportServiceDep,
)
from newsdesk.api.v1.errors import to_http_exception
from newsdesk.models import Comment, ModerationKeyword, User, UserReport
from newsdesk.schemas.comment import ModeratedCommentResponse
from newsdesk.schemas.moderation import (
    KeywordCreate,
    KeywordResponse,
    ShadowBanRequest,
    ShadowBanResponse,
)
from newsdesk.schemas.report import ReportResolve, ReportResponse
from newsdesk.services.errors import ModerationError

router = APIRouter(prefix="/admin", tags=["admin"])


def _moderated_comment(comment: Comment) -> ModeratedCommentResponse:
    return ModeratedCommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        author_id=comment.author_id,
        parent_comment_id=comment.parent_comment_id,
        content=comment.content,
        created_at=comment.created_at,
        is_hidden=comment.is_hidden,
        requires_review=comment.requires_review,
        state=comment.state.value,
        moderation_reason=comment.moderation_reason,
        report_count=comment.report_count,
        reviewed_at=comment.reviewed_at,
        reviewed_by_user_id=comment.reviewed_by_user_id,
    )


def _shadow_ban_state(user: User) -> ShadowBanResponse:
    return ShadowBanResponse(
        user_id=user.id,
        is_shadow_banned=user.is_shadow_banned,
        shadow_banned_until=user.shadow_banned_until,
        shadow_ban_reason=user.shadow_ban_reason,
    )


@router.get("/reports", response_model=list[ReportResponse])
async def list_pending_reports(
    _admin: AdminUserDep,
    reports: ReportServiceDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[UserReport]:
    """List unresolved abuse reports, newest first."""
    try:
        return reports.pending_reports(limit)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.post("/reports/{report_id}/resolve", response_model=ReportResponse)
async def resolve_report(
    report_id: int,
    payload: ReportResolve,
    admin: AdminUserDep,
    reports: ReportServiceDep,
) -> UserReport:
    """Resolve a pending report, optionally hiding the reported comment."""
    try:
        return reports.resolve_report(
            report_id,
            admin=admin,
            resolution=payload.resolution,
            hide_comment=payload.hide_comment,
        )
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.get("/review-queue", response_model=list[ModeratedCommentResponse])
async def get_review_queue(
    _admin: AdminUserDep,
    comments: CommentServiceDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[ModeratedCommentResponse]:
    """List visible comments flagged for review."""
    try:
        return [_moderated_comment(comment) for comment in comments.review_queue(limit)]
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.post("/comments/{comment_id}/approve", response_model=ModeratedCommentResponse)
async def approve_comment(
    comment_id: int,
    admin: AdminUserDep,
    comments: CommentServiceDep,
) -> ModeratedCommentResponse:
    """Clear a comment's review flag and make it visible."""
    try:
        return _moderated_comment(comments.approve_comment(comment_id, admin))
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.get("/keywords", response_model=list[KeywordResponse])
async def list_keywords(
    _admin: AdminUserDep,
    service: AdminServiceDep,
    include_inactive: bool = Query(False),
) -> list[ModerationKeyword]:
    """List keyword rules."""
    try:
        return service.list_keywords(include_inactive=include_inactive)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.post("/keywords", response_model=KeywordResponse, status_code=status.HTTP_201_CREATED)
async def add_keyword(
    payload: KeywordCreate,
    admin: AdminUserDep,
    service: AdminServiceDep,
) -> ModerationKeyword:
    """Add or replace a keyword rule; takes effect on the next submission."""
    try:
        return service.add_keyword(
            keyword=payload.keyword,
            action=payload.action,
            replacement=payload.replacement,
            admin=admin,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ModerationError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/keywords/{keyword}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_keyword(
    keyword: str,
    admin: AdminUserDep,
    service: AdminServiceDep,
) -> None:
    """Deactivate a keyword rule."""
    try:
        removed = service.remove_keyword(keyword, admin)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Keyword not found")


@router.post("/keywords/invalidate", status_code=status.HTTP_204_NO_CONTENT)
async def invalidate_keyword_cache(
    _admin: AdminUserDep,
    service: AdminServiceDep,
) -> None:
    """Force the next submission to reload keyword rules."""
    service.invalidate_keyword_cache()


@router.post("/users/{user_id}/shadow-ban", response_model=ShadowBanResponse)
async def shadow_ban_user(
    user_id: int,
    payload: ShadowBanRequest,
    admin: AdminUserDep,
    service: AdminServiceDep,
) -> ShadowBanResponse:
    """Shadow ban a user until a given time, or permanently."""
    try:
        user = service.shadow_ban(
            user_id,
            admin=admin,
            until=payload.until,
            reason=payload.reason,
        )
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
    return _shadow_ban_state(user)


@router.delete("/users/{user_id}/shadow-ban", response_model=ShadowBanResponse)
async def lift_shadow_ban(
    user_id: int,
    admin: AdminUserDep,
    service: AdminServiceDep,
) -> ShadowBanResponse:
    """Lift a user's shadow ban."""
    try:
        user = service.lift_shadow_ban(user_id, admin=admin)
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
    return _shadow_ban_state(user)
