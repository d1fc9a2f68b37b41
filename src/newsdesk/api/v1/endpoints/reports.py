"""Abuse report endpoints for the Newsdesk API."""

from __future__ import annotations

from fastapi import APIRouter, status

from newsdesk.api.v1.dependencies import CurrentUserDep, ReportServiceDep
from newsdesk.api.v1.errors import to_http_exception
from newsdesk.models import UserReport
from newsdesk.schemas.report import ReportCreate, ReportResponse
from newsdesk.services.errors import ModerationError

router = APIRouter(tags=["reports"])


@router.post(
    "/comments/{comment_id}/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_comment(
    comment_id: int,
    payload: ReportCreate,
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> UserReport:
    """Report a comment for administrator attention."""
    try:
        return reports.file_report(
            comment_id=comment_id,
            reporter=current_user,
            reason=payload.reason,
            details=payload.details,
        )
    except ModerationError as exc:
        raise to_http_exception(exc) from exc
