"""Abuse report Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReportCreate(BaseModel):
    """Schema for reporting a comment."""

    reason: str = Field(..., min_length=1, max_length=200, description="Short reason")
    details: str | None = Field(None, max_length=2000, description="Optional details")


class ReportResolve(BaseModel):
    """Schema for an administrator resolving a report."""

    resolution: str = Field(..., min_length=1, max_length=2000)
    hide_comment: bool = Field(False, description="Hide the reported comment")


class ReportResponse(BaseModel):
    """Schema for report information returned by the API."""

    id: int
    reporting_user_id: int
    reported_user_id: int
    comment_id: int | None
    reason: str
    details: str | None
    created_at: datetime
    is_resolved: bool
    resolution: str | None
    resolved_at: datetime | None = None
    resolved_by_user_id: int | None = None

    model_config = ConfigDict(from_attributes=True)
