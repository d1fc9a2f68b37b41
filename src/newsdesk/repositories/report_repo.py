"""Data access helpers for abuse reports."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from newsdesk.models.report import UserReport

__all__ = ["ReportRepository"]


class ReportRepository:
    """Thin wrapper around database access for abuse reports."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, report_id: int) -> UserReport | None:
        return self.session.get(UserReport, report_id)

    def create(
        self,
        *,
        reporting_user_id: int,
        reported_user_id: int,
        comment_id: int | None,
        reason: str,
        details: str | None,
    ) -> UserReport:
        report = UserReport(
            reporting_user_id=reporting_user_id,
            reported_user_id=reported_user_id,
            comment_id=comment_id,
            reason=reason,
            details=details,
            is_resolved=False,
        )
        self.session.add(report)
        self.session.flush()
        return report

    def has_reported(self, comment_id: int, reporting_user_id: int) -> bool:
        """Return True if the user already reported this comment."""
        stmt = (
            select(UserReport.id)
            .where(
                UserReport.comment_id == comment_id,
                UserReport.reporting_user_id == reporting_user_id,
            )
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def list_pending(self, limit: int = 50) -> list[UserReport]:
        """Return unresolved reports, newest first."""
        stmt = (
            select(UserReport)
            .where(UserReport.is_resolved.is_(False))
            .order_by(UserReport.created_at.desc(), UserReport.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def resolve(
        self,
        report_id: int,
        *,
        resolution: str,
        resolved_by_user_id: int,
        resolved_at: datetime,
    ) -> bool:
        """Mark a pending report resolved.

        The pending check is part of the UPDATE, so two administrators racing
        to resolve the same report cannot both succeed. Returns False when the
        report was not pending.
        """
        result = self.session.execute(
            update(UserReport)
            .where(UserReport.id == report_id, UserReport.is_resolved.is_(False))
            .values(
                is_resolved=True,
                resolution=resolution,
                resolved_by_user_id=resolved_by_user_id,
                resolved_at=resolved_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        report = self.session.get(UserReport, report_id)
        if report is not None:
            self.session.refresh(report)
        return True
