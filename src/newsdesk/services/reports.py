"""Abuse report filing and resolution."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from newsdesk.db.time import utcnow
from newsdesk.models import User, UserReport
from newsdesk.repositories.comment_repo import CommentRepository
from newsdesk.repositories.report_repo import ReportRepository
from newsdesk.services.errors import (
    CommentNotFoundError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
    translate_store_errors,
)
from newsdesk.services.moderation import ModerationService, auto_hide_reason_for

logger = logging.getLogger(__name__)

ADMIN_HIDE_REASON = "Hidden by administrator after report review"


class ReportService:
    """Service handling the abuse report lifecycle.

    Reports are pending until an administrator resolves them, once.
    """

    def __init__(self, db: Session, moderation: ModerationService) -> None:
        self.db = db
        self.reports = ReportRepository(db)
        self.comments = CommentRepository(db)
        self.moderation = moderation

    def file_report(
        self,
        *,
        comment_id: int,
        reporter: User,
        reason: str,
        details: str | None = None,
    ) -> UserReport:
        """Record a report against a comment and apply the auto-hide threshold.

        Raises:
            CommentNotFoundError: The comment does not exist.
            StoreUnavailableError: The database did not respond in time.
        """
        with translate_store_errors("report creation"):
            comment = self.comments.get_by_id(comment_id)
            if comment is None:
                raise CommentNotFoundError(f"Comment {comment_id} not found")

            repeat = self.reports.has_reported(comment.id, reporter.id)
            report = self.reports.create(
                reporting_user_id=reporter.id,
                reported_user_id=comment.author_id,
                comment_id=comment.id,
                reason=reason,
                details=details,
            )
            # Each reporter counts once towards the auto-hide threshold.
            if not repeat:
                report_count = self.comments.increment_report_count(comment.id) or 0
                if self.moderation.should_auto_hide(report_count) and not comment.is_hidden:
                    self.comments.hide(comment, auto_hide_reason_for(report_count))
                    logger.info(
                        "Comment %s auto-hidden after %d reports", comment.id, report_count
                    )
            self.db.commit()

        logger.info(
            "User %s reported comment %s (%s)", reporter.id, comment_id, reason
        )
        return report

    def pending_reports(self, limit: int = 50) -> list[UserReport]:
        with translate_store_errors("pending report listing"):
            return self.reports.list_pending(limit)

    def resolve_report(
        self,
        report_id: int,
        *,
        admin: User,
        resolution: str,
        hide_comment: bool = False,
    ) -> UserReport:
        """Resolve a pending report, optionally hiding the reported comment.

        Raises:
            ReportNotFoundError: No such report.
            ReportAlreadyResolvedError: The report was resolved before.
        """
        with translate_store_errors("report resolution"):
            report = self.reports.get_by_id(report_id)
            if report is None:
                raise ReportNotFoundError(f"Report {report_id} not found")
            if report.is_resolved:
                raise ReportAlreadyResolvedError(f"Report {report_id} is already resolved")

            now = utcnow()
            if not self.reports.resolve(
                report_id,
                resolution=resolution,
                resolved_by_user_id=admin.id,
                resolved_at=now,
            ):
                self.db.rollback()
                raise ReportAlreadyResolvedError(f"Report {report_id} is already resolved")

            if hide_comment and report.comment_id is not None:
                comment = self.comments.get_by_id(report.comment_id)
                if comment is not None:
                    self.comments.mark_reviewed(
                        comment,
                        reviewer_id=admin.id,
                        reviewed_at=now,
                        hidden=True,
                        reason=ADMIN_HIDE_REASON,
                    )
            self.db.commit()
            self.db.refresh(report)

        logger.info(
            "Report %s resolved by administrator %s (comment hidden: %s)",
            report_id,
            admin.id,
            hide_comment,
        )
        return report
