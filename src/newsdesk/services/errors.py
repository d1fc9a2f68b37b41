"""Exceptions raised by the moderation and comment services."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError

logger = logging.getLogger(__name__)


class ModerationError(RuntimeError):
    """Base exception for moderation pipeline failures."""


class CommentValidationError(ModerationError):
    """Raised when submitted content fails input validation.

    The messages are meant to be shown to the submitter as-is.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class CommentBlockedError(ModerationError):
    """Raised when moderation decides the content must not be stored.

    This is a user-facing rejection, not a system fault.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class CommentNotFoundError(ModerationError):
    """Raised when a comment (or a reply's parent) does not exist."""


class PostNotFoundError(ModerationError):
    """Raised when comments are requested for a post that does not exist."""


class CommentPermissionError(ModerationError):
    """Raised when a user may not modify the comment they targeted."""


class CommentNotReviewableError(ModerationError):
    """Raised when approving a comment that is not awaiting review.

    Comments hidden because their author is shadow banned are never approvable.
    """


class UserNotFoundError(ModerationError):
    """Raised when an administrator targets an unknown user."""


class ReportNotFoundError(ModerationError):
    """Raised when an abuse report id is unknown."""


class ReportAlreadyResolvedError(ModerationError):
    """Raised when resolving a report that is already resolved."""


class KeywordStoreUnavailableError(ModerationError):
    """Raised when keywords cannot be loaded and the cache is configured to fail closed."""


class StoreUnavailableError(ModerationError):
    """Raised when persistence times out or the database is unreachable.

    Callers should treat this as retryable.
    """


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise database timeouts and connectivity failures as ``StoreUnavailableError``."""
    try:
        yield
    except (OperationalError, SQLAlchemyTimeoutError) as exc:
        logger.error("Store unavailable during %s: %s", operation, exc)
        raise StoreUnavailableError(f"Storage unavailable during {operation}") from exc
