"""Translation of service exceptions into HTTP errors."""

from fastapi import HTTPException, status

from newsdesk.services.errors import (
    CommentBlockedError,
    CommentNotFoundError,
    CommentNotReviewableError,
    CommentPermissionError,
    CommentValidationError,
    KeywordStoreUnavailableError,
    ModerationError,
    PostNotFoundError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
    StoreUnavailableError,
    UserNotFoundError,
)

RETRY_AFTER_SECONDS = "5"

_NOT_FOUND = (CommentNotFoundError, PostNotFoundError, ReportNotFoundError, UserNotFoundError)
_UNAVAILABLE = (StoreUnavailableError, KeywordStoreUnavailableError)


def to_http_exception(exc: ModerationError) -> HTTPException:
    """Map a service exception to the response the client should see."""
    if isinstance(exc, CommentValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, CommentBlockedError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.reason,
        )
    if isinstance(exc, _NOT_FOUND):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, CommentPermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, (ReportAlreadyResolvedError, CommentNotReviewableError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, _UNAVAILABLE):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable, please retry",
            headers={"Retry-After": RETRY_AFTER_SECONDS},
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Moderation failed",
    )
