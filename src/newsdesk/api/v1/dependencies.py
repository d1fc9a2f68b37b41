"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from newsdesk.core.settings import settings
from newsdesk.db.session import get_db
from newsdesk.models import User
from newsdesk.services.admin import AdminModerationService
from newsdesk.services.comments import CommentService
from newsdesk.services.moderation import ModerationService, get_moderation_service
from newsdesk.services.reports import ReportService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _user_from_token(token: str, db: Session) -> User:
    """Resolve the user named by a bearer token's ``sub`` claim.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the JWT bearer token."""
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user when a token is supplied, else None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_admin_user(current_user: CurrentUserDep) -> User:
    """Require the authenticated user to be an administrator."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges required",
        )
    return current_user


AdminUserDep = Annotated[User, Depends(get_admin_user)]


def get_moderation_service_dep() -> ModerationService:
    """Return the moderation service bound to the shared keyword cache."""
    return get_moderation_service()


ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service_dep)]


def get_comment_service(db: SessionDep, moderation: ModerationServiceDep) -> CommentService:
    return CommentService(db, moderation)


def get_report_service(db: SessionDep, moderation: ModerationServiceDep) -> ReportService:
    return ReportService(db, moderation)


def get_admin_service(
    db: SessionDep, moderation: ModerationServiceDep
) -> AdminModerationService:
    return AdminModerationService(db, moderation)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
AdminServiceDep = Annotated[AdminModerationService, Depends(get_admin_service)]
