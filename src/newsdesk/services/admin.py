"""Administrator actions on keyword rules and shadow bans."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from newsdesk.models import ModerationKeyword, User
from newsdesk.repositories.keyword_repo import KeywordRepository
from newsdesk.services.errors import UserNotFoundError, translate_store_errors
from newsdesk.services.moderation import ModerationService

logger = logging.getLogger(__name__)


class AdminModerationService:
    """Keyword maintenance and shadow-ban management.

    Every keyword write invalidates the keyword cache so new rules apply to the
    next submission instead of waiting for the cache to expire.
    """

    def __init__(self, db: Session, moderation: ModerationService) -> None:
        self.db = db
        self.keywords = KeywordRepository(db)
        self.moderation = moderation

    def list_keywords(self, include_inactive: bool = False) -> list[ModerationKeyword]:
        with translate_store_errors("keyword listing"):
            return self.keywords.list_keywords(include_inactive=include_inactive)

    def add_keyword(
        self,
        *,
        keyword: str,
        action: str,
        replacement: str | None,
        admin: User,
    ) -> ModerationKeyword:
        """Create or replace a keyword rule.

        Raises:
            ValueError: If the rule is malformed.
        """
        with translate_store_errors("keyword update"):
            row = self.keywords.upsert_keyword(
                keyword=keyword,
                action=action,
                replacement=replacement,
                created_by=admin.id,
            )
            self.db.commit()
        self.moderation.invalidate_keyword_cache()
        logger.info("Administrator %s set keyword %r to %s", admin.id, row.keyword, row.action)
        return row

    def remove_keyword(self, keyword: str, admin: User) -> bool:
        with translate_store_errors("keyword removal"):
            removed = self.keywords.deactivate_keyword(keyword)
            self.db.commit()
        if removed:
            self.moderation.invalidate_keyword_cache()
            logger.info("Administrator %s removed keyword %r", admin.id, keyword)
        return removed

    def invalidate_keyword_cache(self) -> None:
        self.moderation.invalidate_keyword_cache()

    def shadow_ban(
        self,
        user_id: int,
        *,
        admin: User,
        until: datetime | None = None,
        reason: str | None = None,
    ) -> User:
        """Shadow ban a user; without ``until`` the ban is permanent."""
        with translate_store_errors("shadow ban"):
            user = self.db.get(User, user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")
            user.is_shadow_banned = True
            user.shadow_banned_until = until
            user.shadow_ban_reason = reason
            self.db.commit()
        logger.info(
            "Administrator %s shadow banned user %s until %s",
            admin.id,
            user_id,
            until.isoformat() if until else "further notice",
        )
        return user

    def lift_shadow_ban(self, user_id: int, *, admin: User) -> User:
        with translate_store_errors("shadow ban removal"):
            user = self.db.get(User, user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")
            user.is_shadow_banned = False
            user.shadow_banned_until = None
            user.shadow_ban_reason = None
            self.db.commit()
        logger.info("Administrator %s lifted shadow ban on user %s", admin.id, user_id)
        return user
