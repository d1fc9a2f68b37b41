"""Models holding administrator-maintained moderation keywords."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from newsdesk.db.session import Base
from newsdesk.db.time import utcnow

KEYWORD_ACTION_BLOCK = "block"
KEYWORD_ACTION_FLAG = "flag"
KEYWORD_ACTION_REPLACE = "replace"

KEYWORD_ACTIONS = (KEYWORD_ACTION_BLOCK, KEYWORD_ACTION_FLAG, KEYWORD_ACTION_REPLACE)


class ModerationKeyword(Base):
    """Single keyword rule; one row per lowercased keyword."""

    __tablename__ = "moderation_keyword"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keyword: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # One of KEYWORD_ACTIONS.
    action: Mapped[str] = mapped_column(Text, nullable=False)
    replacement: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
