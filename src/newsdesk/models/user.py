"""SQLAlchemy models for site users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from newsdesk.db.session import Base
from newsdesk.db.time import utcnow


class User(Base):
    """Registered reader or author.

    Only the fields the moderation pipeline reads are modelled here; credentials
    and profile data belong to the account service.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # A null end date while banned means the ban never expires.
    is_shadow_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shadow_banned_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    shadow_ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
