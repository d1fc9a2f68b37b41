"""Data access helpers for moderation keyword rules."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from newsdesk.db.session import SessionLocal
from newsdesk.models.keyword import KEYWORD_ACTIONS, ModerationKeyword

__all__ = ["KeywordRepository", "KeywordRule", "load_keywords_from_database"]


@dataclass(frozen=True)
class KeywordRule:
    """Plain copy of a keyword row, detached from any session."""

    keyword: str
    action: str
    replacement: str | None = None


class KeywordRepository:
    """Thin wrapper around database access for keyword rules."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def load_active_keywords(self) -> list[KeywordRule]:
        """Return every active rule in insertion order."""
        rows = self.session.execute(
            select(ModerationKeyword)
            .where(ModerationKeyword.is_active.is_(True))
            .order_by(ModerationKeyword.id)
        ).scalars()
        return [
            KeywordRule(keyword=row.keyword, action=row.action, replacement=row.replacement)
            for row in rows
        ]

    def list_keywords(self, include_inactive: bool = False) -> list[ModerationKeyword]:
        stmt = select(ModerationKeyword).order_by(ModerationKeyword.keyword)
        if not include_inactive:
            stmt = stmt.where(ModerationKeyword.is_active.is_(True))
        return list(self.session.execute(stmt).scalars())

    def get(self, keyword: str) -> ModerationKeyword | None:
        return self.session.execute(
            select(ModerationKeyword).where(ModerationKeyword.keyword == keyword.strip().lower())
        ).scalar_one_or_none()

    def upsert_keyword(
        self,
        *,
        keyword: str,
        action: str,
        replacement: str | None,
        created_by: int | None,
    ) -> ModerationKeyword:
        """Create the rule or replace the existing rule for the same keyword.

        Raises:
            ValueError: If the action is unknown or a replace rule has no replacement.
        """
        normalized = keyword.strip().lower()
        action = action.strip().lower()
        if not normalized:
            raise ValueError("Keyword cannot be empty")
        if action not in KEYWORD_ACTIONS:
            raise ValueError(f"Unknown keyword action: {action}")
        if action == "replace" and not replacement:
            raise ValueError("Replace rules need a replacement")

        row = self.get(normalized)
        if row is None:
            row = ModerationKeyword(keyword=normalized, action=action)
            self.session.add(row)
        row.action = action
        row.replacement = replacement if action == "replace" else None
        row.is_active = True
        row.created_by = created_by
        self.session.flush()
        return row

    def deactivate_keyword(self, keyword: str) -> bool:
        """Stop applying a rule; returns False when no active rule exists."""
        row = self.get(keyword)
        if row is None or not row.is_active:
            return False
        row.is_active = False
        self.session.flush()
        return True


def load_keywords_from_database() -> list[KeywordRule]:
    """Load active rules using a short-lived session of its own."""
    db = SessionLocal()
    try:
        return KeywordRepository(db).load_active_keywords()
    finally:
        db.close()
