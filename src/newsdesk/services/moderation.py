"""Comment moderation for Newsdesk.

``ModerationService.moderate`` turns one comment submission into a
``ModerationResult``. The decision depends only on the content, the author's
shadow-ban fields, the comment's report count and the keyword snapshot handed
out by the keyword cache.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from newsdesk.core.settings import settings
from newsdesk.db.time import as_utc, utcnow
from newsdesk.models.comment import CommentState
from newsdesk.services import spam
from newsdesk.services.keyword_cache import KeywordCache, KeywordSnapshot, get_keyword_cache

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"\b[\w']+\b")

BLOCK_REASON = "Comment contains prohibited content"
FLAGGED_KEYWORD_REASON = "Contains flagged keywords"
SPAM_REASON = "Likely spam"


class ModerationSubject(Protocol):
    """The author fields moderation reads; satisfied by ``newsdesk.models.User``."""

    id: int
    is_shadow_banned: bool
    shadow_banned_until: datetime | None


@dataclass(frozen=True)
class ModerationResult:
    """Decision record for a single submission. Never persisted as-is."""

    original_content: str
    moderated_content: str
    is_visible: bool = True
    is_shadow_banned: bool = False
    is_blocked: bool = False
    is_auto_hidden: bool = False
    requires_review: bool = False
    block_reason: str | None = None
    flag_reason: str | None = None
    auto_hide_reason: str | None = None
    spam_score: float = 0.0

    @property
    def moderation_reason(self) -> str | None:
        """Reason worth storing alongside the comment, most severe first."""
        return self.block_reason or self.auto_hide_reason or self.flag_reason

    @property
    def state(self) -> CommentState:
        """Lifecycle state a comment stored from this decision starts in."""
        return CommentState.from_flags(
            is_hidden=not self.is_visible,
            requires_review=self.requires_review,
        )


def is_shadow_ban_active(author: ModerationSubject, now: datetime | None = None) -> bool:
    """Return True while the author's shadow ban is in force.

    A ban without an end date is permanent.
    """
    if not author.is_shadow_banned:
        return False
    if author.shadow_banned_until is None:
        return True
    return as_utc(author.shadow_banned_until) > (now or utcnow())


def auto_hide_reason_for(report_count: int) -> str:
    return f"Exceeded report threshold ({report_count} reports)"


def extract_words(content: str) -> list[str]:
    """Split content into lowercased word tokens."""
    return [match.group(0).lower() for match in WORD_PATTERN.finditer(content)]


def contains_keyword(words: Iterable[str], keywords: frozenset[str]) -> bool:
    return any(word in keywords for word in words)


def apply_replacements(content: str, replacements: Mapping[str, str]) -> str:
    """Substitute every whole-word, case-insensitive replace keyword."""
    result = content
    for keyword, replacement in replacements.items():
        pattern = rf"\b{re.escape(keyword)}\b"
        # Callable replacement keeps backslashes in the replacement literal.
        result = re.sub(pattern, lambda _match, text=replacement: text, result, flags=re.IGNORECASE)
    return result


class ModerationService:
    """Service combining keyword, shadow-ban, report and spam checks.

    Args:
        keyword_cache: Source of keyword snapshots; defaults to the shared cache.
        auto_hide_report_threshold: Report count at which comments are hidden.
        clock: Returns the current UTC time, used for ban expiry.
    """

    def __init__(
        self,
        keyword_cache: KeywordCache | None = None,
        *,
        auto_hide_report_threshold: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.keyword_cache = keyword_cache or get_keyword_cache()
        self.auto_hide_report_threshold = (
            auto_hide_report_threshold
            if auto_hide_report_threshold is not None
            else settings.auto_hide_report_threshold
        )
        self._clock = clock

    def moderate(
        self,
        content: str,
        author: ModerationSubject,
        existing_report_count: int = 0,
    ) -> ModerationResult:
        """Moderate a comment submission using the current keyword snapshot."""
        return self.moderate_with_snapshot(
            content,
            author,
            self.keyword_cache.get_active_keywords(),
            existing_report_count,
        )

    def moderate_with_snapshot(
        self,
        content: str,
        author: ModerationSubject,
        keywords: KeywordSnapshot,
        existing_report_count: int = 0,
    ) -> ModerationResult:
        """Run the moderation checks in order against an explicit snapshot.

        1. An active shadow ban hides the comment; nothing else is evaluated.
        2. A blocked keyword rejects the comment outright.
        3. Replace keywords are substituted into the moderated content.
        4. A flagged keyword sends the comment to review.
        5. Reaching the report threshold hides the comment.
        6. Content that looks like spam and scores above the review threshold
           is sent to review.
        """
        if is_shadow_ban_active(author, self._clock()):
            logger.info("Shadow banned user %s attempted to comment", author.id)
            return ModerationResult(
                original_content=content,
                moderated_content=content,
                is_visible=False,
                is_shadow_banned=True,
            )

        words = extract_words(content)

        if contains_keyword(words, keywords.blocked):
            logger.warning("Comment blocked for user %s: contains blocked keywords", author.id)
            return ModerationResult(
                original_content=content,
                moderated_content=content,
                is_visible=False,
                is_blocked=True,
                block_reason=BLOCK_REASON,
            )

        moderated_content = apply_replacements(content, keywords.replacements)

        is_visible = True
        requires_review = False
        flag_reason: str | None = None
        is_auto_hidden = False
        auto_hide_reason: str | None = None
        score = 0.0

        if contains_keyword(words, keywords.flagged):
            requires_review = True
            flag_reason = FLAGGED_KEYWORD_REASON

        if self.should_auto_hide(existing_report_count):
            is_auto_hidden = True
            is_visible = False
            auto_hide_reason = auto_hide_reason_for(existing_report_count)

        report = spam.analyze(content)
        if report.is_spam:
            score = spam.spam_score(content)
            if score > spam.SPAM_REVIEW_THRESHOLD:
                requires_review = True
                flag_reason = SPAM_REASON
                logger.info(
                    "Comment from user %s queued for review as spam (score %.2f, %d indicators)",
                    author.id,
                    score,
                    report.indicator_count,
                )

        return ModerationResult(
            original_content=content,
            moderated_content=moderated_content,
            is_visible=is_visible,
            is_auto_hidden=is_auto_hidden,
            requires_review=requires_review,
            flag_reason=flag_reason,
            auto_hide_reason=auto_hide_reason,
            spam_score=score,
        )

    def should_auto_hide(self, report_count: int) -> bool:
        """Return True when a comment's report count reaches the hide threshold."""
        return report_count >= self.auto_hide_report_threshold

    def invalidate_keyword_cache(self) -> None:
        """Force the next moderation to reload keyword rules."""
        self.keyword_cache.invalidate()


def get_moderation_service() -> ModerationService:
    """Return a moderation service bound to the shared keyword cache."""
    return ModerationService()
