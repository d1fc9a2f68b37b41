"""Input validation for user-submitted comment text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Final

from newsdesk.core.settings import settings

logger = logging.getLogger(__name__)

_SCRIPT_PATTERN: Final = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_ON_EVENT_PATTERN: Final = re.compile(r"\s*on\w+\s*=", re.IGNORECASE)
_JAVASCRIPT_PROTOCOL_PATTERN: Final = re.compile(r"javascript\s*:", re.IGNORECASE)
_DATA_URI_PATTERN: Final = re.compile(r"data:[^,]*script", re.IGNORECASE)
_DANGEROUS_FRAGMENTS: Final[tuple[str, ...]] = ("<?php", "<%", "eval(", "expression(")


@dataclass
class ValidationResult:
    """Collected validation messages; valid when there are none."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def error_string(self) -> str:
        return "; ".join(self.errors)


def contains_dangerous_content(text: str | None) -> bool:
    """Return True if the text carries script, handler or template injection markers."""
    if text is None or not text.strip():
        return False
    lowered = text.lower()
    return bool(
        _SCRIPT_PATTERN.search(text)
        or _ON_EVENT_PATTERN.search(text)
        or _JAVASCRIPT_PROTOCOL_PATTERN.search(text)
        or _DATA_URI_PATTERN.search(text)
        or any(fragment in lowered for fragment in _DANGEROUS_FRAGMENTS)
    )


class InputValidationService:
    """Validate comment text before it reaches moderation."""

    def __init__(self, min_length: int | None = None, max_length: int | None = None) -> None:
        self.min_length = min_length if min_length is not None else settings.comment_min_length
        self.max_length = max_length if max_length is not None else settings.comment_max_length

    def validate_comment(self, content: str | None) -> ValidationResult:
        """Check emptiness, length bounds and dangerous markup."""
        result = ValidationResult()

        if content is None or not content.strip():
            result.add_error("Comment cannot be empty")
            return result

        if len(content) < self.min_length:
            result.add_error(
                f"Comment is too short (minimum {self.min_length} characters)"
            )

        if len(content) > self.max_length:
            result.add_error(
                f"Comment is too long (maximum {self.max_length} characters)"
            )

        if contains_dangerous_content(content):
            result.add_error("Comment contains potentially dangerous content")
            logger.warning("Dangerous content detected in comment")

        return result
