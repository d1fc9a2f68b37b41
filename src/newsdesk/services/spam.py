"""Heuristic spam detection for comment text.

Both checks are pure functions of the submitted text. ``looks_like_spam`` counts
coarse indicators; ``spam_score`` averages a few normalized densities into a
value in ``[0, 1]``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

URL_PATTERN: Final = re.compile(r"https?://")
REPEATED_CHARACTER_PATTERN: Final = re.compile(r"(.)\1{4,}")
SPAM_PHRASES: Final[tuple[str, ...]] = ("click here", "buy now", "limited offer", "act now")

MAX_URLS: Final[int] = 2
MAX_EXCLAMATIONS: Final[int] = 5
MIN_LETTERS_FOR_CAPS_CHECK: Final[int] = 10
CAPS_RATIO_LIMIT: Final[float] = 0.5
MIN_INDICATORS: Final[int] = 2

URL_WEIGHT: Final[float] = 0.2
URL_CEILING: Final[float] = 0.4
EXCLAMATION_WEIGHT: Final[float] = 0.05
EXCLAMATION_CEILING: Final[float] = 0.3

# Scores above this send a comment to the review queue.
SPAM_REVIEW_THRESHOLD: Final[float] = 0.7


@dataclass(frozen=True)
class SpamReport:
    """Indicators tripped by a single piece of content."""

    too_many_urls: bool
    too_many_exclamations: bool
    excessive_caps: bool
    repeated_characters: bool
    spam_phrase: bool

    @property
    def indicator_count(self) -> int:
        return sum(
            (
                self.too_many_urls,
                self.too_many_exclamations,
                self.excessive_caps,
                self.repeated_characters,
                self.spam_phrase,
            )
        )

    @property
    def is_spam(self) -> bool:
        return self.indicator_count >= MIN_INDICATORS


def _letters(content: str) -> list[str]:
    return [char for char in content if char.isalpha()]


def analyze(content: str) -> SpamReport:
    """Evaluate every spam indicator for ``content``."""
    letters = _letters(content)
    uppercase = sum(1 for char in letters if char.isupper())
    lowered = content.lower()

    return SpamReport(
        too_many_urls=len(URL_PATTERN.findall(content)) > MAX_URLS,
        too_many_exclamations=content.count("!") > MAX_EXCLAMATIONS,
        excessive_caps=(
            len(letters) > MIN_LETTERS_FOR_CAPS_CHECK
            and uppercase > len(letters) * CAPS_RATIO_LIMIT
        ),
        repeated_characters=REPEATED_CHARACTER_PATTERN.search(content) is not None,
        spam_phrase=any(phrase in lowered for phrase in SPAM_PHRASES),
    )


def looks_like_spam(content: str) -> bool:
    """Return True when at least two spam indicators hold."""
    return analyze(content).is_spam


def spam_score(content: str) -> float:
    """Return the mean of the URL, capitals and exclamation densities.

    Each density is divided by its ceiling so every factor spans ``[0, 1]``;
    without that the mean could never exceed one third. The capitals factor
    only participates when the text contains letters.
    """
    factors: list[float] = []

    url_count = len(URL_PATTERN.findall(content))
    factors.append(min(url_count * URL_WEIGHT, URL_CEILING) / URL_CEILING)

    letters = _letters(content)
    if letters:
        uppercase = sum(1 for char in letters if char.isupper())
        factors.append(uppercase / len(letters))

    bangs = content.count("!")
    factors.append(min(bangs * EXCLAMATION_WEIGHT, EXCLAMATION_CEILING) / EXCLAMATION_CEILING)

    return sum(factors) / len(factors)
