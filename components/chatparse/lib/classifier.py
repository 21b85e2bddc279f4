"""
Line classification.

Scores a single trimmed line along five independent axes (username,
timestamp, combined username+time, date separator, metadata) and derives an
overall confidence. Every axis is a pure function of the line; nothing here
raises for any string input.

Contents:
    - score_line: Full PatternScore for one line
    - score_username / score_timestamp / score_user_and_time /
      score_date_separator / score_metadata: Individual axes
    - is_standalone_timestamp: Line is only a timestamp
    - is_timestamp_line: Line starts with a timestamp (separate-header layout)
    - is_avatar_line / avatar_url: Avatar image references
"""

import logging
import re
from typing import Callable, Optional

from .models import ParserContext, PatternScore
from .patterns import (
    BARE_TIME_PATTERN,
    BRACKETED_TIME_PATTERN,
    DATE_SEPARATOR_PATTERNS,
    EMOJI_CODE_LINE,
    EMOJI_ONLY_PATTERNS,
    HEADER_PATTERNS,
    IMAGE_LINE,
    LINK_WITH_TEXT_PATTERN,
    METADATA_PATTERNS,
    REPEATED_WORD_MIN_LENGTH,
    REPEATED_WORD_PATTERN,
    SHORT_WORD_PATTERN,
    SLACK_AVATAR_LINE,
    STANDALONE_TIMESTAMP_PATTERNS,
    TIMESTAMP_LINE_PATTERNS,
    TIMESTAMP_PATTERNS,
    USERNAME_DISQUALIFIERS,
    USERNAME_PATTERNS,
)

logger = logging.getLogger(__name__)

# Score values per axis
USERNAME_BASE = 0.7
USERNAME_BONUS = 0.1
SHORT_WORD_SCORE = 0.3
BRACKETED_TIME_SCORE = 1.0
BARE_TIME_SCORE = 0.95
LINKED_TIME_SCORE = 0.9
TIMESTAMP_SCORE = 0.8
USER_AND_TIME_SCORE = 0.9
DATE_SEPARATOR_SCORE = 0.95
METADATA_SCORE = 0.9

LINKED_TIME_MAX_LENGTH = 100
USERNAME_MAX_LENGTH = 50


def _safe(axis: Callable[[str], float], line: str) -> float:
    """Run one axis, scoring 0 if matching blows up."""
    try:
        return axis(line)
    except (re.error, RecursionError, TypeError) as e:
        logger.warning(f"Scoring failed on line {line[:40]!r}: {e}")
        return 0.0


def score_username(line: str) -> float:
    """How much a line looks like a bare display name."""
    if not line:
        return 0.0

    if any(p.match(line) for p in EMOJI_ONLY_PATTERNS):
        return 0.0

    if REPEATED_WORD_PATTERN.match(line) and len(line) > REPEATED_WORD_MIN_LENGTH:
        return 0.0

    if SHORT_WORD_PATTERN.match(line):
        return SHORT_WORD_SCORE

    if any(p.search(line) for p in USERNAME_DISQUALIFIERS):
        return 0.0

    if not any(p.match(line) for p in USERNAME_PATTERNS):
        return 0.0

    score = USERNAME_BASE
    if len(line) < USERNAME_MAX_LENGTH:
        score += USERNAME_BONUS
    if not re.search(r'\d{4,}', line):
        score += USERNAME_BONUS
    if line[0].isupper():
        score += USERNAME_BONUS
    return min(score, 1.0)


def score_timestamp(line: str) -> float:
    """How much a line looks like (or contains) a timestamp."""
    if not line:
        return 0.0

    if BRACKETED_TIME_PATTERN.match(line):
        return BRACKETED_TIME_SCORE

    for pattern in TIMESTAMP_PATTERNS[1:]:
        if pattern.search(line):
            if BARE_TIME_PATTERN.match(line):
                return BARE_TIME_SCORE
            if LINK_WITH_TEXT_PATTERN.search(line) and len(line) < LINKED_TIME_MAX_LENGTH:
                return LINKED_TIME_SCORE
            return TIMESTAMP_SCORE
    return 0.0


def score_user_and_time(line: str) -> float:
    if line and any(h.pattern.match(line) for h in HEADER_PATTERNS):
        return USER_AND_TIME_SCORE
    return 0.0


def score_date_separator(line: str) -> float:
    if line and any(p.match(line) for p in DATE_SEPARATOR_PATTERNS):
        return DATE_SEPARATOR_SCORE
    return 0.0


def score_metadata(line: str) -> float:
    if line and any(p.search(line) for p in METADATA_PATTERNS):
        return METADATA_SCORE
    return 0.0


def score_line(line: str, context: Optional[ParserContext] = None) -> PatternScore:
    """Score a trimmed line on all five axes.

    Args:
        line: The line, already stripped of surrounding whitespace
        context: Current parser context (read-only, unused by the axes today)

    Returns:
        PatternScore with `confidence` filled in
    """
    score = PatternScore(
        is_username=_safe(score_username, line),
        is_timestamp=_safe(score_timestamp, line),
        has_user_and_time=_safe(score_user_and_time, line),
        is_date_separator=_safe(score_date_separator, line),
        is_metadata=_safe(score_metadata, line),
    )
    score.compute_confidence()
    return score


def is_standalone_timestamp(line: str) -> bool:
    """True if the whole line is a timestamp and nothing else."""
    return any(p.match(line) for p in STANDALONE_TIMESTAMP_PATTERNS)


def is_timestamp_line(line: str) -> bool:
    """True if the line leads with a timestamp (raw line, indentation allowed)."""
    return any(p.match(line) for p in TIMESTAMP_LINE_PATTERNS)


def is_avatar_line(line: str) -> bool:
    """True for a profile-picture reference on its own line."""
    return bool(SLACK_AVATAR_LINE.match(line))


def avatar_url(line: str) -> Optional[str]:
    """URL of an avatar or other non-emoji image line, else None."""
    match = SLACK_AVATAR_LINE.match(line)
    if match:
        return match.group(1)
    match = IMAGE_LINE.match(line)
    if match and not EMOJI_CODE_LINE.match(match.group(1)):
        return match.group(2)
    return None
