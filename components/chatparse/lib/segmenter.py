"""
First pass: split the pasted lines into candidate message blocks.

A single walk over the lines with one open block at a time. High-confidence
header lines open a block, body lines are appended to it, and two blank
lines in a row close it. Metadata lines are mostly skipped, but reaction
pairs and thread/file banners stay with the open block so the extractor can
turn them into structure later.

Contents:
    - segment_lines: Fill context.blocks from context.lines
"""

import logging
from typing import Optional

from .classifier import (
    is_avatar_line,
    is_timestamp_line,
    score_line,
    score_timestamp,
)
from .models import (
    FORMAT_CHANNEL,
    FORMAT_THREAD,
    MessageBlock,
    ParserContext,
    PatternScore,
    UNKNOWN_USER,
)
from .patterns import (
    BARE_NUMBER_LINE,
    BARE_TIME_PATTERN,
    BLOCK_METADATA_PATTERNS,
    BRACKETED_CLOCK_LINE,
    CONTINUATION_MARKERS,
    DATE_SEPARATOR_PATTERNS,
    IN_BODY_METADATA_PATTERNS,
    LINKED_TIMESTAMP_LINE,
    REACTION_EMOJI_LINE,
    REPLIED_TO_THREAD_PATTERN,
    THREAD_QUOTE_STOP_PATTERNS,
)
from .timestamps import parse_date, normalize_timestamp
from .usernames import extract_header

logger = logging.getLogger(__name__)

HEADER_CONFIDENCE = 0.6
STRONG_SIGNAL = 0.7
HIGH_CONFIDENCE = 0.8
LOW_CONFIDENCE = 0.3
FALLBACK_CONFIDENCE = 0.3
ORPHAN_METADATA_LIMIT = 0.5


def _is_header(score: PatternScore) -> bool:
    return score.confidence > HEADER_CONFIDENCE and (
        score.is_username > STRONG_SIGNAL or score.has_user_and_time > STRONG_SIGNAL
    )


def _is_standalone_timestamp(score: PatternScore) -> bool:
    return (score.is_timestamp > STRONG_SIGNAL
            and score.is_username < LOW_CONFIDENCE
            and not score.has_user_and_time)


def _is_continuation(block: MessageBlock) -> bool:
    """A block reopened by a linked/bracketed time survives double blanks."""
    return any(
        p.match(line.strip()) for line in block.content for p in CONTINUATION_MARKERS
    )


def _is_thread_quote(context: ParserContext, index: int) -> bool:
    """Line quoted under "replied to a thread:", kept for the extractor."""
    quoted = context.trimmed(index)
    if not quoted or any(p.match(quoted) for p in THREAD_QUOTE_STOP_PATTERNS):
        return False
    score = score_line(quoted, context)
    return (score.has_user_and_time < STRONG_SIGNAL
            and score.is_date_separator < HIGH_CONFIDENCE)


def _update_date_context(line: str, context: ParserContext):
    for pattern in DATE_SEPARATOR_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        date_str = match.group(1) if match.groups() else match.group(0)
        parsed = parse_date(date_str, today=context.now)
        if parsed is None:
            resolved = normalize_timestamp(date_str, now=context.now)
            parsed = resolved.date() if resolved else None
        if parsed is not None:
            context.current_date = parsed
            context.note(f"Date context -> {parsed.isoformat()}")
        break


def _reopen_previous(context: ParserContext, index: int, trimmed: str) -> Optional[MessageBlock]:
    """Continue the last attributed block with a standalone timestamp line.

    Linked timestamps always continue; bare or bracketed ones depend on the
    format hint, and for threads/channels only when ordinary content follows.
    """
    if not context.blocks:
        return None
    previous = context.blocks[-1]
    if not previous.username or previous.username == UNKNOWN_USER:
        return None

    if LINKED_TIMESTAMP_LINE.match(trimmed):
        should_merge = True
    elif BARE_TIME_PATTERN.match(trimmed) or BRACKETED_CLOCK_LINE.match(trimmed):
        if context.format_hint in (FORMAT_THREAD, FORMAT_CHANNEL):
            following = context.trimmed(index + 1)
            following_score = score_line(following, context)
            should_merge = bool(following) and (
                following_score.is_metadata < HIGH_CONFIDENCE
                and following_score.confidence < HIGH_CONFIDENCE
            )
        else:
            should_merge = True
    else:
        should_merge = False

    if not should_merge:
        return None

    context.note(f"Line {index}: standalone timestamp continues {previous.username}")
    context.blocks.pop()
    if previous.content:
        previous.content.append('')
    previous.content.append(context.lines[index])
    previous.end_line = index
    return previous


def _ends_capture(context: ParserContext, index: int) -> bool:
    """Stop condition while capturing content under a two-line header."""
    trimmed = context.trimmed(index)
    if not trimmed:
        following = context.trimmed(index + 1)
        return not following or score_line(following, context).confidence > STRONG_SIGNAL

    score = score_line(trimmed, context)
    if score.is_date_separator > HIGH_CONFIDENCE:
        return True
    if score.is_metadata > HIGH_CONFIDENCE and not any(
            p.match(trimmed) for p in IN_BODY_METADATA_PATTERNS):
        return True
    if score.has_user_and_time > STRONG_SIGNAL:
        return True
    return (score.is_username > STRONG_SIGNAL
            and index + 1 < len(context.lines)
            and score_timestamp(context.trimmed(index + 1)) > STRONG_SIGNAL)


def _take_separate_timestamp(block: MessageBlock, context: ParserContext, index: int) -> int:
    """Handle the "name on one line, time on the next" layout.

    Returns:
        Index of the last line consumed
    """
    next_line = context.lines[index + 1]
    if not is_timestamp_line(next_line):
        return index

    block.timestamp = next_line.strip()
    block.end_line = index + 1
    index += 1

    while index + 1 < len(context.lines) and not _ends_capture(context, index + 1):
        block.content.append(context.lines[index + 1])
        block.end_line = index + 1
        index += 1
    return index


def segment_lines(context: ParserContext) -> None:
    """Walk context.lines once and fill context.blocks.

    Args:
        context: Parser context; `lines` is read, `blocks` and
            `current_date` are written
    """
    current: Optional[MessageBlock] = None
    previous_blank = False
    total = len(context.lines)

    def close():
        if current is not None:
            context.blocks.append(current)

    i = 0
    while i < total:
        line = context.line_at(i)
        trimmed = line.trimmed
        score = score_line(trimmed, context)
        context.note(
            f"Line {i}: {trimmed[:50]!r} user={score.is_username:.2f} "
            f"time={score.is_timestamp:.2f} combined={score.has_user_and_time:.2f} "
            f"date={score.is_date_separator:.2f} meta={score.is_metadata:.2f}"
        )

        if score.is_date_separator > HIGH_CONFIDENCE:
            close()
            current = None
            _update_date_context(trimmed, context)
            previous_blank = False
            i += 1
            continue

        # Avatars are picked up again by the refiner
        if is_avatar_line(trimmed):
            previous_blank = False
            i += 1
            continue

        # Reaction pair: emoji line, then its count
        if (current is not None and REACTION_EMOJI_LINE.match(trimmed)
                and BARE_NUMBER_LINE.match(context.trimmed(i + 1))):
            current.content.extend([line.raw, context.lines[i + 1]])
            current.end_line = i + 1
            previous_blank = False
            i += 2
            continue

        if score.is_metadata > HIGH_CONFIDENCE and score.has_user_and_time < STRONG_SIGNAL:
            if current is not None and any(p.match(trimmed) for p in BLOCK_METADATA_PATTERNS):
                current.content.append(line.raw)
                current.end_line = i
                if REPLIED_TO_THREAD_PATTERN.match(trimmed) and _is_thread_quote(context, i + 1):
                    current.content.append(context.lines[i + 1])
                    current.end_line = i + 1
                    i += 1
            previous_blank = False
            i += 1
            continue

        standalone = _is_standalone_timestamp(score)
        if standalone:
            if current is not None:
                context.note(f"Line {i}: standalone timestamp kept in current block")
                current.content.append(line.raw)
                current.end_line = i
                previous_blank = False
                i += 1
                continue
            reopened = _reopen_previous(context, i, trimmed)
            if reopened is not None:
                current = reopened
                previous_blank = False
                i += 1
                continue

        if _is_header(score):
            close()
            current = MessageBlock(
                start_line=i,
                end_line=i,
                confidence=score.confidence,
                date_context=context.current_date,
            )
            extract_header(trimmed, current)
            if current.username and not current.timestamp and i + 1 < total:
                i = _take_separate_timestamp(current, context, i)
            previous_blank = False
            i += 1
            continue

        if trimmed:
            if current is not None:
                current.content.append(line.raw)
                current.end_line = i
            elif score.is_metadata < ORPHAN_METADATA_LIMIT and not standalone:
                current = MessageBlock(
                    start_line=i,
                    end_line=i,
                    content=[line.raw],
                    confidence=FALLBACK_CONFIDENCE,
                    date_context=context.current_date,
                )
            previous_blank = False
        else:
            if current is not None:
                if previous_blank and not _is_continuation(current):
                    close()
                    current = None
                else:
                    current.content.append('')
            previous_blank = True
        i += 1

    close()
    logger.debug(f"Segmented {total} lines into {len(context.blocks)} blocks")
