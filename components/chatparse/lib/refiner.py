"""
Second pass: repair and merge the blocks produced by the segmenter.

The segmenter decides on one line at a time, so it gets some boundaries
wrong. This pass walks the block list once, in order, and for each block:

    1. Repairs a header split across two lines ("Feb 25th at" / "3:45 PM")
    2. Merges blocks whose "username" is really body text into the previous one
    3. Finds a timestamp the header did not carry
    4. Merges name-only headers without a timestamp into the previous block
    5. Attaches the avatar image that precedes the header
    6. Merges low-confidence headerless blocks into the previous one

Merged blocks are tombstoned and dropped in one compaction at the end; the
list is never spliced while it is being walked.
"""

import logging
from typing import List, Optional

from .classifier import avatar_url, is_standalone_timestamp, score_timestamp
from .models import MessageBlock, ParserContext, UNKNOWN_USER
from .patterns import (
    BARE_TIME_PATTERN,
    DANGLING_AT,
    INDENTED_TIME_PATTERN,
    SUSPICIOUS_USERNAME_PATTERNS,
)

logger = logging.getLogger(__name__)

REPAIRED_CONFIDENCE = 0.8
INDENTED_TIME_BOOST = 0.3
FIRST_LINE_TIME_BOOST = 0.2
TIMESTAMP_THRESHOLD = 0.7
LOW_CONFIDENCE = 0.5
MAX_MERGE_GAP = 1


def repair_split_header(block: MessageBlock, context: ParserContext) -> bool:
    """Join "<date> at" with a bare time on the following line.

    Returns:
        True if the block was repaired
    """
    if not block.username or block.timestamp or not DANGLING_AT.search(block.username):
        return False

    time_index = block.start_line + 1
    time_line = context.trimmed(time_index)
    if not BARE_TIME_PATTERN.match(time_line):
        return False

    block.timestamp = f"{block.username} {time_line}"
    block.username = UNKNOWN_USER
    for position, line in enumerate(block.content):
        if line.strip() == time_line:
            del block.content[position]
            break

    if not any(line.strip() for line in block.content):
        block.content = [
            context.lines[j]
            for j in range(time_index + 1, min(block.end_line + 1, len(context.lines)))
            if context.lines[j].strip()
        ]

    block.confidence = REPAIRED_CONFIDENCE
    context.note(f"Block at line {block.start_line}: joined split timestamp {block.timestamp!r}")
    return True


def is_suspicious_username(username: Optional[str]) -> bool:
    """True if a captured "username" is really the start of a sentence."""
    return bool(username) and any(p.search(username) for p in SUSPICIOUS_USERNAME_PATTERNS)


def discover_timestamp(block: MessageBlock, context: ParserContext) -> bool:
    """Look for a timestamp below a header that had none.

    Returns:
        True if a timestamp was found
    """
    if block.timestamp:
        return False

    next_index = block.start_line + 1
    if next_index < len(context.lines) and INDENTED_TIME_PATTERN.match(context.lines[next_index]):
        block.timestamp = context.lines[next_index].strip()
        if block.content and block.content[0].strip() == block.timestamp:
            block.content.pop(0)
        block.confidence += INDENTED_TIME_BOOST
        return True

    if block.content:
        first = block.content[0].strip()
        if score_timestamp(first) > TIMESTAMP_THRESHOLD and is_standalone_timestamp(first):
            block.timestamp = first
            block.content.pop(0)
            block.confidence += FIRST_LINE_TIME_BOOST
            return True
    return False


def attach_avatar(block: MessageBlock, context: ParserContext):
    if not block.username or block.start_line == 0:
        return
    url = avatar_url(context.trimmed(block.start_line - 1))
    if url:
        block.avatar_url = url


def is_untimed_header(block: MessageBlock, previous: MessageBlock) -> bool:
    """A name-only header that is really a line of the previous message.

    True when the block has a username but no timestamp and either carries
    nothing at all, or follows a timestamped message under the same date.
    """
    if not block.username or block.timestamp:
        return False
    if not block.has_body():
        return True
    return bool(previous.timestamp) and block.date_context == previous.date_context


def _can_absorb_low_confidence(block: MessageBlock, previous: MessageBlock) -> bool:
    gap = block.start_line - previous.end_line - 1
    return (gap <= MAX_MERGE_GAP
            and block.confidence < LOW_CONFIDENCE
            and not block.username
            and block.date_context == previous.date_context)


def _absorb(previous: MessageBlock, block: MessageBlock, lines: List[str]):
    previous.content.extend(lines)
    previous.end_line = max(previous.end_line, block.end_line)


def refine_blocks(context: ParserContext) -> None:
    """Repair and merge context.blocks in place.

    Args:
        context: Parser context whose `blocks` list is rewritten
    """
    blocks = context.blocks
    alive = [True] * len(blocks)
    previous: Optional[MessageBlock] = None
    merged = 0

    for i, block in enumerate(blocks):
        repair_split_header(block, context)

        if previous is not None and is_suspicious_username(block.username):
            header = [block.username] + ([block.timestamp] if block.timestamp else [])
            _absorb(previous, block, header + block.content)
            context.note(f"Block {i}: {block.username!r} is body text, merged backward")
            alive[i] = False
            merged += 1
            continue

        discover_timestamp(block, context)

        if previous is not None and is_untimed_header(block, previous):
            gap = block.start_line - previous.end_line > 1
            separator = [''] if gap and previous.content and previous.content[-1].strip() else []
            header = [context.lines[block.start_line]]
            _absorb(previous, block, separator + header + block.content)
            context.note(f"Block {i}: untimed header {block.username!r} merged backward")
            alive[i] = False
            merged += 1
            continue

        attach_avatar(block, context)

        if previous is not None and _can_absorb_low_confidence(block, previous):
            _absorb(previous, block, block.content)
            context.note(f"Block {i}: low confidence, merged backward")
            alive[i] = False
            merged += 1
            continue

        previous = block

    context.blocks = [block for block, keep in zip(blocks, alive) if keep]
    logger.debug(f"Refined blocks: {len(context.blocks)} kept, {merged} merged")
