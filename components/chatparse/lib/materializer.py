"""
Final pass: turn refined blocks into Message records.
"""

import logging
from typing import List

from .models import Message, MessageBlock, ParserContext, UNKNOWN_USER
from .patterns import STANDALONE_TIMESTAMP_PATTERNS
from .timestamps import normalize_timestamp

logger = logging.getLogger(__name__)


def _is_leftover_timestamp(line: str) -> bool:
    return any(p.match(line) for p in STANDALONE_TIMESTAMP_PATTERNS)


def filter_leftover_timestamps(block: MessageBlock) -> List[str]:
    """Drop body lines that are only a timestamp.

    A timestamp is kept when it marks a continuation from a known user,
    i.e. the block is attributed and non-blank text follows it.
    """
    attributed = bool(block.username) and block.username != UNKNOWN_USER
    kept = []
    for position, line in enumerate(block.content):
        if _is_leftover_timestamp(line.strip()):
            has_following = any(rest.strip() for rest in block.content[position + 1:])
            if not (attributed and has_following):
                continue
        kept.append(line)
    return kept


def materialize_messages(context: ParserContext) -> List[Message]:
    """Convert context.blocks into Messages.

    Timestamps resolve against the date separator that was in force when
    each block opened; a block with no separator before it uses the last
    date resolved so far.

    Args:
        context: Parser context after segmentation, refinement and extraction

    Returns:
        Messages in input order; blocks with no payload are skipped
    """
    messages = []
    running_date = None

    for block in context.blocks:
        username = block.username or UNKNOWN_USER
        text = '\n'.join(filter_leftover_timestamps(block)).strip()

        timestamp = None
        if block.timestamp:
            resolved = normalize_timestamp(
                block.timestamp,
                context_date=block.date_context or running_date,
                now=context.now,
            )
            if resolved is not None:
                timestamp = resolved.isoformat()
                running_date = resolved.date()
                context.current_date = running_date
            else:
                context.note(f"Unparsed timestamp kept raw: {block.timestamp!r}")
                timestamp = block.timestamp

        if not (text or block.reactions or block.thread_info):
            context.note(f"Block at line {block.start_line} has no payload, skipped")
            continue

        messages.append(Message(
            username=username,
            text=text,
            timestamp=timestamp,
            avatar=block.avatar_url,
            reactions=list(block.reactions),
            thread_info=block.thread_info,
        ))

    logger.debug(f"Materialized {len(messages)} messages from {len(context.blocks)} blocks")
    return messages
