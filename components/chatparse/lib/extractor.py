"""
Third pass: pull reactions, thread banners and attachment footers out of
block bodies.

Contents:
    - extract_reactions: All reaction tokens on one line
    - extract_metadata: Rewrite every block's body, filling reactions and
      thread_info
"""

import logging
from typing import List, Optional, Tuple

from .models import MessageBlock, ParserContext, Reaction
from .patterns import (
    ADDED_BY_PATTERN,
    BARE_NUMBER_LINE,
    CUSTOM_EMOJI_REACTION,
    FILE_COUNT_PATTERN,
    LAST_REPLY_VIEW_THREAD,
    REACTION_EMOJI_LINE,
    REPLIED_TO_THREAD_PATTERN,
    STANDARD_REACTION,
    THREAD_INFO_PATTERNS,
    THREAD_QUOTE_STOP_PATTERNS,
)

logger = logging.getLogger(__name__)

ATTACHMENT_MARKER = '📎'


def _to_count(text: str) -> Optional[int]:
    try:
        count = int(text)
    except ValueError:
        return None
    return count if count >= 0 else None


def _split_reactions(line: str) -> Tuple[List[Reaction], str]:
    """Reactions on a line plus whatever text is left once they are removed."""
    reactions = []
    for match in CUSTOM_EMOJI_REACTION.finditer(line):
        count = _to_count(match.group(2))
        if count is not None:
            reactions.append(Reaction(name=match.group(1), count=count))
    remaining = CUSTOM_EMOJI_REACTION.sub(' ', line)

    for match in STANDARD_REACTION.finditer(remaining):
        count = _to_count(match.group(2))
        if count is None:
            continue
        name = match.group(1)
        if name.startswith(':') and name.endswith(':'):
            name = name[1:-1]
        reactions.append(Reaction(name=name, count=count))
    remaining = STANDARD_REACTION.sub(' ', remaining)
    return reactions, remaining.strip()


def extract_reactions(line: str) -> List[Reaction]:
    """Find reaction tokens on a single line.

    Custom emoji images ("![:subscribe:](url)4") are matched first and
    removed, then ":code: N" and pictograph-count pairs.

    Args:
        line: Trimmed body line

    Returns:
        Reactions in the order they appear
    """
    reactions, _ = _split_reactions(line)
    return reactions


def _extract_block(block: MessageBlock):
    reactions: List[Reaction] = list(block.reactions)
    thread_parts: List[str] = [block.thread_info] if block.thread_info else []
    attachment: List[str] = []
    cleaned: List[str] = []
    content = block.content

    i = 0
    while i < len(content):
        line = content[i]
        trimmed = line.strip()
        following = content[i + 1].strip() if i + 1 < len(content) else ''

        if REACTION_EMOJI_LINE.match(trimmed) and BARE_NUMBER_LINE.match(following):
            count = _to_count(following)
            if count is not None:
                reactions.append(Reaction(name=trimmed.strip(':'), count=count))
            i += 2
            continue

        if trimmed:
            line_reactions, leftover = _split_reactions(trimmed)
            if line_reactions and not leftover:
                reactions.extend(line_reactions)
                i += 1
                continue

        if LAST_REPLY_VIEW_THREAD.search(trimmed):
            thread_parts.append(trimmed)
            i += 1
            continue

        if any(p.search(trimmed) for p in THREAD_INFO_PATTERNS):
            part = trimmed
            if REPLIED_TO_THREAD_PATTERN.match(trimmed) and following and not any(
                    p.match(following) for p in THREAD_QUOTE_STOP_PATTERNS):
                part += f' "{following}"'
                i += 1
            thread_parts.append(part)
            i += 1
            continue

        if FILE_COUNT_PATTERN.match(trimmed):
            attachment.append(trimmed)
            if ADDED_BY_PATTERN.match(following):
                attachment.append(following)
                i += 1
            i += 1
            continue

        # Link preview footer without a file count
        if ADDED_BY_PATTERN.match(trimmed):
            i += 1
            continue

        cleaned.append(line)
        i += 1

    if attachment:
        while cleaned and not cleaned[-1].strip():
            cleaned.pop()
        cleaned.extend(['', f"{ATTACHMENT_MARKER} {' - '.join(attachment)}"])

    block.content = cleaned
    block.reactions = reactions
    block.thread_info = ' '.join(thread_parts) if thread_parts else None


def extract_metadata(context: ParserContext) -> None:
    """Extract reactions, thread info and attachments from every block.

    Args:
        context: Parser context; each block's content is rewritten in place
    """
    for block in context.blocks:
        _extract_block(block)
        if block.reactions or block.thread_info:
            context.note(
                f"Block at line {block.start_line}: {len(block.reactions)} reactions, "
                f"thread={block.thread_info!r}"
            )
    logger.debug(f"Extracted metadata from {len(context.blocks)} blocks")
