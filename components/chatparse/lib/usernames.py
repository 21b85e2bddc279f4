"""
Header field extraction and username cleanup.

Pasted headers carry a lot of decoration around the display name: status
emoji, custom emoji images, avatar markdown, and very often the name twice
in a row ("Alex MittellAlex Mittell") because the web UI renders it once as
a link and once as hover text.

Contents:
    - extract_header: Fill a block's username/timestamp from its header line
    - clean_username: Strip decoration, collapse doubling, default to sentinel
    - collapse_doubled_name: "JaneJane DoeDoe" -> "Jane Doe"
"""

import logging
import re

from .models import MessageBlock, UNKNOWN_USER
from .patterns import (
    AVATAR_PREFIX,
    CUSTOM_EMOJI_IMAGE,
    DOUBLED_NAME,
    DOUBLED_NAME_PARTS,
    EMOJI_CODE_ANYWHERE,
    HEADER_PATTERNS,
    PICTOGRAPH_ANYWHERE,
    TIMESTAMP_PATTERNS,
    TRAILING_PUNCTUATION,
    USERNAME_PATTERNS,
)

logger = logging.getLogger(__name__)

DOUBLED_WORD = re.compile(r'^(.{3,}?)\1$')


def collapse_doubled_name(name: str) -> str:
    """Collapse a display name that was pasted twice.

    Handles the whole name repeated ("Bill MeiBill Mei", "Bill Mei Bill Mei"),
    each word repeated ("AmyAmy BritoBrito"), and consecutive duplicate
    words ("Amy Amy Brito").
    """
    match = DOUBLED_NAME.match(name)
    if match:
        return match.group(1).strip()

    words = []
    for word in name.split():
        word_match = DOUBLED_WORD.match(word)
        if word_match:
            word = word_match.group(1)
        if words and words[-1].lower() == word.lower():
            continue
        words.append(word)

    return DOUBLED_NAME_PARTS.sub(r'\1 \2', ' '.join(words))


def clean_username(raw: str) -> str:
    """Normalize a username captured from a header line.

    Args:
        raw: Captured username text (may include emoji, avatar markdown)

    Returns:
        Cleaned name, or UNKNOWN_USER if nothing is left
    """
    name = CUSTOM_EMOJI_IMAGE.sub('', raw)
    name = AVATAR_PREFIX.sub('', name.strip())
    name = EMOJI_CODE_ANYWHERE.sub('', name)
    name = PICTOGRAPH_ANYWHERE.sub('', name)
    name = ' '.join(name.split())
    name = collapse_doubled_name(name)
    name = TRAILING_PUNCTUATION.sub('', name).strip()
    return name or UNKNOWN_USER


def extract_header(line: str, block: MessageBlock) -> bool:
    """Populate block.username / block.timestamp from a header line.

    Combined patterns are tried in registry order; each one says which
    groups hold the name and which holds the time. If none match, the
    username-only shapes are tried, then the timestamp-only ones.

    Args:
        line: Trimmed header line
        block: Block to update in place

    Returns:
        True if a combined username+time pattern matched
    """
    for header in HEADER_PATTERNS:
        match = header.pattern.match(line)
        if not match:
            continue
        raw_name = ''.join(match.group(g) or '' for g in header.username_groups)
        block.username = clean_username(raw_name)
        block.timestamp = match.group(header.timestamp_group).strip()
        logger.debug(f"Header {line[:40]!r}: {block.username} @ {block.timestamp}")
        return True

    for pattern in USERNAME_PATTERNS:
        match = pattern.match(line)
        if match:
            block.username = clean_username(match.group(1))
            return False

    for pattern in TIMESTAMP_PATTERNS:
        match = pattern.search(line)
        if match:
            block.timestamp = (match.group(1) if match.groups() else match.group(0)).strip()
            break
    return False
