"""
Top-level entry point: pasted chat text in, Message list out.

Runs the passes in order on a fresh ParserContext:

    segment_lines -> refine_blocks -> extract_metadata -> materialize_messages

then applies the caller's user and emoji maps and removes duplicate
messages. A failure inside one pass is logged and whatever that pass had
produced so far is kept; parse_conversation() never raises for str input.

Contents:
    - parse_conversation: One-shot parse
    - ConversationParser: Reusable parser bound to a ParserOptions
    - deduplicate_messages: Drop repeated messages
    - detect_format: Guess the paste layout (dm/thread/channel/standard)
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Set, Tuple

from .extractor import extract_metadata
from .materializer import materialize_messages
from .models import (
    FORMAT_CHANNEL,
    FORMAT_DM,
    FORMAT_STANDARD,
    FORMAT_THREAD,
    Message,
    ParserContext,
    ParserOptions,
)
from .patterns import (
    CHANNEL_FORMAT_PATTERNS,
    DM_FORMAT_PATTERNS,
    THREAD_FORMAT_PATTERNS,
)
from .refiner import refine_blocks
from .segmenter import segment_lines

logger = logging.getLogger(__name__)

TIMESTAMP_KEY_LENGTH = 20
TEXT_KEY_LENGTH = 100


def _message_key(message: Message) -> Tuple[str, str, str]:
    return (
        message.username,
        (message.timestamp or '')[:TIMESTAMP_KEY_LENGTH],
        message.text[:TEXT_KEY_LENGTH],
    )


def deduplicate_messages(messages: List[Message]) -> List[Message]:
    """Remove messages repeated in the paste, keeping the first occurrence.

    Two messages are the same if username, timestamp prefix and text
    prefix all match. Copying a thread often pastes the parent twice.
    """
    seen: Set[Tuple[str, str, str]] = set()
    unique = []
    for message in messages:
        key = _message_key(message)
        if key in seen:
            logger.debug(f"Dropping duplicate message from {message.username}")
            continue
        seen.add(key)
        unique.append(message)
    return unique


def detect_format(text: str) -> str:
    """Guess which layout a paste uses.

    Returns:
        'dm', 'thread', 'channel', or 'standard' when nothing stands out
    """
    dm = sum(1 for p in DM_FORMAT_PATTERNS if p.search(text))
    thread = sum(1 for p in THREAD_FORMAT_PATTERNS if p.search(text))
    channel = sum(1 for p in CHANNEL_FORMAT_PATTERNS if p.search(text))

    if dm > thread and dm > channel:
        return FORMAT_DM
    if thread > dm and thread >= channel:
        return FORMAT_THREAD
    if channel > 0:
        return FORMAT_CHANNEL
    return FORMAT_STANDARD


class ConversationParser:
    """Parses pasted conversations with a fixed set of options."""

    def __init__(self, options: Optional[ParserOptions] = None,
                 logger: Optional[logging.Logger] = None):
        self.options = options or ParserOptions()
        self.logger = logger or logging.getLogger(__name__)

    def _run_pass(self, name: str, func: Callable[[ParserContext], None],
                  context: ParserContext):
        try:
            func(context)
        except Exception as e:
            self.logger.warning(f"{name} failed, keeping partial result: {e}", exc_info=True)

    def _apply_maps(self, messages: List[Message]):
        user_map = self.options.user_map or {}
        emoji_map = self.options.emoji_map or {}
        for message in messages:
            message.username = user_map.get(message.username, message.username)
            for reaction in message.reactions:
                reaction.glyph = emoji_map.get(reaction.name)

    def parse(self, text: str) -> List[Message]:
        """Parse pasted text into messages.

        Args:
            text: The raw paste

        Returns:
            Messages in input order (possibly empty)
        """
        if not text or not text.strip():
            return []

        context = ParserContext(
            lines=text.replace('\r\n', '\n').replace('\r', '\n').split('\n'),
            debug=self.options.debug,
            format_hint=self.options.format_hint,
            now=self.options.now or datetime.now(),
        )

        self._run_pass('segment', segment_lines, context)
        self._run_pass('refine', refine_blocks, context)
        self._run_pass('extract', extract_metadata, context)

        try:
            messages = materialize_messages(context)
        except Exception as e:
            self.logger.warning(f"materialize failed: {e}", exc_info=True)
            messages = []

        self._apply_maps(messages)
        if self.options.deduplicate:
            messages = deduplicate_messages(messages)

        if self.options.debug:
            for entry in context.debug_info:
                self.logger.debug(entry)
        self.logger.debug(
            f"Parsed {len(messages)} messages from {len(context.blocks)} blocks "
            f"({len(context.lines)} lines)"
        )
        return messages


def parse_conversation(text: str, options: Optional[ParserOptions] = None) -> List[Message]:
    """Parse pasted chat text into a list of Messages.

    Args:
        text: The raw paste
        options: Parser options (defaults to ParserOptions())

    Returns:
        Messages in input order; [] for empty input
    """
    return ConversationParser(options).parse(text)
