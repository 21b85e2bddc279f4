"""
chatparse - Pasted chat transcript to structured messages.

This component takes text copy-pasted from a team chat web UI and recovers
the individual messages: who wrote them, when, what they said, and the
reactions and thread banners hanging off them.

Multi-pass pipeline:
1. segmenter: lines -> candidate message blocks (five-axis line scoring)
2. refiner: repair split headers, merge mis-segmented blocks
3. extractor: reactions, thread info, attachment footers out of bodies
4. materializer: blocks -> Message records with normalized timestamps

Core modules:
- patterns: Every regular expression, compiled once
- classifier: Line scoring
- usernames: Header field extraction and username cleanup
- timestamps: Date/timestamp normalization
- parser: parse_conversation() and ConversationParser
- models: Data classes for all types
- config: YAML/.env configuration
- output: JSON/JSONL serialisation and file writing
"""

__version__ = "1.0.0"

# Entry points
from .parser import (
    parse_conversation,
    ConversationParser,
    deduplicate_messages,
    detect_format,
)

# Data structures
from .models import (
    Message,
    Reaction,
    MessageBlock,
    ParserContext,
    ParserOptions,
    PatternScore,
    Line,
    UNKNOWN_USER,
    FORMAT_HINTS,
)

# Individual passes
from .classifier import score_line
from .segmenter import segment_lines
from .refiner import refine_blocks
from .extractor import extract_metadata, extract_reactions
from .materializer import materialize_messages
from .usernames import clean_username, extract_header
from .timestamps import normalize_timestamp, parse_date

# Configuration and output
from .config import load_config, ParserConfig, ConfigError
from .output import messages_to_json, messages_to_jsonl, write_output

__all__ = [
    # Entry points
    'parse_conversation',
    'ConversationParser',
    'deduplicate_messages',
    'detect_format',
    # Data structures
    'Message',
    'Reaction',
    'MessageBlock',
    'ParserContext',
    'ParserOptions',
    'PatternScore',
    'Line',
    'UNKNOWN_USER',
    'FORMAT_HINTS',
    # Passes
    'score_line',
    'segment_lines',
    'refine_blocks',
    'extract_metadata',
    'extract_reactions',
    'materialize_messages',
    'clean_username',
    'extract_header',
    'normalize_timestamp',
    'parse_date',
    # Configuration and output
    'load_config',
    'ParserConfig',
    'ConfigError',
    'messages_to_json',
    'messages_to_jsonl',
    'write_output',
]
