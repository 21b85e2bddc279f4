"""
Data classes for pasted chat transcript parsing.

This module defines the structured data types passed between the parsing
passes. The passes share one ParserContext per call; everything else is a
plain record.

Working Types (live for one parse call):
    - Line: A raw input line and its trimmed form
    - PatternScore: Five-axis classification of one line
    - MessageBlock: A candidate message being assembled
    - ParserContext: Per-call state shared by all passes

Output Types:
    - Reaction: An emoji reaction with its count
    - Message: A finished, attributed message

Options:
    - ParserOptions: Caller-supplied knobs for parse_conversation()
    - FORMAT_HINTS: Accepted format hint values
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Dict, Any

UNKNOWN_USER = "Unknown User"

FORMAT_DM = "dm"
FORMAT_THREAD = "thread"
FORMAT_CHANNEL = "channel"
FORMAT_STANDARD = "standard"
FORMAT_MIXED = "mixed"
FORMAT_HINTS = (FORMAT_DM, FORMAT_THREAD, FORMAT_CHANNEL, FORMAT_STANDARD, FORMAT_MIXED)


@dataclass
class Line:
    """A single input line."""
    index: int
    raw: str
    trimmed: str


@dataclass
class PatternScore:
    """Confidence of one line along each classification axis.

    All values are in [0, 1]. The overall confidence is derived from the
    first four axes; metadata only ever suppresses a line.
    """
    is_username: float = 0.0
    is_timestamp: float = 0.0
    has_user_and_time: float = 0.0
    is_date_separator: float = 0.0
    is_metadata: float = 0.0
    confidence: float = 0.0

    def compute_confidence(self) -> float:
        """Max of the signal axes, boosted when two or more agree."""
        signals = [self.is_username, self.is_timestamp,
                   self.has_user_and_time, self.is_date_separator]
        best = max(signals)
        active = sum(1 for s in signals if s > 0.5)
        if active >= 2:
            best += 0.1 * active
        self.confidence = min(best, 1.0)
        return self.confidence


@dataclass
class Reaction:
    """An emoji reaction."""
    name: str  # emoji code without colons, e.g. "thumbsup"
    count: int
    glyph: Optional[str] = None  # looked up from the emoji map, if any

    def to_dict(self) -> Dict[str, Any]:
        data = {'name': self.name, 'count': self.count}
        if self.glyph:
            data['glyph'] = self.glyph
        return data


@dataclass
class MessageBlock:
    """A candidate message: a header plus the body lines that follow it."""
    start_line: int
    end_line: int
    username: Optional[str] = None
    timestamp: Optional[str] = None  # raw, as it appeared in the paste
    avatar_url: Optional[str] = None
    content: List[str] = field(default_factory=list)
    reactions: List[Reaction] = field(default_factory=list)
    thread_info: Optional[str] = None
    confidence: float = 0.0
    date_context: Optional[date] = None  # date separator in force when opened

    def has_body(self) -> bool:
        """True if the block carries anything worth materializing."""
        return (any(line.strip() for line in self.content)
                or bool(self.reactions)
                or bool(self.thread_info))


@dataclass
class ParserContext:
    """State for one parse call. Never shared between calls."""
    lines: List[str]
    blocks: List[MessageBlock] = field(default_factory=list)
    current_date: Optional[date] = None
    debug_info: List[str] = field(default_factory=list)
    debug: bool = False
    format_hint: Optional[str] = None  # dm | thread | channel | standard | mixed
    now: Optional[datetime] = None

    def line_at(self, index: int) -> Line:
        raw = self.lines[index]
        return Line(index=index, raw=raw, trimmed=raw.strip())

    def trimmed(self, index: int) -> str:
        """Trimmed line at index, or '' past either end."""
        if 0 <= index < len(self.lines):
            return self.lines[index].strip()
        return ''

    def note(self, message: str):
        """Record a debug trace entry (only when debugging)."""
        if self.debug:
            self.debug_info.append(message)


@dataclass
class Message:
    """A single attributed message from a pasted conversation."""
    username: str
    text: str
    timestamp: Optional[str] = None  # ISO-8601, or the raw string if unparseable
    avatar: Optional[str] = None
    reactions: List[Reaction] = field(default_factory=list)
    thread_info: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise for JSON output, omitting empty optional fields."""
        data: Dict[str, Any] = {
            'username': self.username,
            'timestamp': self.timestamp,
            'text': self.text,
        }
        if self.avatar:
            data['avatar'] = self.avatar
        if self.reactions:
            data['reactions'] = [r.to_dict() for r in self.reactions]
        if self.thread_info:
            data['thread_info'] = self.thread_info
        return data


@dataclass
class ParserOptions:
    """Options for parse_conversation()."""
    debug: bool = False
    format_hint: Optional[str] = None  # one of FORMAT_HINTS, None = agnostic
    user_map: Dict[str, str] = field(default_factory=dict)  # raw name -> display name
    emoji_map: Dict[str, str] = field(default_factory=dict)  # emoji code -> glyph
    deduplicate: bool = True
    now: Optional[datetime] = None  # reference time for "Today", weekdays, ...
