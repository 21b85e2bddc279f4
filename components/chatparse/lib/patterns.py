"""
Pattern registry for pasted chat transcripts.

Every regular expression the parser uses lives here, compiled once at import
time. The classifier, the header extractor, the refiner and the metadata
extractor all read from this module, so scoring and field extraction always
agree on what a "timestamp" or a "username" looks like.

Contents:
    - Building blocks (weekday/month vocabulary, clock times, name characters)
    - USERNAME_PATTERNS / USERNAME_DISQUALIFIERS: username axis
    - TIMESTAMP_PATTERNS: timestamp axis
    - HEADER_PATTERNS: combined username + timestamp shapes with group layout
    - DATE_SEPARATOR_PATTERNS: day boundary lines
    - METADATA_PATTERNS: noise lines (reply banners, reaction counts, ...)
    - Thread, reaction, attachment and avatar shapes used by later passes
    - SUSPICIOUS_USERNAME_PATTERNS: header "names" that are really body text

Nothing in this module is mutable; tuples are used for every table.
"""

import re
from typing import NamedTuple, Tuple

# =============================================================================
# Building blocks
# =============================================================================

WEEKDAYS = r'Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday'
WEEKDAYS_SHORT = r'Mon|Tue|Wed|Thu|Fri|Sat|Sun'
MONTHS_LONG = (
    r'January|February|March|April|May|June|July|August|September|October|November|December'
)
MONTHS_SHORT = r'Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec'
RELATIVE_DAYS = r'Today|Yesterday'
ORDINAL = r'(?:st|nd|rd|th)?'

# "3:45", "3:45 PM", "03:45PM"
CLOCK = r'\d{1,2}:\d{2}\s*(?:AM|PM)?'
CLOCK_MERIDIEM = r'\d{1,2}:\d{2}\s*(?:AM|PM)'

# Characters allowed in a display name
NAME_CHARS = r"[A-Za-z0-9\s\-_.'À-ſ]"

EMOJI_CODE = r':[\w\-+]+:'
PICTOGRAPH = r'[\U0001F300-\U0001F9FF]'
PICTOGRAPH_WIDE = r'[\U0001F300-\U0001F9FF☀-⛿✀-➿]'

ARCHIVE_URL = r'https?://[^)]*/archives/[^)]+'
ANY_URL = r'https?://[^)]+'

# Visible text of a linked timestamp: a time, or something that starts like a date
LINKED_TIME_TEXT = (
    rf'\d{{1,2}}:\d{{2}}(?:\s*(?:AM|PM))?'
    rf'|(?:{WEEKDAYS_SHORT}|{WEEKDAYS}|{MONTHS_SHORT}|{RELATIVE_DAYS})[^\]]*'
)

# =============================================================================
# Username axis
# =============================================================================

USERNAME_PATTERNS: Tuple[re.Pattern, ...] = (
    # Plain name: "Alex Mittell", "jane.doe", "O'Brien"
    re.compile(rf'^({NAME_CHARS}+)$'),
    # Name followed by status emoji: "Bill Mei :palm_tree:"
    re.compile(rf'^({NAME_CHARS}+)\s*(?:{EMOJI_CODE}|{PICTOGRAPH})*$'),
    # Avatar markdown followed by name
    re.compile(rf'^!\[.*?\]\(.*?\)\s*({NAME_CHARS}+)'),
)

# Lines that are solely an emoji token are reactions, never names
EMOJI_ONLY_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r'^:[a-zA-Z0-9_+-]+:$'),
    re.compile(r'^!\[:.*?:\]\(.*?\)$'),
    # ![:subscribe:](url)4![:eyes:](url)1
    re.compile(r'^(?:!\[:[\w\-+]+:\]\([^)]+\)\s*\d+\s*)+$'),
)

# Link preview titles: "GuidewireGuidewire"
REPEATED_WORD_PATTERN = re.compile(r'^([A-Za-zÀ-ſ]+)\1$')
REPEATED_WORD_MIN_LENGTH = 10

# 1-3 letter words are ambiguous ("Amy" vs "ok")
SHORT_WORD_PATTERN = re.compile(r'^[A-Za-zÀ-ſ]{1,3}$')

# Each of these forces the username axis to 0
USERNAME_DISQUALIFIERS: Tuple[re.Pattern, ...] = (
    # Media filenames
    re.compile(r'\.(?:png|jpg|jpeg|gif|pdf|doc|docx)$', re.IGNORECASE),
    # Filler words starting a longer phrase
    re.compile(r'^(?:Last|First|The|This|That|Google|Image|File|Document)\s+\w+', re.IGNORECASE),
    # Conversational openers and banner phrases
    re.compile(
        r'^(?:One thing|At Friday|Hosted and|Also sent|Added by|View thread|Thread:|Last reply'
        r'|Language|TypeScript|Last updated|Nice|Oh interesting|Interesting|Hey|hi team'
        r'|Just noticed|Went to|New message|First message|Initial message|This is)(?![A-Za-z])',
        re.IGNORECASE,
    ),
    # "<qualifier> <noun>" phrases that read as content ("Main message", "Next step")
    re.compile(
        r'^(?:Main|Continuation|Message|Content|Reply|Response|Update|Comment|Note|Text'
        r'|Information|Details|Summary|Description|Question|Answer|Thanks|Thank|Please|Sorry'
        r'|Sure|Yes|No|Ok|Okay|Right|Well|So|But|And|Or|Also|However|Actually|Really|Just'
        r'|Still|Only|Even|More|Less|Some|Many|Most|All|Any|Each|Every|Both|Either|Neither'
        r'|Few|Several|Other|Another|Next|Last|First|Second|Third|Previous|Following|Above'
        r'|Below|Here|There|Where|When|Why|How|What|Who|Which|That|These|Those|Before|After'
        r'|During|While|Since|Until|If|Unless|Although|Because|As|Like|Such|Same|Different'
        r'|Important|Good|Bad|Great|Nice|Fine|Better|Best|New|Old|Recent|Current|Today'
        r'|Tomorrow|Yesterday|Now|Later|Soon|Never|Always|Again|Finally|Probably|Definitely'
        r'|Basically|Very|Quite|Pretty|Almost|About|Around|Instead|Anyway|Meanwhile)'
        r'\s+(?:part|message|content|text|line|section|paragraph|sentence|word|statement'
        r'|comment|note|reply|response|update|piece|item|thing|point|topic|issue|problem'
        r'|solution|answer|question|example|case|status|step|phase|level|number|result'
        r'|reason|plan|idea|thought|approach|method|way|type|kind|format|pattern|process'
        r'|task|job|work|test|review|decision|option|request|need|person\'?s?)',
        re.IGNORECASE,
    ),
    # Common sentence words anywhere in the line
    re.compile(
        r'\b(?:the|a|an|this|that|these|those|my|your|his|her|its|our|their|some|any|all'
        r'|every|each|many|much|more|most|few|several|other|another|one|two|three|first'
        r'|second|last|next|before|after|during|while|when|where|why|how|what|who|which'
        r'|if|unless|because|since|as|like|than|but|and|or|so|yet|for|nor|to|of|in|on|at'
        r'|by|with|from|up|out|off|over|under|above|below|through|across|into|onto|upon'
        r'|within|without|between|among|around|about|against|towards|throughout|until)\b',
        re.IGNORECASE,
    ),
    # Possessive fragments: "B's continuation"
    re.compile(r"^[A-Z]'s\s+\w+", re.IGNORECASE),
    # Integration metadata
    re.compile(
        r'^(?:Language|TypeScript|Last updated|\d+\s+(?:minutes?|hours?|days?)\s+ago)$',
        re.IGNORECASE,
    ),
    # Dangling "at" (date split across lines)
    re.compile(r'\s+at$', re.IGNORECASE),
    # "Feb 25th at", "Monday 3 at"
    re.compile(
        rf'^(?:{WEEKDAYS}|{MONTHS_SHORT}|{RELATIVE_DAYS})\s+\d{{1,2}}{ORDINAL}\s+at$',
        re.IGNORECASE,
    ),
    # Bare clock time
    re.compile(rf'^{CLOCK}$', re.IGNORECASE),
    # URLs
    re.compile(r'^https?://', re.IGNORECASE),
)

# =============================================================================
# Timestamp axis
# =============================================================================

BRACKETED_TIME_PATTERN = re.compile(r'^\[\d{1,2}:\d{2}\]$')
BARE_TIME_PATTERN = re.compile(rf'^{CLOCK}$', re.IGNORECASE)
LINK_WITH_TEXT_PATTERN = re.compile(r'\[.+\]\(http', re.IGNORECASE)

TIMESTAMP_PATTERNS: Tuple[re.Pattern, ...] = (
    BRACKETED_TIME_PATTERN,
    re.compile(rf'\b({CLOCK})\b', re.IGNORECASE),
    re.compile(
        rf'\b((?:{WEEKDAYS}|{WEEKDAYS_SHORT})(?:\s+at\s+{CLOCK_MERIDIEM})?)\b',
        re.IGNORECASE,
    ),
    re.compile(
        rf'\b((?:{MONTHS_SHORT})\s+\d{{1,2}}{ORDINAL}(?:\s+at\s+{CLOCK_MERIDIEM})?)\b',
        re.IGNORECASE,
    ),
    re.compile(rf'\b((?:{RELATIVE_DAYS})(?:\s+at\s+{CLOCK_MERIDIEM})?)\b', re.IGNORECASE),
    re.compile(rf'\[({LINKED_TIME_TEXT})\]\({ARCHIVE_URL}\)', re.IGNORECASE),
)

# A line that is nothing but a timestamp, in any of the recognised shapes
STANDALONE_TIMESTAMP_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(rf'^\[?{CLOCK}\]?$', re.IGNORECASE),
    re.compile(rf'^\[{CLOCK}\]\({ANY_URL}\)$', re.IGNORECASE),
    re.compile(rf'^(?:{RELATIVE_DAYS})\s+at\s+{CLOCK}$', re.IGNORECASE),
    re.compile(rf'^(?:{WEEKDAYS})\s+at\s+{CLOCK}$', re.IGNORECASE),
    re.compile(
        rf'^(?:{WEEKDAYS}|{MONTHS_SHORT}|{RELATIVE_DAYS})\s+\d{{1,2}}{ORDINAL}\s+at\s+{CLOCK}$',
        re.IGNORECASE,
    ),
    re.compile(rf'^\[(?:{LINKED_TIME_TEXT})\]\({ARCHIVE_URL}\)$', re.IGNORECASE),
)

LINKED_TIMESTAMP_LINE = re.compile(rf'^\[{CLOCK}\]\({ARCHIVE_URL}\)$', re.IGNORECASE)
BRACKETED_CLOCK_LINE = re.compile(rf'^\[{CLOCK}\]$', re.IGNORECASE)
CONTINUATION_MARKERS: Tuple[re.Pattern, ...] = (
    re.compile(rf'^\[{CLOCK}\]\({ANY_URL}\)$', re.IGNORECASE),
    BRACKETED_CLOCK_LINE,
)

# Line following a username-only header that carries its timestamp
TIMESTAMP_LINE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(
        rf'^\s*(?:{CLOCK}|(?:{WEEKDAYS}|{MONTHS_SHORT}|{RELATIVE_DAYS}).*?{CLOCK})',
        re.IGNORECASE,
    ),
    re.compile(rf'^\s*\[.*\]\({ARCHIVE_URL}\)'),
)

# Indented time directly under a header
INDENTED_TIME_PATTERN = re.compile(rf'^\s{{2,}}{CLOCK}', re.IGNORECASE)

# =============================================================================
# Combined username + timestamp (header lines)
# =============================================================================


class HeaderPattern(NamedTuple):
    """A combined header shape and where its fields sit in the match groups."""
    pattern: re.Pattern
    username_groups: Tuple[int, ...]  # concatenated in order
    timestamp_group: int


# "Yesterday at", "Tuesday at", "Feb 6th at" leading a header's time
DAY_AT_TIME = (
    rf'(?:{RELATIVE_DAYS}|{WEEKDAYS})\s+at\s+{CLOCK}'
    rf'|(?:{MONTHS_LONG}|{MONTHS_SHORT})\s+\d{{1,2}}{ORDINAL}\s+at\s+{CLOCK_MERIDIEM}'
)
DAY_AT_PREFIX = (
    rf'(?:{RELATIVE_DAYS}|{WEEKDAYS})\s+at\s'
    rf'|(?:{MONTHS_LONG}|{MONTHS_SHORT})\s+\d{{1,2}}{ORDINAL}\s+at\s'
)

HEADER_PATTERNS: Tuple[HeaderPattern, ...] = (
    # Name (possibly doubled) + linked timestamp
    HeaderPattern(
        re.compile(rf'^({NAME_CHARS}+?)(?:\1)?\s*\[([^\]]+)\]\({ARCHIVE_URL}\)\s*$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name + day at time: "Alex Mittell Yesterday at 3:45 PM"
    HeaderPattern(
        re.compile(rf'^({NAME_CHARS}+?)\s+({DAY_AT_TIME})$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name at time: "Alex Mittell at 3:45 PM", but not "Yesterday at 3:45 PM"
    HeaderPattern(
        re.compile(rf'^(?!{DAY_AT_PREFIX})({NAME_CHARS}+?)\s+at\s+({CLOCK})$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name (possibly doubled) + time
    HeaderPattern(
        re.compile(rf'^({NAME_CHARS}+?)(?:\1)?\s+({CLOCK})$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name + [time]
    HeaderPattern(
        re.compile(rf'^({NAME_CHARS}+?)\s+\[({CLOCK})\]$', re.IGNORECASE),
        (1,), 2,
    ),
    # Anything + timestamp linked to the message archive
    HeaderPattern(
        re.compile(rf'^(.+?)\s+\[({LINKED_TIME_TEXT})\]\({ARCHIVE_URL}\)$', re.IGNORECASE),
        (1,), 2,
    ),
    # Short name + any linked text
    HeaderPattern(
        re.compile(rf'^({NAME_CHARS}{{2,30}})\s+\[([^\]]+)\]\({ANY_URL}\)$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name at time
    HeaderPattern(
        re.compile(r'^(.+?)\s+(?:at\s+)?(\d{1,2}:\d{2})\s*$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name<emoji>time
    HeaderPattern(
        re.compile(rf'^(.+?)(?:{EMOJI_CODE}|{PICTOGRAPH})+\s*({CLOCK})$', re.IGNORECASE),
        (1,), 2,
    ),
    # Name<emoji> time
    HeaderPattern(
        re.compile(rf'^(.+?)(:[a-zA-Z0-9_+-]+:)\s+({CLOCK})$', re.IGNORECASE),
        (1,), 3,
    ),
    # Letters-only name + time
    HeaderPattern(
        re.compile(
            rf'^([A-Za-zÀ-ſ][A-Za-z\s\-_.À-ſ]+?)\s+({CLOCK})$',
            re.IGNORECASE,
        ),
        (1,), 2,
    ),
    # Explicitly doubled name + archive link: "Amy BritoAmy Brito [3:13 PM](...)"
    HeaderPattern(
        re.compile(
            rf'^([A-Za-z\sÀ-ſ]+)\1\s+\[({CLOCK})\]'
            r'\(https?://[^)]*/archives/[CD][A-Z0-9]+/p\d+\)\s*$',
            re.IGNORECASE,
        ),
        (1,), 2,
    ),
    # Each name part doubled: "AmyAmy BritoBrito [3:13 PM]..."
    HeaderPattern(
        re.compile(rf'^([A-Za-z]+)\1([A-Za-z\s]+)\2\s+\[({CLOCK})\].*$', re.IGNORECASE),
        (1, 2), 3,
    ),
)

# =============================================================================
# Date separators
# =============================================================================

DATE_SEPARATOR_PATTERNS: Tuple[re.Pattern, ...] = (
    # "Monday, March 4th, 2024"
    re.compile(
        rf'^(?:{WEEKDAYS}),?\s+(?:{MONTHS_LONG})\s+\d{{1,2}}{ORDINAL}(?:,?\s+\d{{4}})?$',
        re.IGNORECASE,
    ),
    # "--- Today ---", "--- March 4th, 2024 ---"
    re.compile(r'^---\s*(.+?)\s*---$'),
)

# =============================================================================
# Metadata / noise
# =============================================================================

REPLY_COUNT_PATTERN = re.compile(r'^\d+\s+repl(?:y|ies)', re.IGNORECASE)
VIEW_THREAD_PATTERN = re.compile(r'^View thread$', re.IGNORECASE)
THREAD_PREFIX_PATTERN = re.compile(r'^Thread:', re.IGNORECASE)
LAST_REPLY_PATTERN = re.compile(r'^Last reply', re.IGNORECASE)
REPLIED_TO_THREAD_PATTERN = re.compile(r'^replied to a thread:', re.IGNORECASE)
BROADCAST_PATTERN = re.compile(r'^Also sent to the channel$', re.IGNORECASE)
ADDED_BY_PATTERN = re.compile(r'^Added by', re.IGNORECASE)
FILE_COUNT_PATTERN = re.compile(r'^\d+\s+files?$', re.IGNORECASE)
EMOJI_CODE_LINE = re.compile(r'^:[a-zA-Z0-9_+-]+:$')
# First half of a reaction pair: ":thumbsup:" or "👍" above its count
REACTION_EMOJI_LINE = re.compile(rf'^(?::[a-zA-Z0-9_+-]+:|{PICTOGRAPH_WIDE}\ufe0f?)$')
INLINE_REACTION_LINE = re.compile(r'^:\w+:\s*\d+')  # ":tada: 2"
BARE_NUMBER_LINE = re.compile(r'^\d+$')
LAST_REPLY_VIEW_THREAD = re.compile(r'Last reply.*View thread', re.IGNORECASE)
VIEW_THREAD_ANYWHERE = re.compile(r'View thread', re.IGNORECASE)

METADATA_PATTERNS: Tuple[re.Pattern, ...] = (
    REPLY_COUNT_PATTERN,
    re.compile(r'\d+\s+repl(?:y|ies)$', re.IGNORECASE),
    VIEW_THREAD_PATTERN,
    THREAD_PREFIX_PATTERN,
    INLINE_REACTION_LINE,
    re.compile(r'^This message was deleted', re.IGNORECASE),
    re.compile(r'^\+1$'),
    re.compile(r'^---+$'),
    REPLIED_TO_THREAD_PATTERN,
    LAST_REPLY_PATTERN,
    re.compile(r'^View newer replies$', re.IGNORECASE),
    ADDED_BY_PATTERN,
    FILE_COUNT_PATTERN,
    EMOJI_CODE_LINE,
    re.compile(r'^!\[:.*?:\]\(.*?\)$'),
    BARE_NUMBER_LINE,
    BROADCAST_PATTERN,
    re.compile(r'^\d+\s+(?:new\s+)?messages?$', re.IGNORECASE),
    re.compile(r'^Language$', re.IGNORECASE),
    re.compile(
        r'^(?:TypeScript|JavaScript|Python|Java|Go|Ruby|PHP|C\+\+|C#|Swift|Kotlin|Rust|Scala'
        r'|Haskell|Clojure|Elixir|Erlang)$',
        re.IGNORECASE,
    ),
    re.compile(r'^Last updated$', re.IGNORECASE),
    re.compile(r'^\d+\s+(?:minutes?|hours?|days?|weeks?|months?|years?)\s+ago$', re.IGNORECASE),
    re.compile(r'^!\[[^\]]*\]\(https?://[^)]+\)$'),
    re.compile(r'^[\w-]+/[\w-]+$'),
)

# Metadata the segmenter keeps attached to the open block for the extractor
BLOCK_METADATA_PATTERNS: Tuple[re.Pattern, ...] = (
    REPLY_COUNT_PATTERN,
    BROADCAST_PATTERN,
    ADDED_BY_PATTERN,
    FILE_COUNT_PATTERN,
    VIEW_THREAD_PATTERN,
    THREAD_PREFIX_PATTERN,
    LAST_REPLY_PATTERN,
    INLINE_REACTION_LINE,
    REPLIED_TO_THREAD_PATTERN,
)

# Metadata that may sit inside a message body without ending it
IN_BODY_METADATA_PATTERNS: Tuple[re.Pattern, ...] = (
    REPLY_COUNT_PATTERN,
    BROADCAST_PATTERN,
    VIEW_THREAD_PATTERN,
)

# Lines that make up the thread-info string
THREAD_INFO_PATTERNS: Tuple[re.Pattern, ...] = (
    REPLY_COUNT_PATTERN,
    VIEW_THREAD_ANYWHERE,
    REPLIED_TO_THREAD_PATTERN,
    LAST_REPLY_PATTERN,
    BROADCAST_PATTERN,
    THREAD_PREFIX_PATTERN,
)

# A "replied to a thread:" quote is not captured if it looks like these
THREAD_QUOTE_STOP_PATTERNS: Tuple[re.Pattern, ...] = (
    REPLY_COUNT_PATTERN,
    re.compile(r'^View thread', re.IGNORECASE),
    LAST_REPLY_PATTERN,
    EMOJI_CODE_LINE,
)

# =============================================================================
# Reactions
# =============================================================================

# ![:subscribe:](url)4![:heavy_plus_sign:](url)1
CUSTOM_EMOJI_REACTION = re.compile(r'!\[:([^:]+):\]\([^)]+\)(\d+)')
# :thumbsup: 3, 👍 2
STANDARD_REACTION = re.compile(rf'(:[a-zA-Z0-9_+-]+:|{PICTOGRAPH_WIDE})\s*(\d+)')

# =============================================================================
# Avatars and usernames
# =============================================================================

SLACK_AVATAR_LINE = re.compile(r'^!\[\]\((https://ca\.slack-edge\.com/[^)]+)\)$')
IMAGE_LINE = re.compile(r'^!\[(.*?)\]\((https?://[^)]+)\)$')
AVATAR_PREFIX = re.compile(r'^!\[.*?\]\(.*?\)\s*')
CUSTOM_EMOJI_IMAGE = re.compile(r'!?\[:[\w\-+]+:\]\([^)]+\)')
EMOJI_CODE_ANYWHERE = re.compile(r':[a-zA-Z0-9_+-]+:')
PICTOGRAPH_ANYWHERE = re.compile(PICTOGRAPH_WIDE)
TRAILING_PUNCTUATION = re.compile(r'[!?,.;:]+$')
DOUBLED_NAME = re.compile(r'^(.{3,}?)\s*\1$')
DOUBLED_NAME_PARTS = re.compile(r'(\b[\wÀ-ſ-]+)\s+\1([\wÀ-ſ-]+)\s+\2\b')

DANGLING_AT = re.compile(r'\s+at$', re.IGNORECASE)

# Header "usernames" that are really continuation text
SUSPICIOUS_USERNAME_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(
        r'^(?:One thing|At Friday|Hosted and|Also sent|Added by|View thread|Thread:|Last reply)',
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:Estimated timeline|We haven't notified|They have|They already|They take|They agreed)",
        re.IGNORECASE,
    ),
    re.compile(rf'^(?:{MONTHS_SHORT})\s+\d{{1,2}}{ORDINAL}\s+at$', re.IGNORECASE),
    re.compile(rf'^(?:{WEEKDAYS})\s+at$', re.IGNORECASE),
    re.compile(rf'^(?:{RELATIVE_DAYS})\s+at$', re.IGNORECASE),
)

# =============================================================================
# Document-level format hints
# =============================================================================

DM_FORMAT_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r'^\[\d{1,2}:\d{2}\]\(https://.*/archives/D[A-Z0-9]+/p\d+\)$', re.MULTILINE),
    re.compile(r'/archives/D[A-Z0-9]+/'),
)
THREAD_FORMAT_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r'thread_ts='),
    re.compile(r'^!\[\]\(https://ca\.slack-edge\.com/', re.MULTILINE),
    re.compile(r'\d+\s+replies'),
    re.compile(r'Last reply.*ago.*View thread'),
)
CHANNEL_FORMAT_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r'/archives/C[A-Z0-9]+/'),
    re.compile(r'^---\s*[A-Za-z]', re.MULTILINE),
)
