"""
Timestamp normalization for pasted chat headers.

Chat UIs show times relative to the viewer: "3:45 PM", "Yesterday at 9:02 AM",
"Tuesday", "Feb 6th at 7:47 PM", or the same wrapped in a markdown link to
the message archive. normalize_timestamp() resolves all of these to an
absolute datetime, using the date separator in force (context_date) and a
reference "now" for relative forms.

Contents:
    - parse_date: Date-only parse with explicit rollover rejection
    - normalize_timestamp: Resolve a raw header timestamp to a datetime
    - MONTHS: Month name/abbreviation -> month number

Nothing here raises on bad input; unparseable strings return None.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from dateutil import parser as dateparser

from .patterns import WEEKDAYS

logger = logging.getLogger(__name__)

MONTHS = {
    'jan': 1, 'january': 1, 'feb': 2, 'february': 2, 'mar': 3, 'march': 3,
    'apr': 4, 'april': 4, 'may': 5, 'jun': 6, 'june': 6, 'jul': 7, 'july': 7,
    'aug': 8, 'august': 8, 'sep': 9, 'sept': 9, 'september': 9,
    'oct': 10, 'october': 10, 'nov': 11, 'november': 11, 'dec': 12, 'december': 12,
}
WEEKDAY_INDEX = {
    'monday': 0, 'tuesday': 1, 'wednesday': 2, 'thursday': 3,
    'friday': 4, 'saturday': 5, 'sunday': 6,
}

_MONTH_ALTERNATION = '|'.join(sorted(MONTHS, key=len, reverse=True))

YMD_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
TRAILING_YEAR_PATTERN = re.compile(r',\s*(\d{4})$')
MONTH_DAY_PATTERN = re.compile(rf'\b({_MONTH_ALTERNATION})[\s.]*(\d{{1,2}})(?:st|nd|rd|th)?', re.IGNORECASE)
FOUR_DIGIT_YEAR = re.compile(r'\b\d{4}\b')

# Relative and clock forms, tried in order by normalize_timestamp()
TODAY_PATTERN = re.compile(r'^Today(?:\s+at\s+(\d{1,2}):(\d{2})\s*(AM|PM)?)?$', re.IGNORECASE)
YESTERDAY_PATTERN = re.compile(r'^Yesterday(?:\s+at\s+(\d{1,2}):(\d{2})\s*(AM|PM)?)?$', re.IGNORECASE)
WEEKDAY_PATTERN = re.compile(
    rf'^({WEEKDAYS})(?:\s+at\s+(\d{{1,2}}):(\d{{2}})\s*(AM|PM)?)?$', re.IGNORECASE
)
CLOCK_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})\s*(AM|PM)?$', re.IGNORECASE)
MONTH_DAY_AT_PATTERN = re.compile(
    r'^(\w+)\s+(\d{1,2})(?:st|nd|rd|th)?\s+at\s+(\d{1,2}):(\d{2})\s*(AM|PM)$', re.IGNORECASE
)
MONTH_DAY_ONLY_PATTERN = re.compile(r'^(\w+)\s+(\d{1,2})(?:st|nd|rd|th)?$', re.IGNORECASE)
LINKED_PATTERN = re.compile(r'^\[([^\]]+)\]\(https?://[^)]+\)$')
SECONDS_PATTERN = re.compile(r'^(\d{1,2}):(\d{2}):(\d{2})\s*(AM|PM)?$', re.IGNORECASE)
DATE_AND_TIME_PATTERN = re.compile(
    r'^(\w+\s+\d{1,2}(?:st|nd|rd|th)?)(?:,\s*(\d{4}))?(?:\s+at\s+(.+))?$', re.IGNORECASE
)
TIME_PART_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})\s*(AM|PM)$', re.IGNORECASE)


def parse_date(date_str: str, today: Optional[datetime] = None) -> Optional[date]:
    """Parse a date-only string, rejecting calendar rollovers.

    Accepts "YYYY-MM-DD", "Month Day, Year" and "Month Day" (current year).
    "Feb 30" is rejected rather than rolled into March.

    Args:
        date_str: Text such as "Feb 29, 2024" or "Monday, March 4th"
        today: Reference for the default year (defaults to now)

    Returns:
        date, or None if the string is not a valid date
    """
    if not date_str:
        return None
    cleaned = date_str.strip()

    ymd = YMD_PATTERN.match(cleaned)
    if ymd:
        year, month, day = (int(g) for g in ymd.groups())
    else:
        year_match = TRAILING_YEAR_PATTERN.search(cleaned)
        year = int(year_match.group(1)) if year_match else (today or datetime.now()).year
        month_day = MONTH_DAY_PATTERN.search(cleaned)
        if not month_day:
            logger.debug(f"No month/day in {cleaned!r}")
            return None
        month = MONTHS[month_day.group(1).lower()]
        day = int(month_day.group(2))

    try:
        return date(year, month, day)
    except ValueError:
        logger.warning(f"Invalid date {cleaned!r} ({year}-{month}-{day})")
        return None


def _clock(hour: int, minute: int, meridiem: Optional[str] = None,
           second: int = 0) -> Optional[Tuple[int, int, int]]:
    """Validate and convert a clock reading to 24-hour (hour, minute, second)."""
    if not 0 <= minute <= 59 or not 0 <= second <= 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        meridiem = meridiem.upper()
        if meridiem == 'PM' and hour < 12:
            hour += 12
        elif meridiem == 'AM' and hour == 12:
            hour = 0
    elif not 0 <= hour <= 23:
        return None
    return hour, minute, second


def _at(day: date, clock: Optional[Tuple[int, int, int]]) -> Optional[datetime]:
    if clock is None:
        return None
    return datetime(day.year, day.month, day.day, *clock)


def _clock_from(match: re.Match, first_group: int) -> Optional[Tuple[int, int, int]]:
    """Clock from (hour, minute, meridiem) groups; midnight when absent."""
    hour = match.group(first_group)
    if hour is None:
        return 0, 0, 0
    return _clock(int(hour), int(match.group(first_group + 1)), match.group(first_group + 2))


def _parse_calendar_string(text: str, now: datetime) -> Optional[datetime]:
    """ISO strings, or anything dateutil understands that carries a year.

    Strings without a four digit year are left to the relative forms, since
    dateutil would otherwise anchor "3:45 PM" to today and ignore the
    date context. Fields the text leaves out come from the first of now's
    month at midnight, never from the wall clock.
    """
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        pass
    if not FOUR_DIGIT_YEAR.search(text):
        return None
    default = datetime(now.year, now.month, 1)
    try:
        return dateparser.parse(text, default=default)
    except (ValueError, OverflowError) as e:
        logger.debug(f"dateutil could not parse {text!r}: {e}")
        return None


def _parse_date_and_time(text: str, context_date: Optional[date],
                         now: datetime) -> Optional[datetime]:
    """'Feb 6th, 2024 at 7:47 PM' style strings, split into date and time parts."""
    match = DATE_AND_TIME_PATTERN.match(text)
    if not match:
        return None
    date_part, year, time_part = match.groups()
    default_year = context_date.year if context_date else now.year
    day = parse_date(f"{date_part}, {year or default_year}")
    if day is None:
        return None
    if not time_part:
        return _at(day, (0, 0, 0))
    time_match = TIME_PART_PATTERN.match(time_part.strip())
    if not time_match:
        return None
    return _at(day, _clock(int(time_match.group(1)), int(time_match.group(2)), time_match.group(3)))


def normalize_timestamp(raw: Optional[str], context_date: Optional[date] = None,
                        now: Optional[datetime] = None) -> Optional[datetime]:
    """Resolve a raw header timestamp to an absolute datetime.

    Args:
        raw: Timestamp text as it appeared in the paste
        context_date: Date from the last date separator, if any
        now: Reference time for relative forms (defaults to datetime.now())

    Returns:
        datetime, or None if the text is not a recognisable timestamp
    """
    if not raw or not raw.strip():
        return None
    now = now or datetime.now()
    text = raw.strip()

    linked = LINKED_PATTERN.match(text)
    if not linked and len(text) > 1 and (text[0], text[-1]) in (('[', ']'), ('(', ')')):
        text = text[1:-1].strip()

    try:
        parsed = _parse_calendar_string(text, now)
        if parsed is not None:
            return parsed

        match = TODAY_PATTERN.match(text)
        if match:
            return _at(now.date(), _clock_from(match, 1))

        match = YESTERDAY_PATTERN.match(text)
        if match:
            return _at(now.date() - timedelta(days=1), _clock_from(match, 1))

        match = WEEKDAY_PATTERN.match(text)
        if match:
            target = WEEKDAY_INDEX[match.group(1).lower()]
            days_ago = (now.weekday() - target) % 7 or 7
            return _at(now.date() - timedelta(days=days_ago), _clock_from(match, 2))

        match = CLOCK_PATTERN.match(text)
        if match:
            base = context_date or now.date()
            return _at(base, _clock(int(match.group(1)), int(match.group(2)), match.group(3)))

        match = MONTH_DAY_AT_PATTERN.match(text)
        if match and match.group(1).lower() in MONTHS:
            year = context_date.year if context_date else now.year
            day = date(year, MONTHS[match.group(1).lower()], int(match.group(2)))
            return _at(day, _clock(int(match.group(3)), int(match.group(4)), match.group(5)))

        match = MONTH_DAY_ONLY_PATTERN.match(text)
        if match and match.group(1).lower() in MONTHS:
            year = context_date.year if context_date else now.year
            return _at(date(year, MONTHS[match.group(1).lower()], int(match.group(2))), (0, 0, 0))

        if linked:
            return normalize_timestamp(linked.group(1), context_date, now)

        match = SECONDS_PATTERN.match(text)
        if match:
            base = context_date or now.date()
            return _at(base, _clock(int(match.group(1)), int(match.group(2)),
                                    match.group(4), int(match.group(3))))

        return _parse_date_and_time(text, context_date, now)
    except ValueError as e:
        logger.debug(f"Rejected timestamp {raw!r}: {e}")
        return None
