#!/usr/bin/env python3
"""
Tests for the final pass: blocks -> Message records.

Run with:
    python tests/run_tests.py test_materializer
    python -m pytest tests/test_materializer.py -v
"""

import sys
from datetime import date, datetime
from pathlib import Path

TOOL_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(TOOL_ROOT))

from components.chatparse.lib.materializer import (
    filter_leftover_timestamps,
    materialize_messages,
)
from components.chatparse.lib.models import (
    MessageBlock,
    ParserContext,
    Reaction,
    UNKNOWN_USER,
)

NOW = datetime(2024, 3, 6, 12, 0)


def _materialize(*blocks):
    context = ParserContext(lines=[], blocks=list(blocks), now=NOW)
    return materialize_messages(context), context


# =============================================================================
# filter_leftover_timestamps
# =============================================================================

def test_timestamp_kept_before_text_from_known_user():
    block = MessageBlock(start_line=0, end_line=2, username="Alex Mittell",
                         content=["3:45 PM", "Hello"])
    assert filter_leftover_timestamps(block) == ["3:45 PM", "Hello"]


def test_trailing_timestamp_dropped():
    block = MessageBlock(start_line=0, end_line=2, username="Alex Mittell",
                         content=["Hello", "3:45 PM"])
    assert filter_leftover_timestamps(block) == ["Hello"]


def test_timestamp_dropped_for_unknown_user():
    block = MessageBlock(start_line=0, end_line=2, username=UNKNOWN_USER,
                         content=["3:45 PM", "Hello"])
    assert filter_leftover_timestamps(block) == ["Hello"]


# =============================================================================
# materialize_messages
# =============================================================================

def test_unparseable_timestamp_kept_raw():
    messages, _ = _materialize(MessageBlock(
        start_line=0, end_line=1, username="Alex Mittell",
        timestamp="sometime later", content=["Hello"],
    ))
    assert len(messages) == 1
    assert messages[0].timestamp == "sometime later"


def test_timestamp_resolved_against_block_date():
    messages, context = _materialize(
        MessageBlock(start_line=0, end_line=1, username="Alex Mittell", timestamp="10:30 AM",
                     content=["Morning update for the team"], date_context=date(2024, 3, 4)),
        MessageBlock(start_line=2, end_line=3, username="Jordan Lee", timestamp="11:00 AM",
                     content=["Thanks for the summary"]),
    )
    assert [m.timestamp for m in messages] == ["2024-03-04T10:30:00", "2024-03-04T11:00:00"]
    assert context.current_date == date(2024, 3, 4)


def test_missing_username_becomes_sentinel():
    messages, _ = _materialize(MessageBlock(start_line=0, end_line=0, content=["stray words here"]))
    assert messages[0].username == UNKNOWN_USER
    assert messages[0].timestamp is None


def test_text_joined_and_trimmed():
    messages, _ = _materialize(MessageBlock(
        start_line=0, end_line=3, username="Alex Mittell",
        content=["", "First paragraph", "", "Second paragraph", ""],
    ))
    assert messages[0].text == "First paragraph\n\nSecond paragraph"


def test_empty_block_skipped():
    messages, _ = _materialize(MessageBlock(start_line=0, end_line=1, username="Alex Mittell",
                                            timestamp="3:45 PM", content=["", "  "]))
    assert messages == []


def test_reaction_only_block_kept():
    messages, _ = _materialize(MessageBlock(
        start_line=0, end_line=1, username="Alex Mittell",
        reactions=[Reaction(name="eyes", count=2)],
    ))
    assert len(messages) == 1
    assert messages[0].text == ""
    assert messages[0].reactions == [Reaction(name="eyes", count=2)]


def test_avatar_and_thread_info_copied():
    messages, _ = _materialize(MessageBlock(
        start_line=1, end_line=2, username="Alex Mittell",
        avatar_url="https://ca.slack-edge.com/T01-U01-abc123-48",
        thread_info="13 replies", content=["Hello"],
    ))
    assert messages[0].avatar == "https://ca.slack-edge.com/T01-U01-abc123-48"
    assert messages[0].thread_info == "13 replies"


def test_to_dict_omits_empty_fields():
    messages, _ = _materialize(MessageBlock(start_line=0, end_line=1, username="Alex Mittell",
                                            content=["Hello"]))
    assert messages[0].to_dict() == {"username": "Alex Mittell", "timestamp": None, "text": "Hello"}
