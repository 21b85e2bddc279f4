#!/usr/bin/env python3
"""
End-to-end tests for parse_conversation().

These tests verify:
- Header layouts (inline, doubled + linked, name then time)
- Reactions, thread banners and attachments end up as structure
- Date separators anchor bare times
- Re-parse stability, dedup, user/emoji maps
- Nothing raises, whatever the input

Run with:
    python tests/run_tests.py test_parser
    python -m pytest tests/test_parser.py -v
"""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

TOOL_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(TOOL_ROOT))

from components.chatparse.lib.models import ParserOptions, Reaction, UNKNOWN_USER
from components.chatparse.lib.parser import (
    ConversationParser,
    deduplicate_messages,
    detect_format,
    parse_conversation,
)

FIXTURES_DIR = TOOL_ROOT / 'tests' / 'fixtures'
NOW = datetime(2024, 3, 6, 12, 0)
ARCHIVE_LINK = "https://acme.slack.com/archives/C0123ABC/p1700000000123"


def _parse(text, **kwargs):
    return parse_conversation(text, ParserOptions(now=NOW, **kwargs))


def _fixture(name):
    return (FIXTURES_DIR / name).read_text(encoding='utf-8')


# =============================================================================
# Core scenarios
# =============================================================================

def test_doubled_username():
    messages = _parse("Alex MittellAlex Mittell\n  3:13 PM\nHello")
    assert len(messages) == 1
    assert messages[0].username == "Alex Mittell"
    assert messages[0].text == "Hello"
    assert messages[0].timestamp == "2024-03-06T15:13:00"


def test_thread_banner_absorbed():
    messages = _parse(
        "Alex Mittell 3:45 PM\n"
        "We should cut the release branch soon\n"
        "13 replies\n"
        "Last reply 2 hours agoView thread"
    )
    assert len(messages) == 1
    assert messages[0].thread_info
    assert "13 replies" not in messages[0].text
    assert "View thread" not in messages[0].text
    assert messages[0].text == "We should cut the release branch soon"


def test_reaction_pair():
    messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now\n:thumbsup:\n3")
    assert messages[0].reactions == [Reaction(name="thumbsup", count=3)]
    assert ":thumbsup:" not in messages[0].text
    assert messages[0].text == "Shipping the fix to staging now"


def test_unparseable_timestamp_passthrough():
    messages = _parse(f"Alex Mittell [sometime later]({ARCHIVE_LINK})\nThanks for the update")
    assert len(messages) == 1
    assert messages[0].timestamp == "sometime later"
    assert messages[0].text == "Thanks for the update"


def test_date_separator_anchors_bare_times():
    messages = _parse(
        "Monday, March 4th, 2024\n"
        "Alex Mittell 10:30 AM\n"
        "Morning update for the team\n"
        "\n"
        "Jordan Lee 11:15 AM\n"
        "Thanks for the summary\n"
        "\n"
        "Alex Mittell 11:40 AM\n"
        "One more thing about the deploy"
    )
    assert len(messages) == 3
    assert all(m.timestamp.startswith("2024-03-04T") for m in messages)
    assert [m.username for m in messages] == ["Alex Mittell", "Jordan Lee", "Alex Mittell"]


def test_body_line_that_looks_like_a_name():
    """A short capitalised body line does not start a new message."""
    messages = _parse(
        "Alex Mittell 3:45 PM\n"
        "Shipping the fix to staging now\n"
        "Let's ship it\n"
        "\n"
        "Jordan Lee 3:50 PM\n"
        "Looks good to me"
    )
    assert [m.username for m in messages] == ["Alex Mittell", "Jordan Lee"]
    assert messages[0].text == "Shipping the fix to staging now\nLet's ship it"


def test_replied_to_thread_quote():
    messages = _parse("Alex Mittell 3:45 PM\nreplied to a thread:\nOriginal question\nMy answer")
    assert len(messages) == 1
    assert messages[0].thread_info == 'replied to a thread: "Original question"'
    assert messages[0].text == "My answer"


def test_name_at_time_headers():
    messages = _parse(
        "Jordan Lee Yesterday at 9:02 AM\n"
        "Reviewed the migration plan\n"
        "\n"
        "Alex Mittell at 3:45 PM\n"
        "Shipping the fix to staging now"
    )
    assert [m.username for m in messages] == ["Jordan Lee", "Alex Mittell"]
    assert [m.timestamp for m in messages] == ["2024-03-05T09:02:00", "2024-03-05T15:45:00"]


def test_pictograph_reaction_pair():
    messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now\n👍\n3")
    assert messages[0].reactions == [Reaction(name="👍", count=3)]
    assert messages[0].text == "Shipping the fix to staging now"


def test_times_under_names_follow_each_date_separator():
    messages = _parse(
        "Monday, March 4th, 2024\n"
        "Alex Mittell\n"
        "  9:15 AM\n"
        "Posted the standup notes\n"
        "Jordan Lee\n"
        "  2:30 PM\n"
        "Reviewed the migration plan\n"
        "\n"
        "Tuesday, March 5th, 2024\n"
        "Alex Mittell\n"
        "10:05 AM\n"
        "Deploy went out to staging\n"
        "Sam Ortiz\n"
        "  1:20 PM\n"
        "Rollback plan is ready for the release"
    )
    assert [m.username for m in messages] == ["Alex Mittell", "Jordan Lee", "Alex Mittell", "Sam Ortiz"]
    assert [m.timestamp for m in messages] == [
        "2024-03-04T09:15:00",
        "2024-03-04T14:30:00",
        "2024-03-05T10:05:00",
        "2024-03-05T13:20:00",
    ]
    assert messages == sorted(messages, key=lambda m: m.timestamp)
    assert messages[1].text == "Reviewed the migration plan"


# =============================================================================
# Fixtures
# =============================================================================

def test_channel_fixture():
    messages = _parse(_fixture("channel-day.txt"))
    assert [m.username for m in messages] == ["Alex Mittell", "Jordan Lee", "Sam Ortiz"]
    assert [m.timestamp for m in messages] == [
        "2024-03-04T10:30:00", "2024-03-04T11:15:00", "2024-03-04T11:40:00"
    ]

    alex, jordan, sam = messages
    assert alex.avatar == "https://ca.slack-edge.com/T01-U01-abc123-48"
    assert alex.text == "Morning update for the team"
    assert alex.reactions == [Reaction(name="thumbsup", count=3)]
    assert alex.thread_info == "13 replies Last reply 2 hours agoView thread"
    assert jordan.reactions == [Reaction(name="tada", count=2)]
    assert jordan.avatar is None
    assert sam.text == "One more question about the deploy\n\n📎 2 files - Added by Google Drive"


def test_dm_fixture_with_continuation():
    messages = _parse(_fixture("dm-linked.txt"))
    assert [m.username for m in messages] == ["Alex Mittell", "Jordan Lee"]
    assert messages[0].timestamp == "2024-03-06T15:13:00"
    assert messages[0].text == "Can you take a look at the migration?"
    assert messages[1].text.startswith("Sure, on it now")
    assert "[3:22 PM](" in messages[1].text
    assert messages[1].text.endswith("Looks fine to me")


def test_no_content_loss():
    """Every body line of the fixture lands in some message text."""
    messages = _parse(_fixture("channel-day.txt"))
    combined = "\n".join(m.text for m in messages)
    for line in ("Morning update for the team", "Thanks for the summary",
                 "One more question about the deploy"):
        assert line in combined


# =============================================================================
# Properties
# =============================================================================

def test_reparse_is_identical():
    text = _fixture("channel-day.txt")
    first = [m.to_dict() for m in _parse(text)]
    second = [m.to_dict() for m in _parse(text)]
    assert first == second


def test_reaction_parity():
    """Extracted counts add up to the counts written in the paste."""
    messages = _parse(
        "Alex Mittell 3:45 PM\n"
        "Shipping the fix to staging now\n"
        ":thumbsup:\n"
        "3\n"
        ":tada: 2\n"
        "![:subscribe:](https://emoji.slack-edge.com/T01/subscribe/abc.png)4"
    )
    assert sum(r.count for m in messages for r in m.reactions) == 9


def test_debug_does_not_change_output():
    text = _fixture("channel-day.txt")
    plain = [m.to_dict() for m in _parse(text)]
    traced = [m.to_dict() for m in _parse(text, debug=True)]
    assert plain == traced


# =============================================================================
# Dedup and maps
# =============================================================================

def test_duplicate_messages_removed():
    text = (
        "Alex Mittell 3:45 PM\n"
        "Shipping the fix to staging now\n"
        "\n"
        "Alex Mittell 3:45 PM\n"
        "Shipping the fix to staging now"
    )
    assert len(_parse(text)) == 1
    assert len(_parse(text, deduplicate=False)) == 2


def test_deduplicate_messages_keeps_first():
    messages = _parse("Alex Mittell 3:45 PM\nfirst of the notes\n\nJordan Lee 3:50 PM\nsecond of the notes")
    doubled = messages + messages
    assert deduplicate_messages(doubled) == messages


def test_user_map_applied():
    messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now",
                      user_map={"Alex Mittell": "alex.m"})
    assert messages[0].username == "alex.m"


def test_user_map_missing_key_passes_through():
    messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now",
                      user_map={"Someone Else": "else"})
    assert messages[0].username == "Alex Mittell"


def test_emoji_map_sets_glyph():
    messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now\n:thumbsup:\n3",
                      emoji_map={"thumbsup": "👍"})
    assert messages[0].reactions[0].glyph == "👍"
    assert messages[0].reactions[0].to_dict() == {"name": "thumbsup", "count": 3, "glyph": "👍"}


def test_maps_not_mutated():
    user_map = {"Alex Mittell": "alex.m"}
    emoji_map = {"thumbsup": "👍"}
    _parse("Alex Mittell 3:45 PM\nShipping the fix\n:thumbsup:\n3",
           user_map=user_map, emoji_map=emoji_map)
    assert user_map == {"Alex Mittell": "alex.m"}
    assert emoji_map == {"thumbsup": "👍"}


# =============================================================================
# Robustness
# =============================================================================

def test_empty_input():
    assert _parse("") == []
    assert _parse("   \n\n  ") == []


def test_windows_line_endings():
    messages = _parse("Alex Mittell 3:45 PM\r\nShipping the fix to staging now\r\n")
    assert messages[0].text == "Shipping the fix to staging now"


def test_prose_goes_to_unknown_user():
    messages = _parse("just some words of prose\nwith the lines of text")
    assert len(messages) == 1
    assert messages[0].username == UNKNOWN_USER
    assert messages[0].text == "just some words of prose\nwith the lines of text"


def test_garbage_input_never_raises():
    for text in ("[" * 5000, "\n" * 1000, ":::\n999\n---\n", "🎉\n" * 50, "\x00\x01"):
        assert isinstance(_parse(text), list)


def test_failed_pass_keeps_partial_result():
    with patch("components.chatparse.lib.parser.refine_blocks", side_effect=RuntimeError("boom")):
        messages = _parse("Alex Mittell 3:45 PM\nShipping the fix to staging now")
    assert len(messages) == 1
    assert messages[0].username == "Alex Mittell"


def test_parser_instance_reusable():
    parser = ConversationParser(ParserOptions(now=NOW))
    first = parser.parse("Alex Mittell 3:45 PM\nShipping the fix to staging now")
    second = parser.parse("Jordan Lee 4:00 PM\nLooks good to me")
    assert first[0].username == "Alex Mittell"
    assert second[0].username == "Jordan Lee"


# =============================================================================
# detect_format
# =============================================================================

def test_detect_dm():
    assert detect_format(_fixture("dm-linked.txt")) == "dm"


def test_detect_thread():
    assert detect_format(_fixture("channel-day.txt")) == "thread"


def test_detect_channel():
    assert detect_format(f"Alex Mittell [3:45 PM]({ARCHIVE_LINK})\nHello") == "channel"


def test_detect_standard():
    assert detect_format("Alex Mittell 3:45 PM\nHello") == "standard"
