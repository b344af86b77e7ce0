"""Tests for the timecode and span value types."""

import pytest
from src.models import ParseStats, Speaker, TimeCode, TimeSpan


def test_timecode_parse_canonical():
    tc = TimeCode.parse("01:02:03.456")
    assert (tc.hours, tc.minutes, tc.seconds, tc.milliseconds) == (1, 2, 3, 456)
    assert tc.total_milliseconds == 3723456
    assert str(tc) == "01:02:03.456"


@pytest.mark.parametrize(
    "text, millis",
    [
        ("00:00:01.000", 1000),
        ("0:00:01", 1000),
        ("00:01.5", 1500),
        ("00:00:01,250", 1250),
        ("123:00:00.000", 123 * 3600 * 1000),
        ("00:00:00.07", 70),
    ],
)
def test_timecode_parse_variants(text, millis):
    assert TimeCode.parse(text).total_milliseconds == millis


@pytest.mark.parametrize("text", ["", "abc", "1.000", "00:00:01.0000", "-00:00:01"])
def test_timecode_parse_rejects_garbage(text):
    with pytest.raises(ValueError):
        TimeCode.parse(text)


def test_timecode_orders_numerically_not_lexically():
    # "9:00:00" sorts after "10:00:00" as text
    nine = TimeCode.parse("9:00:00.000")
    ten = TimeCode.parse("10:00:00.000")
    assert "9:00:00.000" > "10:00:00.000"
    assert nine < ten
    assert sorted([ten, nine]) == [nine, ten]


def test_timecode_from_milliseconds_round_trips_str():
    assert str(TimeCode.from_milliseconds(3_723_456)) == "01:02:03.456"
    with pytest.raises(ValueError):
        TimeCode.from_milliseconds(-1)


def test_timespan_rejects_end_before_start():
    with pytest.raises(ValueError, match="ends before it starts"):
        TimeSpan.parse("00:00:02.000", "00:00:01.000")


def test_timespan_allows_zero_length():
    span = TimeSpan.parse("00:00:02.000", "00:00:02.000")
    assert str(span) == "00:00:02.000 --> 00:00:02.000"


def test_speaker_label():
    speaker = Speaker("Alice", "GM", "Narrator", "Runs the game", "alice.vtt")
    assert speaker.label() == "Alice"
    assert speaker.label("player") == "Alice"
    assert speaker.label("character") == "Narrator"


def test_parse_stats_summary():
    stats = ParseStats(source="a.vtt", seen=5, malformed=1, filtered=1, retained=3)
    summary = stats.summary()
    assert summary.startswith("a.vtt: 5 entries seen")
    assert "3 retained" in summary
    assert "without timestamps" not in summary

    stats.untimestamped = 2
    assert "(2 without timestamps)" in stats.summary()
