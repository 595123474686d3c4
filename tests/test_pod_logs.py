from datetime import datetime, timedelta, timezone

import pytest

from metaplaycli.pod_logs import (
    LogEntry,
    aggregate_realtime,
    longest_pod_prefix,
    merge_in_time_order,
    parse_log_line,
    parse_rfc3339,
    pod_prefixes,
    read_log_lines,
    resolve_since,
    right_pad,
)


def _entry(ts: str, msg: str) -> LogEntry:
    return LogEntry(parse_rfc3339(ts), msg)


def test_parse_rfc3339_nanoseconds_truncated():
    parsed = parse_rfc3339("2024-12-23T15:04:05.999999999Z")
    assert parsed == datetime(2024, 12, 23, 15, 4, 5, 999999, tzinfo=timezone.utc)


def test_parse_rfc3339_offset_equivalent_to_utc():
    assert parse_rfc3339("2024-12-27T17:04:05+02:00") == parse_rfc3339("2024-12-27T15:04:05Z")


@pytest.mark.parametrize("text", ["", "2024-12-27 15:04:05Z", "2024-13-27T15:04:05Z", "garbage"])
def test_parse_rfc3339_invalid(text):
    with pytest.raises(ValueError):
        parse_rfc3339(text)


def test_parse_log_line():
    entry = parse_log_line("2024-12-23T15:04:05.999999999Z some log text\n")
    assert entry.message == "some log text"
    assert entry.timestamp == parse_rfc3339("2024-12-23T15:04:05.999999Z")


def test_parse_log_line_malformed():
    with pytest.raises(ValueError):
        parse_log_line("no-space-here")
    with pytest.raises(ValueError):
        parse_log_line("notatimestamp message")


def test_read_log_lines_skips_malformed_and_stops_at_cutoff():
    lines = [
        "2024-01-01T00:00:01Z first",
        "broken",
        "2024-01-01T00:00:02Z second",
        "2024-01-01T00:00:03Z third",
        "2024-01-01T00:00:04Z fourth",
    ]
    cutoff = parse_rfc3339("2024-01-01T00:00:03Z")
    messages = [e.message for e in read_log_lines(lines, cutoff)]
    assert messages == ["first", "second"]


def test_read_log_lines_without_cutoff_reads_all():
    lines = ["2024-01-01T00:00:01Z a", "2024-01-01T00:00:02Z b"]
    assert [e.message for e in read_log_lines(lines)] == ["a", "b"]


def test_merge_in_time_order():
    a = [_entry("2024-01-01T00:00:01Z", "a1"), _entry("2024-01-01T00:00:04Z", "a2")]
    b = [_entry("2024-01-01T00:00:02Z", "b1"), _entry("2024-01-01T00:00:03Z", "b2")]
    merged = list(merge_in_time_order([a, b]))
    assert [e.message for _, e in merged] == ["a1", "b1", "b2", "a2"]
    assert [i for i, _ in merged] == [0, 1, 1, 0]


def test_merge_handles_empty_sources():
    a = [_entry("2024-01-01T00:00:01Z", "x")]
    merged = list(merge_in_time_order([[], a, []]))
    assert merged == [(1, a[0])]


def test_aggregate_realtime_emits_all_in_order():
    a = [_entry("2024-01-01T00:00:01Z", "a1"), _entry("2024-01-01T00:00:05Z", "a2")]
    b = [_entry("2024-01-01T00:00:02Z", "b1")]
    result = list(aggregate_realtime([a, b], window=timedelta(seconds=1), tick=0.01))
    assert sorted(e.message for _, e in result) == ["a1", "a2", "b1"]
    stamps = [e.timestamp for _, e in result]
    assert stamps == sorted(stamps)


def test_aggregate_realtime_no_sources():
    assert list(aggregate_realtime([], tick=0.01)) == []


def test_resolve_since_both_raises():
    with pytest.raises(ValueError):
        resolve_since(timedelta(hours=3), "2024-12-27T15:04:05Z")


def test_resolve_since_duration():
    assert resolve_since(timedelta(minutes=15), None) == (900, None)


def test_resolve_since_time():
    seconds, since_time = resolve_since(None, "2024-12-27T15:04:05Z")
    assert seconds is None
    assert since_time == parse_rfc3339("2024-12-27T15:04:05Z")


def test_resolve_since_zero_counts_as_unset():
    assert resolve_since(timedelta(0), "") == (None, None)


def test_resolve_since_bad_time():
    with pytest.raises(ValueError, match="--since-time"):
        resolve_since(None, "yesterday")


def test_right_pad():
    assert right_pad("ab", 5) == "ab   "
    assert right_pad("abcdef", 3) == "abcdef"


def test_longest_pod_prefix():
    assert longest_pod_prefix(["all-0", "service-10"]) == len("service-10")
    assert longest_pod_prefix([]) == 0


def test_pod_prefixes_aligned():
    names = ["all-0", "service-10"]
    prefixes = pod_prefixes(names)
    assert len({len(p) for p in prefixes}) == 1
    assert prefixes[1] == "service-10:"
    assert prefixes[0].rstrip() == "all-0:"