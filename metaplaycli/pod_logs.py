"""Reading, parsing and time-ordered merging of game server pod logs."""

from __future__ import annotations

import heapq
import itertools
import logging
import queue
import re
import threading
import time
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

log = logging.getLogger(__name__)

# Number of entries to buffer for each pod.
LOG_ENTRY_BUFFER_SIZE = 100

# Name of the game server container.
SERVER_CONTAINER_NAME = "shard-server"

_RFC3339 = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<zone>Z|[+-]\d{2}:\d{2})"
)


@dataclass(frozen=True)
class LogEntry:
    """A single log line with its timestamp."""

    timestamp: datetime
    message: str


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp (with optional fractional seconds) into an aware datetime.

    Fractions finer than a microsecond are truncated. Raises ValueError on bad input.
    """
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp {text!r}")

    zone = match["zone"]
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid time zone offset in {text!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    fraction = match["fraction"] or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    try:
        return datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            microsecond,
            tzinfo=tz,
        )
    except ValueError as exc:
        raise ValueError(f"invalid RFC 3339 timestamp {text!r}: {exc}") from exc


def parse_log_line(line: str) -> LogEntry:
    """Parse a Kubernetes log line of the form '<timestamp> <message>'.

    Raises ValueError if the line has no message part or the timestamp is invalid.
    """
    line = line.rstrip("\r\n")
    timestamp_text, sep, message = line.partition(" ")
    if not sep:
        raise ValueError(f"malformed log line {line!r}")
    return LogEntry(parse_rfc3339(timestamp_text), message)


def read_log_lines(lines: Iterable[str], cutoff: datetime | None = None) -> Iterator[LogEntry]:
    """Yield parsed entries from raw log lines, skipping malformed ones.

    Stops at the first entry whose timestamp is at or after cutoff, if given.
    """
    for line in lines:
        try:
            entry = parse_log_line(line)
        except ValueError as exc:
            log.warning("Skipping log line: %s", exc)
            continue
        if cutoff is not None and entry.timestamp >= cutoff:
            return
        yield entry


def _tag(index: int, source: Iterable[LogEntry]) -> Iterator[tuple[int, LogEntry]]:
    for entry in source:
        yield index, entry


def merge_in_time_order(
    sources: Sequence[Iterable[LogEntry]],
) -> Iterator[tuple[int, LogEntry]]:
    """Merge time-ordered sources lazily into one stream of (source index, entry)."""
    return heapq.merge(
        *(_tag(index, source) for index, source in enumerate(sources)),
        key=lambda item: item[1].timestamp,
    )


_DONE = object()


def aggregate_realtime(
    sources: Sequence[Iterable[LogEntry]],
    window: timedelta | float = timedelta(seconds=1),
    tick: float = 0.05,
) -> Iterator[tuple[int, LogEntry]]:
    """Merge live sources in best-effort timestamp order.

    Each source is consumed on its own thread. Entries are held back for the
    given window so that slightly late entries from other sources can be put in
    order; entries that arrive later than that may come out of order. Ends once
    every source is exhausted and all held entries have been emitted.
    """
    if not isinstance(window, timedelta):
        window = timedelta(seconds=window)

    inbox: queue.Queue = queue.Queue()

    def pump(index: int, source: Iterable[LogEntry]) -> None:
        try:
            for entry in source:
                inbox.put((index, entry))
        except Exception:
            log.exception("Log source %d failed", index)
        finally:
            inbox.put((index, _DONE))

    for index, source in enumerate(sources):
        threading.Thread(target=pump, args=(index, source), daemon=True).start()

    active = len(sources)
    pending: list[tuple[datetime, int, int, LogEntry]] = []
    order = itertools.count()

    while active > 0 or pending:
        while True:
            try:
                index, item = inbox.get_nowait()
            except queue.Empty:
                break
            if item is _DONE:
                active -= 1
            else:
                heapq.heappush(pending, (item.timestamp, next(order), index, item))

        cutoff = datetime.now(timezone.utc) - window
        while pending and pending[0][0] < cutoff:
            _, _, index, entry = heapq.heappop(pending)
            yield index, entry

        if active > 0 or pending:
            time.sleep(tick)


def resolve_since(
    since: timedelta | None, since_time: str | None
) -> tuple[int | None, datetime | None]:
    """Validate the --since and --since-time options.

    Returns (since in whole seconds, parsed since-time); either may be None.
    Raises ValueError if both are given or since-time cannot be parsed.
    """
    has_since = since is not None and since != timedelta(0)
    if has_since and since_time:
        raise ValueError("only one of either --since or --since-time can be used, not both")

    parsed_time = None
    if since_time:
        try:
            parsed_time = parse_rfc3339(since_time)
        except ValueError as exc:
            raise ValueError(f"unable to parse --since-time: {exc}") from exc

    since_seconds = int(since.total_seconds()) if has_since else None
    return since_seconds, parsed_time


def right_pad(text: str, length: int) -> str:
    """Pad text with spaces on the right up to length characters."""
    return text.ljust(length)


def longest_pod_prefix(pod_names: Iterable[str]) -> int:
    """Length of the longest pod name, or 0 if there are none."""
    return max((len(name) for name in pod_names), default=0)


def pod_prefixes(pod_names: Sequence[str]) -> list[str]:
    """Aligned output prefixes 'name:' padded to a common width."""
    width = longest_pod_prefix(pod_names) + 1
    return [right_pad(f"{name}:", width) for name in pod_names]