"""
Timestamp and line selection for normalized records.

Two independent policy flags drive this stage:
- use_incoming_timestamp: take the time from the entry instead of the clock
- use_full_line: ship the whole JSON entry even when textPayload is set
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from gcplog.core.exceptions import MissingTimestampError, TimestampParseError
from gcplog.entry.schema import GCPLogEntry

# The zero instant (0001-01-01T00:00:00Z) means "no timestamp"
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_RFC3339_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>Z|[+-][0-9]{2}:[0-9]{2})"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse a strict RFC3339 timestamp.

    Accepts "2024-01-01T00:00:00Z", "2024-01-01T00:00:00.123456789Z" and
    "2024-01-01T02:00:00+02:00". Fractions finer than a microsecond are
    truncated.

    Args:
        value: Timestamp string

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        TimestampParseError: If value is not RFC3339 or out of range
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise TimestampParseError(f"invalid timestamp format: {value!r}")

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")

    try:
        if offset == "Z":
            tz = timezone.utc
        else:
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            if hours > 23 or minutes > 59:
                raise ValueError(f"offset out of range: {offset}")
            delta = timedelta(hours=hours, minutes=minutes)
            tz = timezone(-delta if offset[0] == "-" else delta)

        parsed = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            int(fraction),
            tzinfo=tz,
        )
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise TimestampParseError(f"invalid timestamp format: {value!r}: {e}") from e


def resolve_timestamp(
    entry: GCPLogEntry,
    use_incoming_timestamp: bool,
    now: Optional[Callable[[], datetime]] = None,
) -> datetime:
    """
    Pick the record timestamp.

    Args:
        entry: Decoded log entry
        use_incoming_timestamp: Adopt the entry's own timestamp
        now: Clock override (defaults to the UTC wall clock)

    Returns:
        Timezone-aware UTC datetime

    Raises:
        MissingTimestampError: If adoption is on and no usable timestamp exists
        TimestampParseError: If adoption is on and the timestamp is not RFC3339

    Notes:
        - timestamp is preferred; receiveTimestamp is used only when it is empty
        - the clock is not consulted when adoption is on
    """
    if not use_incoming_timestamp:
        return (now or _utc_now)()

    value = entry.timestamp or entry.receive_timestamp
    if not value:
        raise MissingTimestampError("no timestamp found in the log entry")

    ts = parse_rfc3339(value)
    if ts == ZERO_TIME:
        raise MissingTimestampError("no timestamp found in the log entry")
    return ts


def resolve_line(entry: GCPLogEntry, raw: Union[bytes, str], use_full_line: bool) -> str:
    """
    Pick the record line.

    textPayload is used when present (non-blank) and the full line was not
    requested; otherwise the raw entry is shipped verbatim.
    """
    if not use_full_line and entry.text_payload.strip():
        return entry.text_payload
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw
