"""Timestamp helpers that never consult the process's own timezone.

Every forecast hour carries the offset of the place it describes. The hour of
day used to bucket morning/afternoon/evening is read from that embedded offset,
so the same payload is classified identically on any machine.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?)?$"
)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 instant, keeping its offset.

    A trailing ``Z`` is read as UTC. Naive values are rejected because their
    local hour would depend on whoever parses them.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {value!r}")
    return parsed


def local_hour(value: str | datetime) -> int:
    """Hour of day in the timestamp's own offset."""
    if isinstance(value, str):
        value = parse_timestamp(value)
    return value.hour


def utc_date(value: datetime) -> date:
    return value.astimezone(timezone.utc).date()


def parse_duration(value: str) -> timedelta | None:
    match = _DURATION_PATTERN.match(value.strip())
    if match is None:
        return None
    parts = {name: int(raw) for name, raw in match.groupdict().items() if raw is not None}
    if not parts:
        return None
    duration = timedelta(
        days=parts.get("days", 0),
        hours=parts.get("hours", 0),
        minutes=parts.get("minutes", 0),
    )
    if duration <= timedelta(0):
        return None
    return duration


def parse_valid_time(value: str) -> tuple[datetime, timedelta] | None:
    """Split an NWS ``"<start>/<duration>"`` interval, or ``None`` if malformed."""
    if not isinstance(value, str) or value.count("/") != 1:
        return None
    raw_start, raw_duration = value.split("/")
    try:
        start = parse_timestamp(raw_start)
    except ValueError:
        return None
    duration = parse_duration(raw_duration)
    if duration is None:
        return None
    return start, duration
