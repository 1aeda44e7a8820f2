from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, Sequence

from ..domain.models import PrecipitationPeriod
from .timeutil import parse_valid_time
from .units import coerce_float, mm_to_inches

LOGGER = logging.getLogger(__name__)


def build_period(start: datetime, duration: timedelta, total_mm: float) -> PrecipitationPeriod:
    hours = duration.total_seconds() / 3600
    return PrecipitationPeriod(
        start=start,
        end=start + duration,
        hourly_rate_in=mm_to_inches(total_mm) / hours,
    )


def parse_precipitation_periods(values: Iterable[Any]) -> list[PrecipitationPeriod]:
    """Turn gridpoint ``quantitativePrecipitation.values`` into hourly-rate periods.

    Entries with an unparseable ``validTime`` or a non-numeric amount are
    skipped; one bad entry never discards the rest of the series.
    """
    periods: list[PrecipitationPeriod] = []
    for entry in values:
        if not isinstance(entry, dict):
            continue
        interval = parse_valid_time(entry.get("validTime"))
        total_mm = coerce_float(entry.get("value"))
        if interval is None or total_mm is None or total_mm < 0:
            LOGGER.debug("Skipping precipitation entry %r", entry)
            continue
        start, duration = interval
        periods.append(build_period(start, duration, total_mm))
    periods.sort(key=lambda period: period.start)
    return periods


def find_period(
    periods: Sequence[PrecipitationPeriod], instant: datetime
) -> PrecipitationPeriod | None:
    for period in periods:
        if period.contains(instant):
            return period
    return None
