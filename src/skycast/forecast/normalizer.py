from __future__ import annotations

import logging
from typing import Sequence

from ..astronomy import SunTimes, SunTimesFunction, sun_times
from ..domain.models import (
    DailyAggregate,
    DailyForecast,
    DayGroup,
    HourlyRecord,
    Location,
    ProviderForecast,
)

LOGGER = logging.getLogger(__name__)


def aggregate_hours(hours: Sequence[HourlyRecord]) -> DailyAggregate:
    if not hours:
        return DailyAggregate()
    return DailyAggregate(
        min_temp_f=min(hour.temp_f for hour in hours),
        max_temp_f=max(hour.temp_f for hour in hours),
        max_chance_of_rain=max(hour.chance_of_rain for hour in hours),
    )


def _resolve_sun_times(
    group: DayGroup,
    location: Location,
    sun_times_fn: SunTimesFunction | None,
) -> SunTimes | None:
    if group.sunrise and group.sunset:
        return SunTimes(sunrise=group.sunrise, sunset=group.sunset)
    if sun_times_fn is None or not location.has_coordinates:
        return None
    tz = group.hours[0].time.tzinfo if group.hours else None
    return sun_times_fn(group.date, location.latitude, location.longitude, tzinfo=tz)


def normalize_day(
    group: DayGroup,
    location: Location,
    *,
    sun_times_fn: SunTimesFunction | None = sun_times,
) -> DailyForecast:
    hours = sorted(group.hours, key=lambda hour: hour.time)
    resolved = _resolve_sun_times(group, location, sun_times_fn)
    return DailyForecast(
        date=group.date,
        hours=hours,
        aggregate=aggregate_hours(hours),
        sunrise=resolved.sunrise if resolved else None,
        sunset=resolved.sunset if resolved else None,
        summary=group.summary,
        has_precipitation_data=group.has_precipitation_data,
    )


def normalize_forecast(
    forecast: ProviderForecast,
    location: Location,
    requested_days: int,
    *,
    sun_times_fn: SunTimesFunction | None = sun_times,
) -> tuple[list[DailyForecast], bool]:
    """Build the canonical day list and report whether it came up short.

    Days are sorted ascending and truncated to ``requested_days``. Missing days
    are never synthesized; the second element of the return value is the
    partial-data signal.
    """
    if requested_days < 1:
        raise ValueError("requested_days must be >= 1")

    groups = sorted(forecast.days, key=lambda group: group.date)[:requested_days]
    days = [normalize_day(group, location, sun_times_fn=sun_times_fn) for group in groups]

    partial = len(days) < requested_days
    if partial:
        LOGGER.warning(
            "Provider '%s' returned %d of %d requested days for %s",
            forecast.provider,
            len(days),
            requested_days,
            location.name,
        )
    return days, partial
