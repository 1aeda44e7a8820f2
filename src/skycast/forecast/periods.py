"""Morning/afternoon/evening summaries over a day's hours.

Hours are bucketed by their local hour, read from each timestamp's own offset.
A forecast for Honolulu viewed from New York still puts 7am Honolulu time in
the morning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from ..domain.models import Condition, DailyForecast, HourlyRecord
from .conditions import NO_DATA_CONDITION

HourSelector = Callable[[Sequence[HourlyRecord]], HourlyRecord | None]


@dataclass(frozen=True, slots=True)
class DayPeriod:
    name: str
    label: str
    start_hour: int
    end_hour: int
    preferred_hours: tuple[int, ...]

    def includes(self, hour: HourlyRecord) -> bool:
        return self.start_hour <= hour.local_hour <= self.end_hour


MORNING = DayPeriod("morning", "Morning", 6, 11, (10,))
AFTERNOON = DayPeriod("afternoon", "Afternoon", 12, 17, (15, 13))
EVENING = DayPeriod("evening", "Evening", 18, 23, (20, 18))
PERIODS: tuple[DayPeriod, ...] = (MORNING, AFTERNOON, EVENING)


@dataclass(frozen=True, slots=True)
class PeriodSummary:
    period: DayPeriod
    condition: Condition
    chance_of_rain: int
    rain_in: float
    has_sample: bool
    has_precipitation_data: bool


def hours_in_period(hours: Sequence[HourlyRecord], period: DayPeriod) -> list[HourlyRecord]:
    return [hour for hour in hours if period.includes(hour)]


def period_rainfall(hours: Sequence[HourlyRecord], period: DayPeriod) -> float:
    return sum(hour.precip_in for hour in hours_in_period(hours, period))


def period_chance_of_rain(hours: Sequence[HourlyRecord], period: DayPeriod) -> int:
    return max((hour.chance_of_rain for hour in hours_in_period(hours, period)), default=0)


def exact_hour(local_hour: int) -> HourSelector:
    def select(hours: Sequence[HourlyRecord]) -> HourlyRecord | None:
        return next((hour for hour in hours if hour.local_hour == local_hour), None)

    return select


def first_at_or_after(local_hour: int) -> HourSelector:
    def select(hours: Sequence[HourlyRecord]) -> HourlyRecord | None:
        return next((hour for hour in hours if hour.local_hour >= local_hour), None)

    return select


def period_selectors(period: DayPeriod) -> list[HourSelector]:
    selectors = [exact_hour(hour) for hour in period.preferred_hours]
    selectors.append(first_at_or_after(period.start_hour))
    return selectors


def representative_hour(
    hours: Sequence[HourlyRecord], period: DayPeriod
) -> HourlyRecord | None:
    """First hit from the period's selectors, or ``None`` when none match."""
    for selector in period_selectors(period):
        hour = selector(hours)
        if hour is not None:
            return hour
    return None


def summarize_period(day: DailyForecast, period: DayPeriod) -> PeriodSummary:
    sample = representative_hour(day.hours, period)
    return PeriodSummary(
        period=period,
        condition=sample.condition if sample is not None else NO_DATA_CONDITION,
        chance_of_rain=period_chance_of_rain(day.hours, period),
        rain_in=period_rainfall(day.hours, period),
        has_sample=sample is not None,
        has_precipitation_data=day.has_precipitation_data,
    )


def summarize_day(day: DailyForecast) -> list[PeriodSummary]:
    return [summarize_period(day, period) for period in PERIODS]
