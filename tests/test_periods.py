"""Tests for morning/afternoon/evening aggregation and representative hours."""

from datetime import date, datetime, timedelta, timezone

import pytest

from skycast.domain.models import Condition, DailyForecast, HourlyRecord
from skycast.forecast.conditions import NO_DATA_CONDITION
from skycast.forecast.normalizer import aggregate_hours
from skycast.forecast.periods import (
    AFTERNOON,
    EVENING,
    MORNING,
    period_chance_of_rain,
    period_rainfall,
    representative_hour,
    summarize_day,
    summarize_period,
)

PACIFIC = timezone(timedelta(hours=-8))


def _hour(hour: int, *, precip: float = 0.0, chance: int = 0, text: str | None = None, tz=PACIFIC) -> HourlyRecord:
    return HourlyRecord(
        time=datetime(2024, 3, 1, hour, tzinfo=tz),
        condition=Condition(text=text or f"hour {hour}"),
        chance_of_rain=chance,
        precip_in=precip,
        temp_f=50,
    )


def _day(hours: list[HourlyRecord], *, has_precipitation_data: bool = True) -> DailyForecast:
    return DailyForecast(
        date=date(2024, 3, 1),
        hours=hours,
        aggregate=aggregate_hours(hours),
        has_precipitation_data=has_precipitation_data,
    )


class TestPeriodTotals:
    def test_rainfall_sums_local_hours_in_range(self):
        hours = [_hour(hour, precip=0.1) for hour in range(24)]
        assert period_rainfall(hours, MORNING) == pytest.approx(0.6)
        assert period_rainfall(hours, AFTERNOON) == pytest.approx(0.6)
        assert period_rainfall(hours, EVENING) == pytest.approx(0.6)

    def test_uses_local_not_utc_hour(self):
        # 07:00-08:00 is 15:00 UTC: morning locally, afternoon in UTC.
        hours = [_hour(7, precip=0.25, chance=60)]
        assert period_rainfall(hours, MORNING) == pytest.approx(0.25)
        assert period_rainfall(hours, AFTERNOON) == 0
        assert period_chance_of_rain(hours, MORNING) == 60
        assert period_chance_of_rain(hours, AFTERNOON) == 0

    def test_peak_chance(self):
        hours = [_hour(12, chance=20), _hour(14, chance=70), _hour(17, chance=40), _hour(18, chance=90)]
        assert period_chance_of_rain(hours, AFTERNOON) == 70

    def test_boundaries_inclusive(self):
        hours = [_hour(5, precip=1.0), _hour(6, precip=0.1), _hour(11, precip=0.2), _hour(12, precip=1.0)]
        assert period_rainfall(hours, MORNING) == pytest.approx(0.3)


class TestRepresentativeHour:
    def test_exact_morning_hour(self):
        hours = [_hour(hour) for hour in range(24)]
        assert representative_hour(hours, MORNING).local_hour == 10

    def test_afternoon_falls_back_to_13(self):
        hours = [_hour(hour) for hour in range(24) if hour != 15]
        assert representative_hour(hours, AFTERNOON).local_hour == 13

    def test_evening_falls_back_to_18(self):
        hours = [_hour(hour) for hour in (18, 19, 21)]
        assert representative_hour(hours, EVENING).local_hour == 18

    def test_future_only_list_uses_first_hour_after_start(self):
        # Viewing "today" at 11:30 leaves hours 12..23 only.
        hours = [_hour(hour) for hour in range(12, 24)]
        assert representative_hour(hours, MORNING).local_hour == 12

    def test_no_candidate_returns_none(self):
        hours = [_hour(hour) for hour in range(0, 6)]
        assert representative_hour(hours, EVENING) is None

    def test_summary_uses_no_data_sentinel(self):
        summary = summarize_period(_day([_hour(2)]), EVENING)
        assert summary.condition == NO_DATA_CONDITION
        assert summary.has_sample is False
        assert summary.rain_in == 0
        assert summary.chance_of_rain == 0


class TestSummarizeDay:
    def test_three_periods_in_order(self):
        hours = [_hour(hour, precip=0.05 if hour >= 18 else 0.0, text="Rain" if hour == 20 else None) for hour in range(24)]
        summaries = summarize_day(_day(hours))
        assert [summary.period.name for summary in summaries] == ["morning", "afternoon", "evening"]
        assert summaries[2].condition.text == "Rain"
        assert summaries[2].rain_in == pytest.approx(0.3)
        assert summaries[0].rain_in == 0

    def test_precipitation_flag_propagates(self):
        summaries = summarize_day(_day([_hour(10)], has_precipitation_data=False))
        assert all(summary.has_precipitation_data is False for summary in summaries)
