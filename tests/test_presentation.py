"""Tests for the display view built over a normalized forecast."""

from datetime import date, datetime, timedelta, timezone

import pytest

from skycast.domain.models import (
    AlertLevel,
    Condition,
    CurrentConditions,
    DailyForecast,
    ForecastResult,
    HourlyRecord,
    Location,
    WeatherAlert,
)
from skycast.forecast.normalizer import aggregate_hours
from skycast.presentation import (
    NO_PRECIPITATION_DATA,
    build_alert_views,
    build_current_view,
    build_day_card,
    build_forecast_view,
    rain_bar_color,
)

EASTERN = timezone(timedelta(hours=-5))


def _hours(precip: float = 0.0) -> list[HourlyRecord]:
    return [
        HourlyRecord(
            time=datetime(2024, 3, 1, hour, tzinfo=EASTERN),
            condition=Condition(text="Light rain", icon_key="rain"),
            chance_of_rain=hour * 2,
            precip_in=precip,
            temp_f=48.4 + hour,
        )
        for hour in range(24)
    ]


def _day(hours: list[HourlyRecord], *, has_precipitation_data: bool = True, **kwargs) -> DailyForecast:
    return DailyForecast(
        date=date(2024, 3, 1),
        hours=hours,
        aggregate=aggregate_hours(hours),
        has_precipitation_data=has_precipitation_data,
        **kwargs,
    )


def _result(days: list[DailyForecast], *, requested_days: int = 3, **kwargs) -> ForecastResult:
    return ForecastResult(
        provider="nws",
        location=Location(name="Wimauma", postal_code="33598"),
        location_name="Ruskin, FL",
        requested_days=requested_days,
        days=days,
        partial_data=len(days) < requested_days,
        fetched_at=datetime(2024, 3, 1, 14, tzinfo=timezone.utc),
        **kwargs,
    )


class TestPrecipitationDisplay:
    def test_missing_data_is_not_zero(self):
        card = build_day_card(_day(_hours(), has_precipitation_data=False), 0)
        assert card["total_rain_display"] == NO_PRECIPITATION_DATA
        assert all(row["rain_display"] == NO_PRECIPITATION_DATA for row in card["periods"])
        assert all(row["rain_display"] == "--" for row in card["hours"])

    def test_known_dry_day_has_no_amount(self):
        card = build_day_card(_day(_hours()), 0)
        assert card["total_rain_display"] is None
        assert card["hours"][0]["rain_display"] == "0.00"

    def test_wet_day_totals_three_periods(self):
        card = build_day_card(_day(_hours(precip=0.05)), 0)
        # Hours 6..23 fall in a period; 0..5 do not.
        assert card["total_rain_display"] == "0.90 in"
        assert [row["rain_display"] for row in card["periods"]] == ["0.30 in"] * 3


class TestDayCard:
    def test_labels_and_temps(self):
        card = build_day_card(_day(_hours(), sunrise="06:52 AM", sunset="06:31 PM", summary="Rain"), 2)
        assert card["index"] == 2
        assert card["day_label"] == "Friday"
        assert card["min_temp_display"] == "48"
        assert card["max_temp_display"] == "71"
        assert card["chance_of_rain_display"] == "46%"
        assert (card["sunrise"], card["sunset"]) == ("06:52 AM", "06:31 PM")
        assert card["hours"][13]["time_label"] == "1:00 PM"

    def test_empty_day_shows_placeholders(self):
        card = build_day_card(_day([]), 0)
        assert card["min_temp_display"] == "--"
        assert card["max_temp_display"] == "--"
        assert card["chance_of_rain_display"] == "--"
        assert card["sunrise"] == "--"
        assert [row["condition"] for row in card["periods"]] == ["No data"] * 3
        assert card["hours"] == []

    @pytest.mark.parametrize(
        ("amount", "color"),
        [
            (0.0, "rgba(59, 130, 246, 0.6)"),
            (0.2, "rgba(245, 158, 11, 0.6)"),
            (0.5, "rgba(239, 68, 68, 0.6)"),
            (1.2, "rgba(190, 24, 93, 0.7)"),
        ],
    )
    def test_rain_bar_color(self, amount, color):
        assert rain_bar_color(amount) == color

    def test_bar_value_capped(self):
        card = build_day_card(_day(_hours(precip=0.8)), 0)
        assert card["hours"][0]["bar_value"] == 0.5


class TestCurrentAndAlerts:
    def test_current_view(self):
        view = build_current_view(
            CurrentConditions(
                temperature_f=68.4,
                condition=Condition(text="Cloudy", icon_key="cloudy"),
                feels_like_f=70.2,
                wind_mph=9.6,
                wind_dir="SW",
                humidity=65,
                last_updated=datetime(2024, 3, 1, 8, 45, tzinfo=EASTERN),
            )
        )
        assert view["temp_display"] == "68"
        assert view["feels_like_display"] == "70°F"
        assert view["wind_display"] == "10 mph SW"
        assert view["gust_display"] == "unavailable"
        assert view["humidity_display"] == "65%"
        assert view["uv_display"] == "--"
        assert view["last_updated_display"] == "Last updated at 8:45 AM"

    def test_no_current(self):
        assert build_current_view(None) is None

    def test_alert_classes(self):
        views = build_alert_views(
            [
                WeatherAlert(event="Tornado Warning", level=AlertLevel.HIGH),
                WeatherAlert(event="Special Statement", level=AlertLevel.DEFAULT),
            ]
        )
        assert views[0]["css_class"].startswith("bg-red-100")
        assert views[0]["level"] == "high"
        assert views[1]["css_class"].startswith("bg-gray-100")


class TestForecastView:
    def test_partial_message(self):
        view = build_forecast_view(_result([_day(_hours())], requested_days=3))
        assert view["partial_data"] is True
        assert view["message"] == "Could not retrieve a full 3-day forecast. Displaying available data."
        assert len(view["cards"]) == 1

    def test_full_result_has_no_message(self):
        view = build_forecast_view(_result([_day(_hours())], requested_days=1, raw_payload={"source": "test"}))
        assert view["message"] is None
        assert view["location_name"] == "Ruskin, FL"
        assert view["raw_payload"] == {"source": "test"}
        assert view["fetched_at_utc"] == "2024-03-01T14:00:00+00:00"
