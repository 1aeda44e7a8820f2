"""View models for the forecast page.

Everything here is display formatting over a ``ForecastResult``; no values are
recomputed from the provider payload. A day whose source had no precipitation
signal renders its rain as ``"n/a"``, never as a zero amount.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .domain.models import (
    AlertLevel,
    CurrentConditions,
    DailyForecast,
    ForecastResult,
    WeatherAlert,
)
from .forecast.periods import summarize_day

NO_VALUE = "--"
NO_PRECIPITATION_DATA = "n/a"
RAIN_CHART_CAP_IN = 0.5

ALERT_CSS_CLASSES = {
    AlertLevel.HIGH: "bg-red-100 border-red-500 text-red-800",
    AlertLevel.MEDIUM: "bg-orange-100 border-orange-500 text-orange-800",
    AlertLevel.LOW: "bg-yellow-100 border-yellow-500 text-yellow-800",
    AlertLevel.DEFAULT: "bg-gray-100 border-gray-500 text-gray-800",
}


def _clock_label(value: datetime) -> str:
    return value.strftime("%I:%M %p").lstrip("0")


def _format_day_label(value: date) -> str:
    return value.strftime("%A")


def _format_temp(value: float | None) -> str:
    if value is None:
        return NO_VALUE
    return f"{round(value)}"


def _format_rain(amount: float, has_data: bool) -> str | None:
    if not has_data:
        return NO_PRECIPITATION_DATA
    if amount <= 0:
        return None
    return f"{amount:.2f} in"


def rain_bar_color(precip_in: float) -> str:
    if precip_in >= 1.0:
        return "rgba(190, 24, 93, 0.7)"
    if precip_in > 0.3:
        return "rgba(239, 68, 68, 0.6)"
    if precip_in > 0.1:
        return "rgba(245, 158, 11, 0.6)"
    return "rgba(59, 130, 246, 0.6)"


def build_day_card(day: DailyForecast, index: int) -> dict[str, Any]:
    aggregate = day.aggregate
    has_temps = aggregate.has_temperature_data
    periods = summarize_day(day)
    total_rain = sum(summary.rain_in for summary in periods)

    period_rows = [
        {
            "name": summary.period.name,
            "label": summary.period.label,
            "condition": summary.condition.text,
            "icon": summary.condition.icon,
            "icon_key": summary.condition.icon_key,
            "has_sample": summary.has_sample,
            "chance_of_rain": summary.chance_of_rain,
            "rain_display": _format_rain(summary.rain_in, summary.has_precipitation_data),
        }
        for summary in periods
    ]

    hour_rows = [
        {
            "time_label": _clock_label(hour.time),
            "condition": hour.condition.text,
            "icon_key": hour.condition.icon_key,
            "temp_display": _format_temp(hour.temp_f),
            "chance_of_rain": hour.chance_of_rain,
            "rain_display": f"{hour.precip_in:.2f}" if day.has_precipitation_data else NO_VALUE,
            "bar_value": min(hour.precip_in, RAIN_CHART_CAP_IN),
            "bar_color": rain_bar_color(hour.precip_in),
        }
        for hour in day.hours
    ]

    return {
        "index": index,
        "date": day.date.isoformat(),
        "day_label": _format_day_label(day.date),
        "summary": day.summary,
        "min_temp_display": _format_temp(aggregate.min_temp_f) if has_temps else NO_VALUE,
        "max_temp_display": _format_temp(aggregate.max_temp_f) if has_temps else NO_VALUE,
        "chance_of_rain_display": (
            f"{aggregate.max_chance_of_rain}%"
            if aggregate.max_chance_of_rain is not None
            else NO_VALUE
        ),
        "has_precipitation_data": day.has_precipitation_data,
        "total_rain_display": _format_rain(total_rain, day.has_precipitation_data),
        "sunrise": day.sunrise or NO_VALUE,
        "sunset": day.sunset or NO_VALUE,
        "periods": period_rows,
        "hours": hour_rows,
    }


def build_current_view(current: CurrentConditions | None) -> dict[str, Any] | None:
    if current is None:
        return None

    wind = NO_VALUE
    if current.wind_mph is not None:
        wind = f"{round(current.wind_mph)} mph {current.wind_dir or ''}".strip()

    return {
        "temp_display": _format_temp(current.temperature_f),
        "condition": current.condition.text,
        "icon": current.condition.icon,
        "icon_key": current.condition.icon_key,
        "feels_like_display": (
            f"{round(current.feels_like_f)}°F" if current.feels_like_f is not None else NO_VALUE
        ),
        "wind_display": wind,
        "gust_display": (
            f"{round(current.gust_mph)} mph" if current.gust_mph is not None else "unavailable"
        ),
        "humidity_display": f"{current.humidity}%" if current.humidity is not None else NO_VALUE,
        "chance_of_rain_display": (
            f"{current.chance_of_rain}%" if current.chance_of_rain is not None else NO_VALUE
        ),
        "uv_display": f"{current.uv:g}" if current.uv is not None else NO_VALUE,
        "visibility_display": (
            f"{current.visibility_miles:g} mi" if current.visibility_miles is not None else NO_VALUE
        ),
        "last_updated_display": (
            f"Last updated at {_clock_label(current.last_updated)}"
            if current.last_updated is not None
            else None
        ),
    }


def build_alert_views(alerts: list[WeatherAlert]) -> list[dict[str, Any]]:
    return [
        {
            "event": alert.event,
            "headline": alert.headline,
            "description": alert.description,
            "level": alert.level.value,
            "css_class": ALERT_CSS_CLASSES[alert.level],
        }
        for alert in alerts
    ]


def partial_data_message(result: ForecastResult) -> str | None:
    if not result.partial_data:
        return None
    return (
        f"Could not retrieve a full {result.requested_days}-day forecast. "
        "Displaying available data."
    )


def build_forecast_view(result: ForecastResult) -> dict[str, Any]:
    return {
        "location_name": result.location_name,
        "provider": result.provider,
        "requested_days": result.requested_days,
        "partial_data": result.partial_data,
        "message": partial_data_message(result),
        "current": build_current_view(result.current),
        "alerts": build_alert_views(result.alerts),
        "cards": [build_day_card(day, index) for index, day in enumerate(result.days)],
        "fetched_at_utc": result.fetched_at.isoformat(),
        "raw_payload": result.raw_payload,
    }
