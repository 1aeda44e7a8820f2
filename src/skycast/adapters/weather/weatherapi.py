from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any
from urllib.parse import urlencode
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...domain.models import (
    AlertLevel,
    CurrentConditions,
    DayGroup,
    HourlyRecord,
    Location,
    ProviderForecast,
    WeatherAlert,
)
from ...forecast.conditions import make_condition
from ...forecast.units import coerce_float, coerce_percent
from .base import ForecastShapeError, WeatherAdapterError
from .http import DEFAULT_TIMEOUT_SECONDS, JsonFetcher, fetch_json

LOGGER = logging.getLogger(__name__)

WEATHERAPI_FORECAST_URL = "https://api.weatherapi.com/v1/forecast.json"
LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M"
PROVIDER_NAME = "weatherapi"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_local_time(value: Any, tz: tzinfo) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), LOCAL_TIME_FORMAT).replace(tzinfo=tz)
    except ValueError:
        return None


def venue_timezone(location: dict[str, Any]) -> tzinfo:
    """Timezone of the forecast venue, never of the machine parsing it."""
    tz_id = location.get("tz_id")
    if isinstance(tz_id, str) and tz_id.strip():
        try:
            return ZoneInfo(tz_id.strip())
        except (ZoneInfoNotFoundError, ValueError):
            LOGGER.debug("Unknown tz_id %r in WeatherAPI payload", tz_id)

    epoch = coerce_float(location.get("localtime_epoch"))
    local_naive = _parse_local_time(location.get("localtime"), timezone.utc)
    if epoch is not None and local_naive is not None:
        utc_naive = datetime.fromtimestamp(epoch, timezone.utc)
        offset_minutes = round((local_naive - utc_naive).total_seconds() / 900) * 15
        return timezone(timedelta(minutes=offset_minutes))
    return timezone.utc


def _venue_today(location: dict[str, Any]) -> date | None:
    localtime = location.get("localtime")
    if not isinstance(localtime, str):
        return None
    try:
        return date.fromisoformat(localtime.strip()[:10])
    except ValueError:
        return None


def _parse_hour(raw_hour: Any, tz: tzinfo) -> tuple[HourlyRecord, bool] | None:
    if not isinstance(raw_hour, dict):
        return None
    hour_time = _parse_local_time(raw_hour.get("time"), tz)
    temp_f = coerce_float(raw_hour.get("temp_f"))
    if hour_time is None or temp_f is None:
        LOGGER.debug("Skipping WeatherAPI hour %r", raw_hour.get("time"))
        return None

    condition = _as_dict(raw_hour.get("condition"))
    precip_in = coerce_float(raw_hour.get("precip_in"))
    record = HourlyRecord(
        time=hour_time,
        condition=make_condition(condition.get("text"), condition.get("icon")),
        chance_of_rain=coerce_percent(raw_hour.get("chance_of_rain")) or 0,
        precip_in=max(precip_in or 0.0, 0.0),
        temp_f=temp_f,
    )
    return record, precip_in is not None


def _parse_day(raw_day: Any, tz: tzinfo) -> DayGroup | None:
    if not isinstance(raw_day, dict):
        return None
    try:
        day_date = date.fromisoformat(str(raw_day.get("date")))
    except ValueError:
        LOGGER.debug("Skipping WeatherAPI day with date %r", raw_day.get("date"))
        return None

    raw_hours = raw_day.get("hour")
    parsed = [
        item
        for item in (_parse_hour(raw, tz) for raw in (raw_hours if isinstance(raw_hours, list) else []))
        if item is not None
    ]
    astro = _as_dict(raw_day.get("astro"))
    day_totals = _as_dict(raw_day.get("day"))
    day_condition = _as_dict(day_totals.get("condition"))
    summary = day_condition.get("text")
    return DayGroup(
        date=day_date,
        hours=[hour for hour, _ in parsed],
        sunrise=astro.get("sunrise") or None,
        sunset=astro.get("sunset") or None,
        summary=summary if isinstance(summary, str) and summary.strip() else None,
        has_precipitation_data=any(measured for _, measured in parsed),
    )


def _parse_current(
    raw_current: Any,
    tz: tzinfo,
    days: list[DayGroup],
    raw_days: list[Any],
) -> CurrentConditions | None:
    if not isinstance(raw_current, dict):
        return None

    condition = _as_dict(raw_current.get("condition"))
    last_updated = _parse_local_time(raw_current.get("last_updated"), tz)

    chance_of_rain: int | None = None
    if days:
        today = days[0]
        if last_updated is not None:
            current_hour = next(
                (hour for hour in today.hours if hour.local_hour == last_updated.hour),
                None,
            )
            if current_hour is not None:
                chance_of_rain = current_hour.chance_of_rain
        if chance_of_rain is None and raw_days and isinstance(raw_days[0], dict):
            chance_of_rain = coerce_percent(_as_dict(raw_days[0].get("day")).get("daily_chance_of_rain"))

    return CurrentConditions(
        temperature_f=coerce_float(raw_current.get("temp_f")),
        condition=make_condition(condition.get("text"), condition.get("icon")),
        feels_like_f=coerce_float(raw_current.get("feelslike_f")),
        wind_mph=coerce_float(raw_current.get("wind_mph")),
        wind_dir=raw_current.get("wind_dir") or None,
        gust_mph=coerce_float(raw_current.get("gust_mph")),
        humidity=coerce_percent(raw_current.get("humidity")),
        chance_of_rain=chance_of_rain,
        uv=coerce_float(raw_current.get("uv")),
        visibility_miles=coerce_float(raw_current.get("vis_miles")),
        last_updated=last_updated,
    )


def _parse_alerts(raw_alerts: Any) -> list[WeatherAlert]:
    if not isinstance(raw_alerts, dict) or not isinstance(raw_alerts.get("alert"), list):
        return []
    alerts: list[WeatherAlert] = []
    for item in raw_alerts["alert"]:
        if not isinstance(item, dict):
            continue
        event = str(item.get("event") or "")
        alerts.append(
            WeatherAlert(
                event=event,
                headline=str(item.get("headline") or event),
                description=str(item.get("desc") or ""),
                level=AlertLevel.from_event(event),
            )
        )
    return alerts


def parse_weatherapi_payload(payload: dict[str, Any], days: int) -> ProviderForecast:
    forecast = payload.get("forecast")
    raw_days = forecast.get("forecastday") if isinstance(forecast, dict) else None
    if not isinstance(raw_days, list):
        raise ForecastShapeError("WeatherAPI response did not include forecast.forecastday")

    location = _as_dict(payload.get("location"))
    tz = venue_timezone(location)
    venue_today = _venue_today(location)

    kept_raw: list[Any] = []
    groups: list[DayGroup] = []
    for raw_day in raw_days:
        group = _parse_day(raw_day, tz)
        if group is None:
            continue
        if venue_today is not None and group.date < venue_today:
            continue
        kept_raw.append(raw_day)
        groups.append(group)

    groups = groups[:days]
    name = location.get("name")
    return ProviderForecast(
        provider=PROVIDER_NAME,
        location_name=name if isinstance(name, str) and name.strip() else None,
        current=_parse_current(payload.get("current"), tz, groups, kept_raw),
        days=groups,
        alerts=_parse_alerts(payload.get("alerts")),
        has_precipitation_data=any(group.has_precipitation_data for group in groups),
        raw_payload=payload,
    )


class WeatherApiAdapter:
    name = PROVIDER_NAME

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        fetcher: JsonFetcher = fetch_json,
    ) -> None:
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._fetcher = fetcher

    def get_forecast(self, location: Location, *, days: int = 3) -> ProviderForecast:
        if not self._api_key:
            raise WeatherAdapterError("WeatherAPI key is not configured")
        params = {
            "key": self._api_key,
            "q": location.query,
            # One spare day survives the drop of an already-past "today".
            "days": str(days + 1),
            "aqi": "no",
            "alerts": "yes",
        }
        url = f"{WEATHERAPI_FORECAST_URL}?{urlencode(params)}"
        payload = self._fetcher(url, request_name="forecast", timeout=self._timeout_seconds)
        return parse_weatherapi_payload(payload, days)
