from __future__ import annotations

import logging
import re
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import date
from typing import Any, Callable, Sequence
from urllib.parse import urlencode

from ...domain.models import (
    AlertLevel,
    CurrentConditions,
    DayGroup,
    HourlyRecord,
    Location,
    PrecipitationPeriod,
    ProviderForecast,
    WeatherAlert,
)
from ...forecast.conditions import make_condition
from ...forecast.precipitation import find_period, parse_precipitation_periods
from ...forecast.timeutil import parse_timestamp, utc_date
from ...forecast.units import (
    celsius_to_fahrenheit,
    coerce_float,
    coerce_percent,
    degrees_to_cardinal,
    quantity_to_fahrenheit,
    quantity_to_mph,
    quantity_value,
)
from .base import ForecastShapeError, WeatherAdapterError
from .http import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, JsonFetcher, fetch_json

LOGGER = logging.getLogger(__name__)

NWS_BASE_URL = "https://api.weather.gov"
PROVIDER_NAME = "nws"
METERS_PER_MILE = 1609.344

_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _properties(document: Any) -> dict[str, Any]:
    return _as_dict(_as_dict(document).get("properties"))


def parse_wind_speed(value: Any) -> float | None:
    """Highest number in an NWS wind string such as ``"5 to 10 mph"``."""
    if not isinstance(value, str):
        return coerce_float(value)
    numbers = [float(match) for match in _NUMBER_PATTERN.findall(value)]
    return max(numbers) if numbers else None


def _hour_temperature(period: dict[str, Any]) -> float | None:
    temperature = period.get("temperature")
    if isinstance(temperature, dict):
        return quantity_to_fahrenheit(temperature)
    value = coerce_float(temperature)
    if value is None:
        return None
    if str(period.get("temperatureUnit", "F")).upper() == "C":
        return celsius_to_fahrenheit(value)
    return value


def _parse_hour(
    period: Any, precipitation: Sequence[PrecipitationPeriod]
) -> tuple[HourlyRecord, bool] | None:
    if not isinstance(period, dict):
        return None
    try:
        start = parse_timestamp(str(period.get("startTime")))
    except ValueError:
        LOGGER.debug("Skipping NWS hour with startTime %r", period.get("startTime"))
        return None
    temp_f = _hour_temperature(period)
    if temp_f is None:
        LOGGER.debug("Skipping NWS hour %s without temperature", start.isoformat())
        return None

    covering = find_period(precipitation, start)
    record = HourlyRecord(
        time=start,
        condition=make_condition(period.get("shortForecast"), period.get("icon")),
        chance_of_rain=coerce_percent(quantity_value(period.get("probabilityOfPrecipitation"))) or 0,
        precip_in=covering.hourly_rate_in if covering is not None else 0.0,
        temp_f=temp_f,
    )
    return record, covering is not None


def _daytime_summaries(forecast: Any) -> dict[date, str]:
    summaries: dict[date, str] = {}
    periods = _properties(forecast).get("periods")
    for period in periods if isinstance(periods, list) else []:
        if not isinstance(period, dict) or not period.get("isDaytime"):
            continue
        text = period.get("shortForecast")
        if not isinstance(text, str) or not text.strip():
            continue
        try:
            period_date = parse_timestamp(str(period.get("startTime"))).date()
        except ValueError:
            continue
        summaries.setdefault(period_date, text.strip())
    return summaries


def group_hours_by_utc_day(
    hours: Sequence[tuple[HourlyRecord, bool]], days: int
) -> list[DayGroup]:
    """Group hours by the UTC date of their start instant.

    Gridded precipitation intervals are UTC-anchored, so the day key is too.
    At most ``days + 1`` keys are collected before sorting and truncating.
    """
    buckets: dict[date, list[tuple[HourlyRecord, bool]]] = {}
    for hour, covered in hours:
        key = utc_date(hour.time)
        if key not in buckets and len(buckets) >= days + 1:
            continue
        buckets.setdefault(key, []).append((hour, covered))

    groups: list[DayGroup] = []
    for key in sorted(buckets)[:days]:
        entries = buckets[key]
        groups.append(
            DayGroup(
                date=key,
                hours=[hour for hour, _ in entries],
                has_precipitation_data=any(covered for _, covered in entries),
            )
        )
    return groups


def _parse_alerts(alerts: Any) -> list[WeatherAlert]:
    features = _as_dict(alerts).get("features")
    parsed: list[WeatherAlert] = []
    for feature in features if isinstance(features, list) else []:
        props = _properties(feature)
        if not props:
            continue
        event = str(props.get("event") or "")
        parsed.append(
            WeatherAlert(
                event=event,
                headline=str(props.get("headline") or event),
                description=str(props.get("description") or ""),
                level=AlertLevel.from_event(event),
            )
        )
    return parsed


def _parse_current(
    observation: Any,
    first_period: dict[str, Any],
    first_hour: HourlyRecord | None,
) -> CurrentConditions:
    props = _properties(observation)

    temperature = quantity_to_fahrenheit(props.get("temperature"))
    if temperature is None and first_hour is not None:
        temperature = first_hour.temp_f

    feels_like = next(
        (
            value
            for value in (
                quantity_to_fahrenheit(props.get("heatIndex")),
                quantity_to_fahrenheit(props.get("windChill")),
            )
            if value is not None
        ),
        temperature,
    )

    text = props.get("textDescription")
    if isinstance(text, str) and text.strip():
        condition = make_condition(text, props.get("icon"))
    elif first_hour is not None:
        condition = first_hour.condition
    else:
        condition = make_condition(None)

    wind_mph = quantity_to_mph(props.get("windSpeed"))
    if wind_mph is None:
        wind_mph = parse_wind_speed(first_period.get("windSpeed"))

    direction_degrees = quantity_value(props.get("windDirection"))
    if direction_degrees is not None:
        wind_dir = degrees_to_cardinal(direction_degrees)
    else:
        wind_dir = first_period.get("windDirection") or None

    humidity = coerce_percent(quantity_value(props.get("relativeHumidity")))
    if humidity is None:
        humidity = coerce_percent(quantity_value(first_period.get("relativeHumidity")))

    visibility_m = quantity_value(props.get("visibility"))
    try:
        last_updated = parse_timestamp(str(props.get("timestamp")))
    except ValueError:
        last_updated = None

    return CurrentConditions(
        temperature_f=temperature,
        condition=condition,
        feels_like_f=feels_like,
        wind_mph=wind_mph,
        wind_dir=wind_dir,
        gust_mph=quantity_to_mph(props.get("windGust")),
        humidity=humidity,
        chance_of_rain=first_hour.chance_of_rain if first_hour is not None else None,
        visibility_miles=visibility_m / METERS_PER_MILE if visibility_m is not None else None,
        last_updated=last_updated,
    )


def parse_nws_payload(raw: dict[str, Any], days: int) -> ProviderForecast:
    """Build a provider-neutral forecast from the collected NWS documents.

    ``raw`` holds the decoded responses keyed ``points``, ``forecast``,
    ``hourly``, ``gridpoint``, ``alerts`` and ``observation``. Only the hourly
    periods are required; everything else degrades to empty.
    """
    hourly_periods = _properties(raw.get("hourly")).get("periods")
    if not isinstance(hourly_periods, list) or not hourly_periods:
        raise ForecastShapeError("NWS hourly forecast did not include any periods")

    qpf = _as_dict(_properties(raw.get("gridpoint")).get("quantitativePrecipitation"))
    qpf_values = qpf.get("values")
    precipitation = parse_precipitation_periods(qpf_values if isinstance(qpf_values, list) else [])

    parsed_hours = [
        parsed
        for parsed in (_parse_hour(period, precipitation) for period in hourly_periods)
        if parsed is not None
    ]
    parsed_hours.sort(key=lambda item: item[0].time)
    groups = group_hours_by_utc_day(parsed_hours, days)

    summaries = _daytime_summaries(raw.get("forecast"))
    if summaries:
        groups = [
            group.model_copy(update={"summary": summaries.get(group.date)}) for group in groups
        ]

    relative = _as_dict(_properties(raw.get("points")).get("relativeLocation"))
    location_props = _properties(relative)
    city = location_props.get("city")
    state = location_props.get("state")
    location_name = ", ".join(part for part in (city, state) if isinstance(part, str) and part) or None

    first_period = hourly_periods[0] if isinstance(hourly_periods[0], dict) else {}
    first_hour = parsed_hours[0][0] if parsed_hours else None

    return ProviderForecast(
        provider=PROVIDER_NAME,
        location_name=location_name,
        current=_parse_current(raw.get("observation"), first_period, first_hour),
        days=groups,
        alerts=_parse_alerts(raw.get("alerts")),
        has_precipitation_data=bool(precipitation),
        raw_payload=raw,
    )


class NwsAdapter:
    name = PROVIDER_NAME

    def __init__(
        self,
        *,
        base_url: str = NWS_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        fetcher: JsonFetcher = fetch_json,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent, "Accept": "application/geo+json"}
        self._timeout_seconds = timeout_seconds
        self._fetcher = fetcher

    def _get(self, url: str, request_name: str) -> dict[str, Any]:
        return self._fetcher(
            url,
            request_name=request_name,
            headers=self._headers,
            timeout=self._timeout_seconds,
        )

    def _get_latest_observation(self, stations_url: str) -> dict[str, Any]:
        stations = self._get(stations_url, "stations")
        features = stations.get("features")
        if not isinstance(features, list) or not features:
            return {}
        station_id = _properties(features[0]).get("stationIdentifier")
        if not isinstance(station_id, str) or not station_id:
            return {}
        return self._get(f"{self._base_url}/stations/{station_id}/observations/latest", "observation")

    def _run_group(self, tasks: dict[str, Callable[[], dict[str, Any]]]) -> dict[str, dict[str, Any]]:
        with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in done:
                error = future.exception()
                if error is not None:
                    raise error
            return {name: future.result() for name, future in futures.items()}

    def get_forecast(self, location: Location, *, days: int = 3) -> ProviderForecast:
        if not location.has_coordinates:
            raise WeatherAdapterError(f"NWS needs coordinates for location '{location.name}'")

        point = f"{location.latitude:.4f},{location.longitude:.4f}"
        points = self._get(f"{self._base_url}/points/{point}", "points")
        props = _properties(points)
        urls = {
            "forecast": props.get("forecast"),
            "hourly": props.get("forecastHourly"),
            "gridpoint": props.get("forecastGridData"),
            "stations": props.get("observationStations"),
        }
        missing = sorted(name for name, url in urls.items() if not isinstance(url, str) or not url)
        if missing:
            raise ForecastShapeError(f"NWS points response was missing {', '.join(missing)} URLs")

        alerts_url = f"{self._base_url}/alerts/active?{urlencode({'point': point})}"
        results = self._run_group(
            {
                "forecast": lambda: self._get(urls["forecast"], "grid_forecast"),
                "hourly": lambda: self._get(urls["hourly"], "hourly_forecast"),
                "gridpoint": lambda: self._get(urls["gridpoint"], "gridpoint"),
                "alerts": lambda: self._get(alerts_url, "alerts"),
                "observation": lambda: self._get_latest_observation(urls["stations"]),
            }
        )
        LOGGER.info("Fetched NWS documents for %s (%s)", location.name, point)
        return parse_nws_payload({"points": points, **results}, days)
