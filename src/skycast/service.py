from __future__ import annotations

import logging
from datetime import datetime, timezone

from .adapters.weather import NwsAdapter, WeatherAdapter, WeatherApiAdapter
from .astronomy import SunTimesFunction, sun_times
from .domain.models import ForecastResult, Location
from .forecast.normalizer import normalize_forecast
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch weather data. Please check your connection or API key."


def build_weather_adapter(settings: AppSettings) -> WeatherAdapter:
    weather = settings.yaml.weather
    if weather.provider == "weatherapi":
        return WeatherApiAdapter(
            api_key=settings.env.weatherapi_key.get_secret_value(),
            timeout_seconds=weather.timeout_seconds,
        )
    if weather.provider == "nws":
        return NwsAdapter(
            user_agent=weather.user_agent,
            timeout_seconds=weather.timeout_seconds,
        )
    raise ValueError(f"Unsupported weather provider: {weather.provider}")


def run_forecast_cycle(
    location: Location,
    days: int,
    adapter: WeatherAdapter,
    *,
    sun_times_fn: SunTimesFunction | None = sun_times,
) -> ForecastResult:
    """Fetch and normalize one forecast for ``location``.

    Transport and structural errors from the adapter propagate unchanged; no
    partial result is produced for them. A short day list is not an error and
    is reported through ``ForecastResult.partial_data``.
    """
    if days < 1:
        raise ValueError("days must be >= 1")

    provider_forecast = adapter.get_forecast(location, days=days)
    daily, partial = normalize_forecast(
        provider_forecast,
        location,
        days,
        sun_times_fn=sun_times_fn,
    )
    fetched_at = datetime.now(timezone.utc)
    result = ForecastResult(
        provider=provider_forecast.provider,
        location=location,
        location_name=provider_forecast.location_name or location.name,
        requested_days=days,
        days=daily,
        current=provider_forecast.current,
        alerts=provider_forecast.alerts,
        partial_data=partial,
        fetched_at=fetched_at,
        raw_payload=provider_forecast.raw_payload,
    )
    LOGGER.info(
        "Forecast cycle for %s via '%s' produced %d day(s) at %s",
        location.name,
        result.provider,
        len(daily),
        fetched_at,
    )
    return result
