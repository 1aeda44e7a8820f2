"""Shared test fixtures and payload builders."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from skycast.domain.models import Location, ProviderForecast
from skycast.settings import AppSettings, EnvSettings, SkycastYamlSettings

NWS_BASE = "https://nws.test"


def weatherapi_hour(day: date, hour: int, **overrides: Any) -> dict[str, Any]:
    entry = {
        "time": f"{day.isoformat()} {hour:02d}:00",
        "temp_f": 50.0 + hour,
        "condition": {"text": "Partly cloudy", "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png"},
        "chance_of_rain": 10,
        "precip_in": 0.0,
    }
    entry.update(overrides)
    return entry


def make_weatherapi_payload(
    *,
    start: date = date(2024, 3, 1),
    day_count: int = 4,
    tz_id: str | None = "America/New_York",
    localtime: str | None = "2024-03-01 08:45",
) -> dict[str, Any]:
    days = []
    for offset in range(day_count):
        day = start + timedelta(days=offset)
        days.append(
            {
                "date": day.isoformat(),
                "day": {
                    "maxtemp_f": 73.0,
                    "mintemp_f": 50.0,
                    "daily_chance_of_rain": 40,
                    "condition": {"text": "Partly cloudy"},
                },
                "astro": {"sunrise": "06:52 AM", "sunset": "06:31 PM"},
                "hour": [weatherapi_hour(day, hour) for hour in range(24)],
            }
        )

    location: dict[str, Any] = {"name": "Wimauma", "region": "Florida"}
    if tz_id is not None:
        location["tz_id"] = tz_id
    if localtime is not None:
        location["localtime"] = localtime

    return {
        "location": location,
        "current": {
            "last_updated": "2024-03-01 08:45",
            "temp_f": 61.2,
            "feelslike_f": 60.1,
            "condition": {"text": "Sunny", "icon": "//cdn.weatherapi.com/weather/64x64/day/113.png"},
            "wind_mph": 9.4,
            "wind_dir": "NNE",
            "gust_mph": 14.1,
            "humidity": 71,
            "uv": 4.0,
            "vis_miles": 6.0,
        },
        "forecast": {"forecastday": days},
        "alerts": {
            "alert": [
                {"event": "Flood Watch", "headline": "Flood Watch issued", "desc": "Heavy rain possible."},
            ]
        },
    }


def nws_period(start: str, **overrides: Any) -> dict[str, Any]:
    period = {
        "startTime": start,
        "temperature": 60,
        "temperatureUnit": "F",
        "probabilityOfPrecipitation": {"unitCode": "wmoUnit:percent", "value": 20},
        "shortForecast": "Chance Rain Showers",
        "icon": "https://api.weather.gov/icons/land/day/rain_showers,20?size=small",
        "windSpeed": "5 to 10 mph",
        "windDirection": "SW",
        "relativeHumidity": {"unitCode": "wmoUnit:percent", "value": 80},
    }
    period.update(overrides)
    return period


def hourly_periods(start: datetime, count: int) -> list[dict[str, Any]]:
    return [
        nws_period((start + timedelta(hours=offset)).isoformat(), temperature=50 + offset % 24)
        for offset in range(count)
    ]


def make_nws_raw(
    *,
    periods: list[dict[str, Any]] | None = None,
    qpf_values: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    if periods is None:
        periods = hourly_periods(datetime(2024, 3, 1, 0, tzinfo=timezone.utc), 96)
    return {
        "points": {
            "properties": {
                "relativeLocation": {"properties": {"city": "Ruskin", "state": "FL"}},
            }
        },
        "forecast": {
            "properties": {
                "periods": [
                    {
                        "startTime": "2024-03-01T06:00:00-05:00",
                        "isDaytime": True,
                        "shortForecast": "Showers Likely",
                    },
                    {
                        "startTime": "2024-03-01T18:00:00-05:00",
                        "isDaytime": False,
                        "shortForecast": "Mostly Cloudy",
                    },
                ]
            }
        },
        "hourly": {"properties": {"periods": periods}},
        "gridpoint": {
            "properties": {
                "quantitativePrecipitation": {
                    "uom": "wmoUnit:mm",
                    "values": qpf_values if qpf_values is not None else [],
                }
            }
        },
        "alerts": {
            "features": [
                {"properties": {"event": "Heat Advisory", "headline": "Heat Advisory until 8 PM", "description": "Hot."}},
                {"properties": {"event": "Tornado Warning", "headline": "Tornado Warning", "description": "Take cover."}},
            ]
        },
        "observation": {
            "properties": {
                "timestamp": "2024-03-01T13:53:00+00:00",
                "textDescription": "Cloudy",
                "temperature": {"unitCode": "wmoUnit:degC", "value": 20.0},
                "windSpeed": {"unitCode": "wmoUnit:km_h-1", "value": 16.09344},
                "windDirection": {"unitCode": "wmoUnit:degree_(angle)", "value": 225},
                "windGust": {"unitCode": "wmoUnit:km_h-1", "value": None},
                "relativeHumidity": {"unitCode": "wmoUnit:percent", "value": 65.4},
                "heatIndex": {"unitCode": "wmoUnit:degC", "value": None},
                "windChill": {"unitCode": "wmoUnit:degC", "value": None},
                "visibility": {"unitCode": "wmoUnit:m", "value": 16093.44},
            }
        },
    }


class StubAdapter:
    """Adapter double returning a canned forecast or raising a canned error."""

    name = "stub"

    def __init__(self, forecast: ProviderForecast | None = None, error: Exception | None = None):
        self.forecast = forecast
        self.error = error
        self.calls: list[tuple[Location, int]] = []

    def get_forecast(self, location: Location, *, days: int = 3) -> ProviderForecast:
        self.calls.append((location, days))
        if self.error is not None:
            raise self.error
        assert self.forecast is not None
        return self.forecast


@pytest.fixture
def wimauma() -> Location:
    return Location(name="Wimauma", postal_code="33598", latitude=27.7125, longitude=-82.2990)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        env=EnvSettings(_env_file=None, skycast_env="test"),
        yaml=SkycastYamlSettings(),
        project_root=tmp_path,
        config_path=tmp_path / "skycast.yaml",
    )
