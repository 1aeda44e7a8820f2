from __future__ import annotations

from typing import Protocol

from ...domain.models import Location, ProviderForecast


class WeatherAdapterError(RuntimeError):
    """Raised when a weather provider request cannot be completed."""


class ProviderFetchError(WeatherAdapterError):
    """Raised when one logical provider request fails in transport."""

    def __init__(self, request: str, message: str, *, status: int | None = None) -> None:
        super().__init__(f"{request}: {message}")
        self.request = request
        self.status = status


class ForecastShapeError(WeatherAdapterError):
    """Raised when a provider payload lacks a required top-level field."""


class WeatherAdapter(Protocol):
    name: str

    def get_forecast(self, location: Location, *, days: int = 3) -> ProviderForecast:
        """Fetch a provider-neutral forecast for the location."""
