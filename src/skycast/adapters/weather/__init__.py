from .base import ForecastShapeError, ProviderFetchError, WeatherAdapter, WeatherAdapterError
from .nws import NwsAdapter
from .weatherapi import WeatherApiAdapter

__all__ = [
    "ForecastShapeError",
    "NwsAdapter",
    "ProviderFetchError",
    "WeatherAdapter",
    "WeatherAdapterError",
    "WeatherApiAdapter",
]
