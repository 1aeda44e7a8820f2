"""SkyCast - multi-day forecast normalization for WeatherAPI.com and the NWS."""

__version__ = "0.1.0"
