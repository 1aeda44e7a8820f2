from __future__ import annotations

import re

from ..domain.models import Location
from ..settings import AppSettings

_COORDINATES_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")
_POSTAL_CODE_PATTERN = re.compile(r"^\d{5}(?:-\d{4})?$")


class LocationResolutionError(RuntimeError):
    """Raised when a location query matches no configured city or known format."""


def _configured_city(query: str, settings: AppSettings) -> Location | None:
    lowered = query.lower()
    for city in settings.yaml.locations.cities:
        if city.postal_code and city.postal_code == query:
            return city
        if city.name.lower() == lowered:
            return city
    return None


def _location_from_coordinates(query: str) -> Location | None:
    match = _COORDINATES_PATTERN.match(query)
    if match is None:
        return None
    lat = float(match.group(1))
    lon = float(match.group(2))
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        return None
    return Location(name=f"{lat:.4f},{lon:.4f}", latitude=lat, longitude=lon)


def list_locations(settings: AppSettings) -> list[Location]:
    return list(settings.yaml.locations.cities)


def resolve_location(query: str | None, settings: AppSettings) -> Location:
    text = (query or "").strip() or settings.yaml.locations.default

    city = _configured_city(text, settings)
    if city is not None:
        return city

    coordinates = _location_from_coordinates(text)
    if coordinates is not None:
        return coordinates

    if _POSTAL_CODE_PATTERN.match(text):
        return Location(name=text, postal_code=text)

    raise LocationResolutionError(f"Unknown location: {text}")
