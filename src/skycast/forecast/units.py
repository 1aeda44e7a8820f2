from __future__ import annotations

import math
from typing import Any

MM_PER_INCH = 25.4
KM_PER_MILE = 1.609344

CARDINAL_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def mm_to_inches(value: float) -> float:
    return value / MM_PER_INCH


def kmh_to_mph(value: float) -> float:
    return value / KM_PER_MILE


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def degrees_to_cardinal(degrees: float) -> str:
    index = int(((degrees % 360) + 11.25) // 22.5) % len(CARDINAL_DIRECTIONS)
    return CARDINAL_DIRECTIONS[index]


def coerce_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_percent(value: Any) -> int | None:
    number = coerce_float(value)
    if number is None:
        return None
    return min(max(int(round(number)), 0), 100)


def quantity_value(quantity: Any) -> float | None:
    """Return the numeric value of an NWS ``{"value": ..., "unitCode": ...}`` quantity."""
    if not isinstance(quantity, dict):
        return None
    return coerce_float(quantity.get("value"))


def quantity_to_fahrenheit(quantity: Any) -> float | None:
    value = quantity_value(quantity)
    if value is None:
        return None
    unit = str(quantity.get("unitCode", "wmoUnit:degC"))
    if unit.endswith("degF"):
        return value
    return celsius_to_fahrenheit(value)


def quantity_to_mph(quantity: Any) -> float | None:
    value = quantity_value(quantity)
    if value is None:
        return None
    unit = str(quantity.get("unitCode", "wmoUnit:km_h-1"))
    if unit.endswith(":m_s-1"):
        return kmh_to_mph(value * 3.6)
    return kmh_to_mph(value)
