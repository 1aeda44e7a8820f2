"""Approximate sunrise/sunset for a date and coordinates.

Uses the solar declination and equation-of-time approximations, good to a few
minutes at mid latitudes. Any callable with the same signature can be passed
to the normalizer instead.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import NamedTuple, Protocol

CLOCK_FORMAT = "%I:%M %p"


class SunTimes(NamedTuple):
    sunrise: str
    sunset: str


class SunTimesFunction(Protocol):
    def __call__(
        self,
        day: date,
        latitude: float,
        longitude: float,
        *,
        tzinfo: tzinfo | None = None,
    ) -> SunTimes:
        """Return venue-local sunrise and sunset clock strings."""


def _solar_declination(day_of_year: int) -> float:
    return 23.45 * math.sin(math.radians(360 / 365 * (day_of_year - 81)))


def _equation_of_time(day_of_year: int) -> float:
    b = 2 * math.pi * (day_of_year - 81) / 365
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def sun_times_utc(day: date, latitude: float, longitude: float) -> tuple[datetime, datetime]:
    day_of_year = day.timetuple().tm_yday
    declination = _solar_declination(day_of_year)

    cos_hour_angle = -math.tan(math.radians(latitude)) * math.tan(math.radians(declination))
    # Polar day or polar night.
    cos_hour_angle = min(max(cos_hour_angle, -1.0), 1.0)
    hour_angle = math.degrees(math.acos(cos_hour_angle))

    solar_noon = 12 - (longitude / 15) - (_equation_of_time(day_of_year) / 60)
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    sunrise = midnight + timedelta(hours=solar_noon - hour_angle / 15)
    sunset = midnight + timedelta(hours=solar_noon + hour_angle / 15)
    return sunrise, sunset


def sun_times(
    day: date,
    latitude: float,
    longitude: float,
    *,
    tzinfo: tzinfo | None = None,
) -> SunTimes:
    sunrise, sunset = sun_times_utc(day, latitude, longitude)
    target = tzinfo or timezone.utc
    return SunTimes(
        sunrise=sunrise.astimezone(target).strftime(CLOCK_FORMAT),
        sunset=sunset.astimezone(target).strftime(CLOCK_FORMAT),
    )
