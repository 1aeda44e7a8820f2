from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Condition(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    text: str
    icon: str | None = None
    icon_key: str = "unknown"


class HourlyRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    time: datetime
    condition: Condition
    chance_of_rain: int = Field(default=0, ge=0, le=100)
    precip_in: float = Field(default=0.0, ge=0)
    temp_f: float

    @field_validator("time")
    @classmethod
    def validate_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("hourly record time must be timezone-aware")
        return value

    @property
    def local_hour(self) -> int:
        return self.time.hour


class DailyAggregate(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    min_temp_f: float = math.inf
    max_temp_f: float = -math.inf
    max_chance_of_rain: int | None = None

    @property
    def has_temperature_data(self) -> bool:
        return math.isfinite(self.min_temp_f) and math.isfinite(self.max_temp_f)


class DailyForecast(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    date: date
    hours: list[HourlyRecord] = Field(default_factory=list)
    aggregate: DailyAggregate = Field(default_factory=DailyAggregate)
    sunrise: str | None = None
    sunset: str | None = None
    summary: str | None = None
    has_precipitation_data: bool = False

    @model_validator(mode="after")
    def validate_aggregate(self) -> DailyForecast:
        if self.hours and self.aggregate.min_temp_f > self.aggregate.max_temp_f:
            raise ValueError("daily min_temp_f must be <= max_temp_f")
        return self


@dataclass(frozen=True, slots=True)
class PrecipitationPeriod:
    start: datetime
    end: datetime
    hourly_rate_in: float

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("precipitation period end must be after start")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class Location(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    postal_code: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location name must not be empty")
        return text

    @model_validator(mode="after")
    def validate_reference(self) -> Location:
        has_pair = self.latitude is not None and self.longitude is not None
        if not has_pair and not self.postal_code:
            raise ValueError("location needs either a postal code or latitude/longitude")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def query(self) -> str:
        if self.postal_code:
            return self.postal_code
        return f"{self.latitude:.4f},{self.longitude:.4f}"


class CurrentConditions(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    temperature_f: float | None = None
    condition: Condition
    feels_like_f: float | None = None
    wind_mph: float | None = None
    wind_dir: str | None = None
    gust_mph: float | None = None
    humidity: int | None = Field(default=None, ge=0, le=100)
    chance_of_rain: int | None = Field(default=None, ge=0, le=100)
    uv: float | None = None
    visibility_miles: float | None = None
    last_updated: datetime | None = None


class AlertLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    DEFAULT = "default"

    @classmethod
    def from_event(cls, event: str) -> AlertLevel:
        text = event.lower()
        if "warning" in text:
            return cls.HIGH
        if "watch" in text:
            return cls.MEDIUM
        if "advisory" in text:
            return cls.LOW
        return cls.DEFAULT


class WeatherAlert(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    event: str = ""
    headline: str = ""
    description: str = ""
    level: AlertLevel = AlertLevel.DEFAULT


class DayGroup(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    date: date
    hours: list[HourlyRecord] = Field(default_factory=list)
    sunrise: str | None = None
    sunset: str | None = None
    summary: str | None = None
    has_precipitation_data: bool = False


class ProviderForecast(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    provider: str
    location_name: str | None = None
    current: CurrentConditions | None = None
    days: list[DayGroup] = Field(default_factory=list)
    alerts: list[WeatherAlert] = Field(default_factory=list)
    has_precipitation_data: bool = False
    raw_payload: dict[str, Any] = Field(default_factory=dict)


class ForecastResult(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    provider: str
    location: Location
    location_name: str
    requested_days: int = Field(ge=1)
    days: list[DailyForecast] = Field(default_factory=list)
    current: CurrentConditions | None = None
    alerts: list[WeatherAlert] = Field(default_factory=list)
    partial_data: bool = False
    fetched_at: datetime
    raw_payload: dict[str, Any] = Field(default_factory=dict)
