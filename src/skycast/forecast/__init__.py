from .normalizer import aggregate_hours, normalize_day, normalize_forecast
from .periods import (
    AFTERNOON,
    EVENING,
    MORNING,
    PERIODS,
    DayPeriod,
    PeriodSummary,
    period_chance_of_rain,
    period_rainfall,
    representative_hour,
    summarize_day,
    summarize_period,
)

__all__ = [
    "AFTERNOON",
    "EVENING",
    "MORNING",
    "PERIODS",
    "DayPeriod",
    "PeriodSummary",
    "aggregate_hours",
    "normalize_day",
    "normalize_forecast",
    "period_chance_of_rain",
    "period_rainfall",
    "representative_hour",
    "summarize_day",
    "summarize_period",
]
