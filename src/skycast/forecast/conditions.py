from __future__ import annotations

from typing import Any

from ..domain.models import Condition

NO_DATA_TEXT = "No data"

# Checked in order; the first keyword found in the lowercased text wins.
ICON_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("thunderstorm", ("thunder", "t-storm", "tstorm", "lightning")),
    ("snow", ("snow", "blizzard", "flurr", "sleet", "ice pellets", "freezing")),
    ("rain", ("rain", "shower", "drizzle")),
    ("fog", ("fog", "mist", "haze", "smoke")),
    ("wind", ("wind", "breezy", "blustery")),
    ("partly-cloudy", ("partly", "mostly sunny", "mostly clear")),
    ("cloudy", ("overcast", "cloudy")),
    ("clear", ("sunny", "clear", "fair")),
)


def classify_condition(text: str | None) -> str:
    if not text:
        return "unknown"
    lowered = text.lower()
    for icon_key, keywords in ICON_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return icon_key
    return "unknown"


def normalize_icon_url(icon: Any) -> str | None:
    if not isinstance(icon, str):
        return None
    text = icon.strip()
    if not text:
        return None
    if text.startswith("//"):
        return f"https:{text}"
    return text


def make_condition(text: Any, icon: Any = None) -> Condition:
    label = text.strip() if isinstance(text, str) and text.strip() else NO_DATA_TEXT
    return Condition(
        text=label,
        icon=normalize_icon_url(icon),
        icon_key=classify_condition(label if label != NO_DATA_TEXT else None),
    )


NO_DATA_CONDITION = Condition(text=NO_DATA_TEXT, icon=None, icon_key="unknown")
