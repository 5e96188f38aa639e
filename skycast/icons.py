"""Weather icon enumeration and the provider lookup tables that feed it."""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple, Union


class Icon(str, Enum):
    SUN = "sun"
    MOON = "moon"
    CLOUD_SUN = "cloud-sun"
    CLOUD_MOON = "cloud-moon"
    CLOUD = "cloud"
    SMOG = "smog"
    CLOUD_SHOWERS_HEAVY = "cloud-showers-heavy"
    CLOUD_BOLT = "cloud-bolt"
    CLOUD_SLEET = "cloud-sleet"
    SNOWFLAKE = "snowflake"
    CLOUD_RAIN = "cloud-rain"
    CLOUD_DRIZZLE = "cloud-drizzle"


# (day, night) pair for conditions that look different after sunset.
DayNight = Tuple[Icon, Icon]
IconChoice = Union[Icon, DayNight]

CLEAR: DayNight = (Icon.SUN, Icon.MOON)
PARTLY_CLOUDY: DayNight = (Icon.CLOUD_SUN, Icon.CLOUD_MOON)

# SMHI Wsymb2 codes, see https://opendata.smhi.se/apidocs/metfcst/parameters.html
SMHI_SYMBOLS: Mapping[int, IconChoice] = {
    1: CLEAR,
    2: PARTLY_CLOUDY,
    3: Icon.CLOUD,
    4: Icon.CLOUD,
    5: Icon.CLOUD,
    6: Icon.CLOUD,
    7: Icon.SMOG,
    8: Icon.CLOUD_SHOWERS_HEAVY,
    9: Icon.CLOUD_SHOWERS_HEAVY,
    10: Icon.CLOUD_SHOWERS_HEAVY,
    11: Icon.CLOUD_BOLT,
    12: Icon.CLOUD_SLEET,
    13: Icon.CLOUD_SLEET,
    14: Icon.CLOUD_SLEET,
    15: Icon.SNOWFLAKE,
    16: Icon.SNOWFLAKE,
    17: Icon.SNOWFLAKE,
    18: Icon.CLOUD_RAIN,
    19: Icon.CLOUD_RAIN,
    20: Icon.CLOUD_RAIN,
    21: Icon.CLOUD_BOLT,
    22: Icon.CLOUD_SLEET,
    23: Icon.CLOUD_SLEET,
    24: Icon.CLOUD_SLEET,
    25: Icon.SNOWFLAKE,
    26: Icon.SNOWFLAKE,
    27: Icon.SNOWFLAKE,
}

# Scanned in order against the lowercased condition text; first hit wins.
# "partly cloudy" must stay ahead of "cloudy" and "rain" ahead of "thunder".
CONDITION_KEYWORDS: Sequence[Tuple[str, IconChoice]] = (
    ("clear", CLEAR),
    ("partly cloudy", PARTLY_CLOUDY),
    ("cloudy", Icon.CLOUD),
    ("overcast", Icon.CLOUD),
    ("mist", Icon.SMOG),
    ("fog", Icon.SMOG),
    ("rain", Icon.CLOUD_SHOWERS_HEAVY),
    ("thunder", Icon.CLOUD_BOLT),
    ("sleet", Icon.CLOUD_SLEET),
    ("snow", Icon.SNOWFLAKE),
    ("drizzle", Icon.CLOUD_DRIZZLE),
)


def resolve(choice: IconChoice, is_day: bool) -> Icon:
    if isinstance(choice, tuple):
        day, night = choice
        return day if is_day else night
    return choice


def icon_for_symbol(code: object, is_day: bool) -> Optional[Icon]:
    """Map an SMHI Wsymb2 value to an icon, ``None`` for unknown codes."""
    try:
        choice = SMHI_SYMBOLS.get(int(code))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if choice is None:
        return None
    return resolve(choice, is_day)


def icon_for_condition(text: Optional[str], is_day: bool) -> Icon:
    """Keyword scan of a free-text condition, defaulting to partly cloudy."""
    lowered = (text or "").lower()
    for keyword, choice in CONDITION_KEYWORDS:
        if keyword in lowered:
            return resolve(choice, is_day)
    return resolve(PARTLY_CLOUDY, is_day)


__all__ = [
    "CONDITION_KEYWORDS",
    "Icon",
    "SMHI_SYMBOLS",
    "icon_for_condition",
    "icon_for_symbol",
    "resolve",
]
