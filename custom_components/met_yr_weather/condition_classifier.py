"""Map MET/Yr symbol codes to icon ids and human readable descriptions.

Both mappings are static tables so that reviewing a mapping means reading
data, not branches:

- ICON_TABLE: (base_code, variant) -> icon rule
- DESCRIPTION_TABLE: base_code -> description rule

A rule is either a fixed string or a (light, moderate, heavy) triple selected
by the precipitation intensity tier. ``variant`` is "day", "night" or None
for codes published without a suffix (e.g. "cloudy", "rain").
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

from .const import HEAVY_PRECIP_THRESHOLD, LIGHT_PRECIP_THRESHOLD
from .unit_helpers import _to_float

_LOGGER = logging.getLogger(__name__)

TIER_LIGHT = "light"
TIER_MODERATE = "moderate"
TIER_HEAVY = "heavy"

DEFAULT_ICON_ID = "cloudy"
DEFAULT_DESCRIPTION = "Cloudy"
WIND_ICON_ID = "wind"
WIND_DESCRIPTION = "Windy"

Rule = Union[str, Tuple[str, str, str]]

_TIER_INDEX = {TIER_LIGHT: 0, TIER_MODERATE: 1, TIER_HEAVY: 2}


def _light_split(light: str, other: str) -> Tuple[str, str, str]:
    """Codes prefixed 'light': tier 1 when measured light, else tier 2."""
    return (light, other, other)


def _heavy_split(heavy: str, other: str) -> Tuple[str, str, str]:
    """Plain codes: tier 3 only when measured heavy, else tier 2."""
    return (other, other, heavy)


def _day_night(base: str, stem_or_builder) -> Dict[Tuple[str, Optional[str]], Rule]:
    """Expand one base code into its _day and _night table rows."""
    if callable(stem_or_builder):
        build = stem_or_builder
    else:
        build = lambda variant: f"{stem_or_builder}-{variant}"  # noqa: E731
    return {(base, variant): build(variant) for variant in ("day", "night")}


ICON_TABLE: Dict[Tuple[str, Optional[str]], Rule] = {
    # Clear / cloud cover
    **_day_night("clearsky", "clear"),
    **_day_night("fair", "cloudy-1"),
    **_day_night("partlycloudy", "cloudy-2"),
    ("cloudy", None): "cloudy",
    ("fog", None): "fog",
    # Rain
    ("lightrain", None): _light_split("rainy-1", "rainy-2"),
    **_day_night("lightrainshowers", lambda v: _light_split(f"rainy-1-{v}", f"rainy-2-{v}")),
    ("rain", None): _heavy_split("rainy-3", "rainy-2"),
    **_day_night("rainshowers", lambda v: _heavy_split(f"rainy-3-{v}", f"rainy-2-{v}")),
    ("heavyrain", None): "rainy-3",
    **_day_night("heavyrainshowers", "rainy-3"),
    # Snow
    ("lightsnow", None): _light_split("snowy-1", "snowy-2"),
    **_day_night("lightsnowshowers", lambda v: _light_split(f"snowy-1-{v}", f"snowy-2-{v}")),
    ("snow", None): _heavy_split("snowy-3", "snowy-2"),
    **_day_night("snowshowers", lambda v: _heavy_split(f"snowy-3-{v}", f"snowy-2-{v}")),
    ("heavysnow", None): "snowy-3",
    **_day_night("heavysnowshowers", "snowy-3"),
    # Sleet
    ("sleet", None): "rain-and-sleet-mix",
    ("lightsleet", None): "rain-and-sleet-mix",
    ("heavysleet", None): "rain-and-sleet-mix",
    **_day_night("sleetshowers", lambda v: "rain-and-sleet-mix"),
    **_day_night("lightsleetshowers", lambda v: "rain-and-sleet-mix"),
    **_day_night("heavysleetshowers", lambda v: "rain-and-sleet-mix"),
    # Thunder
    ("rainandthunder", None): "scattered-thunderstorms",
    ("lightrainandthunder", None): "scattered-thunderstorms",
    ("heavyrainandthunder", None): "thunderstorms",
    **_day_night("rainshowersandthunder", "scattered-thunderstorms"),
    **_day_night("lightrainshowersandthunder", "scattered-thunderstorms"),
    **_day_night("heavyrainshowersandthunder", lambda v: "thunderstorms"),
    ("snowandthunder", None): "snow-and-sleet-mix",
    ("lightsnowandthunder", None): "snow-and-sleet-mix",
    ("heavysnowandthunder", None): "snow-and-sleet-mix",
    ("sleetandthunder", None): "snow-and-sleet-mix",
    # Severe
    ("tropicalstorm", None): "tropical-storm",
    ("hurricane", None): "hurricane",
}

DESCRIPTION_TABLE: Dict[str, Rule] = {
    "clearsky": "Clear Sky",
    "fair": "Mostly Clear",
    "partlycloudy": "Partly Cloudy",
    "cloudy": "Cloudy",
    "fog": "Fog",
    "lightrain": _light_split("Light Rain", "Moderate Rain"),
    "lightrainshowers": _light_split("Light Rain Showers", "Moderate Rain Showers"),
    "rain": _heavy_split("Heavy Rain", "Moderate Rain"),
    "rainshowers": _heavy_split("Heavy Rain Showers", "Moderate Rain Showers"),
    "heavyrain": "Heavy Rain",
    "heavyrainshowers": "Heavy Rain Showers",
    "lightsnow": _light_split("Light Snow", "Moderate Snow"),
    "lightsnowshowers": _light_split("Light Snow Showers", "Moderate Snow Showers"),
    "snow": _heavy_split("Heavy Snow", "Moderate Snow"),
    "snowshowers": _heavy_split("Heavy Snow Showers", "Moderate Snow Showers"),
    "heavysnow": "Heavy Snow",
    "heavysnowshowers": "Heavy Snow Showers",
    "sleet": "Sleet",
    "sleetshowers": "Sleet Showers",
    "lightsleet": "Light Sleet",
    "heavysleet": "Heavy Sleet",
    "lightsleetshowers": "Light Sleet Showers",
    "heavysleetshowers": "Heavy Sleet Showers",
    "rainandthunder": "Rain with Thunder",
    "lightrainandthunder": "Light Rain with Thunder",
    "heavyrainandthunder": "Heavy Rain with Thunder",
    "rainshowersandthunder": "Rain Showers with Thunder",
    "lightrainshowersandthunder": "Light Rain Showers with Thunder",
    "heavyrainshowersandthunder": "Heavy Rain Showers with Thunder",
    "snowandthunder": "Snow with Thunder",
    "lightsnowandthunder": "Light Snow with Thunder",
    "heavysnowandthunder": "Heavy Snow with Thunder",
    "sleetandthunder": "Sleet with Thunder",
    "tropicalstorm": "Tropical Storm",
    "hurricane": "Hurricane",
}


def intensity_tier(precipitation_amount: Any) -> str:
    """Return the intensity tier for a precipitation amount in mm (absent -> 0)."""
    precip = _to_float(precipitation_amount)
    if precip is None:
        precip = 0.0
    if precip < LIGHT_PRECIP_THRESHOLD:
        return TIER_LIGHT
    if precip >= HEAVY_PRECIP_THRESHOLD:
        return TIER_HEAVY
    return TIER_MODERATE


def split_symbol(symbol_code: Any) -> Tuple[str, Optional[str]]:
    """Split 'lightrainshowers_day' into ('lightrainshowers', 'day').

    'polartwilight' is folded into 'day'; unknown suffixes are kept as-is.
    """
    if not isinstance(symbol_code, str):
        return "", None
    code = symbol_code.strip().lower()
    base, sep, variant = code.partition("_")
    if not sep or not variant:
        return base, None
    if variant == "polartwilight":
        variant = "day"
    return base, variant


def _pick(rule: Rule, tier: str) -> str:
    if isinstance(rule, tuple):
        return rule[_TIER_INDEX[tier]]
    return rule


def map_symbol_to_icon(symbol_code: Optional[str], precipitation_amount: Any = None) -> str:
    """Return the hyphenated icon id for a symbol code."""
    base, variant = split_symbol(symbol_code)
    if not base:
        return DEFAULT_ICON_ID

    rule = ICON_TABLE.get((base, variant))
    if rule is None and variant is not None:
        rule = ICON_TABLE.get((base, None))
    if rule is None and variant is None:
        rule = ICON_TABLE.get((base, "day"))
    if rule is None:
        if "wind" in symbol_code.lower():
            return WIND_ICON_ID
        return DEFAULT_ICON_ID
    return _pick(rule, intensity_tier(precipitation_amount))


def map_symbol_to_description(symbol_code: Optional[str], precipitation_amount: Any = None) -> str:
    """Return a title-cased description for a symbol code (suffix ignored)."""
    base, _variant = split_symbol(symbol_code)
    if not base:
        return DEFAULT_DESCRIPTION

    rule = DESCRIPTION_TABLE.get(base)
    if rule is None:
        description = WIND_DESCRIPTION if "wind" in base else DEFAULT_DESCRIPTION
    else:
        description = _pick(rule, intensity_tier(precipitation_amount))
    return description.lower().title()


def classify(symbol_code: Optional[str], precipitation_amount: Any = None) -> Tuple[str, str]:
    """Return (icon_id, description) for a symbol code and precipitation amount.

    Pure and total: any input, including None or garbage, yields non-empty strings.
    """
    return (
        map_symbol_to_icon(symbol_code, precipitation_amount),
        map_symbol_to_description(symbol_code, precipitation_amount),
    )
