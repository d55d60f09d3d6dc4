"""Validation and defaults for entry options.

validate_and_normalize_options never raises: every invalid value is replaced
by its documented default and reported in the returned warnings list.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .const import (
    CONF_ALTITUDE,
    CONF_DATE_TIME_FORMAT,
    CONF_FORECAST_DATE_FORMAT,
    CONF_FORECAST_DAYS,
    CONF_ICON_URL,
    CONF_REFRESH_INTERVAL,
    CONF_TEMPERATURE_UNIT,
    CONF_UTC_OFFSET,
    DEFAULT_DATE_TIME_FORMAT,
    DEFAULT_FORECAST_DATE_FORMAT,
    DEFAULT_FORECAST_DAYS,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_UTC_OFFSET,
    MAX_FORECAST_DAYS,
    MIN_FORECAST_DAYS,
    TEMP_UNIT_CELSIUS,
    TEMP_UNIT_FAHRENHEIT,
)
from .unit_helpers import _to_float

_LOGGER = logging.getLogger(__name__)

# fixed instant used to test date formats
_SAMPLE_DATETIME = datetime(2024, 1, 31, 13, 45, 30)

# strftime directives portable enough to accept; "-" is the no-padding flag
_DIRECTIVE_CHARS = frozenset("aAbBcdefGHIjklmMpPsSuUVwWxXyYzZ%")
_DIRECTIVE_RE = re.compile(r"%(-?)(.?)", re.DOTALL)


def _to_int(value: Any) -> Optional[int]:
    """Parse an integral value (int, integral float, or numeric string); None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    f = _to_float(value)
    if f is None or not f.is_integer():
        return None
    return int(f)


def is_valid_date_format(fmt: Any) -> bool:
    """A date format is usable when every % directive is a known strftime
    directive, there is at least one, and strftime accepts the whole pattern.

    Unknown directives such as "%Q" and a trailing lone "%" are rejected.
    """
    if not isinstance(fmt, str) or "%" not in fmt:
        return False
    for match in _DIRECTIVE_RE.finditer(fmt):
        flag, char = match.groups()
        if char not in _DIRECTIVE_CHARS or (flag and char == "%"):
            return False
    try:
        _SAMPLE_DATETIME.strftime(fmt)
    except (ValueError, TypeError):
        return False
    return True


def normalize_forecast_days(value: Any) -> int:
    days = _to_int(value)
    if days is None or not MIN_FORECAST_DAYS <= days <= MAX_FORECAST_DAYS:
        return DEFAULT_FORECAST_DAYS
    return days


def normalize_temperature_unit(value: Any) -> str:
    if isinstance(value, str) and value.strip().upper() == TEMP_UNIT_FAHRENHEIT:
        return TEMP_UNIT_FAHRENHEIT
    return TEMP_UNIT_CELSIUS


def validate_and_normalize_options(options: Optional[Mapping[str, Any]]) -> Tuple[Dict[str, Any], List[str]]:
    """Return (normalized_options, warnings) for a raw options mapping."""
    raw = dict(options or {})
    normalized: Dict[str, Any] = {}
    warnings: List[str] = []

    days = normalize_forecast_days(raw.get(CONF_FORECAST_DAYS, DEFAULT_FORECAST_DAYS))
    if CONF_FORECAST_DAYS in raw and _to_int(raw[CONF_FORECAST_DAYS]) != days:
        warnings.append(
            f"{CONF_FORECAST_DAYS}={raw[CONF_FORECAST_DAYS]!r} not an integer in "
            f"[{MIN_FORECAST_DAYS}, {MAX_FORECAST_DAYS}]; using {DEFAULT_FORECAST_DAYS}"
        )
    normalized[CONF_FORECAST_DAYS] = days

    refresh = _to_int(raw.get(CONF_REFRESH_INTERVAL, DEFAULT_REFRESH_INTERVAL))
    if refresh is None or refresh <= 0:
        warnings.append(f"{CONF_REFRESH_INTERVAL}={raw.get(CONF_REFRESH_INTERVAL)!r} invalid; using {DEFAULT_REFRESH_INTERVAL}")
        refresh = DEFAULT_REFRESH_INTERVAL
    normalized[CONF_REFRESH_INTERVAL] = refresh

    offset = _to_float(raw.get(CONF_UTC_OFFSET, DEFAULT_UTC_OFFSET))
    if offset is None:
        warnings.append(f"{CONF_UTC_OFFSET}={raw.get(CONF_UTC_OFFSET)!r} invalid; using {DEFAULT_UTC_OFFSET}")
        offset = DEFAULT_UTC_OFFSET
    normalized[CONF_UTC_OFFSET] = offset

    unit_raw = raw.get(CONF_TEMPERATURE_UNIT, TEMP_UNIT_CELSIUS)
    unit = normalize_temperature_unit(unit_raw)
    if not isinstance(unit_raw, str) or unit_raw.strip().upper() != unit:
        warnings.append(f"{CONF_TEMPERATURE_UNIT}={unit_raw!r} invalid; using {unit}")
    normalized[CONF_TEMPERATURE_UNIT] = unit

    for key, default in (
        (CONF_DATE_TIME_FORMAT, DEFAULT_DATE_TIME_FORMAT),
        (CONF_FORECAST_DATE_FORMAT, DEFAULT_FORECAST_DATE_FORMAT),
    ):
        fmt = raw.get(key, default)
        if not is_valid_date_format(fmt):
            warnings.append(f"{key}={fmt!r} is not a usable date format; using {default!r}")
            fmt = default
        normalized[key] = fmt

    altitude_raw = raw.get(CONF_ALTITUDE)
    altitude = _to_int(altitude_raw) if altitude_raw not in (None, "") else None
    if altitude_raw not in (None, "") and altitude is None:
        warnings.append(f"{CONF_ALTITUDE}={altitude_raw!r} is not an integer; ignoring")
    normalized[CONF_ALTITUDE] = altitude

    icon_raw = raw.get(CONF_ICON_URL)
    icon_url = icon_raw.strip() if isinstance(icon_raw, str) else None
    normalized[CONF_ICON_URL] = icon_url or None

    if warnings:
        _LOGGER.debug("Options normalized with warnings: %s", warnings)
    return normalized, warnings
