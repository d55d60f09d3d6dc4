"""Unit conversion helper utilities shared across the integration.

All functions attempt to coerce to float and return None on failure.
Canonical units used by the integration (as delivered by api.met.no):
- temperature: Celsius (°C)
- wind: meters/second (m/s)
- wind direction: degrees the wind blows FROM (0 = north)
- pressure: hectopascals (hPa)
- precipitation: millimetres (mm)
"""
from typing import Any, Optional
import logging
import math

from .const import COMPASS_POINTS, TEMP_UNIT_FAHRENHEIT

_LOGGER = logging.getLogger(__name__)


def _to_float(v: Any) -> Optional[float]:
    try:
        if v is None or isinstance(v, bool):
            return None
        f = float(v)
    except Exception:
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


# ---- Converters ----

def c_to_f(v: Any) -> Optional[float]:
    """Convert Celsius to Fahrenheit."""
    f = _to_float(v)
    if f is None:
        return None
    return (f * 9.0 / 5.0) + 32.0


def m_s_to_kmh(v: Any) -> Optional[float]:
    f = _to_float(v)
    if f is None:
        return None
    return f * 3.6


def temperature_to_display(v_c: Any, temperature_unit: str) -> Optional[float]:
    """Convert canonical °C to the configured display unit ("C" or "F")."""
    f = _to_float(v_c)
    if f is None:
        return None
    if temperature_unit == TEMP_UNIT_FAHRENHEIT:
        return c_to_f(f)
    return f


def temperature_unit_symbol(temperature_unit: str) -> str:
    return "°F" if temperature_unit == TEMP_UNIT_FAHRENHEIT else "°C"


# ---- Derived values ----

def feels_like_c(temp_c: Any, wind_m_s: Any) -> Optional[float]:
    """Apparent temperature in °C.

    Uses the Environment Canada wind chill formula below 10 °C with wind above
    1.33 m/s (4.8 km/h); otherwise the air temperature is returned unchanged.
    """
    t = _to_float(temp_c)
    if t is None:
        return None
    w = _to_float(wind_m_s)
    if w is None:
        return t
    if t < 10.0 and w > 1.33:
        wind_kmh = m_s_to_kmh(w)
        k = math.pow(wind_kmh, 0.16)
        return 13.12 + 0.6215 * t - 11.37 * k + 0.3965 * t * k
    return t


def normalize_degrees(deg: Any) -> Optional[float]:
    """Normalize an angle into [0, 360)."""
    f = _to_float(deg)
    if f is None:
        return None
    out = f % 360.0
    # -1e-17 % 360.0 == 360.0 in floating point
    if out >= 360.0:
        out = 0.0
    return out


def degrees_to_compass(deg: Any) -> Optional[str]:
    """Map a direction in degrees to the nearest of 8 compass points.

    index = round(normalized / 45) mod 8, so 359° -> "N" and 44° -> "NE".
    """
    n = normalize_degrees(deg)
    if n is None:
        return None
    # half-way points round to even (22.5° -> N, 67.5° -> E)
    index = int(round(n / 45.0)) % 8
    return COMPASS_POINTS[index]


def circular_mean_degrees(values: Any) -> Optional[float]:
    """Mean direction of a sequence of angles via unit vectors.

    Returns None for an empty sequence. When the vectors cancel out (90° and
    270°) the arithmetic mean is used so a direction is always reported.
    Sums use math.fsum so the result does not depend on input order.
    """
    angles = [a for a in (_to_float(v) for v in values or []) if a is not None]
    if not angles:
        return None
    sin_sum = math.fsum(math.sin(math.radians(a)) for a in angles)
    cos_sum = math.fsum(math.cos(math.radians(a)) for a in angles)
    if abs(sin_sum) < 1e-9 and abs(cos_sum) < 1e-9:
        return normalize_degrees(math.fsum(angles) / len(angles))
    return normalize_degrees(math.degrees(math.atan2(sin_sum, cos_sum)))
