"""MET/Yr time-series model and calendar-day bucketing.

The api.met.no payload (nowcast and locationforecast share the shape) is::

    {"properties": {"timeseries": [
        {"time": "2025-04-08T12:00:00Z",
         "data": {"instant": {"details": {...}},
                  "next_1_hours": {"summary": {"symbol_code": ...},
                                   "details": {"precipitation_amount": ...}},
                  "next_6_hours": {...}}},
        ...]}}

Every nested object may be missing. Parsing never raises on shape problems;
absent or malformed fields become None.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from homeassistant.util import dt as dt_util

from .unit_helpers import _to_float

_LOGGER = logging.getLogger(__name__)


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime (None if unparsable).

    Naive timestamps are taken as UTC.
    """
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str) and raw.strip():
        try:
            parsed = dt_util.parse_datetime(raw.strip())
        except (ValueError, TypeError):
            parsed = None
    else:
        parsed = None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class InstantDetails:
    air_temperature: Optional[float] = None
    air_pressure_at_sea_level: Optional[float] = None
    relative_humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_from_direction: Optional[float] = None
    wind_speed_of_gust: Optional[float] = None
    cloud_area_fraction: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["InstantDetails"]:
        d = _as_dict(raw)
        if d is None:
            return None
        return cls(
            air_temperature=_to_float(d.get("air_temperature")),
            air_pressure_at_sea_level=_to_float(d.get("air_pressure_at_sea_level")),
            relative_humidity=_to_float(d.get("relative_humidity")),
            wind_speed=_to_float(d.get("wind_speed")),
            wind_from_direction=_to_float(d.get("wind_from_direction")),
            wind_speed_of_gust=_to_float(d.get("wind_speed_of_gust")),
            cloud_area_fraction=_to_float(d.get("cloud_area_fraction")),
        )


@dataclass(frozen=True)
class PeriodForecast:
    """A next_1_hours / next_6_hours block."""

    symbol_code: Optional[str] = None
    precipitation_amount: Optional[float] = None
    precipitation_category: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["PeriodForecast"]:
        d = _as_dict(raw)
        if d is None:
            return None
        summary = _as_dict(d.get("summary")) or {}
        details = _as_dict(d.get("details")) or {}
        return cls(
            symbol_code=_as_str(summary.get("symbol_code")),
            precipitation_amount=_to_float(details.get("precipitation_amount")),
            precipitation_category=_as_str(details.get("precipitation_category")),
        )


@dataclass(frozen=True)
class TimeSeriesPoint:
    time: Optional[str] = None
    details: Optional[InstantDetails] = None
    next_1_hours: Optional[PeriodForecast] = None
    next_6_hours: Optional[PeriodForecast] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "TimeSeriesPoint":
        d = _as_dict(raw) or {}
        data = _as_dict(d.get("data")) or {}
        instant = _as_dict(data.get("instant")) or {}
        time_raw = d.get("time")
        return cls(
            time=time_raw if isinstance(time_raw, str) else None,
            details=InstantDetails.from_dict(instant.get("details")),
            next_1_hours=PeriodForecast.from_dict(data.get("next_1_hours")),
            next_6_hours=PeriodForecast.from_dict(data.get("next_6_hours")),
        )

    @property
    def timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.time)

    @property
    def symbol_6h(self) -> Optional[str]:
        return self.next_6_hours.symbol_code if self.next_6_hours else None

    @property
    def precipitation_6h(self) -> Optional[float]:
        return self.next_6_hours.precipitation_amount if self.next_6_hours else None


def parse_timeseries(payload: Any) -> List[TimeSeriesPoint]:
    """Extract properties.timeseries[] from a MET payload (empty list on bad shape)."""
    root = _as_dict(payload)
    if root is None:
        return []
    props = _as_dict(root.get("properties"))
    if props is None:
        return []
    series = props.get("timeseries")
    if not isinstance(series, list):
        return []
    return [TimeSeriesPoint.from_dict(entry) for entry in series if isinstance(entry, dict)]


def select_closest(points: List[TimeSeriesPoint], now: Optional[datetime] = None) -> Optional[TimeSeriesPoint]:
    """Pick the point whose timestamp is closest to now.

    Points with unparsable timestamps are only used when none parse, in which
    case the first point is returned. Ties keep the earlier list position.
    """
    if not points:
        return None
    now = now or dt_util.utcnow()
    best: Optional[TimeSeriesPoint] = None
    best_delta: Optional[float] = None
    for point in points:
        ts = point.timestamp
        if ts is None:
            continue
        delta = abs((ts - now).total_seconds())
        if best_delta is None or delta < best_delta:
            best, best_delta = point, delta
    return best if best is not None else points[0]


def bucketize(points: Iterable[TimeSeriesPoint], start_day: date, days: int) -> Dict[date, List[TimeSeriesPoint]]:
    """Group points by UTC calendar date within [start_day, start_day + days).

    Unparsable or out-of-window points are dropped. Days without points are
    absent from the result; point order inside a bucket follows the input.
    """
    end_day = start_day + timedelta(days=days)
    buckets: Dict[date, List[TimeSeriesPoint]] = {}
    for point in points:
        ts = point.timestamp
        if ts is None:
            _LOGGER.debug("Skipping time-series entry with unparsable time: %r", point.time)
            continue
        day = ts.date()
        if start_day <= day < end_day:
            buckets.setdefault(day, []).append(point)
    return buckets
