# Daily aggregation and presentation of MET/Yr time-series
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import unit_helpers
from .condition_classifier import classify
from .const import (
    DEFAULT_DATE_TIME_FORMAT,
    DEFAULT_FORECAST_DATE_FORMAT,
    DEFAULT_FORECAST_DAYS,
    DEFAULT_TEMPERATURE_UNIT,
    NO_VALUE,
)
from .timeseries import PeriodForecast, TimeSeriesPoint, bucketize

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyForecastRow:
    date: date
    representative_symbol: Optional[str]
    temp_max: Optional[float]
    temp_min: Optional[float]
    precipitation_total: float
    avg_wind_speed: Optional[float]
    avg_wind_direction: Optional[float]
    icon_id: str
    description: str
    wind_compass_label: Optional[str]


def representative_symbol(points: Sequence[TimeSeriesPoint]) -> Optional[str]:
    """Majority vote over next_6_hours symbol codes.

    Ties go to the symbol with the larger summed 6h precipitation, then to the
    lexicographically smallest symbol.
    """
    groups: Dict[str, List[float]] = {}
    for point in points:
        symbol = point.symbol_6h
        if not symbol:
            continue
        groups.setdefault(symbol, []).append(point.precipitation_6h or 0.0)
    if not groups:
        return None
    ranked = sorted(groups.items(), key=lambda kv: (-len(kv[1]), -math.fsum(kv[1]), kv[0]))
    return ranked[0][0]


def aggregate_day(day: date, points: Sequence[TimeSeriesPoint]) -> DailyForecastRow:
    """Reduce one day bucket into a DailyForecastRow.

    Points without instant.details do not contribute to temperature or wind.
    A details block missing a reading contributes 0 for that reading.
    """
    with_details = [p.details for p in points if p.details is not None]

    temps = [d.air_temperature if d.air_temperature is not None else 0.0 for d in with_details]
    temp_max = max(temps) if temps else None
    temp_min = min(temps) if temps else None

    precip_values = [p.precipitation_6h for p in points if p.precipitation_6h is not None]
    precipitation_total = math.fsum(precip_values)
    max_precip = max(precip_values) if precip_values else None

    speeds = [d.wind_speed if d.wind_speed is not None else 0.0 for d in with_details]
    avg_wind_speed = math.fsum(speeds) / len(speeds) if speeds else None

    directions = [d.wind_from_direction if d.wind_from_direction is not None else 0.0 for d in with_details]
    avg_wind_direction = unit_helpers.circular_mean_degrees(directions)

    symbol = representative_symbol(points)
    icon_id, description = classify(symbol, max_precip)

    return DailyForecastRow(
        date=day,
        representative_symbol=symbol,
        temp_max=temp_max,
        temp_min=temp_min,
        precipitation_total=precipitation_total,
        avg_wind_speed=avg_wind_speed,
        avg_wind_direction=avg_wind_direction,
        icon_id=icon_id,
        description=description,
        wind_compass_label=unit_helpers.degrees_to_compass(avg_wind_direction),
    )


def format_timestamp(value: datetime, fmt: str, fallback: str) -> str:
    """strftime with a fallback format for patterns the platform rejects."""
    try:
        return value.strftime(fmt)
    except (ValueError, TypeError):
        _LOGGER.warning("Invalid date format %r, falling back to %r", fmt, fallback)
        return value.strftime(fallback)


class DataFormatter:
    """
    Turn parsed time-series into the two published artifacts:

    - forecast rows: one dict per calendar day in [tomorrow, tomorrow + days)
    - current snapshot: one dict describing a single time-series point
    """

    def build_forecast_rows(
        self,
        series: Sequence[TimeSeriesPoint],
        today: date,
        forecast_days: int = DEFAULT_FORECAST_DAYS,
    ) -> List[DailyForecastRow]:
        start_day = today + timedelta(days=1)
        buckets = bucketize(series, start_day, forecast_days)
        rows = [aggregate_day(day, buckets[day]) for day in sorted(buckets)]
        _LOGGER.debug(
            "Built %d forecast rows from %d points (window %s + %d days)",
            len(rows),
            len(series),
            start_day,
            forecast_days,
        )
        return rows

    def format_forecast_row(
        self,
        row: DailyForecastRow,
        date_format: str = DEFAULT_FORECAST_DATE_FORMAT,
        temperature_unit: str = DEFAULT_TEMPERATURE_UNIT,
    ) -> Dict[str, Any]:
        day_start = datetime(row.date.year, row.date.month, row.date.day)
        unit_symbol = unit_helpers.temperature_unit_symbol(temperature_unit)

        if row.temp_max is not None and row.temp_min is not None:
            t_max = unit_helpers.temperature_to_display(row.temp_max, temperature_unit)
            t_min = unit_helpers.temperature_to_display(row.temp_min, temperature_unit)
            temperature = f"{t_max:.0f}{unit_symbol} / {t_min:.0f}{unit_symbol}"
        else:
            temperature = NO_VALUE

        if row.avg_wind_speed is not None:
            wind = f"{row.avg_wind_speed:.1f} m/s {row.wind_compass_label or NO_VALUE}"
        else:
            wind = NO_VALUE

        return {
            "date": format_timestamp(day_start, date_format, DEFAULT_FORECAST_DATE_FORMAT),
            "iso_date": row.date.isoformat(),
            "weather": row.description if row.representative_symbol else NO_VALUE,
            "symbol_code": row.representative_symbol,
            "icon_id": row.icon_id,
            "temperature": temperature,
            "temperature_max": _round_opt(unit_helpers.temperature_to_display(row.temp_max, temperature_unit), 1),
            "temperature_min": _round_opt(unit_helpers.temperature_to_display(row.temp_min, temperature_unit), 1),
            "precipitation": round(row.precipitation_total, 1),
            "precipitation_unit": "mm",
            "wind": wind,
            "wind_speed": _round_opt(row.avg_wind_speed, 1),
            "wind_direction": row.wind_compass_label,
        }

    def format_current(
        self,
        point: TimeSeriesPoint,
        name: str,
        icon_url: str,
        temperature_unit: str = DEFAULT_TEMPERATURE_UNIT,
        refreshed_at: Optional[datetime] = None,
        date_time_format: str = DEFAULT_DATE_TIME_FORMAT,
        utc_offset_hours: float = 0.0,
    ) -> Dict[str, Any]:
        """Build the current-conditions snapshot. Requires point.details."""
        details = point.details
        if details is None:
            raise ValueError("Current time-series point has no instant details")

        period = point.next_1_hours
        symbol, icon_id, description = summarize_point(point)
        precip_1h = period.precipitation_amount if period else None

        temp_c = details.air_temperature if details.air_temperature is not None else 0.0
        wind = details.wind_speed if details.wind_speed is not None else 0.0
        feels_c = unit_helpers.feels_like_c(temp_c, wind)

        rain_rate = precip_1h or 0.0
        snow_rate = rain_rate if period and period.precipitation_category == "snow" else 0.0

        observed = point.timestamp
        refreshed = None
        if refreshed_at is not None:
            local = refreshed_at + timedelta(hours=utc_offset_hours)
            refreshed = format_timestamp(local, date_time_format, DEFAULT_DATE_TIME_FORMAT)

        return {
            "name": name,
            "condition": symbol.split("_")[0] if symbol else NO_VALUE,
            "description": description,
            "symbol_code": symbol,
            "icon_id": icon_id,
            "icon_url": icon_url,
            "temperature": _round_opt(unit_helpers.temperature_to_display(temp_c, temperature_unit), 1),
            "feels_like": _round_opt(unit_helpers.temperature_to_display(feels_c, temperature_unit), 1),
            "temperature_unit": unit_helpers.temperature_unit_symbol(temperature_unit),
            "pressure": details.air_pressure_at_sea_level,
            "humidity": details.relative_humidity,
            "wind_speed": wind,
            "wind_direction": details.wind_from_direction,
            "wind_compass": unit_helpers.degrees_to_compass(details.wind_from_direction),
            "wind_gust": details.wind_speed_of_gust if details.wind_speed_of_gust is not None else wind,
            "cloud_fraction": details.cloud_area_fraction,
            "rain_rate": rain_rate,
            "snow_rate": snow_rate,
            "observed_at": observed.isoformat() if observed else None,
            "last_refreshed": refreshed,
        }


def summarize_point(point: TimeSeriesPoint) -> Tuple[Optional[str], str, str]:
    """(symbol_code, icon_id, description) for a single point.

    Uses the next_1_hours block when it carries a symbol, else next_6_hours.
    """
    summary: Optional[PeriodForecast] = point.next_6_hours
    if point.next_1_hours is not None and point.next_1_hours.symbol_code:
        summary = point.next_1_hours
    if summary is None:
        icon_id, description = classify(None, None)
        return None, icon_id, description
    icon_id, description = classify(summary.symbol_code, summary.precipitation_amount)
    return summary.symbol_code, icon_id, description


def _round_opt(v: Optional[float], ndigits: int = 1) -> Optional[float]:
    if v is None:
        return None
    return round(float(v), ndigits)
