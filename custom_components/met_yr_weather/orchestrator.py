"""One refresh cycle: current snapshot and forecast table, fetched concurrently.

Each half either produces a fresh artifact or keeps the one from the previous
cycle. A failing half never takes the other one down, and nothing but
cancellation leaves run_cycle.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from homeassistant.util import dt as dt_util

from .const import (
    CONF_ALTITUDE,
    CONF_DATE_TIME_FORMAT,
    CONF_FORECAST_DATE_FORMAT,
    CONF_FORECAST_DAYS,
    CONF_ICON_URL,
    CONF_TEMPERATURE_UNIT,
    CONF_UTC_OFFSET,
    DEFAULT_OPTIONS,
)
from .data_formatter import DataFormatter, summarize_point
from .icon_resolver import IconResolver
from .weather_fetcher import WeatherFetchError, WeatherFetcher

_LOGGER = logging.getLogger(__name__)


@dataclass
class CycleResult:
    current: Optional[Dict[str, Any]] = None
    forecast: List[Dict[str, Any]] = field(default_factory=list)
    current_updated: bool = False
    forecast_updated: bool = False

    def as_dict(self) -> Dict[str, Any]:
        """Coordinator data shape consumed by the sensors."""
        return {"current": self.current, "forecast": self.forecast}


class WeatherOrchestrator:
    def __init__(
        self,
        fetcher: WeatherFetcher,
        icon_resolver: IconResolver,
        formatter: Optional[DataFormatter] = None,
    ) -> None:
        self.fetcher = fetcher
        self.icon_resolver = icon_resolver
        self.formatter = formatter or DataFormatter()

    async def run_cycle(
        self,
        location_name: str,
        latitude: float,
        longitude: float,
        options: Optional[Mapping[str, Any]] = None,
        previous: Optional[CycleResult] = None,
        now: Optional[datetime] = None,
    ) -> CycleResult:
        opts = dict(DEFAULT_OPTIONS)
        opts.update(options or {})
        now = (now or dt_util.utcnow()).astimezone(timezone.utc)

        current, forecast = await asyncio.gather(
            self._guarded("current", self._build_current(location_name, latitude, longitude, opts, now)),
            self._guarded("forecast", self._build_forecast(latitude, longitude, opts, now)),
        )

        result = CycleResult(
            current=current if current is not None else (previous.current if previous else None),
            forecast=forecast if forecast is not None else (list(previous.forecast) if previous else []),
            current_updated=current is not None,
            forecast_updated=forecast is not None,
        )
        _LOGGER.debug(
            "Cycle for %s done (current_updated=%s, forecast_updated=%s, rows=%d)",
            location_name,
            result.current_updated,
            result.forecast_updated,
            len(result.forecast),
        )
        return result

    async def _guarded(self, half: str, coro):
        """Await one half; any non-cancellation error becomes None (no update)."""
        try:
            return await coro
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Unexpected error while building %s weather; keeping previous data", half)
            return None

    async def _build_current(
        self,
        location_name: str,
        latitude: float,
        longitude: float,
        opts: Dict[str, Any],
        now: datetime,
    ) -> Optional[Dict[str, Any]]:
        point = await self.fetcher.resolve_current(latitude, longitude, opts.get(CONF_ALTITUDE), now=now)
        if point is None:
            _LOGGER.warning("No current conditions available for %s; keeping previous snapshot", location_name)
            return None
        if point.details is None:
            _LOGGER.warning("Current time-series point for %s has no instant details; keeping previous snapshot", location_name)
            return None

        _symbol, icon_id, _description = summarize_point(point)
        icon_url = await self.icon_resolver.resolve_icon_url(opts.get(CONF_ICON_URL), icon_id)

        return self.formatter.format_current(
            point,
            name=location_name,
            icon_url=icon_url,
            temperature_unit=opts[CONF_TEMPERATURE_UNIT],
            refreshed_at=now,
            date_time_format=opts[CONF_DATE_TIME_FORMAT],
            utc_offset_hours=opts[CONF_UTC_OFFSET],
        )

    async def _build_forecast(
        self,
        latitude: float,
        longitude: float,
        opts: Dict[str, Any],
        now: datetime,
    ) -> Optional[List[Dict[str, Any]]]:
        try:
            series = await self.fetcher.fetch_forecast_series(latitude, longitude, opts.get(CONF_ALTITUDE))
        except WeatherFetchError as exc:
            _LOGGER.warning("Forecast unavailable (%s); keeping previous forecast", exc)
            return None
        rows = self.formatter.build_forecast_rows(series, now.date(), opts[CONF_FORECAST_DAYS])
        return [
            self.formatter.format_forecast_row(row, opts[CONF_FORECAST_DATE_FORMAT], opts[CONF_TEMPERATURE_UNIT])
            for row in rows
        ]
