"""
WeatherFetcher for MET Norway (api.met.no).

- Current conditions come from nowcast first and fall back to
  locationforecast once; the point closest to "now" is returned.
- Transport, HTTP and payload failures on the current path are logged and
  turned into a fallback (or None), never raised.
- The forecast series comes from locationforecast and raises
  WeatherFetchError on any failure; the caller decides what to keep.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from .const import MET_FORECAST_URL, MET_NOWCAST_URL, REQUEST_TIMEOUT, USER_AGENT
from .timeseries import TimeSeriesPoint, parse_timeseries, select_closest

_LOGGER = logging.getLogger(__name__)


class WeatherFetchError(RuntimeError):
    """Raised when a MET endpoint cannot deliver a usable time-series."""


def build_params(latitude: float, longitude: float, altitude: Optional[int] = None) -> Dict[str, str]:
    """Query parameters for MET endpoints: coordinates to 4 decimals, optional altitude in metres."""
    params = {
        "lat": f"{float(latitude):.4f}",
        "lon": f"{float(longitude):.4f}",
    }
    if altitude is not None:
        params["altitude"] = str(int(altitude))
    return params


class WeatherFetcher:
    """
    Fetch MET/Yr time-series over a shared aiohttp session.

    primary_url / secondary_url default to nowcast / locationforecast and are
    overridable so tests can point them at local servers.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        primary_url: str = MET_NOWCAST_URL,
        secondary_url: str = MET_FORECAST_URL,
        request_timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self.primary_url = primary_url
        self.secondary_url = secondary_url
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)

    async def _get_series(self, url: str, params: Dict[str, str]) -> List[TimeSeriesPoint]:
        """GET url and return its parsed time-series; raise WeatherFetchError on any failure."""
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        try:
            async with self._session.get(url, params=params, headers=headers, timeout=self._timeout) as resp:
                resp.raise_for_status()
                payload: Any = await resp.json(content_type=None)
        except aiohttp.ClientResponseError as exc:
            raise WeatherFetchError(f"HTTP {exc.status} from {url}") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise WeatherFetchError(f"Request to {url} failed: {exc!r}") from exc
        except ValueError as exc:
            # invalid JSON body
            raise WeatherFetchError(f"Invalid JSON from {url}") from exc

        series = parse_timeseries(payload)
        if not series:
            raise WeatherFetchError(f"No properties.timeseries entries in response from {url}")
        _LOGGER.debug("Fetched %d time-series entries from %s", len(series), url)
        return series

    async def resolve_current(
        self,
        latitude: float,
        longitude: float,
        altitude: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[TimeSeriesPoint]:
        """Return the time-series point closest to now, or None if both sources fail."""
        try:
            series = await self._get_series(self.primary_url, build_params(latitude, longitude))
            return select_closest(series, now)
        except WeatherFetchError as exc:
            _LOGGER.warning("Nowcast unavailable (%s); falling back to locationforecast", exc)

        try:
            series = await self._get_series(self.secondary_url, build_params(latitude, longitude, altitude))
            return select_closest(series, now)
        except WeatherFetchError as exc:
            _LOGGER.warning("Locationforecast unavailable for current conditions: %s", exc)
        return None

    async def fetch_forecast_series(
        self,
        latitude: float,
        longitude: float,
        altitude: Optional[int] = None,
    ) -> List[TimeSeriesPoint]:
        """Return the full locationforecast time-series; raises WeatherFetchError."""
        return await self._get_series(self.secondary_url, build_params(latitude, longitude, altitude))
