# Location text -> coordinates via OpenStreetMap Nominatim
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple

import aiohttp

from .const import FALLBACK_LATITUDE, FALLBACK_LONGITUDE, NOMINATIM_URL, REQUEST_TIMEOUT, USER_AGENT
from .unit_helpers import _to_float

_LOGGER = logging.getLogger(__name__)


def _first_coordinates(payload: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
        return None
    lat = _to_float(payload[0].get("lat"))
    lon = _to_float(payload[0].get("lon"))
    if lat is None or lon is None:
        return None
    return lat, lon


async def async_geocode(
    session: aiohttp.ClientSession,
    location: str,
    url: str = NOMINATIM_URL,
    request_timeout: float = REQUEST_TIMEOUT,
) -> Optional[Tuple[float, float]]:
    """Return (lat, lon) of the best Nominatim match, or None on any failure."""
    if not location or not str(location).strip():
        return None
    params = {"q": str(location).strip(), "format": "json", "limit": "1"}
    try:
        async with session.get(
            url,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=aiohttp.ClientTimeout(total=request_timeout),
        ) as resp:
            if resp.status != 200:
                _LOGGER.warning("Geocoding %r failed with HTTP %s", location, resp.status)
                return None
            payload = await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
        _LOGGER.warning("Error geocoding location %r: %s", location, exc)
        return None

    coords = _first_coordinates(payload)
    if coords is None:
        _LOGGER.warning("No geocoding result for location %r", location)
    else:
        _LOGGER.debug("Geocoded %r to %s", location, coords)
    return coords


async def async_resolve_coordinates(
    session: aiohttp.ClientSession,
    location: Optional[str],
    latitude: Any = None,
    longitude: Any = None,
    url: str = NOMINATIM_URL,
) -> Tuple[float, float]:
    """Explicit coordinates win; otherwise geocode; otherwise the fallback point."""
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if lat is not None and lon is not None:
        return lat, lon

    coords = await async_geocode(session, location or "", url=url)
    if coords is not None:
        return coords

    _LOGGER.warning(
        "Could not resolve coordinates for %r; using fallback %s,%s",
        location,
        FALLBACK_LATITUDE,
        FALLBACK_LONGITUDE,
    )
    return FALLBACK_LATITUDE, FALLBACK_LONGITUDE
