"""
Resolve icon ids to renderable URLs.

- A custom icon directory (static file base URL) is probed for <icon_id>.svg,
  then <icon_id>.png. The first extension that exists is cached for the
  lifetime of the resolver, so later icons are built without network calls.
- Without a usable custom directory, icon ids are translated to
  OpenWeatherMap icon codes and served from openweathermap.org at @4x.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import aiohttp
from yarl import URL

from .const import (
    DEFAULT_OWM_ICON_CODE,
    ICON_PROBE_TIMEOUT,
    OPENWEATHERMAP_ICON_URL,
    USER_AGENT,
)

_LOGGER = logging.getLogger(__name__)

PROBE_EXTENSIONS = (".svg", ".png")
VALIDATION_ICON_ID = "clear-day"

# icon id -> OpenWeatherMap icon code
ICON_TO_OWM_CODE: Dict[str, str] = {
    "clear-day": "01d",
    "clear-night": "01n",
    "cloudy-1-day": "02d",
    "cloudy-1-night": "02n",
    "cloudy-2-day": "03d",
    "cloudy-2-night": "03n",
    "cloudy": "04d",
    "fog": "50d",
    "rainy-1": "10d",
    "rainy-2": "10d",
    "rainy-3": "10d",
    "rainy-1-day": "10d",
    "rainy-2-day": "10d",
    "rainy-3-day": "10d",
    "rainy-1-night": "10n",
    "rainy-2-night": "10n",
    "rainy-3-night": "10n",
    "snowy-1": "13d",
    "snowy-2": "13d",
    "snowy-3": "13d",
    "snowy-1-day": "13d",
    "snowy-2-day": "13d",
    "snowy-3-day": "13d",
    "snowy-1-night": "13n",
    "snowy-2-night": "13n",
    "snowy-3-night": "13n",
    "rain-and-sleet-mix": "13d",
    "snow-and-sleet-mix": "13d",
    "scattered-thunderstorms": "11d",
    "scattered-thunderstorms-day": "11d",
    "scattered-thunderstorms-night": "11n",
    "thunderstorms": "11d",
    "tropical-storm": "11d",
    "hurricane": "11d",
    "wind": "04d",
}


def default_icon_url(icon_id: str) -> str:
    """OpenWeatherMap @4x URL for an icon id (unknown ids map to cloudy)."""
    code = ICON_TO_OWM_CODE.get(icon_id, DEFAULT_OWM_ICON_CODE)
    return f"{OPENWEATHERMAP_ICON_URL}{code}@4x.png"


def normalize_base_url(custom_base_url: Optional[str]) -> Optional[str]:
    """Return the base URL without trailing '/', or None if not absolute http(s)."""
    if not custom_base_url or not isinstance(custom_base_url, str):
        return None
    candidate = custom_base_url.strip()
    try:
        url = URL(candidate)
    except (ValueError, TypeError):
        return None
    if not url.is_absolute() or url.scheme not in ("http", "https") or not url.host:
        return None
    return candidate.rstrip("/")


class IconResolver:
    """Icon URL resolver with a per-instance extension cache."""

    def __init__(self, session: aiohttp.ClientSession, probe_timeout: float = ICON_PROBE_TIMEOUT) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=probe_timeout)
        self._resolved_extension: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def resolved_extension(self) -> Optional[str]:
        return self._resolved_extension

    async def _exists(self, url: str) -> bool:
        """Lightweight existence check: any 2xx response counts, body is not read."""
        async with self._session.get(url, timeout=self._timeout, headers={"User-Agent": USER_AGENT}) as resp:
            _LOGGER.debug("Icon probe %s -> HTTP %s", url, resp.status)
            return 200 <= resp.status < 300

    async def _probe(self, base: str, icon_id: str) -> Optional[str]:
        """Return the first extension that exists for icon_id under base."""
        for ext in PROBE_EXTENSIONS:
            if await self._exists(f"{base}/{icon_id}{ext}"):
                return ext
        return None

    async def resolve_icon_url(self, custom_base_url: Optional[str], icon_id: str) -> str:
        base = normalize_base_url(custom_base_url)
        if base is None:
            if custom_base_url:
                _LOGGER.debug("Icon URL %r is not a valid absolute URL; using OpenWeatherMap icons", custom_base_url)
            return default_icon_url(icon_id)

        async with self._lock:
            if self._resolved_extension:
                return f"{base}/{icon_id}{self._resolved_extension}"
            try:
                ext = await self._probe(base, icon_id)
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                _LOGGER.warning("Error checking custom icon %s/%s: %s; using OpenWeatherMap icons", base, icon_id, exc)
                return default_icon_url(icon_id)
            if ext is None:
                _LOGGER.debug("No svg/png icon found for %s under %s; using OpenWeatherMap icons", icon_id, base)
                return default_icon_url(icon_id)
            self._resolved_extension = ext
            _LOGGER.debug("Custom icons under %s resolved to extension %s", base, ext)
            return f"{base}/{icon_id}{ext}"

    async def validate_base_url(self, custom_base_url: Optional[str]) -> bool:
        """Check that a custom icon directory serves clear-day.svg or clear-day.png.

        A successful check warms the extension cache.
        """
        base = normalize_base_url(custom_base_url)
        if base is None:
            return False
        async with self._lock:
            try:
                ext = await self._probe(base, VALIDATION_ICON_ID)
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                _LOGGER.warning("Error accessing test icon under %s: %s", base, exc)
                return False
            if ext is None:
                return False
            self._resolved_extension = ext
            return True
