"""
MET/Yr Weather - integration entry points.

Location and altitude live in entry.data; display settings live in
entry.options. Invalid option values are replaced by their defaults at load
time, so setup never fails on configuration.
"""
import logging

from homeassistant.helpers import aiohttp_client

from .const import (
    DOMAIN,
    DEFAULT_NAME,
    CONF_NAME,
    CONF_LOCATION,
    CONF_LATITUDE,
    CONF_LONGITUDE,
    CONF_ALTITUDE,
)
from .coordinator import MetYrCoordinator
from .data_formatter import DataFormatter
from .geocoding import async_resolve_coordinates
from .icon_resolver import IconResolver
from .options_helpers import validate_and_normalize_options
from .orchestrator import WeatherOrchestrator
from .weather_fetcher import WeatherFetcher

_LOGGER = logging.getLogger(__name__)

PLATFORMS = ["sensor"]


async def async_setup_entry(hass, entry):
    """Set up integration from a config entry."""
    _LOGGER.debug("Starting async_setup_entry for entry %s", entry.entry_id)
    session = aiohttp_client.async_get_clientsession(hass)

    raw_options = {CONF_ALTITUDE: entry.data.get(CONF_ALTITUDE)}
    raw_options.update(entry.options or {})
    options, warnings = validate_and_normalize_options(raw_options)
    for warning in warnings:
        _LOGGER.warning("Entry %s: %s", entry.entry_id, warning)

    lat, lon = await async_resolve_coordinates(
        session,
        entry.data.get(CONF_LOCATION),
        entry.data.get(CONF_LATITUDE),
        entry.data.get(CONF_LONGITUDE),
    )
    _LOGGER.debug("Config entry %s coordinates lat=%s lon=%s", entry.entry_id, lat, lon)

    orchestrator = WeatherOrchestrator(
        fetcher=WeatherFetcher(session),
        icon_resolver=IconResolver(session),
        formatter=DataFormatter(),
    )
    coord = MetYrCoordinator(
        hass,
        entry.entry_id,
        orchestrator=orchestrator,
        location_name=entry.data.get(CONF_NAME) or entry.title or DEFAULT_NAME,
        lat=lat,
        lon=lon,
        options=options,
    )
    _LOGGER.debug("MetYrCoordinator created for entry %s", entry.entry_id)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coord

    _LOGGER.debug("Requesting initial data refresh for entry %s", entry.entry_id)
    await coord.async_request_refresh()

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.debug("async_setup_entry completed for entry %s", entry.entry_id)
    return True


async def async_reload_entry(hass, entry):
    """Options changed: rebuild the coordinator with the new settings."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass, entry):
    """Unload a config entry."""
    _LOGGER.debug("Starting async_unload_entry for entry %s", entry.entry_id)
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    _LOGGER.debug("async_unload_entry finished for entry %s, unload_ok=%s", entry.entry_id, unload_ok)
    return unload_ok
