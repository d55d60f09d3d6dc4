"""
MET/Yr sensors.

coordinator.data is a dict with keys:
 - "current": current-conditions snapshot dict, or None before the first
   successful current half
 - "forecast": list of formatted daily rows (may be empty)

Two entities per entry:
 - <name> Current: state = temperature in the configured unit, snapshot as attributes
 - <name> Forecast: state = description of tomorrow, rows under "forecast"
"""
from typing import Optional, Dict, Any, List
import logging

from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.const import ATTR_ATTRIBUTION
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN, CONF_NAME, DEFAULT_NAME

_LOGGER = logging.getLogger(__name__)

ATTRIBUTION = "Weather forecast from MET Norway (api.met.no)"


class MetYrSensor(CoordinatorEntity):
    """Base entity bound to one MetYrCoordinator."""

    _kind = ""

    def __init__(self, coordinator, name: str):
        super().__init__(coordinator)
        self._attr_name = f"{name} {self._kind.title()}"
        safe_name = name.strip().lower().replace(" ", "_")
        self._attr_unique_id = f"{DOMAIN}_{getattr(coordinator, 'entry_id', 'noentry')}_{safe_name}_{self._kind}"

    @property
    def _data(self) -> Dict[str, Any]:
        return self.coordinator.data or {}


class MetYrCurrentSensor(MetYrSensor):
    _kind = "current"

    @property
    def _current(self) -> Optional[Dict[str, Any]]:
        return self._data.get("current")

    @property
    def available(self) -> bool:
        return self._current is not None

    @property
    def state(self) -> Optional[float]:
        current = self._current
        return current.get("temperature") if current else None

    @property
    def unit_of_measurement(self) -> Optional[str]:
        current = self._current
        return current.get("temperature_unit") if current else None

    @property
    def entity_picture(self) -> Optional[str]:
        current = self._current
        return current.get("icon_url") if current else None

    @property
    def extra_state_attributes(self) -> Dict[str, Any]:
        attrs: Dict[str, Any] = dict(self._current or {})
        attrs[ATTR_ATTRIBUTION] = ATTRIBUTION
        return attrs


class MetYrForecastSensor(MetYrSensor):
    _kind = "forecast"

    @property
    def _rows(self) -> List[Dict[str, Any]]:
        return list(self._data.get("forecast") or [])

    @property
    def available(self) -> bool:
        return bool(self._rows)

    @property
    def state(self) -> Optional[str]:
        rows = self._rows
        return rows[0].get("weather") if rows else None

    @property
    def extra_state_attributes(self) -> Dict[str, Any]:
        rows = self._rows
        return {
            "forecast": rows,
            "days": len(rows),
            ATTR_ATTRIBUTION: ATTRIBUTION,
        }


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities):
    coordinator = hass.data[DOMAIN].get(entry.entry_id) if hass.data.get(DOMAIN) else None
    if coordinator is None:
        raise RuntimeError(f"Coordinator not found in hass.data for config entry {entry.entry_id}")

    name = entry.data.get(CONF_NAME) or entry.title or DEFAULT_NAME
    async_add_entities([MetYrCurrentSensor(coordinator, name), MetYrForecastSensor(coordinator, name)])
    _LOGGER.debug("Added current and forecast sensors for %s", name)
