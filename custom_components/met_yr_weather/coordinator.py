# Coordinator: runs one orchestrator cycle per refresh and keeps the last published halves

from datetime import timedelta
import async_timeout
import logging
from typing import Any, Dict, Mapping, Optional

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import CONF_REFRESH_INTERVAL, CYCLE_TIMEOUT, DEFAULT_REFRESH_INTERVAL, DOMAIN
from .orchestrator import CycleResult, WeatherOrchestrator

_LOGGER = logging.getLogger(__name__)


class MetYrCoordinator(DataUpdateCoordinator):
    def __init__(
        self,
        hass,
        entry_id: str,
        orchestrator: WeatherOrchestrator,
        location_name: str,
        lat: float,
        lon: float,
        options: Optional[Mapping[str, Any]] = None,
        cycle_timeout: float = CYCLE_TIMEOUT,
    ):
        """
        - options must already be normalized (options_helpers.validate_and_normalize_options).
        - the refresh interval comes from options[refresh_interval_minutes].
        """
        self.options: Dict[str, Any] = dict(options or {})
        interval_minutes = int(self.options.get(CONF_REFRESH_INTERVAL, DEFAULT_REFRESH_INTERVAL))
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN}_{entry_id}",
            update_interval=timedelta(minutes=interval_minutes),
        )
        self.entry_id = entry_id
        self.orchestrator = orchestrator
        self.location_name = location_name
        self.lat = lat
        self.lon = lon
        self._cycle_timeout = cycle_timeout
        self.last_result: Optional[CycleResult] = None

    async def _async_update_data(self) -> Dict[str, Any]:
        """Run one cycle. A timeout or cancellation propagates and nothing is published."""
        async with async_timeout.timeout(self._cycle_timeout):
            result = await self.orchestrator.run_cycle(
                self.location_name,
                self.lat,
                self.lon,
                self.options,
                previous=self.last_result,
            )
        self.last_result = result
        _LOGGER.debug(
            "Refresh for %s (%s,%s): current_updated=%s forecast_updated=%s",
            self.location_name,
            self.lat,
            self.lon,
            result.current_updated,
            result.forecast_updated,
        )
        return result.as_dict()
