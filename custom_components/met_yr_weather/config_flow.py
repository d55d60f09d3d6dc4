"""Config flow for MET/Yr Weather"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector
from homeassistant.helpers.aiohttp_client import async_get_clientsession
import homeassistant.helpers.config_validation as cv

from .const import (
    DOMAIN,
    DEFAULT_NAME,
    DEFAULT_LOCATION,
    DEFAULT_OPTIONS,
    CONF_NAME,
    CONF_LOCATION,
    CONF_LATITUDE,
    CONF_LONGITUDE,
    CONF_ALTITUDE,
    CONF_REFRESH_INTERVAL,
    CONF_DATE_TIME_FORMAT,
    CONF_FORECAST_DATE_FORMAT,
    CONF_UTC_OFFSET,
    CONF_FORECAST_DAYS,
    CONF_TEMPERATURE_UNIT,
    CONF_ICON_URL,
    MIN_FORECAST_DAYS,
    MAX_FORECAST_DAYS,
    TEMP_UNIT_CELSIUS,
    TEMP_UNIT_FAHRENHEIT,
)
from .icon_resolver import IconResolver
from .options_helpers import is_valid_date_format, validate_and_normalize_options

_LOGGER = logging.getLogger(__name__)

DISPLAY_KEYS = (
    CONF_FORECAST_DAYS,
    CONF_TEMPERATURE_UNIT,
    CONF_REFRESH_INTERVAL,
    CONF_DATE_TIME_FORMAT,
    CONF_FORECAST_DATE_FORMAT,
    CONF_UTC_OFFSET,
    CONF_ICON_URL,
)


def _display_schema(defaults: dict[str, Any]) -> vol.Schema:
    """Form for the display settings, shared by the config and options flows."""
    return vol.Schema(
        {
            vol.Required(CONF_FORECAST_DAYS, default=defaults[CONF_FORECAST_DAYS]): selector.NumberSelector(
                selector.NumberSelectorConfig(min=MIN_FORECAST_DAYS, max=MAX_FORECAST_DAYS, step=1, mode="slider")
            ),
            vol.Required(CONF_TEMPERATURE_UNIT, default=defaults[CONF_TEMPERATURE_UNIT]): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[
                        {"value": TEMP_UNIT_CELSIUS, "label": "Celsius (°C)"},
                        {"value": TEMP_UNIT_FAHRENHEIT, "label": "Fahrenheit (°F)"},
                    ],
                    mode="dropdown",
                )
            ),
            vol.Required(CONF_REFRESH_INTERVAL, default=defaults[CONF_REFRESH_INTERVAL]): selector.NumberSelector(
                selector.NumberSelectorConfig(min=5, max=1440, step=5, unit_of_measurement="min")
            ),
            vol.Required(CONF_DATE_TIME_FORMAT, default=defaults[CONF_DATE_TIME_FORMAT]): str,
            vol.Required(CONF_FORECAST_DATE_FORMAT, default=defaults[CONF_FORECAST_DATE_FORMAT]): str,
            vol.Required(CONF_UTC_OFFSET, default=defaults[CONF_UTC_OFFSET]): selector.NumberSelector(
                selector.NumberSelectorConfig(min=-12, max=14, step=0.5, unit_of_measurement="h")
            ),
            vol.Optional(
                CONF_ICON_URL,
                description={"suggested_value": defaults.get(CONF_ICON_URL) or ""},
            ): str,
        }
    )


async def _validate_display_input(hass, user_input: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
    """Normalize display settings; return (options, errors) for the form."""
    errors: dict[str, str] = {}
    for key in (CONF_DATE_TIME_FORMAT, CONF_FORECAST_DATE_FORMAT):
        if not is_valid_date_format(user_input.get(key)):
            errors[key] = "invalid_date_format"

    options, warnings = validate_and_normalize_options(user_input)
    if warnings:
        _LOGGER.debug("Display settings normalized with warnings: %s", warnings)

    icon_url = options.get(CONF_ICON_URL)
    if icon_url and not errors:
        resolver = IconResolver(async_get_clientsession(hass))
        if not await resolver.validate_base_url(icon_url):
            errors[CONF_ICON_URL] = "invalid_icon_url"

    display = {key: options[key] for key in DISPLAY_KEYS}
    return display, errors


class MetYrConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for MET/Yr Weather."""

    VERSION = 1

    def __init__(self) -> None:
        self.location_config: dict[str, Any] = {}

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Name, location text and optional explicit coordinates."""
        errors: dict[str, str] = {}
        if user_input is not None:
            has_lat = user_input.get(CONF_LATITUDE) is not None
            has_lon = user_input.get(CONF_LONGITUDE) is not None
            if has_lat != has_lon:
                errors["base"] = "incomplete_coordinates"
            elif not has_lat and not str(user_input.get(CONF_LOCATION, "")).strip():
                errors[CONF_LOCATION] = "location_required"

            if not errors:
                title = str(user_input.get(CONF_NAME, "")).strip() or DEFAULT_NAME
                await self.async_set_unique_id(title)
                self._abort_if_unique_id_configured()
                self.location_config = {
                    CONF_NAME: title,
                    CONF_LOCATION: str(user_input.get(CONF_LOCATION, "")).strip(),
                    CONF_LATITUDE: user_input.get(CONF_LATITUDE),
                    CONF_LONGITUDE: user_input.get(CONF_LONGITUDE),
                    CONF_ALTITUDE: user_input.get(CONF_ALTITUDE),
                }
                return await self.async_step_display()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_NAME, default=DEFAULT_NAME): str,
                    vol.Optional(CONF_LOCATION, default=DEFAULT_LOCATION): str,
                    vol.Optional(CONF_LATITUDE): cv.latitude,
                    vol.Optional(CONF_LONGITUDE): cv.longitude,
                    vol.Optional(CONF_ALTITUDE): vol.All(vol.Coerce(int), vol.Range(min=-500, max=9000)),
                }
            ),
            errors=errors,
        )

    async def async_step_display(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Forecast length, units, refresh interval, formats and icon source."""
        errors: dict[str, str] = {}
        if user_input is not None:
            display, errors = await _validate_display_input(self.hass, user_input)
            if not errors:
                _LOGGER.debug("Creating entry %s with options %s", self.location_config[CONF_NAME], display)
                return self.async_create_entry(
                    title=self.location_config[CONF_NAME],
                    data=self.location_config,
                    options=display,
                )

        defaults = {**DEFAULT_OPTIONS, **(user_input or {})}
        return self.async_show_form(
            step_id="display",
            data_schema=_display_schema(defaults),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: config_entries.ConfigEntry) -> config_entries.OptionsFlow:
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Edit the display settings of an existing entry."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        self._config_entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        errors: dict[str, str] = {}
        if user_input is not None:
            display, errors = await _validate_display_input(self.hass, user_input)
            if not errors:
                return self.async_create_entry(title="", data=display)

        defaults = {**DEFAULT_OPTIONS, **dict(self._config_entry.options), **(user_input or {})}
        return self.async_show_form(
            step_id="init",
            data_schema=_display_schema(defaults),
            errors=errors,
        )
