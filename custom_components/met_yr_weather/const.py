"""Constants for MET/Yr Weather."""

# Integration identity
DOMAIN = "met_yr_weather"
DEFAULT_NAME = "MET/Yr Weather"
VERSION = "1.6.0"

# api.met.no rejects requests without an identifying User-Agent
USER_AGENT = f"HomeAssistant-MetYrWeather/{VERSION} (https://github.com/met-yr-weather)"

# MET Norway endpoints
MET_NOWCAST_URL = "https://api.met.no/weatherapi/nowcast/2.0/complete"
MET_FORECAST_URL = "https://api.met.no/weatherapi/locationforecast/2.0/complete"

# Nominatim geocoding
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"

# Default icon source (OpenWeatherMap @4x = ~400x400px)
OPENWEATHERMAP_ICON_URL = "https://openweathermap.org/img/wn/"
DEFAULT_OWM_ICON_CODE = "04d"

# Precipitation intensity thresholds (mm)
LIGHT_PRECIP_THRESHOLD = 2.5
HEAVY_PRECIP_THRESHOLD = 7.5

# Network bounds (seconds)
REQUEST_TIMEOUT = 30
ICON_PROBE_TIMEOUT = 10
CYCLE_TIMEOUT = 90

# Used when neither coordinates nor a geocodable location are available
FALLBACK_LATITUDE = 1.3521
FALLBACK_LONGITUDE = 103.8198

# ----- Config keys used by the flow and entry data/options -----
CONF_NAME = "name"
CONF_LOCATION = "location"
CONF_LATITUDE = "latitude"
CONF_LONGITUDE = "longitude"
CONF_ALTITUDE = "altitude"
CONF_REFRESH_INTERVAL = "refresh_interval_minutes"
CONF_DATE_TIME_FORMAT = "date_time_format"
CONF_FORECAST_DATE_FORMAT = "forecast_date_format"
CONF_UTC_OFFSET = "utc_offset_hours"
CONF_FORECAST_DAYS = "forecast_days"
CONF_TEMPERATURE_UNIT = "temperature_unit"
CONF_ICON_URL = "icon_url"

# Defaults
DEFAULT_LOCATION = "Oslo, Norway"
DEFAULT_REFRESH_INTERVAL = 60  # minutes
DEFAULT_DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"
DEFAULT_FORECAST_DATE_FORMAT = "%A %d %b"
DEFAULT_UTC_OFFSET = 0.0
DEFAULT_FORECAST_DAYS = 5
MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 10

TEMP_UNIT_CELSIUS = "C"
TEMP_UNIT_FAHRENHEIT = "F"
DEFAULT_TEMPERATURE_UNIT = TEMP_UNIT_CELSIUS

DEFAULT_OPTIONS = {
    CONF_REFRESH_INTERVAL: DEFAULT_REFRESH_INTERVAL,
    CONF_DATE_TIME_FORMAT: DEFAULT_DATE_TIME_FORMAT,
    CONF_FORECAST_DATE_FORMAT: DEFAULT_FORECAST_DATE_FORMAT,
    CONF_UTC_OFFSET: DEFAULT_UTC_OFFSET,
    CONF_FORECAST_DAYS: DEFAULT_FORECAST_DAYS,
    CONF_TEMPERATURE_UNIT: DEFAULT_TEMPERATURE_UNIT,
    CONF_ICON_URL: None,
    CONF_ALTITUDE: None,
}

# Placeholder shown for values that could not be derived
NO_VALUE = "-"

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
