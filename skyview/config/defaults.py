"""Default endpoints, intervals and storage locations."""

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"

DEFAULT_UNITS = "metric"  # Celsius
DEFAULT_LANG = "zh_cn"

DEFAULT_TICK_INTERVAL_SECONDS = 5 * 60
DEFAULT_STALENESS_MINUTES = 10

DEFAULT_DB_PATH = "data/skyview.db"
FAVORITES_NAMESPACE = "favorite-cities-storage"

API_KEY_ENV = "SKYVIEW_API_KEY"
