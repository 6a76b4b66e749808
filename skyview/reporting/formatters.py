"""Plain-text renderings of snapshots, charts and favorites."""

from datetime import tzinfo

from skyview.forecast.windowing import format_clock
from skyview.models.common import epoch_millis
from skyview.models.favorites import FavoriteCity
from skyview.models.weather import ChartPoint, WeatherSnapshot
from skyview.refresh.staleness import snapshot_age_minutes

NO_FORECAST = "No forecast data"
NO_FAVORITES = "No favorite cities yet"

_COMPASS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]


def wind_direction(deg: int) -> str:
    return _COMPASS[round(deg / 45) % 8]


def format_snapshot_text(s: WeatherSnapshot, tz: tzinfo | None = None) -> str:
    cond = s.primary_condition
    lines = [
        f"=== {s.name}, {s.country} ===",
        f"{round(s.temperature)}°C  {cond.description if cond else ''}".rstrip(),
        f"Feels like: {s.feels_like:.1f}°C | Humidity: {s.humidity}% | "
        f"Pressure: {s.pressure} hPa",
        f"Wind: {s.wind_speed:.1f} m/s {wind_direction(s.wind_deg)}",
        f"Sunrise: {format_clock(s.sunrise, tz)} | Sunset: {format_clock(s.sunset, tz)}",
    ]
    return "\n".join(lines)


def format_chart_text(points: list[ChartPoint], width: int = 30) -> str:
    """Horizontal bar chart of the 48-hour temperature series."""
    if not points:
        return NO_FORECAST
    temps = [p.temperature for p in points]
    low, high = min(temps), max(temps)
    span = (high - low) or 1.0
    lines = ["Next 48 hours"]
    for p in points:
        bar = "#" * (1 + round((p.temperature - low) / span * (width - 1)))
        lines.append(f"{p.time}  {p.temperature:6.1f}°C  {bar}")
    return "\n".join(lines)


def format_favorites_text(
    favorites: list[FavoriteCity],
    refreshing: frozenset[str] = frozenset(),
    now_ms: int | None = None,
) -> str:
    if not favorites:
        return NO_FAVORITES
    if now_ms is None:
        now_ms = epoch_millis()
    lines = ["Favorite cities"]
    for fav in favorites:
        if fav.snapshot is None:
            weather = "no data yet"
        else:
            cond = fav.snapshot.primary_condition
            weather = f"{round(fav.snapshot.temperature)}°C {cond.description if cond else ''}".rstrip()
        age = snapshot_age_minutes(fav, now_ms)
        marker = " (refreshing)" if fav.key in refreshing else ""
        lines.append(f"  {fav.name}, {fav.country}: {weather} | updated {age:.0f} min ago{marker}")
    return "\n".join(lines)
