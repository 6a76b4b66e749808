"""OpenWeatherMap current-conditions and forecast models."""

from dataclasses import dataclass
from typing import Any

from skyview.config.defaults import OPENWEATHER_ICON_URL


@dataclass(frozen=True)
class WeatherCondition:
    id: int
    main: str
    description: str
    icon: str

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "WeatherCondition":
        if not isinstance(payload, dict):
            raise ValueError(f"Malformed weather condition: {payload!r}")
        return cls(
            id=int(payload.get("id", 0)),
            main=str(payload.get("main", "")),
            description=str(payload.get("description", "")),
            icon=str(payload.get("icon", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "main": self.main,
            "description": self.description,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class WeatherSnapshot:
    """One current-conditions reading for a location.

    ``to_dict`` emits the same shape the ``/weather`` endpoint returns, so a
    stored snapshot can be read back with ``from_api``.
    """

    name: str
    country: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    wind_speed: float
    wind_deg: int
    conditions: tuple[WeatherCondition, ...]
    sunrise: int  # epoch seconds
    sunset: int  # epoch seconds

    @property
    def primary_condition(self) -> WeatherCondition | None:
        return self.conditions[0] if self.conditions else None

    @property
    def icon_url(self) -> str | None:
        cond = self.primary_condition
        if cond is None or not cond.icon:
            return None
        return OPENWEATHER_ICON_URL.format(icon=cond.icon)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "WeatherSnapshot":
        """Build a snapshot from a ``/weather`` response body.

        Raises ValueError when the body lacks the name or main readings.
        """
        try:
            main = payload["main"]
            wind = payload.get("wind") or {}
            sys_ = payload.get("sys") or {}
            return cls(
                name=str(payload["name"]),
                country=str(sys_.get("country", "")),
                temperature=float(main["temp"]),
                feels_like=float(main.get("feels_like", main["temp"])),
                humidity=int(main.get("humidity", 0)),
                pressure=int(main.get("pressure", 0)),
                wind_speed=float(wind.get("speed", 0.0)),
                wind_deg=int(wind.get("deg", 0)),
                conditions=tuple(
                    WeatherCondition.from_api(w) for w in payload.get("weather") or []
                ),
                sunrise=int(sys_.get("sunrise", 0)),
                sunset=int(sys_.get("sunset", 0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Malformed weather payload: {e!r}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "main": {
                "temp": self.temperature,
                "feels_like": self.feels_like,
                "humidity": self.humidity,
                "pressure": self.pressure,
            },
            "weather": [c.to_dict() for c in self.conditions],
            "wind": {"speed": self.wind_speed, "deg": self.wind_deg},
            "sys": {
                "country": self.country,
                "sunrise": self.sunrise,
                "sunset": self.sunset,
            },
        }


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: int  # epoch seconds
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    condition: WeatherCondition | None
    wind_speed: float
    wind_deg: int
    dt_txt: str


@dataclass(frozen=True)
class ForecastSeries:
    """5-day / 3-hour forecast, entries in the order the API returned them."""

    city_name: str
    country: str
    entries: tuple[ForecastEntry, ...]

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "ForecastSeries":
        try:
            city = payload.get("city") or {}
            entries = []
            for item in payload["list"]:
                main = item["main"]
                wind = item.get("wind") or {}
                weather = item.get("weather") or []
                entries.append(
                    ForecastEntry(
                        timestamp=int(item["dt"]),
                        temperature=float(main["temp"]),
                        feels_like=float(main.get("feels_like", main["temp"])),
                        humidity=int(main.get("humidity", 0)),
                        pressure=int(main.get("pressure", 0)),
                        condition=WeatherCondition.from_api(weather[0]) if weather else None,
                        wind_speed=float(wind.get("speed", 0.0)),
                        wind_deg=int(wind.get("deg", 0)),
                        dt_txt=str(item.get("dt_txt", "")),
                    )
                )
            return cls(
                city_name=str(city.get("name", "")),
                country=str(city.get("country", "")),
                entries=tuple(entries),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Malformed forecast payload: {e!r}") from e


@dataclass(frozen=True)
class ChartPoint:
    time: str  # HH:MM, x-axis label
    temperature: float
    date: str  # secondary label, same HH:MM value
