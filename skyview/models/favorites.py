"""Favorite city records."""

from dataclasses import dataclass
from typing import Any

from skyview.models.weather import WeatherSnapshot


def favorite_key(name: str) -> str:
    """Case-insensitive identity of a favorite."""
    return name.strip().casefold()


@dataclass(frozen=True)
class FavoriteCity:
    name: str
    country: str
    snapshot: WeatherSnapshot | None
    last_updated: int  # epoch millis

    @property
    def key(self) -> str:
        return favorite_key(self.name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "country": self.country,
            "lastUpdated": self.last_updated,
        }
        if self.snapshot is not None:
            data["weatherData"] = self.snapshot.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FavoriteCity":
        """Rebuild a record written by ``to_dict``. Raises ValueError on bad shape."""
        try:
            weather = data.get("weatherData")
            return cls(
                name=str(data["name"]),
                country=str(data.get("country", "")),
                snapshot=WeatherSnapshot.from_api(weather) if weather else None,
                last_updated=int(data["lastUpdated"]),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed favorite record: {e!r}") from e
