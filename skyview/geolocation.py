"""One-shot position lookup for "weather here"."""

import asyncio
import logging
from typing import Protocol

from skyview.config.schema import LocationConfig
from skyview.errors import GeolocationTimeout, GeolocationUnavailable

logger = logging.getLogger(__name__)


class GeolocationSource(Protocol):
    async def locate(self) -> tuple[float, float]: ...


class ConfiguredLocation:
    """Position taken from the ``location`` config section."""

    def __init__(self, latitude: float | None, longitude: float | None):
        self.latitude = latitude
        self.longitude = longitude

    @classmethod
    def from_config(cls, config: LocationConfig) -> "ConfiguredLocation":
        return cls(config.latitude, config.longitude)

    async def locate(self) -> tuple[float, float]:
        if self.latitude is None or self.longitude is None:
            raise GeolocationUnavailable("No location configured")
        return self.latitude, self.longitude


async def locate_with_timeout(
    source: GeolocationSource, timeout_seconds: float
) -> tuple[float, float]:
    """Ask a source for a position, giving up after ``timeout_seconds``."""
    try:
        lat, lon = await asyncio.wait_for(source.locate(), timeout=timeout_seconds)
    except TimeoutError as e:
        raise GeolocationTimeout(f"No position within {timeout_seconds}s") from e
    logger.info("Located at lat=%s lon=%s", lat, lon)
    return lat, lon
