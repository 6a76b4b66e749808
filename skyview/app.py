"""Wires user actions to the weather client and the favorites store."""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from skyview.errors import (
    ApiStatusError,
    GeolocationDenied,
    GeolocationTimeout,
    GeolocationUnavailable,
    NetworkUnavailableError,
    RequestSetupError,
    WeatherError,
)
from skyview.favorites.store import FavoritesStore
from skyview.forecast.windowing import to_chart_series
from skyview.geolocation import GeolocationSource, locate_with_timeout
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.models.weather import ChartPoint, ForecastSeries, WeatherSnapshot

logger = logging.getLogger(__name__)

MSG_CREDENTIAL_INVALID = "API key is invalid or unauthorized. Check api.api_key in your config."
MSG_NOT_FOUND = "No weather data found for that location. Check the spelling and try again."
MSG_RATE_LIMITED = "Too many requests to the weather service. Please try again later."
MSG_SERVER_ERROR = "The weather service returned an error ({status}). Please try again later."
MSG_NETWORK = "Cannot reach the weather service. Check your network connection."
MSG_REQUEST = "Error while requesting weather data: {message}"
MSG_GEO_DENIED = "Could not get your location: permission denied."
MSG_GEO_UNAVAILABLE = "Could not get your location: position unavailable."
MSG_GEO_TIMEOUT = "Could not get your location: request timed out."
MSG_UNEXPECTED = "Something went wrong: {error}"


def describe_error(exc: BaseException) -> str:
    """User-facing message for a failed lookup."""
    if isinstance(exc, ApiStatusError):
        if exc.status == 401:
            return MSG_CREDENTIAL_INVALID
        if exc.status == 404:
            return MSG_NOT_FOUND
        if exc.status == 429:
            return MSG_RATE_LIMITED
        return MSG_SERVER_ERROR.format(status=exc.status)
    if isinstance(exc, NetworkUnavailableError):
        return MSG_NETWORK
    if isinstance(exc, RequestSetupError):
        return MSG_REQUEST.format(message=exc.message)
    if isinstance(exc, GeolocationDenied):
        return MSG_GEO_DENIED
    if isinstance(exc, GeolocationUnavailable):
        return MSG_GEO_UNAVAILABLE
    if isinstance(exc, GeolocationTimeout):
        return MSG_GEO_TIMEOUT
    return MSG_UNEXPECTED.format(error=exc)


@dataclass
class CityView:
    """What the screen shows for one looked-up location."""

    snapshot: WeatherSnapshot
    chart: list[ChartPoint] = field(default_factory=list)
    forecast_error: str | None = None
    city: str | None = None
    coords: tuple[float, float] | None = None

    @property
    def has_forecast(self) -> bool:
        return bool(self.chart)


class WeatherApp:
    def __init__(
        self,
        client: OpenWeatherClient,
        store: FavoritesStore,
        geolocation: GeolocationSource | None = None,
        geolocation_timeout: float = 10.0,
        tz: tzinfo | None = None,
    ):
        self.client = client
        self.store = store
        self.geolocation = geolocation
        self.geolocation_timeout = geolocation_timeout
        self.tz = tz
        self.current: CityView | None = None

    async def search(self, city: str, now: datetime | None = None) -> CityView:
        """Current weather plus chart for a city name.

        A current-weather failure propagates; a forecast failure only empties
        the chart.
        """
        snapshot = await self.client.get_current_by_name(city)
        view = CityView(snapshot=snapshot, city=city)
        await self._attach_forecast(view, self.client.get_forecast_by_name(city), now)
        self.current = view
        return view

    async def locate(self, now: datetime | None = None) -> CityView:
        """Current weather plus chart for the geolocated position."""
        if self.geolocation is None:
            raise GeolocationUnavailable("No geolocation source configured")
        lat, lon = await locate_with_timeout(self.geolocation, self.geolocation_timeout)
        snapshot = await self.client.get_current_by_coords(lat, lon)
        view = CityView(snapshot=snapshot, coords=(lat, lon))
        await self._attach_forecast(
            view, self.client.get_forecast_by_coords(lat, lon), now
        )
        self.current = view
        return view

    async def _attach_forecast(
        self, view: CityView, pending: Awaitable[ForecastSeries], now: datetime | None
    ) -> None:
        try:
            forecast = await pending
        except WeatherError as e:
            logger.error("Forecast fetch failed: %s", e)
            view.forecast_error = describe_error(e)
            return
        view.chart = to_chart_series(forecast, now=now, tz=self.tz)

    def toggle_favorite(self, view: CityView | None = None) -> bool:
        """Add or remove the shown city. Returns whether it is now a favorite."""
        view = view or self.current
        if view is None:
            raise ValueError("Nothing to add to favorites")
        snap = view.snapshot
        return self.store.toggle(snap.name, snap.country, snap)

    def back_to_home(self) -> None:
        self.current = None
