"""OpenWeatherMap current-weather and forecast client.

Every call is one GET with no retries and no caching. Transport failures
are reported as the categories in ``skyview.errors``.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from skyview.config.defaults import DEFAULT_LANG, DEFAULT_UNITS, OPENWEATHER_BASE_URL
from skyview.config.schema import ApiConfig
from skyview.ingest.city_names import normalize_city_name
from skyview.errors import (
    ApiStatusError,
    NetworkUnavailableError,
    RequestSetupError,
)
from skyview.models.weather import ForecastSeries, WeatherSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Request went out, nothing usable came back.
_NO_RESPONSE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = DEFAULT_UNITS,
        lang: str = DEFAULT_LANG,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            logger.warning("No OpenWeatherMap API key configured; requests will be rejected")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls, config: ApiConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> "OpenWeatherClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            units=config.units,
            lang=config.lang,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "OpenWeatherClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # --- Current conditions ---

    async def get_current_by_name(self, city: str) -> WeatherSnapshot:
        resp = await self._get("/weather", {"q": normalize_city_name(city)})
        return _parse(WeatherSnapshot.from_api, resp)

    async def get_current_by_coords(self, lat: float, lon: float) -> WeatherSnapshot:
        resp = await self._get("/weather", {"lat": lat, "lon": lon})
        return _parse(WeatherSnapshot.from_api, resp)

    # --- Forecast ---

    async def get_forecast_by_name(self, city: str) -> ForecastSeries:
        resp = await self._get("/forecast", {"q": normalize_city_name(city)})
        return _parse(ForecastSeries.from_api, resp)

    async def get_forecast_by_coords(self, lat: float, lon: float) -> ForecastSeries:
        resp = await self._get("/forecast", {"lat": lat, "lon": lon})
        return _parse(ForecastSeries.from_api, resp)

    async def _get(self, path: str, location: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}{path}"
        params = {
            **location,
            "appid": self.api_key,
            "units": self.units,
            "lang": self.lang,
        }
        logger.debug("GET %s %s", path, location)
        try:
            resp = await self._http.get(url, params=params)
        except _NO_RESPONSE_ERRORS as e:
            logger.error("No response from OpenWeatherMap %s: %s", path, type(e).__name__)
            raise NetworkUnavailableError(f"No response from {path}: {e}") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error("Could not send OpenWeatherMap request %s: %s", path, e)
            raise RequestSetupError(str(e)) from e

        if not resp.is_success:
            body = resp.text
            logger.error("OpenWeatherMap %d: GET %s -> %s", resp.status_code, path, body)
            if resp.status_code == 401:
                logger.error("API key invalid or unauthorized; check api.api_key")
            raise ApiStatusError(resp.status_code, body)
        return resp


def _parse(factory: Callable[[dict], T], resp: httpx.Response) -> T:
    """Apply a model factory, reporting unusable 2xx bodies as ApiStatusError."""
    try:
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return factory(data)
    except ValueError as e:
        logger.error("Unexpected OpenWeatherMap payload: %s", e)
        raise ApiStatusError(resp.status_code, resp.text) from e
