"""Tests for error messages and the search/locate orchestration."""

import asyncio
from datetime import UTC

import httpx
import pytest
import respx

from conftest import FIXTURE_NOW, make_snapshot
from skyview.app import (
    MSG_CREDENTIAL_INVALID,
    MSG_GEO_DENIED,
    MSG_GEO_TIMEOUT,
    MSG_GEO_UNAVAILABLE,
    MSG_NETWORK,
    MSG_NOT_FOUND,
    MSG_RATE_LIMITED,
    WeatherApp,
    describe_error,
)
from skyview.errors import (
    ApiStatusError,
    GeolocationDenied,
    GeolocationTimeout,
    GeolocationUnavailable,
    NetworkUnavailableError,
    RequestSetupError,
)
from skyview.geolocation import ConfiguredLocation
from skyview.ingest.openweather_client import OpenWeatherClient



class FakeClient:
    def __init__(self, forecast, current_error=None, forecast_error=None):
        self.forecast = forecast
        self.current_error = current_error
        self.forecast_error = forecast_error
        self.calls: list[tuple] = []

    async def get_current_by_name(self, city):
        self.calls.append(("current", city))
        if self.current_error:
            raise self.current_error
        return make_snapshot(city)

    async def get_current_by_coords(self, lat, lon):
        self.calls.append(("current", lat, lon))
        if self.current_error:
            raise self.current_error
        return make_snapshot("Here")

    async def get_forecast_by_name(self, city):
        self.calls.append(("forecast", city))
        if self.forecast_error:
            raise self.forecast_error
        return self.forecast

    async def get_forecast_by_coords(self, lat, lon):
        self.calls.append(("forecast", lat, lon))
        if self.forecast_error:
            raise self.forecast_error
        return self.forecast


class SlowLocation:
    async def locate(self):
        await asyncio.sleep(10)
        return 0.0, 0.0


class TestDescribeError:
    @pytest.mark.parametrize(
        "status, message",
        [(401, MSG_CREDENTIAL_INVALID), (404, MSG_NOT_FOUND), (429, MSG_RATE_LIMITED)],
    )
    def test_known_statuses(self, status: int, message: str):
        assert describe_error(ApiStatusError(status)) == message

    @pytest.mark.parametrize("status", [400, 500, 502])
    def test_other_status_is_generic_server_error(self, status: int):
        msg = describe_error(ApiStatusError(status, "x"))
        assert str(status) in msg
        assert msg not in (MSG_CREDENTIAL_INVALID, MSG_NOT_FOUND, MSG_RATE_LIMITED)

    def test_network(self):
        assert describe_error(NetworkUnavailableError("down")) == MSG_NETWORK

    def test_request_setup_includes_message(self):
        assert "bad scheme" in describe_error(RequestSetupError("bad scheme"))

    def test_geolocation(self):
        assert describe_error(GeolocationDenied()) == MSG_GEO_DENIED
        assert describe_error(GeolocationUnavailable()) == MSG_GEO_UNAVAILABLE
        assert describe_error(GeolocationTimeout()) == MSG_GEO_TIMEOUT


class TestSearch:
    async def test_current_and_chart(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store, tz=UTC)
        view = await app.search("北京", now=FIXTURE_NOW)
        assert view.snapshot.name == "北京"
        assert view.city == "北京"
        assert [p.time for p in view.chart] == ["09:00", "12:00", "05:00", "08:00"]
        assert view.forecast_error is None
        assert app.current is view

    async def test_current_failure_propagates(self, store, forecast):
        client = FakeClient(forecast, current_error=ApiStatusError(404, "city not found"))
        app = WeatherApp(client, store)
        with pytest.raises(ApiStatusError):
            await app.search("Atlantis")
        assert app.current is None
        assert ("forecast", "Atlantis") not in client.calls

    async def test_forecast_failure_degrades(self, store, forecast):
        client = FakeClient(forecast, forecast_error=NetworkUnavailableError("down"))
        app = WeatherApp(client, store)
        view = await app.search("Beijing")
        assert view.snapshot.name == "Beijing"
        assert view.chart == []
        assert not view.has_forecast
        assert view.forecast_error == MSG_NETWORK

    async def test_malformed_forecast_body_degrades(self, store, current_payload: dict):
        base = "https://test-owm.example.com/data/2.5"
        with respx.mock(base_url=base) as mock:
            mock.get("/weather").mock(return_value=httpx.Response(200, json=current_payload))
            mock.get("/forecast").mock(
                return_value=httpx.Response(200, json={"city": ["x"], "list": []})
            )
            async with OpenWeatherClient(api_key="test-key", base_url=base) as client:
                view = await WeatherApp(client, store).search("Beijing")
        assert view.snapshot.name == "Beijing"
        assert view.chart == []
        assert "200" in view.forecast_error


class TestLocate:
    async def test_uses_configured_position(self, store, forecast):
        client = FakeClient(forecast)
        app = WeatherApp(client, store, geolocation=ConfiguredLocation(39.9, 116.4), tz=UTC)
        view = await app.locate(now=FIXTURE_NOW)
        assert view.coords == (39.9, 116.4)
        assert ("current", 39.9, 116.4) in client.calls
        assert ("forecast", 39.9, 116.4) in client.calls
        assert len(view.chart) == 4

    async def test_no_position_configured(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store, geolocation=ConfiguredLocation(None, None))
        with pytest.raises(GeolocationUnavailable):
            await app.locate()

    async def test_no_source(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store)
        with pytest.raises(GeolocationUnavailable):
            await app.locate()

    async def test_timeout(self, store, forecast):
        app = WeatherApp(
            FakeClient(forecast), store, geolocation=SlowLocation(), geolocation_timeout=0.01
        )
        with pytest.raises(GeolocationTimeout):
            await app.locate()


class TestToggleFavorite:
    async def test_toggle_current_view(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store)
        await app.search("Beijing")
        assert app.toggle_favorite() is True
        fav = store.get("beijing")
        assert fav.country == "CN"
        assert fav.snapshot == app.current.snapshot
        assert app.toggle_favorite() is False
        assert store.list() == []

    def test_nothing_shown(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store)
        with pytest.raises(ValueError):
            app.toggle_favorite()

    async def test_back_to_home(self, store, forecast):
        app = WeatherApp(FakeClient(forecast), store)
        await app.search("Beijing")
        app.back_to_home()
        assert app.current is None
