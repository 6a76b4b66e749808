"""Tests for the command line entry point and the interactive session."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from skyview.app import MSG_GEO_UNAVAILABLE, MSG_NOT_FOUND
from skyview.cli import HELP, main, run_shell
from skyview.config.schema import AppConfig
from skyview.reporting.formatters import NO_FAVORITES, NO_FORECAST

BASE = "https://test-owm.example.com/data/2.5"


def scripted(*lines: str):
    """Async line reader that replays lines, then signals end of input."""
    pending = list(lines)

    async def read_line() -> str | None:
        return pending.pop(0) if pending else None

    return read_line


async def run_script(config: AppConfig, *lines: str) -> list[str]:
    output: list[str] = []
    code = await run_shell(config, read_line=scripted(*lines), write=output.append)
    assert code == 0
    return output


@pytest.fixture
def owm_routes(current_payload: dict, forecast_payload: dict):
    with respx.mock(base_url=BASE, assert_all_called=False) as mock:
        mock.get("/weather").mock(return_value=httpx.Response(200, json=current_payload))
        mock.get("/forecast").mock(return_value=httpx.Response(200, json=forecast_payload))
        yield mock


class TestConfigCommands:
    def test_show(self, config_yaml_path: Path, capsys):
        assert main(["--config", str(config_yaml_path), "config", "show"]) == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["api"]["lang"] == "en"
        assert shown["refresh"]["staleness_minutes"] == 15

    def test_set_saves(self, config_yaml_path: Path, capsys):
        code = main(["--config", str(config_yaml_path), "config", "set", "refresh.tick_interval_seconds=60"])
        assert code == 0
        assert "Set refresh.tick_interval_seconds = 60" in capsys.readouterr().out
        assert "tick_interval_seconds: 60" in config_yaml_path.read_text()

    def test_set_requires_key_value(self, config_yaml_path: Path):
        assert main(["--config", str(config_yaml_path), "config", "set", "nothing"]) == 1

    def test_set_unknown_key(self, config_yaml_path: Path, capsys):
        assert main(["--config", str(config_yaml_path), "config", "set", "api.bogus=1"]) == 1
        assert capsys.readouterr().out.startswith("Error:")


class TestShell:
    async def test_help_then_end_of_input(self, app_config: AppConfig):
        output = await run_script(app_config)
        assert output == [HELP]

    async def test_search_shows_snapshot(self, app_config: AppConfig, owm_routes):
        output = await run_script(app_config, "search 北京", "quit")
        assert output[1].startswith("=== Beijing, CN ===")
        # Fixture forecast times are in the past, so nothing is left to chart
        assert output[2] == NO_FORECAST
        request = owm_routes.calls[0].request
        assert request.url.params["q"] == "Beijing"

    async def test_forecast_failure_still_shows_current(self, app_config: AppConfig, current_payload: dict):
        with respx.mock(base_url=BASE) as mock:
            mock.get("/weather").mock(return_value=httpx.Response(200, json=current_payload))
            mock.get("/forecast").mock(return_value=httpx.Response(500, text="boom"))
            output = await run_script(app_config, "search Beijing")
        assert output[1].startswith("=== Beijing, CN ===")
        assert output[2].startswith(f"{NO_FORECAST} (")
        assert "500" in output[2]

    async def test_unknown_city(self, app_config: AppConfig):
        with respx.mock(base_url=BASE) as mock:
            mock.get("/weather").mock(
                return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
            )
            output = await run_script(app_config, "search Atlantis")
        assert output[1:] == [MSG_NOT_FOUND]

    async def test_toggle_persists_across_sessions(self, app_config: AppConfig, owm_routes):
        output = await run_script(app_config, "fav", "search Beijing", "toggle", "fav")
        assert output[1] == NO_FAVORITES
        assert "Beijing added to favorites" in output
        assert output[-1].startswith("Favorite cities")
        assert "Beijing, CN: 22°C 晴" in output[-1]

        output = await run_script(app_config, "fav", "fav rm beijing", "fav")
        assert "Beijing, CN" in output[1]
        assert output[2] == "beijing removed from favorites"
        assert output[3] == NO_FAVORITES

    async def test_fav_add(self, app_config: AppConfig, owm_routes):
        output = await run_script(app_config, "fav add 北京", "search Beijing")
        assert output[1] == "Beijing added to favorites"
        assert "★ favorite" in output

    async def test_toggle_without_city(self, app_config: AppConfig):
        output = await run_script(app_config, "toggle")
        assert output[1] == "Search for a city first"

    async def test_here_without_location(self, app_config: AppConfig):
        output = await run_script(app_config, "here")
        assert output[1] == MSG_GEO_UNAVAILABLE

    async def test_here_with_location(self, app_config: AppConfig, owm_routes):
        config = app_config.model_copy(
            update={"location": app_config.location.model_copy(update={"latitude": 39.9, "longitude": 116.4})}
        )
        output = await run_script(config, "here")
        assert output[1].startswith("=== Beijing, CN ===")
        assert owm_routes.calls[0].request.url.params["lat"] == "39.9"

    async def test_unknown_and_malformed_commands(self, app_config: AppConfig):
        output = await run_script(app_config, "", "dance", 'search "unclosed', "search", "quit", "help")
        assert output[1] == "Unknown command: dance (try 'help')"
        assert output[2].startswith("Error:")
        assert output[3] == "Usage: search <city>"
        # quit ends the session before "help" is read
        assert len(output) == 4

    async def test_refresh_reports_count(self, app_config: AppConfig):
        output = await run_script(app_config, "refresh")
        assert output[1] == "Refreshing 0 favorite(s)"
