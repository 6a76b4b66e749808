"""Shared test fixtures."""

import json
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from skyview.config.schema import AppConfig
from skyview.favorites.store import FavoritesStore
from skyview.models.weather import ForecastSeries, WeatherSnapshot
from skyview.storage.favorites_repo import MemoryFavoritesRepo

FIXTURE_DIR = Path(__file__).parent / "fixtures"

# 2025-10-19T08:00:00Z, the "dt" of the current-weather fixture
FIXTURE_NOW = datetime(2025, 10, 19, 8, 0, 0, tzinfo=UTC)
FIXTURE_NOW_MS = int(FIXTURE_NOW.timestamp() * 1000)


class FakeClock:
    """Epoch-millis clock that only moves when told to."""

    def __init__(self, now_ms: int = FIXTURE_NOW_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, minutes: float) -> None:
        self.now_ms += int(minutes * 60_000)


def make_snapshot(name: str = "Beijing", temperature: float = 21.9, **overrides) -> WeatherSnapshot:
    with open(FIXTURE_DIR / "owm_current_beijing.json") as f:
        payload = json.load(f)
    payload["name"] = name
    payload["main"]["temp"] = temperature
    snapshot = WeatherSnapshot.from_api(payload)
    if overrides:
        snapshot = replace(snapshot, **overrides)
    return snapshot


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def current_payload() -> dict:
    with open(FIXTURE_DIR / "owm_current_beijing.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_payload() -> dict:
    with open(FIXTURE_DIR / "owm_forecast_beijing.json") as f:
        return json.load(f)


@pytest.fixture
def forecast(forecast_payload: dict) -> ForecastSeries:
    return ForecastSeries.from_api(forecast_payload)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repo() -> MemoryFavoritesRepo:
    return MemoryFavoritesRepo()


@pytest.fixture
def store(repo: MemoryFavoritesRepo, clock: FakeClock) -> FavoritesStore:
    return FavoritesStore(repo, clock=clock)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        api={"base_url": "https://test-owm.example.com/data/2.5", "api_key": "test-key"},
        storage={"db_path": str(tmp_path / "skyview.db")},
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {"lang": "en", "timeout_seconds": 5.0},
        "refresh": {"staleness_minutes": 15},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
