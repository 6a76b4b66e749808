"""Background refresh of stale favorite snapshots.

Each tick looks at a copy of the favorites list and starts one refresh task
per favorite whose snapshot is missing or too old. A favorite never has more
than one refresh in flight. Failures are logged and leave the stored snapshot
untouched, so the next tick retries.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from skyview.config.defaults import DEFAULT_STALENESS_MINUTES, DEFAULT_TICK_INTERVAL_SECONDS
from skyview.config.schema import RefreshConfig
from skyview.errors import WeatherError
from skyview.favorites.store import FavoritesStore
from skyview.models.common import epoch_millis
from skyview.models.favorites import FavoriteCity
from skyview.models.weather import WeatherSnapshot
from skyview.refresh.staleness import is_snapshot_stale

logger = logging.getLogger(__name__)


class CurrentWeatherSource(Protocol):
    async def get_current_by_name(self, city: str) -> WeatherSnapshot: ...


class RefreshLoop:
    def __init__(
        self,
        store: FavoritesStore,
        client: CurrentWeatherSource,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        staleness_minutes: float = DEFAULT_STALENESS_MINUTES,
        clock: Callable[[], int] | None = None,
        on_refreshed: Callable[[str, WeatherSnapshot], None] | None = None,
    ):
        self.store = store
        self.client = client
        self.tick_interval_seconds = tick_interval_seconds
        self.staleness_minutes = staleness_minutes
        self.clock = clock or epoch_millis
        self.on_refreshed = on_refreshed
        self._ticker: asyncio.Task | None = None
        self._in_flight: dict[str, asyncio.Task] = {}
        self.total_ticks = 0
        self.total_refreshes = 0
        self.total_failures = 0

    @classmethod
    def from_config(
        cls,
        store: FavoritesStore,
        client: CurrentWeatherSource,
        config: RefreshConfig,
        **kwargs,
    ) -> "RefreshLoop":
        return cls(
            store,
            client,
            tick_interval_seconds=config.tick_interval_seconds,
            staleness_minutes=config.staleness_minutes,
            **kwargs,
        )

    @property
    def in_flight(self) -> frozenset[str]:
        """Keys of favorites currently being refreshed."""
        return frozenset(self._in_flight)

    @property
    def is_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def due(self) -> list[FavoriteCity]:
        now = self.clock()
        return [
            fav for fav in self.store.list()
            if is_snapshot_stale(fav, self.staleness_minutes, now)
        ]

    def tick(self) -> list[asyncio.Task]:
        """Start a refresh for every due favorite not already refreshing.

        Must be called from a running event loop. Returns the started tasks.
        """
        self.total_ticks += 1
        started = []
        for fav in self.due():
            if fav.key in self._in_flight:
                logger.debug("Refresh of %s already in flight", fav.name)
                continue
            task = asyncio.create_task(self._refresh(fav), name=f"refresh:{fav.key}")
            self._in_flight[fav.key] = task
            started.append(task)
        if started:
            logger.info("Tick #%d: refreshing %d favorite(s)", self.total_ticks, len(started))
        return started

    async def _refresh(self, fav: FavoriteCity) -> None:
        try:
            snapshot = await self.client.get_current_by_name(fav.name)
            self.store.update_snapshot(fav.name, snapshot)
        except WeatherError as e:
            self.total_failures += 1
            logger.warning("Refreshing %s failed: %s", fav.name, e)
            return
        except Exception:
            self.total_failures += 1
            logger.exception("Refreshing %s crashed", fav.name)
            return
        finally:
            self._in_flight.pop(fav.key, None)

        self.total_refreshes += 1
        logger.info("Refreshed %s: %.1f°C", fav.name, snapshot.temperature)
        if self.on_refreshed is not None:
            self.on_refreshed(fav.name, snapshot)

    # --- Lifecycle ---

    def start(self) -> None:
        """Tick now and then every interval until stop()."""
        if self.is_running:
            return
        self._ticker = asyncio.create_task(self._run(), name="refresh-ticker")
        logger.info(
            "Refresh loop started: every %ss, stale after %s min",
            self.tick_interval_seconds, self.staleness_minutes,
        )

    async def _run(self) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Refresh tick #%d crashed", self.total_ticks)
            await asyncio.sleep(self.tick_interval_seconds)

    def stop(self) -> None:
        """Stop ticking. Refreshes already in flight run to completion."""
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
            logger.info(
                "Refresh loop stopped: %d refreshed, %d failed",
                self.total_refreshes, self.total_failures,
            )

    async def wait_idle(self) -> None:
        """Wait for every in-flight refresh to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight.values()), return_exceptions=True)
