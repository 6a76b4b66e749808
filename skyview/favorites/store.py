"""Favorite cities with their last fetched weather.

Names match case-insensitively everywhere. Every mutation is written through
to the persistence backend before the call returns.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from skyview.errors import StorageUnavailable
from skyview.models.common import epoch_millis
from skyview.models.favorites import FavoriteCity, favorite_key
from skyview.models.weather import WeatherSnapshot
from skyview.storage.favorites_repo import FavoritesPersistence

logger = logging.getLogger(__name__)


class FavoritesStore:
    def __init__(
        self,
        persistence: FavoritesPersistence,
        clock: Callable[[], int] | None = None,
    ):
        self.persistence = persistence
        self.clock = clock or epoch_millis
        self._lock = threading.Lock()
        self._favorites: list[FavoriteCity] = self._load()

    def _load(self) -> list[FavoriteCity]:
        try:
            loaded = self.persistence.load()
        except StorageUnavailable as e:
            logger.warning("Favorites storage unreadable, starting empty: %s", e)
            return []

        # Collapse duplicate names a hand-edited document may contain; first wins.
        seen: set[str] = set()
        favorites = []
        for fav in loaded:
            if fav.key in seen:
                logger.warning("Dropping duplicate favorite %r", fav.name)
                continue
            seen.add(fav.key)
            favorites.append(fav)
        logger.info("Loaded %d favorite cities", len(favorites))
        return favorites

    def _index(self, key: str) -> int | None:
        for i, fav in enumerate(self._favorites):
            if fav.key == key:
                return i
        return None

    def _commit(self, favorites: list[FavoriteCity]) -> None:
        self._favorites = favorites
        self.persistence.save(list(favorites))

    # --- Mutations ---

    def add(
        self, name: str, country: str, snapshot: WeatherSnapshot | None = None
    ) -> FavoriteCity:
        """Add a favorite, or refresh the snapshot of an existing one.

        An existing entry keeps its stored name and country.
        """
        with self._lock:
            favorites = list(self._favorites)
            idx = self._index(favorite_key(name))
            now = self.clock()
            if idx is not None:
                entry = replace(favorites[idx], snapshot=snapshot, last_updated=now)
                favorites[idx] = entry
            else:
                entry = FavoriteCity(
                    name=name, country=country, snapshot=snapshot, last_updated=now
                )
                favorites.append(entry)
                logger.info("Added favorite %s, %s", name, country)
            self._commit(favorites)
            return entry

    def remove(self, name: str) -> bool:
        """Remove any favorite matching name. Returns True if one was removed."""
        key = favorite_key(name)
        with self._lock:
            favorites = [f for f in self._favorites if f.key != key]
            if len(favorites) == len(self._favorites):
                return False
            self._commit(favorites)
            logger.info("Removed favorite %s", name)
            return True

    def update_snapshot(self, name: str, snapshot: WeatherSnapshot) -> FavoriteCity | None:
        """Replace the snapshot of an existing favorite; unknown names are ignored."""
        with self._lock:
            idx = self._index(favorite_key(name))
            if idx is None:
                logger.debug("Ignoring snapshot for non-favorite %s", name)
                return None
            favorites = list(self._favorites)
            entry = replace(favorites[idx], snapshot=snapshot, last_updated=self.clock())
            favorites[idx] = entry
            self._commit(favorites)
            return entry

    def toggle(
        self, name: str, country: str, snapshot: WeatherSnapshot | None = None
    ) -> bool:
        """Remove name if it is a favorite, otherwise add it. Returns new membership."""
        if self.remove(name):
            return False
        self.add(name, country, snapshot)
        return True

    # --- Reads ---

    def is_favorite(self, name: str) -> bool:
        return self._index(favorite_key(name)) is not None

    def get(self, name: str) -> FavoriteCity | None:
        key = favorite_key(name)
        # Mutations swap the list, never edit it in place
        for fav in self._favorites:
            if fav.key == key:
                return fav
        return None

    def with_weather(self) -> list[FavoriteCity]:
        """Favorites that already hold a snapshot, in insertion order."""
        return [f for f in self._favorites if f.snapshot is not None]

    def __len__(self) -> int:
        return len(self._favorites)

    # Defined last: the name shadows the builtin inside the class body.
    def list(self) -> list[FavoriteCity]:
        return list(self._favorites)
