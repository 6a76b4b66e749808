"""Persistence backends for the favorites collection.

The whole collection is one JSON document stored under a namespace key and
overwritten on every save.
"""

import json
import sqlite3
from typing import Protocol

from skyview.config.defaults import FAVORITES_NAMESPACE
from skyview.errors import StorageUnavailable
from skyview.models.favorites import FavoriteCity
from skyview.storage import kv_repo

DOCUMENT_VERSION = 0


class FavoritesPersistence(Protocol):
    def load(self) -> list[FavoriteCity]: ...

    def save(self, favorites: list[FavoriteCity]) -> None: ...


def encode_favorites(favorites: list[FavoriteCity]) -> str:
    return json.dumps(
        {
            "state": {"favoriteCities": [f.to_dict() for f in favorites]},
            "version": DOCUMENT_VERSION,
        },
        ensure_ascii=False,
    )


def decode_favorites(document: str) -> list[FavoriteCity]:
    """Parse a stored document. Raises StorageUnavailable if it is unreadable."""
    try:
        data = json.loads(document)
        records = data["state"]["favoriteCities"]
        if not isinstance(records, list):
            raise ValueError("favoriteCities is not a list")
        return [FavoriteCity.from_dict(r) for r in records]
    except (ValueError, KeyError, TypeError) as e:
        raise StorageUnavailable(f"Corrupt favorites document: {e}") from e


class SqliteFavoritesRepo:
    def __init__(self, conn: sqlite3.Connection, namespace: str = FAVORITES_NAMESPACE):
        self.conn = conn
        self.namespace = namespace

    def load(self) -> list[FavoriteCity]:
        try:
            document = kv_repo.get_value(self.conn, self.namespace)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot read {self.namespace}: {e}") from e
        if document is None:
            return []
        return decode_favorites(document)

    def save(self, favorites: list[FavoriteCity]) -> None:
        kv_repo.set_value(self.conn, self.namespace, encode_favorites(favorites))


class MemoryFavoritesRepo:
    """Keeps the encoded document in memory; nothing outlives the process."""

    def __init__(self, document: str | None = None):
        self.document = document
        self.save_count = 0

    def load(self) -> list[FavoriteCity]:
        if self.document is None:
            return []
        return decode_favorites(self.document)

    def save(self, favorites: list[FavoriteCity]) -> None:
        self.document = encode_favorites(favorites)
        self.save_count += 1
