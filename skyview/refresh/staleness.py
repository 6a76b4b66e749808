"""Staleness checks for stored favorite snapshots."""

from skyview.models.common import epoch_millis
from skyview.models.favorites import FavoriteCity


def snapshot_age_minutes(favorite: FavoriteCity, now_ms: int | None = None) -> float:
    """Minutes since the favorite was last updated."""
    if now_ms is None:
        now_ms = epoch_millis()
    return (now_ms - favorite.last_updated) / 60_000


def is_snapshot_stale(
    favorite: FavoriteCity, max_age_minutes: float, now_ms: int | None = None
) -> bool:
    """A favorite needs a refetch when it has no snapshot or is older than the limit."""
    if favorite.snapshot is None:
        return True
    return snapshot_age_minutes(favorite, now_ms) > max_age_minutes
