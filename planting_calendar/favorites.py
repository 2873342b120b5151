"""Reactive feed of favorited plants and the selection that drives it."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from .models import PlantRule

if TYPE_CHECKING:
    from .catalog import PlantCatalog

_LOGGER = logging.getLogger(__name__)

__all__ = ["FavoritesListener", "FavoritesFeed", "GardenSelection"]

FavoritesListener = Callable[[tuple[PlantRule, ...]], None]


class FavoritesFeed:
    """Push full favorites snapshots to subscribers.

    The feed remembers the last published snapshot and hands it to every new
    subscriber straight away, so a late subscriber never waits for the next
    change to get data. Deliveries are serialized and a delivery stops as
    soon as a newer snapshot is published, so subscribers always end on the
    latest snapshot.
    """

    def __init__(self, initial: Iterable[PlantRule] = ()) -> None:
        self._latest: tuple[PlantRule, ...] = tuple(initial)
        self._version = 0
        self._subscribers: list[FavoritesListener] = []
        self._lock = threading.Lock()
        # re-entrant so a subscriber may publish from inside its callback
        self._delivery_lock = threading.RLock()

    @property
    def latest(self) -> tuple[PlantRule, ...]:
        return self._latest

    def subscribe(self, listener: FavoritesListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        with self._delivery_lock:
            with self._lock:
                self._subscribers.append(listener)
                latest = self._latest
            self._deliver(listener, latest)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._subscribers:
                    self._subscribers.remove(listener)

        return _unsubscribe

    def publish(self, plants: Iterable[PlantRule] | None) -> None:
        """Replace the current snapshot and notify all subscribers."""

        snapshot = tuple(plants or ())
        with self._lock:
            self._version += 1
            version = self._version
            self._latest = snapshot

        with self._delivery_lock:
            with self._lock:
                subscribers = list(self._subscribers)
            _LOGGER.debug(
                "Publishing %d favorite plants to %d subscribers", len(snapshot), len(subscribers)
            )
            for listener in subscribers:
                if not self._is_current(version):
                    _LOGGER.debug("Favorites snapshot %d superseded during delivery", version)
                    return
                self._deliver(listener, snapshot)

    def _is_current(self, version: int) -> bool:
        with self._lock:
            return version == self._version

    @staticmethod
    def _deliver(listener: FavoritesListener, snapshot: tuple[PlantRule, ...]) -> None:
        try:
            listener(snapshot)
        except Exception:
            _LOGGER.exception("Favorites subscriber %r failed", listener)


def _sort_key(plant: PlantRule) -> tuple[str, int]:
    return plant.name.casefold(), plant.id


class GardenSelection:
    """The user's chosen plants out of a catalog.

    Changes that alter the selection publish a new snapshot, ordered by
    name, to the attached feed.
    """

    def __init__(
        self,
        plants: Iterable[PlantRule],
        feed: FavoritesFeed | None = None,
        favorite_ids: Iterable[int] = (),
    ) -> None:
        self._plants: dict[int, PlantRule] = {plant.id: plant for plant in plants}
        self._favorite_ids: set[int] = set()
        for plant_id in favorite_ids:
            self._require(plant_id)
            self._favorite_ids.add(plant_id)
        self.feed = feed if feed is not None else FavoritesFeed()
        self._publish()

    @classmethod
    def from_catalog(
        cls, catalog: PlantCatalog, feed: FavoritesFeed | None = None
    ) -> GardenSelection:
        """Return a selection seeded with the catalog's favorite flags."""

        return cls(catalog.plants, feed, catalog.favorite_ids)

    def _require(self, plant_id: int) -> PlantRule:
        try:
            return self._plants[plant_id]
        except KeyError:
            raise KeyError(f"Unknown plant id {plant_id}") from None

    def _publish(self) -> None:
        self.feed.publish(self.favorites())

    def is_favorite(self, plant_id: int) -> bool:
        return plant_id in self._favorite_ids

    def favorites(self) -> list[PlantRule]:
        """Return favorited plants ordered by name."""
        return sorted((self._plants[pid] for pid in self._favorite_ids), key=_sort_key)

    def snapshot(self) -> tuple[PlantRule, ...]:
        return tuple(self.favorites())

    def add(self, plant_id: int) -> None:
        self._require(plant_id)
        if plant_id in self._favorite_ids:
            return
        self._favorite_ids.add(plant_id)
        self._publish()

    def remove(self, plant_id: int) -> None:
        self._require(plant_id)
        if plant_id not in self._favorite_ids:
            return
        self._favorite_ids.discard(plant_id)
        self._publish()

    def toggle(self, plant_id: int) -> bool:
        """Flip the favorite flag for ``plant_id`` and return the new value."""

        if self.is_favorite(plant_id):
            self.remove(plant_id)
            return False
        self.add(plant_id)
        return True
