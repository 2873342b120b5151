"""Merge per-plant events into a date index and a set of marked dates."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import date

from .config import resolve_anchor_date
from .event_calculator import calculate_events
from .models import CalendarEvent, CalendarSnapshot, PlantRule

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "SnapshotListener",
    "build_date_index",
    "recompute",
    "CalendarAggregator",
]

SnapshotListener = Callable[[CalendarSnapshot], None]


def build_date_index(events: Iterable[CalendarEvent]) -> dict[date, list[str]]:
    """Return event labels grouped by date, preserving iteration order."""

    index: dict[date, list[str]] = {}
    for event in events:
        index.setdefault(event.date, []).append(event.label)
    return index


def recompute(
    favorites: Iterable[PlantRule] | None, anchor_date: date
) -> CalendarSnapshot:
    """Return a fresh calendar snapshot for ``favorites``.

    ``None`` is treated as an empty selection. A plant whose calculation
    raises is logged and skipped so the remaining plants still show up.
    """

    if not favorites:
        _LOGGER.debug("No favorite plants, calendar is empty")
        return CalendarSnapshot()

    events: list[CalendarEvent] = []
    count = 0
    for plant in favorites:
        count += 1
        try:
            events.extend(calculate_events(plant, anchor_date))
        except Exception:
            _LOGGER.exception(
                "Failed to calculate events for %s, skipping",
                getattr(plant, "name", plant),
            )

    index = build_date_index(events)
    _LOGGER.debug(
        "Calculated %d events on %d dates for %d plants",
        len(events),
        len(index),
        count,
    )
    return CalendarSnapshot(date_index=index, marked_dates=frozenset(index))


class CalendarAggregator:
    """Keep the calendar in sync with a pushed favorites selection.

    Every favorites snapshot or anchor change triggers one full recompute.
    When passes overlap the one started last wins: earlier results are
    dropped on arrival and listeners never see an older snapshot after a
    newer one.

    Without an explicit anchor the configured last frost date is resolved
    again on every pass so it follows the current year. An anchor passed in
    or set with :meth:`set_anchor_date` is used as given.
    """

    def __init__(self, anchor_date: date | None = None) -> None:
        self._anchor_date = anchor_date
        self._favorites: tuple[PlantRule, ...] = ()
        self._snapshot = CalendarSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._lock = threading.Lock()
        # held while listeners run so deliveries never interleave
        self._notify_lock = threading.RLock()
        self._generation = 0

    @property
    def anchor_date(self) -> date:
        anchor = self._anchor_date
        return anchor if anchor is not None else resolve_anchor_date()

    @property
    def favorites(self) -> tuple[PlantRule, ...]:
        return self._favorites

    @property
    def snapshot(self) -> CalendarSnapshot:
        """Return the most recently computed snapshot."""
        return self._snapshot

    def events_on(self, day: date) -> list[str]:
        return self._snapshot.events_on(day)

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` for new snapshots and return its remover."""

        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    def attach(self, feed) -> Callable[[], None]:
        """Subscribe to a :class:`~planting_calendar.favorites.FavoritesFeed`."""

        return feed.subscribe(self.handle_favorites)

    def handle_favorites(self, favorites: Iterable[PlantRule] | None) -> CalendarSnapshot:
        """Recompute from a new favorites snapshot."""

        snapshot = tuple(favorites or ())
        with self._lock:
            self._favorites = snapshot
        return self.refresh()

    def set_anchor_date(self, anchor_date: date | None) -> CalendarSnapshot:
        """Change the last frost date and recompute.

        ``None`` goes back to the configured date for the current year.
        """

        with self._lock:
            self._anchor_date = anchor_date
        return self.refresh()

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def refresh(self) -> CalendarSnapshot:
        """Run a full pass over the current inputs and publish the result."""

        with self._lock:
            self._generation += 1
            generation = self._generation
            favorites = self._favorites
            anchor = self._anchor_date

        if anchor is None:
            anchor = resolve_anchor_date()
        result = recompute(favorites, anchor)

        with self._lock:
            if generation != self._generation:
                _LOGGER.debug("Discarding stale calendar pass %d", generation)
                return result
            self._snapshot = result
            listeners = list(self._listeners)

        with self._notify_lock:
            for listener in listeners:
                if not self._is_current(generation):
                    _LOGGER.debug("Calendar pass %d superseded during delivery", generation)
                    break
                try:
                    listener(result)
                except Exception:
                    _LOGGER.exception("Calendar listener %r failed", listener)
        return result
