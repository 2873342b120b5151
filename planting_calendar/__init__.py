"""Planting calendar engine.

Turns per-plant offsets relative to the last frost date into dated actions
and keeps a date index of those actions in sync with the user's favorites.
"""

from __future__ import annotations

from .aggregator import CalendarAggregator, build_date_index, recompute
from .catalog import PlantCatalog, load_catalog, parse_record, parse_records
from .config import load_config, parse_frost_date, resolve_anchor_date
from .const import ACTIONS
from .decorator import EventDecorator
from .event_calculator import PIPELINE, PlantingState, calculate_events
from .favorites import FavoritesFeed, GardenSelection
from .models import CalendarEvent, CalendarSnapshot, PlantRule

__all__ = [
    "ACTIONS",
    "PIPELINE",
    "CalendarAggregator",
    "CalendarEvent",
    "CalendarSnapshot",
    "EventDecorator",
    "FavoritesFeed",
    "GardenSelection",
    "PlantCatalog",
    "PlantRule",
    "PlantingState",
    "build_date_index",
    "calculate_events",
    "load_catalog",
    "load_config",
    "parse_frost_date",
    "parse_record",
    "parse_records",
    "recompute",
    "resolve_anchor_date",
]
