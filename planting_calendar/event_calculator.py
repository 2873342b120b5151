"""Derive dated planting events from a plant's relative offsets.

The calculation is an ordered pipeline of small pure steps. Every step takes
the plant, the last frost date and the :class:`PlantingState` produced so far
and returns a new state. The state carries the one value later steps depend
on, the effective planting date, so the dependency chain
``indoor start -> transplant | direct sow -> harvest start -> harvest end`` is
explicit instead of hidden in nested optionals.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, timedelta

from .const import (
    ACTION_DIRECT_SOW,
    ACTION_HARVEST_END,
    ACTION_HARVEST_START,
    ACTION_START_INDOORS,
    ACTION_TRANSPLANT,
)
from .models import CalendarEvent, PlantRule
from .utils import coerce_days

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "PlantingState",
    "PIPELINE",
    "start_indoors_step",
    "transplant_step",
    "direct_sow_step",
    "harvest_start_step",
    "harvest_end_step",
    "calculate_events",
]


@dataclass(slots=True, frozen=True)
class PlantingState:
    """Working values threaded through the pipeline for one plant."""

    events: tuple[CalendarEvent, ...] = ()
    started_indoors: bool = False
    planting_date: date | None = None
    harvest_start_days: int | None = None

    def emit(self, plant: PlantRule, day: date, description: str) -> PlantingState:
        event = CalendarEvent(day, plant.id, plant.name, description)
        return replace(self, events=self.events + (event,))


Step = Callable[[PlantRule, date, PlantingState], PlantingState]


def _shift(day: date, days: int) -> date | None:
    try:
        return day + timedelta(days=days)
    except OverflowError:
        _LOGGER.debug("Offset of %s days from %s is out of range", days, day)
        return None


def start_indoors_step(plant: PlantRule, frost: date, state: PlantingState) -> PlantingState:
    """Emit the indoor start when the plant has a positive lead time."""

    days = coerce_days(plant.start_indoors_days_before_frost)
    if days is None or days <= 0:
        return state
    state = replace(state, started_indoors=True)
    start = _shift(frost, -days)
    if start is None:
        return state
    _LOGGER.debug(" -> Indoor start: %s (%s days before frost)", start, days)
    return state.emit(plant, start, ACTION_START_INDOORS)


def transplant_step(plant: PlantRule, frost: date, state: PlantingState) -> PlantingState:
    """Emit the transplant date for plants started indoors."""

    days = coerce_days(plant.transplant_days_after_frost)
    if days is None or not state.started_indoors:
        return state
    transplant = _shift(frost, days)
    if transplant is None:
        return state
    _LOGGER.debug(" -> Transplant: %s (%s days after frost)", transplant, days)
    state = state.emit(plant, transplant, ACTION_TRANSPLANT)
    return replace(state, planting_date=transplant)


def direct_sow_step(plant: PlantRule, frost: date, state: PlantingState) -> PlantingState:
    """Emit the direct sow date unless the plant was already transplanted."""

    days = coerce_days(plant.direct_sow_days_after_frost)
    if days is None or state.planting_date is not None:
        return state
    sow = _shift(frost, days)
    if sow is None:
        return state
    _LOGGER.debug(" -> Direct sow: %s (%s days after frost)", sow, days)
    state = state.emit(plant, sow, ACTION_DIRECT_SOW)
    return replace(state, planting_date=sow)


def harvest_start_step(plant: PlantRule, frost: date, state: PlantingState) -> PlantingState:
    """Emit the first harvest day counted from the planting date."""

    if state.planting_date is None:
        _LOGGER.debug(" -> No planting date established, skipping harvest")
        return state
    days = coerce_days(plant.harvest_start_days_after_planting)
    if days is None:
        return state
    state = replace(state, harvest_start_days=days)
    start = _shift(state.planting_date, days)
    if start is None:
        return state
    _LOGGER.debug(" -> Harvest start: %s (%s days after planting)", start, days)
    return state.emit(plant, start, ACTION_HARVEST_START)


def harvest_end_step(plant: PlantRule, frost: date, state: PlantingState) -> PlantingState:
    """Emit the end of the harvest window when it follows the start."""

    if state.planting_date is None or state.harvest_start_days is None:
        return state
    days = coerce_days(plant.harvest_end_days_after_planting)
    if days is None:
        return state
    if days <= state.harvest_start_days:
        _LOGGER.debug(
            " -> Harvest end (%s days) is not after start (%s days), skipping",
            days,
            state.harvest_start_days,
        )
        return state
    end = _shift(state.planting_date, days)
    if end is None:
        return state
    _LOGGER.debug(" -> Harvest end: %s (%s days after planting)", end, days)
    return state.emit(plant, end, ACTION_HARVEST_END)


PIPELINE: tuple[Step, ...] = (
    start_indoors_step,
    transplant_step,
    direct_sow_step,
    harvest_start_step,
    harvest_end_step,
)


def calculate_events(plant: PlantRule, last_frost: date) -> list[CalendarEvent]:
    """Return the planting events for ``plant`` in the year of ``last_frost``.

    Steps run in :data:`PIPELINE` order so the result is stable for identical
    input. Events landing outside the calendar year of ``last_frost`` are
    dropped, not wrapped.
    """

    _LOGGER.debug(
        "Calculating events for %s (ID: %s) with frost date %s",
        plant.name,
        plant.id,
        last_frost,
    )
    state = PlantingState()
    for step in PIPELINE:
        state = step(plant, last_frost, state)
    return [event for event in state.events if event.date.year == last_frost.year]
