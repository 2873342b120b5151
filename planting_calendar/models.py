"""Data containers passed between the calculator, aggregator and callers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

__all__ = ["PlantRule", "CalendarEvent", "CalendarSnapshot"]


@dataclass(slots=True, frozen=True)
class PlantRule:
    """Relative planting offsets for a single catalog plant.

    All offsets are whole days. ``start_indoors_days_before_frost`` counts
    backwards from the last frost date, the transplant and direct sow offsets
    count forwards from it and the harvest offsets count from the effective
    planting date. ``None`` means the plant has no such step.
    """

    id: int
    name: str
    start_indoors_days_before_frost: int | None = None
    transplant_days_after_frost: int | None = None
    direct_sow_days_after_frost: int | None = None
    harvest_start_days_after_planting: int | None = None
    harvest_end_days_after_planting: int | None = None
    description: str = ""
    notes: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PlantRule:
        """Return a rule parsed from a catalog record.

        Raises :class:`ValueError` when the record lacks a usable ``id`` or
        ``name``. Invalid offsets are dropped rather than rejected.
        """

        from .catalog import parse_record

        return parse_record(data)

    @property
    def has_offsets(self) -> bool:
        return any(
            value is not None
            for value in (
                self.start_indoors_days_before_frost,
                self.transplant_days_after_frost,
                self.direct_sow_days_after_frost,
                self.harvest_start_days_after_planting,
                self.harvest_end_days_after_planting,
            )
        )


@dataclass(slots=True, frozen=True)
class CalendarEvent:
    """Single dated action for a plant."""

    date: date
    plant_id: int
    plant_name: str
    description: str

    @property
    def label(self) -> str:
        """Return the text shown in a date's event list."""
        return f"{self.plant_name}: {self.description}"


@dataclass(slots=True, frozen=True)
class CalendarSnapshot:
    """Result of one aggregation pass.

    ``date_index`` maps each date to its event labels in emission order and
    ``marked_dates`` holds exactly the keys of ``date_index``. Both are
    read-only so a snapshot can be shared between threads and listeners.
    """

    date_index: Mapping[date, tuple[str, ...]] = field(default_factory=dict, hash=False)
    marked_dates: frozenset[date] = frozenset()

    def __post_init__(self) -> None:
        frozen = {day: tuple(labels) for day, labels in self.date_index.items()}
        object.__setattr__(self, "date_index", MappingProxyType(frozen))
        object.__setattr__(self, "marked_dates", frozenset(self.marked_dates))

    @property
    def is_empty(self) -> bool:
        return not self.marked_dates

    def events_on(self, day: date) -> list[str]:
        """Return a copy of the labels scheduled for ``day``."""
        return list(self.date_index.get(day, ()))

    def as_tuple(self) -> tuple[Mapping[date, tuple[str, ...]], frozenset[date]]:
        return self.date_index, self.marked_dates
