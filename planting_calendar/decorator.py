"""Marked date decoration for calendar widgets."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .const import DEFAULT_MARKER_COLOR
from .models import CalendarSnapshot

__all__ = ["EventDecorator"]


class EventDecorator:
    """Tell a calendar widget which days get an event dot in ``color``."""

    __slots__ = ("color", "dates")

    def __init__(self, color: str, dates: Iterable[date]) -> None:
        self.color = color
        self.dates: frozenset[date] = frozenset(dates)

    @classmethod
    def from_snapshot(
        cls, snapshot: CalendarSnapshot, color: str = DEFAULT_MARKER_COLOR
    ) -> EventDecorator:
        return cls(color, snapshot.marked_dates)

    def should_decorate(self, day: date) -> bool:
        return day in self.dates

    def __repr__(self) -> str:
        return f"EventDecorator(color={self.color!r}, dates={len(self.dates)})"
