"""Calendar configuration and last frost date resolution."""

from __future__ import annotations

import calendar
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import (
    CONF_CATALOG,
    CONF_LAST_FROST_DATE,
    CONF_MARKER_COLOR,
    DEFAULT_CATALOG_FILE,
    DEFAULT_LAST_FROST_DAY,
    DEFAULT_LAST_FROST_MONTH,
    DEFAULT_MARKER_COLOR,
    ENV_LAST_FROST,
)
from .utils import PathType, load_data

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "DEFAULTS",
    "CONFIG_SCHEMA",
    "parse_frost_date",
    "resolve_anchor_date",
    "load_config",
]

DEFAULTS: dict[str, Any] = {
    CONF_LAST_FROST_DATE: None,
    CONF_CATALOG: DEFAULT_CATALOG_FILE,
    CONF_MARKER_COLOR: DEFAULT_MARKER_COLOR,
}


def parse_frost_date(value: Any) -> tuple[int, int, int | None]:
    """Return ``(month, day, year)`` parsed from ``value``.

    ``year`` is ``None`` for ``MM-DD`` strings. :class:`ValueError` is raised
    for anything that is not a date, a datetime or one of the two string
    forms.
    """

    if isinstance(value, datetime):
        return value.month, value.day, value.year
    if isinstance(value, date):
        return value.month, value.day, value.year
    if not isinstance(value, str):
        raise ValueError(f"Unsupported frost date {value!r}")

    text = value.strip()
    try:
        if text.count("-") == 2:
            parsed = date.fromisoformat(text)
            return parsed.month, parsed.day, parsed.year
        month, day = (int(part) for part in text.split("-"))
        # validate against a leap year so 02-29 is accepted
        date(2000, month, day)
        return month, day, None
    except ValueError as err:
        raise ValueError(f"Invalid frost date {value!r}: expected YYYY-MM-DD or MM-DD") from err


def _frost_date_validator(value: Any) -> Any:
    if value is None:
        return None
    try:
        parse_frost_date(value)
    except ValueError as err:
        raise vol.Invalid(str(err)) from err
    return value


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_LAST_FROST_DATE): _frost_date_validator,
        vol.Optional(CONF_CATALOG): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_MARKER_COLOR): vol.All(str, vol.Match(r"^#[0-9A-Fa-f]{6}$")),
    },
    extra=vol.REMOVE_EXTRA,
)


def resolve_anchor_date(value: Any = None, *, today: date | None = None) -> date:
    """Return the last frost date moved into the current year.

    ``value`` falls back to the ``PLANTING_CALENDAR_LAST_FROST`` environment
    variable and then to May 15. February 29 becomes February 28 outside leap
    years.
    """

    if today is None:
        today = date.today()
    if value is None:
        value = os.getenv(ENV_LAST_FROST) or None
    if value is None:
        month, day = DEFAULT_LAST_FROST_MONTH, DEFAULT_LAST_FROST_DAY
    else:
        month, day, _year = parse_frost_date(value)

    year = today.year
    if month == 2 and day == 29 and not calendar.isleap(year):
        day = 28
    return date(year, month, day)


def load_config(path: PathType | None = None) -> dict[str, Any]:
    """Return configuration from ``path`` merged with :data:`DEFAULTS`.

    A missing file yields the defaults. Invalid settings raise
    :class:`ValueError`.
    """

    merged = dict(DEFAULTS)
    if path is None:
        return merged
    try:
        raw = load_data(Path(path))
    except FileNotFoundError:
        _LOGGER.debug("Config file %s not found, using defaults", path)
        return merged
    if raw is None:
        return merged
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    try:
        merged.update(CONFIG_SCHEMA(raw))
    except vol.Invalid as err:
        raise ValueError(f"Invalid calendar config in {path}: {err}") from err
    return merged
