"""Load plant offset rules from bundled or user supplied datasets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import (
    DEFAULT_CATALOG_FILE,
    FIELD_DESCRIPTION,
    FIELD_ID,
    FIELD_IS_FAVORITE,
    FIELD_NAME,
    FIELD_NOTES,
    FIELD_START_INDOORS,
    OFFSET_FIELDS,
)
from .models import PlantRule
from .utils import PathType, coerce_days, load_data, load_dataset

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "RECORD_SCHEMA",
    "PlantCatalog",
    "parse_record",
    "parse_records",
    "load_catalog",
]


def _plant_id(value: Any) -> int:
    """Return ``value`` as a whole-number id, rejecting fractional values."""

    plant_id = coerce_days(value)
    if plant_id is None:
        raise vol.Invalid(f"expected a whole number id, got {value!r}")
    return plant_id


RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(FIELD_ID): _plant_id,
        vol.Required(FIELD_NAME): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional(FIELD_DESCRIPTION, default=""): vol.Any(None, str),
        vol.Optional(FIELD_NOTES, default=""): vol.Any(None, str),
        vol.Optional(FIELD_START_INDOORS): vol.Any(None, vol.Boolean()),
        vol.Optional(FIELD_IS_FAVORITE, default=False): vol.Any(None, vol.Boolean()),
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(slots=True, frozen=True)
class PlantCatalog:
    """Plant rules keyed by id plus the ids flagged as favorites."""

    plants: tuple[PlantRule, ...] = ()
    favorite_ids: frozenset[int] = frozenset()

    def __iter__(self) -> Iterator[PlantRule]:
        return iter(self.plants)

    def __len__(self) -> int:
        return len(self.plants)

    def get(self, plant_id: int) -> PlantRule | None:
        for plant in self.plants:
            if plant.id == plant_id:
                return plant
        return None

    def favorites(self) -> list[PlantRule]:
        return [plant for plant in self.plants if plant.id in self.favorite_ids]


def _offsets(record: Mapping[str, Any], name: str) -> dict[str, int | None]:
    offsets: dict[str, int | None] = {}
    for field, aliases in OFFSET_FIELDS.items():
        raw = next((record[key] for key in aliases if record.get(key) is not None), None)
        days = coerce_days(raw)
        if raw is not None and days is None:
            _LOGGER.debug("Ignoring invalid %s=%r for %s", field, raw, name)
        offsets[field] = days
    return offsets


def _validate(data: Any) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"Plant record must be a mapping, got {type(data).__name__}")
    try:
        return RECORD_SCHEMA(dict(data))
    except vol.Invalid as err:
        raise ValueError(f"Invalid plant record {dict(data)!r}: {err}") from err


def _build(record: Mapping[str, Any]) -> PlantRule:
    offsets = _offsets(record, record[FIELD_NAME])
    if record.get(FIELD_START_INDOORS) is False:
        offsets["start_indoors_days_before_frost"] = None
    return PlantRule(
        id=record[FIELD_ID],
        name=record[FIELD_NAME],
        description=record.get(FIELD_DESCRIPTION) or "",
        notes=record.get(FIELD_NOTES) or "",
        **offsets,
    )


def parse_record(data: Mapping[str, Any]) -> PlantRule:
    """Return a :class:`PlantRule` built from a single catalog record.

    ``start_indoors: false`` drops the indoor lead time, which is how
    flag-style records express "never started indoors".
    """

    return _build(_validate(data))


def _iter_records(data: Any) -> Iterable[Any]:
    if isinstance(data, Mapping):
        if isinstance(data.get("plants"), list):
            return data["plants"]
        records = []
        for key, value in data.items():
            if isinstance(value, Mapping):
                value = {FIELD_NAME: str(key), **value}
            records.append(value)
        return records
    if isinstance(data, list):
        return data
    raise ValueError(f"Catalog must be a list or mapping, got {type(data).__name__}")


def parse_records(data: Any) -> PlantCatalog:
    """Return a catalog from decoded dataset contents.

    Invalid records are skipped with a warning. When two records share an id
    the later one wins.
    """

    plants: dict[int, PlantRule] = {}
    favorites: set[int] = set()
    for raw in _iter_records(data):
        try:
            record = _validate(raw)
        except ValueError as err:
            _LOGGER.warning("Skipping plant record: %s", err)
            continue
        plant = _build(record)
        if plant.id in plants:
            _LOGGER.warning(
                "Duplicate plant id %s (%s), keeping the later record", plant.id, plant.name
            )
        plants[plant.id] = plant
        if record.get(FIELD_IS_FAVORITE):
            favorites.add(plant.id)
        else:
            favorites.discard(plant.id)
    return PlantCatalog(plants=tuple(plants.values()), favorite_ids=frozenset(favorites))


def load_catalog(source: PathType | None = None) -> PlantCatalog:
    """Return the plant catalog stored in ``source``.

    ``source`` may be a path to a JSON/YAML file or a dataset filename looked
    up in the configured data directories. The bundled
    ``planting_rules.yaml`` is used when omitted. A dataset found in none of
    the directories yields an empty catalog.
    """

    if source is None:
        source = DEFAULT_CATALOG_FILE
    path = Path(source)
    if path.is_absolute() or path.exists():
        data = load_data(path)
    else:
        data = load_dataset(str(source))
    if not data:
        _LOGGER.debug("Catalog %s is empty", source)
        return PlantCatalog()
    catalog = parse_records(data)
    _LOGGER.debug("Loaded %d plants from %s", len(catalog), source)
    return catalog
