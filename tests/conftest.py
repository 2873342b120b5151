from datetime import date

import pytest

from planting_calendar.models import PlantRule
from planting_calendar.utils import clear_dataset_cache

ENV_VARS = (
    "PLANTING_CALENDAR_DATA_DIR",
    "PLANTING_CALENDAR_EXTRA_DATA_DIRS",
    "PLANTING_CALENDAR_OVERLAY_DIR",
    "PLANTING_CALENDAR_LAST_FROST",
)


@pytest.fixture(autouse=True)
def _isolated_datasets(monkeypatch):
    """Run every test against the bundled data with a fresh cache."""

    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_dataset_cache()
    yield
    clear_dataset_cache()


@pytest.fixture
def anchor() -> date:
    return date(2024, 5, 15)


@pytest.fixture
def tomato() -> PlantRule:
    return PlantRule(
        id=1,
        name="Tomato",
        start_indoors_days_before_frost=10,
        transplant_days_after_frost=14,
        harvest_start_days_after_planting=30,
        harvest_end_days_after_planting=45,
    )


@pytest.fixture
def bean() -> PlantRule:
    return PlantRule(
        id=5,
        name="Bean",
        direct_sow_days_after_frost=7,
        harvest_start_days_after_planting=55,
        harvest_end_days_after_planting=85,
    )


@pytest.fixture
def zucchini() -> PlantRule:
    return PlantRule(id=6, name="Zucchini", direct_sow_days_after_frost=7)
