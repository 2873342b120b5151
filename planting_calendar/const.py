"""Constants shared across the planting calendar engine."""

from __future__ import annotations

# Action labels emitted by the event calculator. The set is fixed and the
# strings are shown to the user verbatim.
ACTION_START_INDOORS = "Start seeds indoors"
ACTION_TRANSPLANT = "Transplant seedlings"
ACTION_DIRECT_SOW = "Direct sow seeds"
ACTION_HARVEST_START = "Begin harvesting"
ACTION_HARVEST_END = "End harvest window"

ACTIONS: tuple[str, ...] = (
    ACTION_START_INDOORS,
    ACTION_TRANSPLANT,
    ACTION_DIRECT_SOW,
    ACTION_HARVEST_START,
    ACTION_HARVEST_END,
)

# Average last frost date used when nothing else is configured (mid May).
DEFAULT_LAST_FROST_MONTH = 5
DEFAULT_LAST_FROST_DAY = 15

DEFAULT_MARKER_COLOR = "#FF0000"

DEFAULT_CATALOG_FILE = "planting_rules.yaml"

# Environment overrides
ENV_DATA_DIR = "PLANTING_CALENDAR_DATA_DIR"
ENV_EXTRA_DATA_DIRS = "PLANTING_CALENDAR_EXTRA_DATA_DIRS"
ENV_OVERLAY_DIR = "PLANTING_CALENDAR_OVERLAY_DIR"
ENV_LAST_FROST = "PLANTING_CALENDAR_LAST_FROST"

CONF_LAST_FROST_DATE = "last_frost_date"
CONF_CATALOG = "catalog"
CONF_MARKER_COLOR = "marker_color"

# Catalog record keys. The ``*_last_frost`` spellings match the column names
# of the plant definitions table the catalog was first exported from.
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"
FIELD_NOTES = "notes"
FIELD_START_INDOORS = "start_indoors"
FIELD_IS_FAVORITE = "is_favorite"

OFFSET_FIELDS: dict[str, tuple[str, ...]] = {
    "start_indoors_days_before_frost": (
        "start_indoors_days_before_frost",
        "start_indoors_days_before_last_frost",
    ),
    "transplant_days_after_frost": (
        "transplant_days_after_frost",
        "transplant_days_after_last_frost",
    ),
    "direct_sow_days_after_frost": (
        "direct_sow_days_after_frost",
        "direct_sow_days_after_last_frost",
    ),
    "harvest_start_days_after_planting": ("harvest_start_days_after_planting",),
    "harvest_end_days_after_planting": ("harvest_end_days_after_planting",),
}
