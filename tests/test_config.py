from datetime import date, datetime

import pytest

from planting_calendar.config import DEFAULTS, load_config, parse_frost_date, resolve_anchor_date

TODAY = date(2026, 3, 1)


def test_default_is_mid_may_this_year():
    assert resolve_anchor_date(today=TODAY) == date(2026, 5, 15)


def test_environment_overrides_default(monkeypatch):
    monkeypatch.setenv("PLANTING_CALENDAR_LAST_FROST", "2019-04-28")

    assert resolve_anchor_date(today=TODAY) == date(2026, 4, 28)


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2020, 5, 1), date(2026, 5, 1)),
        (datetime(2021, 6, 2, 7, 30), date(2026, 6, 2)),
        ("2023-04-30", date(2026, 4, 30)),
        ("05-10", date(2026, 5, 10)),
        (" 5-9 ", date(2026, 5, 9)),
    ],
)
def test_values_are_moved_into_current_year(value, expected):
    assert resolve_anchor_date(value, today=TODAY) == expected


def test_leap_day_outside_leap_year():
    assert resolve_anchor_date("02-29", today=date(2025, 1, 1)) == date(2025, 2, 28)
    assert resolve_anchor_date("02-29", today=date(2024, 1, 1)) == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["13-45", "spring", "2024-02-30", "1-2-3-4", 42])
def test_invalid_frost_dates(value):
    with pytest.raises(ValueError):
        parse_frost_date(value)


def test_missing_config_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "absent.yaml") == DEFAULTS
    assert load_config() == DEFAULTS


def test_load_config_merges_values(tmp_path):
    path = tmp_path / "calendar.yaml"
    path.write_text(
        "last_frost_date: 2024-04-30\nmarker_color: '#00AA00'\nunrelated: true\n"
    )

    config = load_config(path)

    assert config["last_frost_date"] == date(2024, 4, 30)
    assert config["marker_color"] == "#00AA00"
    assert config["catalog"] == "planting_rules.yaml"
    assert "unrelated" not in config
    assert resolve_anchor_date(config["last_frost_date"], today=TODAY) == date(2026, 4, 30)


@pytest.mark.parametrize(
    "content",
    [
        "marker_color: red\n",
        "last_frost_date: someday\n",
        "catalog: ''\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "calendar.yaml"
    path.write_text(content)

    with pytest.raises(ValueError):
        load_config(path)
