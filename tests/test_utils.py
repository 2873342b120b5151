import os

import pytest

from planting_calendar import utils


@pytest.mark.parametrize(
    "value, expected",
    [
        (14, 14),
        (-21, -21),
        (30.0, 30),
        ("45", 45),
        (" 7 ", 7),
        ("10.0", 10),
        (2.5, None),
        ("2.5", None),
        ("", None),
        ("soon", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ([3], None),
    ],
)
def test_coerce_days(value, expected):
    assert utils.coerce_days(value) == expected


def test_dataset_paths_env(monkeypatch, tmp_path):
    base = tmp_path / "data"
    extra = tmp_path / "extra"
    base.mkdir()
    extra.mkdir()
    monkeypatch.setenv("PLANTING_CALENDAR_DATA_DIR", str(base))
    extra_dirs = os.pathsep.join([str(extra), str(tmp_path / "missing")])
    monkeypatch.setenv("PLANTING_CALENDAR_EXTRA_DATA_DIRS", extra_dirs)

    paths = utils.dataset_paths()

    assert paths == (base, extra)


def test_default_data_dir_is_bundled():
    assert utils.dataset_paths() == (utils.DEFAULT_DATA_DIR,)
    assert (utils.DEFAULT_DATA_DIR / "planting_rules.yaml").exists()


def test_load_dataset_is_cached(monkeypatch, tmp_path):
    (tmp_path / "rules.json").write_text('{"a": {"id": 1}}')
    monkeypatch.setenv("PLANTING_CALENDAR_DATA_DIR", str(tmp_path))

    first = utils.load_dataset("rules.json")
    (tmp_path / "rules.json").write_text('{"a": {"id": 2}}')

    assert utils.load_dataset("rules.json") is first
    utils.clear_dataset_cache()
    assert utils.load_dataset("rules.json") == {"a": {"id": 2}}


def test_list_datasets_replace_earlier_ones(monkeypatch, tmp_path):
    base = tmp_path / "base"
    extra = tmp_path / "extra"
    base.mkdir()
    extra.mkdir()
    (base / "rules.yaml").write_text("- id: 1\n  name: A\n")
    (extra / "rules.yaml").write_text("- id: 2\n  name: B\n")
    monkeypatch.setenv("PLANTING_CALENDAR_DATA_DIR", str(base))
    monkeypatch.setenv("PLANTING_CALENDAR_EXTRA_DATA_DIRS", str(extra))

    assert utils.load_dataset("rules.yaml") == [{"id": 2, "name": "B"}]


def test_load_data_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        utils.load_data(tmp_path / "nope.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("a: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        utils.load_data(bad)


def test_deep_update():
    base = {"tomato": {"id": 1, "name": "Tomato"}}

    utils.deep_update(base, {"tomato": {"name": "Roma"}, "bean": {"id": 2}})

    assert base == {"tomato": {"id": 1, "name": "Roma"}, "bean": {"id": 2}}
