import json

import pytest

from text_eraser.config import default_config, load_config, save_config, validate_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "missing.json")) == default_config()


def test_save_and_load(tmp_path):
    path = tmp_path / "sub" / "config.json"
    config = default_config()
    config["heal_passes"] = 5
    config["pyramid_scales"] = [0.5, 1.0]

    assert save_config(config, str(path)) is True
    assert not (tmp_path / "sub" / "config.json.tmp").exists()

    loaded = load_config(str(path))
    assert loaded["heal_passes"] == 5
    assert loaded["pyramid_scales"] == [0.5, 1.0]


def test_missing_keys_are_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"noise_bound": 3}), encoding="utf-8")
    loaded = load_config(str(path))
    assert loaded["noise_bound"] == 3
    assert loaded["base_fill_passes"] == default_config()["base_fill_passes"]


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", json.dumps({"heal_passes": -1})])
def test_bad_files_fall_back_to_defaults(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    assert load_config(str(path)) == default_config()


def test_save_rejects_non_dict(tmp_path):
    assert save_config(["not", "a", "dict"], str(tmp_path / "c.json")) is False


@pytest.mark.parametrize("key, value", [
    ("pyramid_scales", []),
    ("pyramid_scales", [0.5, 0.25, 1.0]),
    ("pyramid_scales", [0.25, 0.5]),
    ("pyramid_scales", [0, 1.0]),
    ("base_fill_passes", 1.5),
    ("heal_passes", True),
    ("noise_bound", 300),
    ("pdf_render_scale", 0),
    ("ocr_device", "tpu"),
])
def test_validate_rejects(key, value):
    config = default_config()
    config[key] = value
    assert validate_config(config) is False


def test_defaults_are_valid():
    assert validate_config(default_config()) is True
