from pathlib import Path

import pytest
import yaml

from socket_wfc import ModelSettings, load_settings, resolve_settings
from socket_wfc.config import save_settings

SETTINGS_FILE = Path(__file__).resolve().parent.parent / "data" / "settings.yaml"


def test_defaults():
    settings = resolve_settings()
    assert settings == ModelSettings()
    assert (settings.width, settings.height) == (10, 10)
    assert settings.framerate is None
    assert settings.tint is False
    assert settings.seed is None
    assert settings.propagation == "sweep"


def test_none_means_default():
    settings = resolve_settings({"width": None, "height": 4, "seed": 0})
    assert settings.width == 10
    assert settings.height == 4
    assert settings.seed == 0


def test_tint_triple():
    assert resolve_settings({"tint": [10, 20, 30]}).tint == (10, 20, 30)
    assert resolve_settings({"tint": True}).tint is True


@pytest.mark.parametrize("options", [
    {"width": 0},
    {"height": "ten"},
    {"width": True},
    {"framerate": -5},
    {"tint": [1, 2]},
    {"tint": [0, 0, 300]},
    {"tint": "red"},
    {"seed": 1.5},
    {"propagation": "wavefront"},
    {"max_restarts": -1},
    {"speed": 3},
])
def test_invalid(options):
    with pytest.raises(ValueError):
        resolve_settings(options)


def test_load_yaml():
    settings = load_settings(str(SETTINGS_FILE))
    assert settings.width == 12
    assert settings.height == 8
    assert settings.seed == 42
    assert settings.propagation == "worklist"
    assert settings.restart_on_contradiction


def test_overrides_win(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump({"width": 5, "height": 5}))
    settings = load_settings(str(path), {"width": 7, "height": None})
    assert (settings.width, settings.height) == (7, 5)


def test_yaml_must_be_a_mapping(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_settings(str(path))


def test_save_and_load(tmp_path):
    settings = resolve_settings({"width": 3, "tint": [1, 2, 3], "seed": 8})
    path = tmp_path / "saved.yaml"
    save_settings(settings, str(path))
    assert load_settings(str(path)) == settings
