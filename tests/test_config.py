"""Test: configuration defaults, YAML loading and overrides."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
import yaml
from pydantic import ValidationError

from config_io.config import Config, load_config
from config_io.schema import ExportFormat, PropertyType

ROOT = Path(__file__).resolve().parent.parent


def test_defaults():
    config = load_config()
    assert config.loader.strict is False
    assert config.validation.known_properties["height"] == PropertyType.FLOAT
    assert PropertyType.INT not in config.validation.allowed_property_types
    assert config.export.format == ExportFormat.JSON


def test_default_yaml_matches_defaults():
    assert load_config(ROOT / "configs" / "default.yaml") == Config()


def test_default_yaml_spells_out_every_field():
    raw = yaml.safe_load((ROOT / "configs" / "default.yaml").read_text())
    assert raw == Config().model_dump(mode="json")


def test_missing_file_falls_back_to_defaults(tmp_path):
    assert load_config(tmp_path / "none.yaml") == Config()


def test_yaml_and_overrides(tmp_path):
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text("validation:\n  height_max: 3.0\nexport:\n  format: lua\n")
    config = load_config(cfg_path, overrides={"validation": {"height_min": -2.0}})
    assert config.validation.height_max == 3.0
    assert config.validation.height_min == -2.0
    assert config.export.format == ExportFormat.LUA


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        load_config(overrides={"export": {"format": "xml"}})
    with pytest.raises(ValidationError):
        load_config(overrides={"validation": {"allowed_property_types": ["vector"]}})
