"""Tests for the configuration schemas and loading.

This module checks the default values, the reset of non-positive scale
factors, the validation of tightening windows, and the layering of the YAML
file and environment variables in `load_config`.
"""

import pytest
from pydantic import ValidationError

from tessbox.config import CONFIG_PATH, load_config
from tessbox.config.schemas import (
    DEFAULT_FONT_SCALE,
    DEFAULT_IMAGE_SCALE,
    DEFAULT_TIFF_DPI,
    GeneratorConfig,
    TighteningConfig,
)


def test_defaults():
    """Tests the default configuration values.

    They are the values the tightening windows were tuned for.
    """
    config = GeneratorConfig()
    assert config.font_scale == DEFAULT_FONT_SCALE
    assert config.image_scale == DEFAULT_IMAGE_SCALE
    assert config.tiff_dpi == DEFAULT_TIFF_DPI
    assert config.tracking == pytest.approx(0.1)
    assert config.margin == 100
    assert config.leading == 12
    assert config.line_spacing_adjustment == 4
    assert config.anti_aliased is False
    assert config.noise_amount == 0
    assert config.layout_scale == 1.0
    assert config.tightening == TighteningConfig()


@pytest.mark.parametrize("field, default", [
    ("font_scale", DEFAULT_FONT_SCALE),
    ("image_scale", DEFAULT_IMAGE_SCALE),
    ("tiff_dpi", DEFAULT_TIFF_DPI),
])
@pytest.mark.parametrize("value", [0, -2.5])
def test_non_positive_scales_reset_to_default(field, default, value):
    """Tests that a zero or negative scale factor falls back to its default."""
    config = GeneratorConfig(**{field: value})
    assert getattr(config, field) == default


def test_positive_scales_are_kept():
    """Tests that positive scale factors are kept and drive the layout scale."""
    config = GeneratorConfig(font_scale=8, image_scale=0.5, tiff_dpi=600)
    assert config.font_scale == 8
    assert config.layout_scale == 2.0
    assert config.image_scale == 0.5
    assert config.tiff_dpi == 600


def test_tightening_windows_are_validated():
    """Tests that scan windows running the wrong way are rejected."""
    with pytest.raises(ValidationError):
        TighteningConfig(left=(3, -1))
    with pytest.raises(ValidationError):
        TighteningConfig(bottom=(-4, 1))
    assert TighteningConfig(top=(0, 0)).top == (0, 0)


def test_load_default_config_file():
    """Tests that the packaged YAML file holds the schema defaults."""
    assert CONFIG_PATH.exists()
    config = load_config()
    assert config == GeneratorConfig()


def test_load_config_from_yaml(tmp_path):
    """Tests that values from a YAML file override the defaults."""
    path = tmp_path / "config.yaml"
    path.write_text("margin: 20\nanti_aliased: true\ntightening:\n  top_bias: 0\n", encoding="utf-8")
    config = load_config(path)
    assert config.margin == 20
    assert config.anti_aliased is True
    assert config.tightening.top_bias == 0
    assert config.tightening.left == (-1, 2)
    assert config.leading == 12


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    """Tests that environment variables win over the YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text("image_scale: 2.0\nmargin: 20\ntightening:\n  left: [0, 1]\n", encoding="utf-8")
    monkeypatch.setenv("TESSBOX_IMAGE_SCALE", "0.5")
    monkeypatch.setenv("TESSBOX_TIGHTENING__TOP_BIAS", "3")
    config = load_config(path)
    assert config.image_scale == 0.5
    assert config.margin == 20
    assert config.tightening.top_bias == 3
    assert config.tightening.left == (0, 1)


def test_empty_yaml_file(tmp_path):
    """Tests that an empty YAML file yields the default configuration."""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == GeneratorConfig()
