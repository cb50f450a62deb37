"""
Unit tests for the editing config_loader module.
"""

from pathlib import Path

import pytest
import yaml

from quadscan.editing.config_loader import load_config
from quadscan.editing.types import EditorConfig


def _valid_raw_config():
    return {
        "default_quad": {"inset_ratio": 0.1},
        "detector": {"rotation_degrees": 270.0, "portrait_frame": False},
        "interaction": {
            "clamp_to_bounds": True,
            "highlight_active_handle": False,
            "hit_radius": 44,
            "animate_detection": False,
        },
    }


def _write_config(tmp_path: Path, raw) -> Path:
    path = tmp_path / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(raw, f)
    return path


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_default_config(self):
        """Test loading the default configuration file."""
        config = load_config()

        assert isinstance(config, EditorConfig)
        assert config.default_quad.inset_ratio == pytest.approx(0.05)
        assert config.detector.rotation_degrees == pytest.approx(90.0)
        assert config.detector.portrait_frame is True
        assert config.interaction.clamp_to_bounds is True
        assert config.interaction.hit_radius is None

    def test_load_custom_config(self, tmp_path):
        """Test loading a custom configuration file."""
        config = load_config(_write_config(tmp_path, _valid_raw_config()))

        assert config.default_quad.inset_ratio == pytest.approx(0.1)
        assert config.detector.rotation_degrees == pytest.approx(270.0)
        assert config.detector.portrait_frame is False
        assert config.interaction.highlight_active_handle is False
        assert config.interaction.hit_radius == pytest.approx(44.0)

    def test_missing_file_raises_error(self):
        """Test that missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("nonexistent_config.yaml"))

    def test_missing_section(self, tmp_path):
        raw = _valid_raw_config()
        del raw["detector"]

        with pytest.raises(ValueError, match="Invalid configuration file"):
            load_config(_write_config(tmp_path, raw))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration file"):
            load_config(path)

    @pytest.mark.parametrize("inset", [-0.1, 0.5, 0.75])
    def test_invalid_inset_ratio(self, tmp_path, inset):
        raw = _valid_raw_config()
        raw["default_quad"]["inset_ratio"] = inset

        with pytest.raises(ValueError, match="inset_ratio"):
            load_config(_write_config(tmp_path, raw))

    def test_non_positive_hit_radius(self, tmp_path):
        raw = _valid_raw_config()
        raw["interaction"]["hit_radius"] = 0

        with pytest.raises(ValueError, match="hit_radius"):
            load_config(_write_config(tmp_path, raw))

    def test_non_finite_rotation(self, tmp_path):
        raw = _valid_raw_config()
        raw["detector"]["rotation_degrees"] = float("nan")

        with pytest.raises(ValueError, match="rotation_degrees"):
            load_config(_write_config(tmp_path, raw))
