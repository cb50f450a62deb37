"""
Configuration loader for the editing module.

Loads and validates configuration from config.yaml file.
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict

import yaml

from quadscan.editing.types import (
    DefaultQuadConfig,
    DetectorConfig,
    EditorConfig,
    InteractionConfig,
)

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> EditorConfig:
    """
    Load editing configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated EditorConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid or missing required fields.

    Example:
        >>> config = load_config()
        >>> print(config.default_quad.inset_ratio)
        0.05
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading editing config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f)

    try:
        config = _parse_config(raw_config)
        _validate_config(config)
        logger.info("Successfully loaded editing configuration")
        return config
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e


def _parse_config(raw: Dict[str, Any]) -> EditorConfig:
    """Parse raw dictionary into structured config objects."""
    hit_radius = raw["interaction"].get("hit_radius")

    return EditorConfig(
        default_quad=DefaultQuadConfig(
            inset_ratio=float(raw["default_quad"]["inset_ratio"]),
        ),
        detector=DetectorConfig(
            rotation_degrees=float(raw["detector"]["rotation_degrees"]),
            portrait_frame=bool(raw["detector"]["portrait_frame"]),
        ),
        interaction=InteractionConfig(
            clamp_to_bounds=bool(raw["interaction"]["clamp_to_bounds"]),
            highlight_active_handle=bool(
                raw["interaction"]["highlight_active_handle"]
            ),
            hit_radius=float(hit_radius) if hit_radius is not None else None,
            animate_detection=bool(raw["interaction"]["animate_detection"]),
        ),
    )


def _validate_config(config: EditorConfig) -> None:
    """
    Validate configuration values for logical consistency.

    Raises:
        ValueError: If any configuration value is invalid.
    """
    inset = config.default_quad.inset_ratio
    if not 0.0 <= inset < 0.5:
        raise ValueError(f"inset_ratio ({inset}) must be in [0.0, 0.5)")

    if not math.isfinite(config.detector.rotation_degrees):
        raise ValueError("rotation_degrees must be finite")

    hit_radius = config.interaction.hit_radius
    if hit_radius is not None and hit_radius <= 0:
        raise ValueError(f"hit_radius ({hit_radius}) must be positive or null")

    logger.debug("Configuration validation passed")
