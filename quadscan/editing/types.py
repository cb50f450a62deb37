"""
Data types and structures for the editing module.

Provides type-safe containers for configuration, gesture input, drag
session state, and commit results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np

from quadscan.common.types import Point, Size
from quadscan.geometry.hit_testing import Handle
from quadscan.geometry.quadrilateral import Quadrilateral


class GesturePhase(Enum):
    """Phases delivered by the gesture source."""

    BEGAN = "began"
    MOVED = "moved"
    ENDED = "ended"
    CANCELLED = "cancelled"


class EditorState(Enum):
    """Interaction state of the editor."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class DefaultQuadConfig:
    """Configuration for the fallback quadrilateral."""

    inset_ratio: float  # Margin on each side, as a fraction of the image size


@dataclass
class DetectorConfig:
    """Configuration for mapping detector output onto the preview."""

    rotation_degrees: float  # Sensor orientation relative to the portrait display
    portrait_frame: bool  # Detector frames are landscape; read them transposed


@dataclass
class InteractionConfig:
    """Configuration for drag handling."""

    clamp_to_bounds: bool
    highlight_active_handle: bool
    hit_radius: Optional[float]  # None: always pick the nearest handle
    animate_detection: bool


@dataclass
class EditorConfig:
    """Complete editing module configuration."""

    default_quad: DefaultQuadConfig
    detector: DetectorConfig
    interaction: InteractionConfig


@dataclass
class DragSession:
    """
    State of one continuous drag gesture.

    Attributes:
        handle: Handle resolved at gesture start; fixed until the gesture ends.
        previous_position: Last pointer position, used for per-update deltas.
    """

    handle: Optional[Handle] = None
    previous_position: Optional[Point] = None


@dataclass
class CommitResult:
    """
    Output of committing an edit session.

    Attributes:
        image_quad: Edited quadrilateral in source-image coordinates.
        cartesian_quad: ``image_quad`` flipped to cartesian and reorganized.
        control_points: Filter control points keyed top_left, top_right,
            bottom_left, bottom_right (cartesian convention).
        output_size: Size of the rectified output rectangle.
        perspective_matrix: 3x3 homography from image space to output space.
        is_convex: Whether the committed outline is convex. Not enforced.
    """

    image_quad: Quadrilateral
    cartesian_quad: Quadrilateral
    control_points: Dict[str, Point]
    output_size: Size
    perspective_matrix: np.ndarray
    is_convex: bool
