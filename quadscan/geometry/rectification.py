"""
Rectified output space.

Helpers describing where an edited quadrilateral lands once the document is
perspective-corrected: the size of the top-down output rectangle, the
homography from source-image coordinates to that rectangle, and the control
points handed to a cartesian perspective-correction filter.

No pixels are resampled here; the warp itself belongs to the caller.
"""

import logging
from typing import Dict, Optional, Union

import cv2
import numpy as np

from quadscan.common.types import Point, Size
from quadscan.geometry.quadrilateral import Quadrilateral

logger = logging.getLogger(__name__)


def rectified_size(quad: Quadrilateral) -> Size:
    """
    Calculate the size of the rectified output rectangle.

    Uses the maximum edge lengths so no content is lost:
    width = max(top, bottom), height = max(left, right).

    Args:
        quad: Quadrilateral in image coordinates (screen convention).

    Returns:
        Output Size.

    Example:
        >>> quad = Quadrilateral.from_numpy([[100, 150], [450, 100], [470, 300], [80, 320]])
        >>> rectified_size(quad)
        Size(width=390.51..., height=200.99...)
    """
    top, right, bottom, left = quad.edge_lengths()
    size = Size(width=max(top, bottom), height=max(left, right))

    logger.debug(f"Rectified size: {size.width:.1f} x {size.height:.1f}")
    return size


def perspective_matrix(
    quad: Quadrilateral, output_size: Optional[Size] = None
) -> np.ndarray:
    """
    Calculate the homography from the quadrilateral to the output rectangle.

    Args:
        quad: Quadrilateral in image coordinates, corners in TL, TR, BR, BL order.
        output_size: Target rectangle. Defaults to ``rectified_size(quad)``.

    Returns:
        3x3 perspective transformation matrix (float64).
    """
    if output_size is None:
        output_size = rectified_size(quad)

    src = quad.to_numpy(dtype=np.float32)
    dst = np.array(
        [
            [0, 0],  # Top-Left
            [output_size.width - 1, 0],  # Top-Right
            [output_size.width - 1, output_size.height - 1],  # Bottom-Right
            [0, output_size.height - 1],  # Bottom-Left
        ],
        dtype=np.float32,
    )

    return cv2.getPerspectiveTransform(src, dst)


def map_to_output(
    points: Union[np.ndarray, list], matrix: np.ndarray
) -> np.ndarray:
    """
    Map image-space points into the rectified output space.

    Args:
        points: Array-like of shape (N, 2).
        matrix: Homography from ``perspective_matrix``.

    Returns:
        (N, 2) float32 array of output coordinates.
    """
    pts = np.asarray(points, dtype=np.float32).reshape(-1, 1, 2)
    return cv2.perspectiveTransform(pts, matrix).reshape(-1, 2)


def perspective_correction_points(cartesian_quad: Quadrilateral) -> Dict[str, Point]:
    """
    Control points for a cartesian perspective-correction filter.

    ``cartesian_quad`` must already be flipped with ``to_cartesian`` and then
    reorganized exactly once. Reorganizing sorts by ascending y, so in the
    bottom-up convention its "top" pair is the physical bottom of the
    document; the mapping below swaps the pairs back.

    Returns:
        Dict with keys ``top_left``, ``top_right``, ``bottom_left``,
        ``bottom_right``.
    """
    return {
        "top_left": cartesian_quad.bottom_left,
        "top_right": cartesian_quad.bottom_right,
        "bottom_left": cartesian_quad.top_left,
        "bottom_right": cartesian_quad.top_right,
    }
