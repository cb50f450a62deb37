"""
Coordinate-space transform pipeline.

Defines the exact transform chain for each point where a quadrilateral
crosses between spaces:

1. Detector -> display (live preview): aspect-fill scale, fixed sensor
   rotation, then re-centring on the view.
2. Image -> display (edit screen): uniform aspect-fit scale onto the view
   that sits over the displayed image.
3. Display -> image -> cartesian (commit): scale back to the source image,
   flip to the bottom-up convention, reorganize once.

Also generates the default quadrilateral used when the detector finds none.
"""

import logging
import math
from typing import List

from quadscan.common.types import Point, Rect, Size
from quadscan.geometry.quadrilateral import Quadrilateral
from quadscan.geometry.transforms import AffineTransform

logger = logging.getLogger(__name__)

DEFAULT_INSET_RATIO = 0.05
SENSOR_ROTATION = math.pi / 2.0


def default_quadrilateral(
    image_size: Size, inset_ratio: float = DEFAULT_INSET_RATIO
) -> Quadrilateral:
    """
    Generate a centered quadrilateral inset by ``inset_ratio`` on each side.

    With the default ratio this is the 5%-95% rectangle of the image.

    Example:
        >>> default_quadrilateral(Size(width=200, height=100)).top_left
        Point(x=10.0, y=5.0)
    """
    x_min = image_size.width * inset_ratio
    x_max = image_size.width * (1.0 - inset_ratio)
    y_min = image_size.height * inset_ratio
    y_max = image_size.height * (1.0 - inset_ratio)

    return Quadrilateral(
        top_left=Point(x=x_min, y=y_min),
        top_right=Point(x=x_max, y=y_min),
        bottom_right=Point(x=x_max, y=y_max),
        bottom_left=Point(x=x_min, y=y_max),
    )


def detector_to_display_transforms(
    frame_size: Size,
    view_size: Size,
    rotation_angle: float = SENSOR_ROTATION,
    portrait_frame: bool = True,
) -> List[AffineTransform]:
    """
    Build the ordered [scale, rotation, translation] chain for live preview.

    Args:
        frame_size: Size of the detector frame the quadrilateral refers to.
        view_size: Size of the preview view.
        rotation_angle: Sensor rotation in radians.
        portrait_frame: Read the (landscape) frame with its sides swapped
            when computing the aspect-fill factor.

    Returns:
        Transforms to apply in order.
    """
    fill_source = frame_size.transposed() if portrait_frame else frame_size
    scale_transform = AffineTransform.aspect_fill_scale(fill_source, view_size)
    rotation_transform = AffineTransform.rotation(rotation_angle)

    image_bounds = (
        Rect.from_size(frame_size).applying(scale_transform).applying(rotation_transform)
    )
    translation_transform = AffineTransform.translate_center(
        image_bounds, Rect.from_size(view_size)
    )

    return [scale_transform, rotation_transform, translation_transform]


def detector_to_display(
    quad: Quadrilateral,
    frame_size: Size,
    view_size: Size,
    rotation_angle: float = SENSOR_ROTATION,
    portrait_frame: bool = True,
) -> Quadrilateral:
    """Map a detector-space quadrilateral onto the live preview view."""
    transforms = detector_to_display_transforms(
        frame_size, view_size, rotation_angle, portrait_frame
    )
    return quad.apply_transforms(transforms)


def aspect_fit_rect(aspect_size: Size, bounding_rect: Rect) -> Rect:
    """
    Largest rectangle of ``aspect_size``'s proportions centred in ``bounding_rect``.

    This is the frame an aspect-fit image occupies inside its container.
    """
    fitted = Rect.from_size(aspect_size).applying(
        AffineTransform.aspect_fit_scale(aspect_size, bounding_rect.size)
    )
    return Rect(
        origin=Point(
            x=bounding_rect.mid_x - fitted.width / 2,
            y=bounding_rect.mid_y - fitted.height / 2,
        ),
        size=fitted.size,
    )


def image_to_display(
    quad: Quadrilateral, image_size: Size, view_size: Size
) -> Quadrilateral:
    """Map an image-space quadrilateral onto the editing view (uniform scale)."""
    return quad.apply_transforms(
        [AffineTransform.aspect_fit_scale(image_size, view_size)]
    )


def display_to_image(
    quad: Quadrilateral, view_size: Size, image_size: Size
) -> Quadrilateral:
    """Map an edited display-space quadrilateral back onto the source image."""
    return quad.scale(view_size, image_size)


def image_to_cartesian(quad: Quadrilateral, image_height: float) -> Quadrilateral:
    """
    Flip to cartesian convention and restore corner roles.

    Reorganizes exactly once, immediately after the flip. Skipping it would
    transpose the corrected output.
    """
    cartesian = quad.to_cartesian(image_height)
    cartesian.reorganize()
    return cartesian
