"""
Session orchestration for the editing module.

Two surfaces consume the geometry core:

1. PreviewOverlay: live preview. Each detector result is mapped from
   detector-frame coordinates onto the preview view and drawn, or the overlay
   is cleared when nothing was detected. Not editable.
2. EditSession: edit screen. Starts from the detected quadrilateral (or the
   default inset rectangle), lets the user drag handles in display
   coordinates, and on commit maps the result back to the source image and
   into the cartesian convention expected by the perspective-correction
   filter.

All state is passed in at construction; there is no process-wide session.
"""

import logging
import math
from pathlib import Path
from typing import Optional

from quadscan.common.types import Point, Rect, Size
from quadscan.editing.config_loader import load_config
from quadscan.editing.editor import QuadrilateralEditor, QuadrilateralRenderer
from quadscan.editing.pipeline import (
    aspect_fit_rect,
    default_quadrilateral,
    detector_to_display,
    display_to_image,
    image_to_cartesian,
    image_to_display,
)
from quadscan.editing.types import CommitResult, EditorConfig, GesturePhase
from quadscan.geometry.quadrilateral import Quadrilateral
from quadscan.geometry.rectification import (
    perspective_correction_points,
    perspective_matrix,
    rectified_size,
)

logger = logging.getLogger(__name__)


def _resolve_config(
    config: Optional[EditorConfig], config_path: Optional[Path]
) -> EditorConfig:
    if config is not None:
        logger.info("Using provided configuration")
        return config
    logger.info("Loaded configuration from file")
    return load_config(config_path) if config_path else load_config()


class PreviewOverlay:
    """
    Draws detector output on top of the live camera preview.

    Example:
        >>> overlay = PreviewOverlay(Size(width=375, height=667), renderer)
        >>> overlay.on_detection(detected_quad, Size(width=1920, height=1080))
        >>> overlay.on_detection(None, Size(width=1920, height=1080))  # clears
    """

    def __init__(
        self,
        view_size: Size,
        renderer: Optional[QuadrilateralRenderer] = None,
        config: Optional[EditorConfig] = None,
        config_path: Optional[Path] = None,
    ):
        self.config = _resolve_config(config, config_path)
        self.editor = QuadrilateralEditor(
            view_size, renderer=renderer, config=self.config, editable=False
        )

    @property
    def quad(self) -> Optional[Quadrilateral]:
        """The quadrilateral currently drawn, in preview coordinates."""
        return self.editor.quad

    def on_detection(
        self, quad: Optional[Quadrilateral], frame_size: Size
    ) -> Optional[Quadrilateral]:
        """
        Handle one detector result.

        Args:
            quad: Detected quadrilateral in detector-frame coordinates, or None.
            frame_size: Size of the frame the detector ran on.

        Returns:
            The quadrilateral as drawn on the preview, or None if cleared.
        """
        if quad is None:
            self.editor.remove_quadrilateral()
            return None

        detector = self.config.detector
        transformed = detector_to_display(
            quad,
            frame_size,
            self.editor.view_size,
            rotation_angle=math.radians(detector.rotation_degrees),
            portrait_frame=detector.portrait_frame,
        )
        self.editor.draw_quadrilateral(
            transformed, animated=self.config.interaction.animate_detection
        )
        return transformed


class EditSession:
    """
    Edit screen for adjusting a quadrilateral over a captured image.

    The editing view is the aspect-fit frame of the image inside its
    container, so display coordinates map to image coordinates with a
    uniform scale.

    Example:
        >>> session = EditSession(Size(width=3024, height=4032), Size(width=375, height=600))
        >>> session.handle_gesture(Point(x=20, y=30), GesturePhase.BEGAN)
        >>> session.handle_gesture(Point(x=40, y=45), GesturePhase.MOVED)
        >>> session.handle_gesture(Point(x=40, y=45), GesturePhase.ENDED)
        >>> result = session.commit()
        >>> result.control_points["top_left"]
    """

    def __init__(
        self,
        image_size: Size,
        container_size: Size,
        detected_quad: Optional[Quadrilateral] = None,
        renderer: Optional[QuadrilateralRenderer] = None,
        config: Optional[EditorConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the edit session.

        Args:
            image_size: Size of the source image.
            container_size: Size of the area the image is displayed in.
            detected_quad: Detector candidate in image coordinates. If None,
                the default inset quadrilateral is used.
            renderer: Drawing collaborator for the overlay.
            config: Pre-loaded configuration. If None, loads from file.
            config_path: Path to config file. If None, uses default location.
        """
        self.config = _resolve_config(config, config_path)
        self.image_size = image_size

        if detected_quad is None:
            logger.info("No detected quadrilateral, using default")
            detected_quad = default_quadrilateral(
                image_size, self.config.default_quad.inset_ratio
            )
        self.image_quad = detected_quad

        self.view_frame = aspect_fit_rect(image_size, Rect.from_size(container_size))
        self.editor = QuadrilateralEditor(
            self.view_frame.size, renderer=renderer, config=self.config
        )
        self.editor.draw_quadrilateral(
            image_to_display(detected_quad, image_size, self.view_frame.size)
        )

    @property
    def view_size(self) -> Size:
        return self.view_frame.size

    @property
    def display_quad(self) -> Optional[Quadrilateral]:
        """Copy of the quadrilateral being edited, in view coordinates."""
        return self.editor.quad

    def handle_gesture(self, position: Point, phase: GesturePhase) -> None:
        """Forward a gesture event, in editing-view coordinates."""
        self.editor.handle_gesture(position, phase)

    def commit(self) -> Optional[CommitResult]:
        """
        Map the edited quadrilateral to image and cartesian output spaces.

        Returns:
            CommitResult with the image-space quad, its reorganized cartesian
            copy, the filter control points, and the rectified output geometry.
            None if the editor holds no quadrilateral.
        """
        display_quad = self.editor.quad
        if display_quad is None:
            logger.warning("No quadrilateral to commit")
            return None

        logger.info("Committing edited quadrilateral")

        image_quad = display_to_image(
            display_quad, self.view_frame.size, self.image_size
        )
        self.image_quad = image_quad

        cartesian_quad = image_to_cartesian(image_quad, self.image_size.height)

        is_convex = image_quad.is_convex()
        if not is_convex:
            logger.warning(
                "Committed quadrilateral is not convex; "
                "perspective correction may produce a folded image"
            )

        output_size = rectified_size(image_quad)
        logger.info(
            f"Rectified output size: {output_size.width:.0f}x{output_size.height:.0f}"
        )

        return CommitResult(
            image_quad=image_quad,
            cartesian_quad=cartesian_quad,
            control_points=perspective_correction_points(cartesian_quad),
            output_size=output_size,
            perspective_matrix=perspective_matrix(image_quad, output_size),
            is_convex=is_convex,
        )
