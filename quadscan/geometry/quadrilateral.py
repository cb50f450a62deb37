"""
Quadrilateral model.

A quadrilateral is four corner points in the fixed logical order top-left,
top-right, bottom-right, bottom-left. Screen convention is used everywhere
(y grows downward) except for the cartesian copy handed to the perspective
correction filter, where y grows upward.

Edge midpoints are derived from their two adjacent corners on every access;
they are never stored, so they cannot go stale after a corner moves.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Tuple, Union

import numpy as np
from pydantic import BaseModel

from quadscan.common.types import Point, Rect, Size
from quadscan.geometry.transforms import AffineTransform, midpoint

logger = logging.getLogger(__name__)


class Corner(Enum):
    """The four corner roles, in canonical order."""

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM_LEFT = "bottom_left"


class Edge(Enum):
    """The four edges, each identified by its midpoint role."""

    TOP = "top"
    BOTTOM = "bottom"
    RIGHT = "right"
    LEFT = "left"

    @property
    def corners(self) -> Tuple[Corner, Corner]:
        """The two corners this edge joins."""
        return _EDGE_CORNERS[self]


_EDGE_CORNERS = {
    Edge.TOP: (Corner.TOP_LEFT, Corner.TOP_RIGHT),
    Edge.BOTTOM: (Corner.BOTTOM_LEFT, Corner.BOTTOM_RIGHT),
    Edge.RIGHT: (Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT),
    Edge.LEFT: (Corner.TOP_LEFT, Corner.BOTTOM_LEFT),
}


class Quadrilateral(BaseModel):
    """
    Four ordered corners of a document outline.

    Attributes:
        top_left: Top-left corner.
        top_right: Top-right corner.
        bottom_right: Bottom-right corner.
        bottom_left: Bottom-left corner.

    No convexity constraint is enforced. Dragging may legally produce a
    concave or self-intersecting shape; see ``is_convex`` for a diagnostic.

    Example:
        >>> quad = Quadrilateral.from_numpy([[0, 0], [100, 0], [100, 50], [0, 50]])
        >>> quad.midpoint(Edge.TOP)
        Point(x=50.0, y=0.0)
    """

    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    model_config = {"validate_assignment": True}

    @classmethod
    def from_numpy(cls, pts: Union[np.ndarray, list]) -> "Quadrilateral":
        """
        Create a Quadrilateral from 4 points in TL, TR, BR, BL order.

        Args:
            pts: Array-like of shape (4, 2).

        Raises:
            ValueError: If input does not have shape (4, 2).
        """
        pts = np.asarray(pts, dtype=np.float64)
        if pts.shape != (4, 2):
            raise ValueError(
                f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
            )
        tl, tr, br, bl = (Point.from_numpy(p) for p in pts)
        return cls(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

    @classmethod
    def from_rect(cls, rect: Rect) -> "Quadrilateral":
        tl, tr, br, bl = rect.corners()
        return cls(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def corner(self, corner: Corner) -> Point:
        return getattr(self, corner.value)

    def set_corner(self, corner: Corner, point: Point) -> None:
        """
        Replace one corner.

        Raises:
            ValidationError: If ``point`` is not a Point.
        """
        setattr(self, corner.value, point)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in canonical TL, TR, BR, BL order."""
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def midpoint(self, edge: Edge) -> Point:
        """Midpoint of ``edge``, computed from the current corners."""
        first, second = edge.corners
        return midpoint(self.corner(first), self.corner(second))

    def midpoints(self) -> Dict[Edge, Point]:
        return {edge: self.midpoint(edge) for edge in Edge}

    def to_numpy(self, dtype: type = np.float64) -> np.ndarray:
        """Corners as a (4, 2) array in TL, TR, BR, BL order."""
        return np.array([p.to_tuple() for p in self.corners()], dtype=dtype)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def applying(self, transform: AffineTransform) -> "Quadrilateral":
        """Return a new quadrilateral with every corner mapped through ``transform``."""
        return Quadrilateral.from_numpy(
            transform.apply_points(self.to_numpy(dtype=np.float64))
        )

    def apply_transforms(
        self, transforms: Iterable[AffineTransform]
    ) -> "Quadrilateral":
        """Apply each transform in order to all four corners."""
        quad = self
        for transform in transforms:
            quad = quad.applying(transform)
        return quad

    def scale(
        self, from_size: Size, to_size: Size, rotation_angle: float = 0.0
    ) -> "Quadrilateral":
        """
        Map a quadrilateral defined against ``from_size`` onto ``to_size``.

        Relative position inside the frame is preserved. When a rotation is
        given, the source frame is read with its sides swapped (except for a
        half turn), the scaled quad is rotated, and the result is re-centred
        on the target frame.

        Args:
            from_size: Size of the frame the quadrilateral is expressed in.
            to_size: Size of the target frame.
            rotation_angle: Optional rotation in radians.

        Returns:
            New Quadrilateral in the target frame.
        """
        rotated = rotation_angle != 0.0
        source = from_size
        if rotated and not np.isclose(rotation_angle, np.pi):
            source = from_size.transposed()

        scale_transform = AffineTransform.scale(
            to_size.width / source.width, to_size.height / source.height
        )
        quad = self.applying(scale_transform)

        if rotated:
            rotation_transform = AffineTransform.rotation(rotation_angle)
            from_bounds = (
                Rect.from_size(from_size)
                .applying(scale_transform)
                .applying(rotation_transform)
            )
            translation_transform = AffineTransform.translate_center(
                from_bounds, Rect.from_size(to_size)
            )
            quad = quad.apply_transforms([rotation_transform, translation_transform])

        return quad

    def to_cartesian(self, height: float) -> "Quadrilateral":
        """
        Flip from screen to cartesian convention: y' = height - y.

        Applying it twice with the same height returns the original.
        """
        return self.applying(AffineTransform.vertical_flip(height))

    def reorganize(self) -> None:
        """
        Relabel the corners so role names match position again.

        The two corners with the smallest y become the top pair and the
        other two the bottom pair; each pair is ordered by x. A quadrilateral
        already ordered in screen convention is left unchanged.
        """
        by_y = sorted(self.corners(), key=lambda p: (p.y, p.x))
        top = sorted(by_y[:2], key=lambda p: p.x)
        bottom = sorted(by_y[2:], key=lambda p: p.x)

        self.top_left, self.top_right = top
        self.bottom_left, self.bottom_right = bottom

        logger.debug(
            f"Reorganized corners: TL={self.top_left}, TR={self.top_right}, "
            f"BR={self.bottom_right}, BL={self.bottom_left}"
        )

    # ------------------------------------------------------------------
    # Measurements
    # ------------------------------------------------------------------

    def edge_lengths(self) -> Tuple[float, float, float, float]:
        """Lengths of the (top, right, bottom, left) edges."""
        tl, tr, br, bl = self.corners()
        return (
            tl.distance_to(tr),
            tr.distance_to(br),
            br.distance_to(bl),
            bl.distance_to(tl),
        )

    def is_convex(self) -> bool:
        """
        Check whether the corners, walked TL→TR→BR→BL, form a convex polygon.

        All consecutive edge cross products must share a sign. Concave and
        self-intersecting outlines give mixed signs.
        """
        rect = self.to_numpy(dtype=np.float64)
        cross_products: List[float] = []
        for i in range(4):
            v1 = rect[(i + 1) % 4] - rect[i]
            v2 = rect[(i + 2) % 4] - rect[(i + 1) % 4]
            cross_products.append(float(v1[0] * v2[1] - v1[1] * v2[0]))

        signs = [cp > 1e-6 for cp in cross_products]
        is_convex = all(signs) or not any(signs)

        if not is_convex:
            logger.debug(
                f"Non-convex quadrilateral. Cross products: {cross_products}"
            )
        return is_convex

    def __repr__(self) -> str:
        return (
            f"Quadrilateral(top_left={self.top_left}, top_right={self.top_right}, "
            f"bottom_right={self.bottom_right}, bottom_left={self.bottom_left})"
        )
