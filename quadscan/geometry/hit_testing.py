"""
Hit testing for quadrilateral handles.

Pure geometric functions that decide which of the eight draggable handles
(four corners, four edge midpoints) is nearest a pointer location, with no
dependency on gesture or view state.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from quadscan.common.types import Point
from quadscan.geometry.quadrilateral import Corner, Edge, Quadrilateral

logger = logging.getLogger(__name__)


class Handle(Enum):
    """
    One of the eight draggable points on a quadrilateral.

    Declaration order is significant: it is the tie-break order used by
    ``closest_handle`` (corners first, then midpoints).
    """

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM_LEFT = "bottom_left"
    TOP_MIDDLE = "top_middle"
    BOTTOM_MIDDLE = "bottom_middle"
    RIGHT_MIDDLE = "right_middle"
    LEFT_MIDDLE = "left_middle"

    @property
    def is_corner(self) -> bool:
        return self in _CORNER_HANDLES

    @property
    def edge(self) -> Optional[Edge]:
        """Edge a midpoint handle sits on, ``None`` for corners."""
        return _MIDDLE_HANDLES.get(self)

    @property
    def corners(self) -> Tuple[Corner, ...]:
        """
        Corners moved when this handle is dragged.

        A corner handle moves itself; a midpoint handle moves both corners
        of its edge.
        """
        if self.is_corner:
            return (_CORNER_HANDLES[self],)
        return self.edge.corners

    def position(self, quad: Quadrilateral) -> Point:
        if self.is_corner:
            return quad.corner(_CORNER_HANDLES[self])
        return quad.midpoint(self.edge)


_CORNER_HANDLES = {
    Handle.TOP_LEFT: Corner.TOP_LEFT,
    Handle.TOP_RIGHT: Corner.TOP_RIGHT,
    Handle.BOTTOM_RIGHT: Corner.BOTTOM_RIGHT,
    Handle.BOTTOM_LEFT: Corner.BOTTOM_LEFT,
}

_MIDDLE_HANDLES = {
    Handle.TOP_MIDDLE: Edge.TOP,
    Handle.BOTTOM_MIDDLE: Edge.BOTTOM,
    Handle.RIGHT_MIDDLE: Edge.RIGHT,
    Handle.LEFT_MIDDLE: Edge.LEFT,
}


def handle_positions(quad: Quadrilateral) -> Dict[Handle, Point]:
    """Current position of all eight handles, in declaration order."""
    return {handle: handle.position(quad) for handle in Handle}


def closest_handle(
    point: Point, quad: Quadrilateral, max_distance: Optional[float] = None
) -> Optional[Handle]:
    """
    Find the handle nearest ``point`` by Euclidean distance.

    Ties are broken by ``Handle`` declaration order: the first of several
    equidistant handles wins, so corners beat midpoints.

    Args:
        point: Query location, in the same space as ``quad``.
        quad: Quadrilateral whose handles are tested. Not modified.
        max_distance: Optional hit radius. When set and the nearest handle is
            farther away, no handle is hit.

    Returns:
        The nearest Handle, or None if ``max_distance`` excludes every handle.

    Example:
        >>> quad = Quadrilateral.from_numpy([[0, 0], [100, 0], [100, 100], [0, 100]])
        >>> closest_handle(Point(x=50, y=0), quad)
        <Handle.TOP_MIDDLE: 'top_middle'>
    """
    handles = list(Handle)
    positions = np.array([h.position(quad).to_tuple() for h in handles])
    distances = np.hypot(positions[:, 0] - point.x, positions[:, 1] - point.y)

    # argmin returns the first occurrence, which gives the declaration-order tie-break
    index = int(np.argmin(distances))
    nearest = handles[index]

    if max_distance is not None and distances[index] > max_distance:
        logger.debug(
            f"No handle within {max_distance} of {point} "
            f"(nearest {nearest.value} at {distances[index]:.1f})"
        )
        return None

    logger.debug(f"Closest handle to {point}: {nearest.value} ({distances[index]:.1f})")
    return nearest
