"""
Geometry core: transforms, the quadrilateral model, handle hit testing,
and the rectified output space.

All functions here are pure and synchronous. Geometry is total over valid
input; the only exceptions raised are ValueError at numpy conversion
boundaries.
"""

from quadscan.geometry.hit_testing import Handle, closest_handle, handle_positions
from quadscan.geometry.quadrilateral import Corner, Edge, Quadrilateral
from quadscan.geometry.rectification import (
    map_to_output,
    perspective_correction_points,
    perspective_matrix,
    rectified_size,
)
from quadscan.geometry.transforms import (
    AffineTransform,
    apply,
    compose,
    concatenate,
    midpoint,
)

__all__ = [
    "AffineTransform",
    "apply",
    "compose",
    "concatenate",
    "midpoint",
    "Corner",
    "Edge",
    "Quadrilateral",
    "Handle",
    "closest_handle",
    "handle_positions",
    "rectified_size",
    "perspective_matrix",
    "map_to_output",
    "perspective_correction_points",
]
