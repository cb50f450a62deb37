"""
Affine transform primitives.

Provides the 2D affine transform value type used to move points and
quadrilaterals between coordinate spaces (detector frame, display view,
source image), together with the small set of constructors the pipeline
needs: uniform aspect-fill / aspect-fit scaling, rotation, translation
between rectangle centres, and the vertical axis flip.

Transforms use the column-vector convention: a point (x, y) maps to
``M @ [x, y, 1]``. Composition is associative but not commutative, so
``t1.then(t2)`` (apply ``t1`` first) is ``t2.matrix @ t1.matrix``.
"""

import math
from typing import Iterable

import numpy as np
from pydantic import BaseModel, Field, field_validator

from quadscan.common.types import Point, Rect, Size


class AffineTransform(BaseModel):
    """
    Immutable 2D affine transform backed by a 3x3 homogeneous matrix.

    Attributes:
        matrix: 3x3 float64 matrix whose last row is [0, 0, 1].

    Example:
        >>> t = AffineTransform.scale(2.0, 2.0).then(AffineTransform.translation(5, 0))
        >>> t.apply(Point(x=1, y=1))
        Point(x=7.0, y=2.0)
    """

    matrix: np.ndarray = Field(..., description="3x3 homogeneous matrix")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("matrix", mode="before")
    @classmethod
    def _validate_matrix(cls, v) -> np.ndarray:
        """
        Validate that the matrix is a 3x3 affine matrix.

        Raises:
            ValueError: If the shape is wrong or the last row is not [0, 0, 1].
        """
        m = np.array(v, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"Expected matrix of shape (3, 3), got {m.shape}")
        if not np.allclose(m[2], [0.0, 0.0, 1.0]):
            raise ValueError(
                f"Last row of an affine matrix must be [0, 0, 1], got {m[2].tolist()}"
            )
        m.setflags(write=False)
        return m

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls(matrix=np.eye(3))

    @classmethod
    def scale(cls, sx: float, sy: float) -> "AffineTransform":
        return cls(matrix=[[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])

    @classmethod
    def rotation(cls, angle: float) -> "AffineTransform":
        """Rotation by ``angle`` radians about the origin."""
        c, s = math.cos(angle), math.sin(angle)
        return cls(matrix=[[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls(matrix=[[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])

    @classmethod
    def vertical_flip(cls, height: float) -> "AffineTransform":
        """
        Axis flip between screen and cartesian conventions: y' = height - y.

        The flip is its own inverse for a fixed height.
        """
        return cls(matrix=[[1.0, 0.0, 0.0], [0.0, -1.0, height], [0.0, 0.0, 1.0]])

    @classmethod
    def aspect_fill_scale(cls, from_size: Size, in_size: Size) -> "AffineTransform":
        """
        Uniform scale so that ``from_size`` fills ``in_size`` without distortion.

        The larger of the two axis ratios is used, so one axis may overflow
        the target.
        """
        factor = max(
            in_size.width / from_size.width, in_size.height / from_size.height
        )
        return cls.scale(factor, factor)

    @classmethod
    def aspect_fit_scale(cls, from_size: Size, in_size: Size) -> "AffineTransform":
        """Uniform scale so that ``from_size`` fits entirely inside ``in_size``."""
        factor = min(
            in_size.width / from_size.width, in_size.height / from_size.height
        )
        return cls.scale(factor, factor)

    @classmethod
    def translate_center(cls, from_rect: Rect, to_rect: Rect) -> "AffineTransform":
        """Translation moving the centre of ``from_rect`` onto the centre of ``to_rect``."""
        return cls.translation(
            to_rect.mid_x - from_rect.mid_x, to_rect.mid_y - from_rect.mid_y
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def then(self, other: "AffineTransform") -> "AffineTransform":
        """Transform that applies ``self`` first and ``other`` second."""
        return AffineTransform(matrix=other.matrix @ self.matrix)

    def apply(self, point: Point) -> Point:
        x, y, _ = self.matrix @ np.array([point.x, point.y, 1.0])
        return Point(x=x, y=y)

    def apply_points(self, points: np.ndarray) -> np.ndarray:
        """
        Apply the transform to an (N, 2) array of points.

        Returns:
            New (N, 2) float64 array.
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
        return (homogeneous @ self.matrix.T)[:, :2]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return False
        return bool(np.array_equal(self.matrix, other.matrix))

    def __repr__(self) -> str:
        a, c, tx = self.matrix[0]
        b, d, ty = self.matrix[1]
        return f"AffineTransform(a={a:g}, b={b:g}, c={c:g}, d={d:g}, tx={tx:g}, ty={ty:g})"


def apply(transform: AffineTransform, point: Point) -> Point:
    """Apply ``transform`` to ``point``."""
    return transform.apply(point)


def compose(t1: AffineTransform, t2: AffineTransform) -> AffineTransform:
    """Compose two transforms: ``t1`` is applied first, then ``t2``."""
    return t1.then(t2)


def concatenate(transforms: Iterable[AffineTransform]) -> AffineTransform:
    """
    Collapse a sequence of transforms into one, preserving application order.

    An empty sequence yields the identity.
    """
    result = AffineTransform.identity()
    for transform in transforms:
        result = result.then(transform)
    return result


def midpoint(p1: Point, p2: Point) -> Point:
    """Arithmetic mean of two points."""
    return Point(x=(p1.x + p2.x) / 2, y=(p1.y + p2.y) / 2)
