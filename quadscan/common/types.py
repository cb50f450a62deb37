"""
Common type definitions for the quadscan package.

This module provides Pydantic-based type definitions for the value types
shared by the geometry and editing layers: points, sizes, and rectangles.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Helper methods for common operations
- Integration with numpy arrays

Coordinates are plain floats. The coordinate space a value lives in (image,
display, or cartesian output) is tracked by the caller, not by the type.
"""

from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator


class Point(BaseModel):
    """
    Type-safe representation of a 2D point (x, y).

    Attributes:
        x: X-coordinate (horizontal).
        y: Y-coordinate (vertical).

    Example:
        >>> point = Point(x=100, y=200.5)
        >>> print(point)  # Point(x=100.0, y=200.5)
        >>> arr = point.to_numpy()  # array([100. , 200.5])
        >>> point2 = Point.from_numpy(np.array([150, 250]))
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Union[int, float]) -> float:
        """
        Convert coordinate to a python float.

        Accepts numpy scalars as well, so points can be built straight from
        array elements.
        """
        if isinstance(v, (int, float, np.integer, np.floating)) and not isinstance(
            v, bool
        ):
            return float(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array.

        Args:
            arr: Numpy array of shape (2,) with [x, y] coordinates.

        Returns:
            Point instance.

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def to_numpy(self, dtype: type = np.float64) -> np.ndarray:
        """Convert Point to a numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert Point to tuple (x, y)."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """
        Calculate Euclidean distance to another point.

        Args:
            other: Target point.

        Returns:
            Euclidean distance as float.
        """
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def applying(self, transform) -> "Point":
        """Return this point mapped through an affine transform."""
        return transform.apply(self)

    def __add__(self, other: "Point") -> "Point":
        """Add two points (vector addition)."""
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        """Subtract two points (vector subtraction)."""
        return Point(x=self.x - other.x, y=self.y - other.y)

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


class Size(BaseModel):
    """
    Width and height of a frame, view, or image.

    Zero or negative dimensions are not rejected here. Scale computations
    divide by these values, so callers must not pass a degenerate size.
    """

    width: float
    height: float

    model_config = {"frozen": True}

    def transposed(self) -> "Size":
        """Swap width and height (landscape frame seen in portrait)."""
        return Size(width=self.height, height=self.width)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def __repr__(self) -> str:
        return f"Size(width={self.width}, height={self.height})"


class Rect(BaseModel):
    """
    Axis-aligned rectangle given by its origin (top-left) and size.

    Example:
        >>> rect = Rect.from_size(Size(width=400, height=300))
        >>> rect.center
        Point(x=200.0, y=150.0)
    """

    origin: Point = Field(default_factory=lambda: Point(x=0.0, y=0.0))
    size: Size

    model_config = {"frozen": True}

    @classmethod
    def from_size(cls, size: Size) -> "Rect":
        """Rectangle at the origin with the given size."""
        return cls(origin=Point(x=0.0, y=0.0), size=size)

    @classmethod
    def from_bounds(
        cls, x_min: float, y_min: float, x_max: float, y_max: float
    ) -> "Rect":
        """Create a Rect from its min/max coordinates."""
        return cls(
            origin=Point(x=x_min, y=y_min),
            size=Size(width=x_max - x_min, height=y_max - y_min),
        )

    @property
    def width(self) -> float:
        return self.size.width

    @property
    def height(self) -> float:
        return self.size.height

    @property
    def min_x(self) -> float:
        return self.origin.x

    @property
    def min_y(self) -> float:
        return self.origin.y

    @property
    def max_x(self) -> float:
        return self.origin.x + self.size.width

    @property
    def max_y(self) -> float:
        return self.origin.y + self.size.height

    @property
    def mid_x(self) -> float:
        return self.origin.x + self.size.width / 2

    @property
    def mid_y(self) -> float:
        return self.origin.y + self.size.height / 2

    @property
    def center(self) -> Point:
        """Get center point of the rectangle."""
        return Point(x=self.mid_x, y=self.mid_y)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in top-left, top-right, bottom-right, bottom-left order."""
        return (
            Point(x=self.min_x, y=self.min_y),
            Point(x=self.max_x, y=self.min_y),
            Point(x=self.max_x, y=self.max_y),
            Point(x=self.min_x, y=self.max_y),
        )

    def applying(self, transform) -> "Rect":
        """
        Map the rectangle through an affine transform.

        Returns the smallest axis-aligned rectangle containing the four
        transformed corners, so a rotated frame yields its new bounds.
        """
        pts = np.array([p.to_tuple() for p in self.corners()], dtype=np.float64)
        mapped = transform.apply_points(pts)
        x_min, y_min = mapped.min(axis=0)
        x_max, y_max = mapped.max(axis=0)
        return Rect.from_bounds(
            float(x_min), float(y_min), float(x_max), float(y_max)
        )

    def __repr__(self) -> str:
        return (
            f"Rect(x={self.origin.x}, y={self.origin.y}, "
            f"width={self.width}, height={self.height})"
        )
