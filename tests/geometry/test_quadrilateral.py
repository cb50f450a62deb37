"""
Unit tests for the Quadrilateral model.
"""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from quadscan.common.types import Point, Rect, Size
from quadscan.geometry.quadrilateral import Corner, Edge, Quadrilateral
from quadscan.geometry.transforms import AffineTransform


def assert_quads_close(actual: Quadrilateral, expected: Quadrilateral, tol=1e-6):
    np.testing.assert_allclose(
        actual.to_numpy(dtype=np.float64),
        expected.to_numpy(dtype=np.float64),
        atol=tol,
    )


def assert_midpoints_consistent(quad: Quadrilateral):
    for edge in Edge:
        first, second = edge.corners
        a, b = quad.corner(first), quad.corner(second)
        mid = quad.midpoint(edge)
        assert mid.x == pytest.approx((a.x + b.x) / 2)
        assert mid.y == pytest.approx((a.y + b.y) / 2)


class TestConstruction:
    """Tests for building quadrilaterals."""

    def test_from_numpy_keeps_order(self, sample_quadrilateral):
        assert sample_quadrilateral.top_left == Point(x=100, y=200)
        assert sample_quadrilateral.top_right == Point(x=300, y=150)
        assert sample_quadrilateral.bottom_right == Point(x=320, y=400)
        assert sample_quadrilateral.bottom_left == Point(x=80, y=380)

    def test_from_numpy_invalid_count(self):
        with pytest.raises(ValueError, match="Expected exactly 4 points"):
            Quadrilateral.from_numpy([[0, 0], [1, 1]])

    def test_from_rect(self):
        quad = Quadrilateral.from_rect(
            Rect(origin=Point(x=5, y=5), size=Size(width=10, height=20))
        )
        assert quad.bottom_right == Point(x=15, y=25)

    def test_to_numpy_round_trip(self, sample_quadrilateral):
        rebuilt = Quadrilateral.from_numpy(sample_quadrilateral.to_numpy())
        assert rebuilt == sample_quadrilateral

    def test_to_numpy_round_trip_keeps_fractional_coordinates(self):
        """Non-integer corners survive the array round trip exactly."""
        quad = Quadrilateral.from_numpy(
            [[0.1, 1 / 3], [100.7, 0.2], [99.9, 50.123456789], [0.3, 49.9]]
        )

        rebuilt = Quadrilateral.from_numpy(quad.to_numpy())

        assert quad.to_numpy().dtype == np.float64
        assert rebuilt == quad


class TestCornersAndMidpoints:
    """Tests for corner accessors and derived midpoints."""

    def test_corner_accessors(self, square_quad):
        square_quad.set_corner(Corner.BOTTOM_RIGHT, Point(x=120, y=130))

        assert square_quad.corner(Corner.BOTTOM_RIGHT) == Point(x=120, y=130)
        assert square_quad.bottom_right == Point(x=120, y=130)

    @pytest.mark.parametrize("value", [(5, 5), [5, 5], None, "5,5"])
    def test_set_corner_rejects_non_points(self, square_quad, value):
        with pytest.raises(ValidationError):
            square_quad.set_corner(Corner.TOP_LEFT, value)

        assert square_quad.top_left == Point(x=0, y=0)

    def test_edge_adjacency(self):
        assert Edge.TOP.corners == (Corner.TOP_LEFT, Corner.TOP_RIGHT)
        assert Edge.BOTTOM.corners == (Corner.BOTTOM_LEFT, Corner.BOTTOM_RIGHT)
        assert Edge.RIGHT.corners == (Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT)
        assert Edge.LEFT.corners == (Corner.TOP_LEFT, Corner.BOTTOM_LEFT)

    def test_square_midpoints(self, square_quad):
        assert square_quad.midpoint(Edge.TOP) == Point(x=50, y=0)
        assert square_quad.midpoint(Edge.BOTTOM) == Point(x=50, y=100)
        assert square_quad.midpoint(Edge.RIGHT) == Point(x=100, y=50)
        assert square_quad.midpoint(Edge.LEFT) == Point(x=0, y=50)

    def test_midpoints_follow_corner_mutation(self, square_quad):
        square_quad.set_corner(Corner.TOP_LEFT, Point(x=20, y=40))

        assert square_quad.midpoint(Edge.TOP) == Point(x=60, y=20)
        assert square_quad.midpoint(Edge.LEFT) == Point(x=10, y=70)

    def test_midpoints_consistent_after_random_mutations(self, sample_quadrilateral):
        """Midpoints match the corner average after every mutation in a sequence."""
        rng = np.random.default_rng(42)
        corners = list(Corner)

        for _ in range(200):
            corner = corners[rng.integers(len(corners))]
            x, y = rng.uniform(-500, 500, size=2)
            sample_quadrilateral.set_corner(corner, Point(x=x, y=y))
            assert_midpoints_consistent(sample_quadrilateral)

    def test_midpoints_dict_covers_all_edges(self, square_quad):
        assert set(square_quad.midpoints()) == set(Edge)


class TestTransforms:
    """Tests for transform application, scaling and the cartesian flip."""

    def test_apply_transforms_in_order(self, square_quad):
        quad = square_quad.apply_transforms(
            [AffineTransform.scale(2, 2), AffineTransform.translation(10, 0)]
        )
        assert quad.bottom_right == Point(x=210, y=200)

    def test_applying_returns_new_instance(self, square_quad):
        moved = square_quad.applying(AffineTransform.translation(5, 5))

        assert moved.top_left == Point(x=5, y=5)
        assert square_quad.top_left == Point(x=0, y=0)

    def test_scale_between_sizes(self, square_quad):
        quad = square_quad.scale(Size(width=100, height=100), Size(width=300, height=50))

        assert quad.top_right == Point(x=300, y=0)
        assert quad.bottom_left == Point(x=0, y=50)

    def test_scale_round_trip(self, sample_quadrilateral):
        a = Size(width=375, height=500)
        b = Size(width=3024, height=4032)

        result = sample_quadrilateral.scale(a, b).scale(b, a)

        assert_quads_close(result, sample_quadrilateral)

    def test_scale_with_quarter_rotation(self):
        """A portrait 100x200 frame rotated onto a 200x100 frame maps (x, y) to (200 - y, x)."""
        quad = Quadrilateral.from_numpy([[10, 20], [90, 20], [90, 180], [10, 180]])

        result = quad.scale(
            Size(width=100, height=200),
            Size(width=200, height=100),
            rotation_angle=math.pi / 2,
        )

        expected = Quadrilateral.from_numpy(
            [[180, 10], [180, 90], [20, 90], [20, 10]]
        )
        assert_quads_close(result, expected)

    def test_to_cartesian_flips_y(self, sample_quadrilateral):
        cartesian = sample_quadrilateral.to_cartesian(500)

        assert cartesian.top_left == Point(x=100, y=300)
        assert cartesian.bottom_right == Point(x=320, y=100)

    def test_cartesian_round_trip(self, sample_quadrilateral):
        result = sample_quadrilateral.to_cartesian(480).to_cartesian(480)
        assert_quads_close(result, sample_quadrilateral)


class TestReorganize:
    """Tests for corner relabeling."""

    def test_reorganize_is_noop_when_ordered(self, sample_quadrilateral):
        expected = sample_quadrilateral.model_copy()

        sample_quadrilateral.reorganize()

        assert sample_quadrilateral == expected

    def test_reorganize_after_flip(self):
        """After a flip the smallest-y pair is relabeled as the top pair."""
        quad = Quadrilateral.from_numpy([[10, 5], [190, 5], [190, 95], [10, 95]])
        cartesian = quad.to_cartesian(100)

        cartesian.reorganize()

        assert cartesian.top_left == Point(x=10, y=5)
        assert cartesian.top_right == Point(x=190, y=5)
        assert cartesian.bottom_right == Point(x=190, y=95)
        assert cartesian.bottom_left == Point(x=10, y=95)

    def test_reorganize_shuffled_corners(self):
        quad = Quadrilateral.from_numpy([[90, 90], [10, 10], [10, 90], [90, 10]])

        quad.reorganize()

        assert quad == Quadrilateral.from_numpy(
            [[10, 10], [90, 10], [90, 90], [10, 90]]
        )


class TestMeasurements:
    """Tests for edge lengths and convexity."""

    def test_edge_lengths(self):
        quad = Quadrilateral.from_numpy([[0, 0], [100, 0], [100, 50], [0, 50]])
        top, right, bottom, left = quad.edge_lengths()

        assert top == pytest.approx(100.0)
        assert right == pytest.approx(50.0)
        assert bottom == pytest.approx(100.0)
        assert left == pytest.approx(50.0)

    def test_convex_square(self, square_quad):
        assert square_quad.is_convex()

    def test_concave_quad_is_allowed(self):
        """Concave outlines are legal; only the diagnostic reports them."""
        quad = Quadrilateral.from_numpy([[100, 100], [300, 100], [200, 120], [100, 150]])

        assert not quad.is_convex()
        assert_midpoints_consistent(quad)

    def test_self_intersecting_quad_is_not_convex(self):
        bow_tie = Quadrilateral.from_numpy([[0, 0], [100, 100], [100, 0], [0, 100]])
        assert not bow_tie.is_convex()
