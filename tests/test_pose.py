"""Tests for the SE2 pose class."""

import math

import numpy as np
import pytest

from fieldstate.geometry import SE2, wrap_angle


class TestSE2:
    """Test suite for SE2 transformations."""

    def test_identity(self):
        """Identity leaves points unchanged."""
        pose = SE2.identity()
        np.testing.assert_allclose(pose.transform_point([3.0, -2.0]), [3.0, -2.0])
        assert pose.theta == 0.0

    def test_invalid_shapes(self):
        """Malformed rotation or translation is rejected."""
        with pytest.raises(ValueError, match="Rotation must be 2x2"):
            SE2(rotation=np.eye(3), translation=np.zeros(2))
        with pytest.raises(ValueError, match="Translation must be"):
            SE2(rotation=np.eye(2), translation=np.zeros(3))

    def test_from_xytheta(self):
        """Heading and position round-trip through the constructor."""
        pose = SE2.from_xytheta(1.0, 2.0, math.pi / 2)
        assert pose.theta == pytest.approx(math.pi / 2)
        np.testing.assert_allclose(pose.transform_point([1.0, 0.0]), [1.0, 3.0], atol=1e-12)

    def test_compose_and_inverse(self):
        """A pose composed with its inverse is the identity."""
        pose = SE2.from_xytheta(4.0, -1.0, 0.7)
        result = pose @ pose.inverse()
        np.testing.assert_allclose(result.rotation, np.eye(2), atol=1e-12)
        np.testing.assert_allclose(result.translation, [0.0, 0.0], atol=1e-12)

    def test_compose_order(self):
        """Composition applies the right-hand transform in the left-hand frame."""
        field_to_vehicle = SE2.from_xytheta(10.0, 0.0, math.pi / 2)
        vehicle_to_camera = SE2.from_translation(np.array([2.0, 0.0]))
        field_to_camera = field_to_vehicle @ vehicle_to_camera
        np.testing.assert_allclose(field_to_camera.translation, [10.0, 2.0], atol=1e-12)

    def test_transform_points(self):
        """Batch transform matches single-point transform."""
        pose = SE2.from_xytheta(1.0, 1.0, 0.3)
        points = np.array([[1.0, 0.0], [0.0, 2.0]])
        batch = pose.transform_points(points)
        for point, expected in zip(points, batch):
            np.testing.assert_allclose(pose.transform_point(point), expected)

    def test_translate_by_keeps_heading(self):
        """Translating shifts position only."""
        pose = SE2.from_xytheta(1.0, 1.0, 0.4)
        moved = pose.translate_by(np.array([2.0, -1.0]))
        np.testing.assert_allclose(moved.translation, [3.0, 0.0])
        assert moved.theta == pytest.approx(0.4)

    def test_copy_does_not_alias(self):
        """Copies share no arrays with the original."""
        pose = SE2.from_xytheta(1.0, 2.0, 0.0)
        clone = pose.copy()
        clone.translation[0] = 99.0
        assert pose.translation[0] == 1.0


class TestInterpolation:
    """Test suite for SE2.interpolate."""

    def test_translation_is_linear(self):
        """Translation interpolates component-wise."""
        start = SE2.from_xytheta(0.0, 0.0, 0.0)
        end = SE2.from_xytheta(10.0, -4.0, 0.0)
        mid = start.interpolate(end, 0.25)
        np.testing.assert_allclose(mid.translation, [2.5, -1.0])

    def test_rotation_takes_shortest_arc(self):
        """Interpolating across +/-pi goes the short way round."""
        start = SE2.from_xytheta(0.0, 0.0, math.radians(170.0))
        end = SE2.from_xytheta(0.0, 0.0, math.radians(-170.0))
        mid = start.interpolate(end, 0.5)
        assert abs(wrap_angle(mid.theta - math.pi)) < 1e-9

    def test_alpha_is_clamped(self):
        """Fractions outside [0, 1] return the endpoints."""
        start = SE2.from_xytheta(0.0, 0.0, 0.0)
        end = SE2.from_xytheta(1.0, 0.0, 1.0)
        np.testing.assert_allclose(start.interpolate(end, -1.0).translation, [0.0, 0.0])
        np.testing.assert_allclose(start.interpolate(end, 2.0).translation, [1.0, 0.0])


def test_wrap_angle():
    """Angles wrap into [-pi, pi)."""
    assert wrap_angle(1.5 * math.pi) == pytest.approx(-0.5 * math.pi)
    assert wrap_angle(-math.pi / 2) == pytest.approx(-math.pi / 2)
    assert wrap_angle(2 * math.pi + 0.1) == pytest.approx(0.1)


def test_heading_ranges_at_pi():
    """theta can report +pi while wrap_angle maps pi to -pi."""
    assert SE2.from_xytheta(0.0, 0.0, math.pi).theta == pytest.approx(math.pi)
    assert wrap_angle(math.pi) == pytest.approx(-math.pi)
