"""SE(2) pose representation for planar rigid body transformations."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians to [-pi, pi).

    ``SE2.theta`` comes from ``atan2`` instead and may be exactly +pi.
    """
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def rotation_matrix(theta: float) -> np.ndarray:
    """Return the 2x2 rotation matrix for an angle in radians."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s], [s, c]], dtype=np.float64)


@dataclass
class SE2:
    """Rigid body transformation (rotation + translation) in SE(2).

    Represents a pose T_field_vehicle that transforms points from the
    vehicle frame to the field frame:

        p_field = R @ p_vehicle + t

    Attributes:
        rotation: 2x2 orthonormal rotation matrix (det = +1)
        translation: 2D translation vector
    """

    rotation: np.ndarray  # 2x2 rotation matrix
    translation: np.ndarray  # (2,) translation vector

    def __post_init__(self) -> None:
        """Validate and normalize inputs."""
        self.rotation = np.asarray(self.rotation, dtype=np.float64)
        self.translation = np.asarray(self.translation, dtype=np.float64).flatten()

        if self.rotation.shape != (2, 2):
            raise ValueError(f"Rotation must be 2x2, got {self.rotation.shape}")
        if self.translation.shape != (2,):
            raise ValueError(
                f"Translation must be (2,), got {self.translation.shape}"
            )

    @classmethod
    def identity(cls) -> SE2:
        """Create identity transformation (no rotation, no translation)."""
        return cls(rotation=np.eye(2), translation=np.zeros(2))

    @classmethod
    def from_xytheta(cls, x: float, y: float, theta: float = 0.0) -> SE2:
        """Create SE2 from a position and heading.

        Args:
            x: Position along the x axis
            y: Position along the y axis
            theta: Heading in radians (CCW positive, 0 along +x)

        Returns:
            SE2 transformation
        """
        return cls(rotation=rotation_matrix(theta), translation=np.array([x, y]))

    @classmethod
    def from_translation(cls, translation: np.ndarray) -> SE2:
        """Create a pure translation with no rotation."""
        return cls(rotation=np.eye(2), translation=translation)

    @property
    def theta(self) -> float:
        """Heading angle in radians, in [-pi, pi] (``atan2`` can return +pi)."""
        return math.atan2(self.rotation[1, 0], self.rotation[0, 0])

    @property
    def position(self) -> np.ndarray:
        """Return vehicle position in field frame."""
        return self.translation.copy()

    def copy(self) -> SE2:
        """Return a deep copy that shares no arrays with this pose."""
        return SE2(rotation=self.rotation.copy(), translation=self.translation.copy())

    def inverse(self) -> SE2:
        """Compute the inverse transformation T^{-1}.

        For T = [R, t], the inverse is [R^T, -R^T @ t].
        """
        R_inv = self.rotation.T
        t_inv = -R_inv @ self.translation
        return SE2(rotation=R_inv, translation=t_inv)

    def compose(self, other: SE2) -> SE2:
        """Compose with another transformation: self @ other.

        Example:
            T_field_vehicle.compose(T_vehicle_camera) gives T_field_camera

        Args:
            other: SE2 transformation to compose with

        Returns:
            Composed SE2 transformation (self @ other)
        """
        R = self.rotation @ other.rotation
        t = self.rotation @ other.translation + self.translation
        return SE2(rotation=R, translation=t)

    def translate_by(self, delta: np.ndarray) -> SE2:
        """Shift the translation by a field-frame vector, keeping the rotation."""
        return SE2(
            rotation=self.rotation.copy(),
            translation=self.translation + np.asarray(delta, dtype=np.float64),
        )

    def transform_point(self, point: np.ndarray) -> np.ndarray:
        """Transform a single point from local frame to field frame."""
        point = np.asarray(point, dtype=np.float64).flatten()
        return self.rotation @ point + self.translation

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """Transform Nx2 points from local frame to field frame."""
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            points = points.reshape(1, 2)

        if points.shape[1] != 2:
            raise ValueError(f"Points must be Nx2, got {points.shape}")

        return (self.rotation @ points.T).T + self.translation

    def interpolate(self, other: SE2, alpha: float) -> SE2:
        """Interpolate between this pose and another.

        Translation is interpolated component-wise. Rotation follows the
        shortest arc between the two headings.

        Args:
            other: End pose (alpha = 1)
            alpha: Fraction in [0, 1]; values outside are clamped

        Returns:
            Interpolated SE2
        """
        if alpha <= 0.0:
            return self.copy()
        if alpha >= 1.0:
            return other.copy()

        translation = (1.0 - alpha) * self.translation + alpha * other.translation
        delta = wrap_angle(other.theta - self.theta)
        theta = self.theta + alpha * delta
        return SE2(rotation=rotation_matrix(theta), translation=translation)

    def __repr__(self) -> str:
        """Return string representation."""
        x, y = self.translation
        return f"SE2(x={x:.3f}, y={y:.3f}, theta={math.degrees(self.theta):.2f}deg)"

    def __matmul__(self, other: SE2) -> SE2:
        """Matrix multiplication operator for composition."""
        return self.compose(other)
