"""Planar geometry primitives."""

from .pose import SE2, rotation_matrix, wrap_angle

__all__ = [
    "SE2",
    "rotation_matrix",
    "wrap_angle",
]
