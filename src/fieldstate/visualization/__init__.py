"""Visualization of estimator state."""

from .rerun_visualizer import EstimatorVisualizer

__all__ = ["EstimatorVisualizer"]
