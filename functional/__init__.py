"""Stateless functional operations for quaternion classifiers.

Includes the metrics used to report training progress.
"""

from .loss import (
    geodesic_errors,
    mean_geodesic_error,
    accuracy,
    evaluate_batch,
)

__all__ = [
    "geodesic_errors",
    "mean_geodesic_error",
    "accuracy",
    "evaluate_batch",
]
