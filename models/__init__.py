"""Models built on the quaternion algebra.

The perceptron composes rotation-valued weights with its input and is
trained with the rules in :mod:`optimizers`.
"""

from .perceptron import (
    QuaternionPerceptron,
    label_to_target,
    TARGETS,
    CLASSIFICATION_AXIS,
)

__all__ = [
    "QuaternionPerceptron",
    "label_to_target",
    "TARGETS",
    "CLASSIFICATION_AXIS",
]
