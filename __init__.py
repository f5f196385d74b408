"""QPerceptron: a quaternion rotation perceptron."""

__version__ = "0.1.0"

from core.quaternion import Quaternion
from models.perceptron import QuaternionPerceptron
from optimizers.rotation import DecompositionUpdate, AdaptiveUpdate

__all__ = [
    "__version__",
    "Quaternion",
    "QuaternionPerceptron",
    "DecompositionUpdate",
    "AdaptiveUpdate",
]
